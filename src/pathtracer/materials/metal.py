"""Metal (specular reflective) material implementation.

The incoming direction is normalized and mirrored about the surface normal:

    R = I - 2(I . N)N

then perturbed by a random offset inside a sphere of radius ``fuzz``. A fuzz
of 0 is a perfect mirror. If the perturbed direction ends up pointing into
the surface the ray is absorbed.

Example:
    >>> from pathtracer.materials.metal import Metal
    >>> gold = Metal(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import dot, make_unit_vector, random_in_unit_sphere, reflect
from pathtracer.materials.material import MaterialFields, MaterialKind, validate_albedo

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Metal:
    """Metal material parameters.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Radius of the reflection perturbation in [0, 1].
            0 = perfect mirror, 1 = maximum fuzziness.
    """

    albedo: tuple[float, float, float]
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)
        if self.fuzz < 0.0 or self.fuzz > 1.0:
            raise ValueError(f"Fuzz = {self.fuzz} is outside [0, 1].")

    @property
    def kind(self) -> MaterialKind:
        return MaterialKind.METAL

    def as_fields(self) -> MaterialFields:
        """Flatten into (kind, albedo, fuzz, refractive_index)."""
        return (int(self.kind), tuple(self.albedo), float(self.fuzz), 0.0)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "metal", "albedo": list(self.albedo), "fuzz": self.fuzz}


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    rng_state: ti.u32,
):
    """Compute the scattered direction for a metal surface.

    Args:
        albedo: The reflective color (RGB).
        fuzz: The perturbation radius in [0, 1].
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal.
        rng_state: The current generator state.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, next_state)
        where did_scatter is 0 if the scattered direction does not point
        away from the surface (dot with the normal is not positive).
    """
    reflected = reflect(make_unit_vector(incident_direction), normal)
    offset, state = random_in_unit_sphere(rng_state)
    scattered_direction = reflected + fuzz * offset

    did_scatter = 0
    if dot(scattered_direction, normal) > 0.0:
        did_scatter = 1

    return scattered_direction, albedo, did_scatter, state
