"""Diffuse (Lambertian) material implementation.

A diffuse surface scatters light around the surface normal. The scattered
direction points from the hit point to a random target inside the unit
sphere tangent to the surface at the hit point:

    target = point + normal + random_in_unit_sphere()

which gives a cosine-like distribution about the normal. Diffuse scattering
always succeeds and attenuates by the albedo.

Example:
    >>> from pathtracer.materials.diffuse import Diffuse
    >>> matte = Diffuse(albedo=(0.8, 0.3, 0.3))
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import random_in_unit_sphere
from pathtracer.materials.material import MaterialFields, MaterialKind, validate_albedo

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Diffuse:
    """Diffuse (Lambertian) material parameters.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    albedo: tuple[float, float, float]

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)

    @property
    def kind(self) -> MaterialKind:
        return MaterialKind.DIFFUSE

    def as_fields(self) -> MaterialFields:
        """Flatten into (kind, albedo, fuzz, refractive_index)."""
        return (int(self.kind), tuple(self.albedo), 0.0, 0.0)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "diffuse", "albedo": list(self.albedo)}


@ti.func
def scatter_diffuse(albedo: vec3, hit_point: vec3, normal: vec3, rng_state: ti.u32):
    """Sample a scattered direction for a diffuse surface.

    Args:
        albedo: The diffuse reflectance color (RGB).
        hit_point: The intersection point on the surface.
        normal: The unit surface normal at the hit point.
        rng_state: The current generator state.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, next_state)
        where did_scatter is always 1 and attenuation equals albedo.
    """
    offset, state = random_in_unit_sphere(rng_state)
    target = hit_point + normal + offset
    return target - hit_point, albedo, 1, state
