"""Dielectric (glass/water) material implementation.

A dielectric both reflects and refracts. Whether the ray is entering or
leaving the medium is decided by the sign of dot(direction, normal), since
sphere normals always point outward:

    - dot > 0: leaving the medium; the refraction side normal is -normal and
      the index ratio is n
    - dot <= 0: entering the medium; the refraction side normal is normal and
      the index ratio is 1 / n

If no refracted direction exists (total internal reflection) the ray always
reflects. Otherwise it reflects with the Schlick reflectance probability and
refracts the rest of the time. Clear glass absorbs nothing, so attenuation is
always white.

Example:
    >>> from pathtracer.materials.dielectric import Dielectric
    >>> glass = Dielectric(refractive_index=1.5)
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import dot, length, reflect, refract, schlick
from pathtracer.core.rng import random_float
from pathtracer.materials.material import MaterialFields, MaterialKind

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Dielectric:
    """Dielectric material parameters.

    Attributes:
        refractive_index: Index of refraction, must be > 1. Common values:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    refractive_index: float = 1.5

    def __post_init__(self) -> None:
        if self.refractive_index <= 1.0:
            raise ValueError(
                f"Refractive index = {self.refractive_index} must be greater than 1.0."
            )

    @property
    def kind(self) -> MaterialKind:
        return MaterialKind.DIELECTRIC

    def as_fields(self) -> MaterialFields:
        """Flatten into (kind, albedo, fuzz, refractive_index)."""
        return (int(self.kind), (1.0, 1.0, 1.0), 0.0, float(self.refractive_index))

    def to_dict(self) -> dict[str, Any]:
        return {"type": "dielectric", "refractive_index": self.refractive_index}


@ti.func
def _refraction_at_interface(
    refractive_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
):
    """Compute the refracted direction and reflection probability.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The outward unit surface normal.

    Returns:
        A tuple of (refracted_direction, reflect_probability). The
        probability is 1 under total internal reflection.
    """
    incidence = dot(incident_direction, normal)
    outward_normal = normal
    ni_over_nt = 1.0 / refractive_index
    cosine = -incidence / length(incident_direction)
    if incidence > 0.0:
        outward_normal = -normal
        ni_over_nt = refractive_index
        cosine = refractive_index * incidence / length(incident_direction)

    refracted, did_refract = refract(incident_direction, outward_normal, ni_over_nt)

    reflect_probability = 1.0
    if did_refract == 1:
        reflect_probability = schlick(cosine, refractive_index)

    return refracted, reflect_probability


@ti.func
def reflect_probability(refractive_index: ti.f32, incident_direction: vec3, normal: vec3) -> ti.f32:
    """Probability that a ray reflects rather than refracts.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The outward unit surface normal.

    Returns:
        1 under total internal reflection, the Schlick reflectance otherwise.
    """
    _, probability = _refraction_at_interface(refractive_index, incident_direction, normal)
    return probability


@ti.func
def scatter_dielectric(
    refractive_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    rng_state: ti.u32,
):
    """Compute the scattered direction for a dielectric surface.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The outward unit surface normal (not flipped toward the ray).
        rng_state: The current generator state.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, next_state)
        where attenuation is white and did_scatter is always 1.
    """
    attenuation = vec3(1.0, 1.0, 1.0)
    reflected = reflect(incident_direction, normal)
    refracted, probability = _refraction_at_interface(
        refractive_index, incident_direction, normal
    )

    draw, state = random_float(rng_state)
    scattered_direction = refracted
    if draw < probability:
        scattered_direction = reflected

    return scattered_direction, attenuation, 1, state
