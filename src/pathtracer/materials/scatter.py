"""Material dispatch for scattering at a surface hit.

``scatter`` selects the scattering routine for the hit record's material kind
and packages the outcome as a ScatterRecord: whether the ray scattered, the
attenuation color, and the outgoing ray starting at the hit point.
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import Ray
from pathtracer.materials.dielectric import scatter_dielectric
from pathtracer.materials.diffuse import scatter_diffuse
from pathtracer.materials.material import MaterialKind
from pathtracer.materials.metal import scatter_metal

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class ScatterRecord:
    """Outcome of scattering a ray at a surface.

    Attributes:
        did_scatter: 1 if the ray scattered, 0 if it was absorbed.
        attenuation: Color multiplier for the scattered ray's contribution.
            Only meaningful if did_scatter == 1.
        scattered: The outgoing ray. Only meaningful if did_scatter == 1.
        rng_state: The generator state after any random draws.
    """

    did_scatter: ti.i32
    attenuation: vec3
    scattered: Ray
    rng_state: ti.u32


@ti.func
def scatter(ray: Ray, hit, rng_state: ti.u32) -> ScatterRecord:
    """Scatter an incoming ray at a surface hit.

    Args:
        ray: The incoming ray.
        hit: The HitRecord of the intersection (carries the material copy).
        rng_state: The current generator state.

    Returns:
        A ScatterRecord. An unknown material kind absorbs the ray.
    """
    material = hit.material

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0
    state = rng_state

    if material.kind == int(MaterialKind.DIFFUSE):
        scattered_direction, attenuation, did_scatter, state = scatter_diffuse(
            material.albedo, hit.point, hit.normal, state
        )
    elif material.kind == int(MaterialKind.METAL):
        scattered_direction, attenuation, did_scatter, state = scatter_metal(
            material.albedo, material.fuzz, ray.direction, hit.normal, state
        )
    elif material.kind == int(MaterialKind.DIELECTRIC):
        scattered_direction, attenuation, did_scatter, state = scatter_dielectric(
            material.refractive_index, ray.direction, hit.normal, state
        )

    return ScatterRecord(
        did_scatter=did_scatter,
        attenuation=attenuation,
        scattered=Ray(origin=hit.point, direction=scattered_direction),
        rng_state=state,
    )
