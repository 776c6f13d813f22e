"""Scene-level sphere storage and nearest-hit queries.

The scene is an ordered list of spheres stored in Taichi fields
(Structure-of-Arrays layout). Each sphere carries its own material by value.
The scene is populated once before rendering and only read by kernels.

``intersect_scene`` scans spheres in insertion order and keeps the hit with
the smallest t. Each test uses the closest t found so far as its exclusive
upper bound, so when two surfaces are hit at exactly the same t the one added
first wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.materials import Diffuse
    >>> from pathtracer.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, Diffuse((0.1, 0.2, 0.5)))
    >>> # Use intersect_scene within a Taichi kernel
"""

from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import Ray
from pathtracer.geometry.sphere import HitRecord, Sphere, hit_sphere
from pathtracer.materials.material import Material

if TYPE_CHECKING:
    from pathtracer.materials import MaterialSpec

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Per-sphere material copies
sphere_material_kinds = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
sphere_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_fuzz = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_SPHERES)


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Resets the sphere count to zero. The field data is overwritten when new
    spheres are added. This does not check SceneManager's freeze; use
    SceneManager.clear() on a managed scene.
    """
    num_spheres[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material: "MaterialSpec",
) -> int:
    """Append a sphere to the scene.

    Low-level storage write. The read-only freeze is enforced by
    SceneManager only, so code building a scene should go through it.

    Radii are not validated; a zero radius never produces a hit and a
    negative radius flips the reported normals inward.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material: The material of the sphere (Diffuse, Metal or Dielectric).

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    kind, albedo, fuzz, refractive_index = material.as_fields()
    sphere_centers[idx] = [float(center[0]), float(center[1]), float(center[2])]
    sphere_radii[idx] = radius
    sphere_material_kinds[idx] = kind
    sphere_albedos[idx] = [float(albedo[0]), float(albedo[1]), float(albedo[2])]
    sphere_fuzz[idx] = fuzz
    sphere_refractive_indices[idx] = refractive_index
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(index: ti.i32) -> Sphere:
    """Assemble the Sphere struct stored at an index."""
    material = Material(
        kind=sphere_material_kinds[index],
        albedo=sphere_albedos[index],
        fuzz=sphere_fuzz[index],
        refractive_index=sphere_refractive_indices[index],
    )
    return Sphere(center=sphere_centers[index], radius=sphere_radii[index], material=material)


@ti.func
def _make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material=Material(
            kind=-1,
            albedo=vec3(0.0, 0.0, 0.0),
            fuzz=0.0,
            refractive_index=0.0,
        ),
    )


@ti.func
def intersect_scene(ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Find the nearest intersection of a ray with the scene.

    Args:
        ray: The ray to test.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        The HitRecord with the smallest t in (t_min, t_max), or a miss record
        (hit == 0) if no sphere intersects.
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        rec = hit_sphere(ray, get_sphere(i), t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = rec

    return result
