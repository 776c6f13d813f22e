"""Sphere primitive with ray-sphere intersection.

The ray-sphere intersection is found by solving:
    |origin + t * direction - center|^2 = radius^2

which expands to the quadratic a*t^2 + 2*b*t + c = 0 with
    a = dot(direction, direction)
    b = dot(oc, direction)
    c = dot(oc, oc) - radius^2
    oc = origin - center

The near root is tested before the far root and the first one strictly inside
(t_min, t_max) is reported. The hit normal is (point - center) / radius: it
always points outward and is never flipped toward the incoming ray, so
material code decides front or back facing from dot(direction, normal).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.geometry.sphere import Sphere, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import Ray, dot, point_at
from pathtracer.materials.material import Material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rays with a shorter direction than this cannot be intersected reliably
MIN_DIRECTION_LENGTH_SQUARED = 1e-12


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius, and material.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere.
        material: The material of the sphere surface.
    """

    center: vec3
    radius: ti.f32
    material: Material


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: Whether the ray intersected the surface (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The unit outward surface normal at the intersection point.
            Only valid if hit == 1.
        material: Copy of the material of the surface that was hit.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material: Material


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray-sphere intersection.

    A non-positive discriminant is a miss, which includes rays that only
    graze the sphere. A ray whose direction is (nearly) zero never hits.

    Args:
        ray: The ray to test. Its direction need not be normalized.
        sphere: The sphere to test against.
        t_min: Exclusive lower bound on t (avoids self-intersection).
        t_max: Exclusive upper bound on t.

    Returns:
        A HitRecord. Check the hit field to determine if intersection occurred.
    """
    oc = ray.origin - sphere.center
    a = dot(ray.direction, ray.direction)
    b = dot(oc, ray.direction)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if a > MIN_DIRECTION_LENGTH_SQUARED and discriminant > 0.0:
        sqrt_d = ti.sqrt(discriminant)

        # Near root first
        t = (-b - sqrt_d) / a
        valid = (t > t_min) and (t < t_max)

        if not valid:
            t = (-b + sqrt_d) / a
            valid = (t > t_min) and (t < t_max)

        if valid:
            did_hit = 1
            hit_t = t
            hit_point = point_at(ray, t)
            hit_normal = (hit_point - sphere.center) / sphere.radius

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        material=sphere.material,
    )


@ti.func
def make_sphere(center: vec3, radius: ti.f32, material: Material) -> Sphere:
    """Create a sphere from center, radius, and material."""
    return Sphere(center=center, radius=radius, material=material)
