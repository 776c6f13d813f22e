"""Ray data structure and vector utilities for path tracing.

This module provides the Ray dataclass and the Vector3 algebra used by every
other part of the renderer. Vectors are ``taichi.math.vec3`` values with
32-bit float components; they already support addition, subtraction,
component-wise and scalar multiplication and division, and negation. The
named operations below (dot, cross, length, normalization, reflection,
refraction) are Taichi functions for use inside kernels.

Sampling helpers take an explicit generator state (see core.rng) and return
the advanced state with their result.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> @ti.kernel
    ... def at() -> vec3:
    ...     ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(4.0, 5.0, 6.0))
    ...     return point_at(ray, 2.0)  # (9, 12, 15)
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.rng import random_float

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A parametric line with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            normalized; callers normalize when an algorithm needs it.
    """

    origin: vec3
    direction: vec3


@ti.func
def point_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def squared_length(v: vec3) -> ti.f32:
    """Compute the squared Euclidean length of a vector."""
    return dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(squared_length(v))


@ti.func
def make_unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    A zero-length vector has no direction; it is returned unchanged (as the
    zero vector) rather than producing NaN components.

    Args:
        v: The input vector.

    Returns:
        v / length(v), or the zero vector if v is zero.
    """
    result = vec3(0.0, 0.0, 0.0)
    len_sq = squared_length(v)
    if len_sq > 0.0:
        result = v / ti.sqrt(len_sq)
    return result


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Reflect a vector about a unit normal: v - 2 * dot(v, n) * n."""
    return v - 2.0 * dot(v, n) * n


@ti.func
def refract(v: vec3, n: vec3, ni_over_nt: ti.f32):
    """Refract a direction through a surface.

    The cosine term is dot(unit(v), v), which equals the length of v, so the
    discriminant 1 - ni_over_nt^2 * (1 - |v|^2) depends on how long the
    incoming direction is rather than on its angle to the normal. Unit
    directions therefore always refract, and total internal reflection needs
    a direction shorter than sqrt(1 - 1 / ni_over_nt^2). The returned
    direction is not normalized.

    Args:
        v: The incoming direction (any length).
        n: The unit normal on the side the ray arrives from.
        ni_over_nt: Ratio of refractive indices (incident / transmitted).

    Returns:
        A tuple of (refracted, did_refract) where did_refract is 0 when the
        discriminant is not positive (total internal reflection) and the
        refracted direction is then the zero vector.
    """
    uv = make_unit_vector(v)
    dt = dot(uv, v)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)

    refracted = vec3(0.0, 0.0, 0.0)
    did_refract = 0
    if discriminant > 0.0:
        refracted = ni_over_nt * (uv - n * dt) - n * ti.sqrt(discriminant)
        did_refract = 1
    return refracted, did_refract


@ti.func
def schlick(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    """Approximate Fresnel reflectance with Schlick's polynomial.

    Args:
        cosine: Cosine of the incidence angle.
        ref_idx: Refractive index of the material.

    Returns:
        r0 + (1 - r0) * (1 - cosine)^5 with r0 = ((1 - n) / (1 + n))^2.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    m = 1.0 - cosine
    return r0 + (1.0 - r0) * (m * m * m * m * m)


# =============================================================================
# Random Sampling
# =============================================================================


@ti.func
def random_in_unit_sphere(rng_state: ti.u32):
    """Generate a uniformly distributed point inside the unit sphere.

    Uses rejection sampling: points are drawn uniformly in the cube
    [-1, 1]^3 until one has squared length below 1. On average about 1.91
    candidates are drawn.

    Args:
        rng_state: The current generator state.

    Returns:
        A tuple of (point, next_state) with squared_length(point) < 1.
    """
    state = rng_state
    p = vec3(0.0, 0.0, 0.0)
    while True:
        x, state = random_float(state)
        y, state = random_float(state)
        z, state = random_float(state)
        p = vec3(2.0 * x - 1.0, 2.0 * y - 1.0, 2.0 * z - 1.0)
        if squared_length(p) < 1.0:
            break
    return p, state
