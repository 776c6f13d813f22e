"""Core rendering module.

This module contains the fundamental building blocks for path tracing:

Components:
    ray: Ray data structure, vector algebra, reflection and refraction
    rng: Explicitly seeded per-sample random number streams
    integrator: Radiance estimator, render target, and rendering kernels
    progressive: Batched sample accumulation with progress reporting

The integrator follows a ray through repeated scattering events until it
escapes to the sky gradient or reaches the bounce limit, carrying the product
of material attenuations forward.
"""

from .ray import (
    Ray,
    cross,
    dot,
    length,
    make_ray,
    make_unit_vector,
    point_at,
    random_in_unit_sphere,
    reflect,
    refract,
    schlick,
    squared_length,
    vec3,
)
from .rng import pcg_hash, random_float, seed_rng

# Note: integrator and progressive are NOT imported here. They declare Taichi
# fields at import time and depend on the scene and camera packages.
# Import them directly from pathtracer.core.integrator and
# pathtracer.core.progressive.

__all__ = [
    "Ray",
    "point_at",
    "make_ray",
    "vec3",
    "dot",
    "cross",
    "length",
    "squared_length",
    "make_unit_vector",
    "reflect",
    "refract",
    "schlick",
    "random_in_unit_sphere",
    "pcg_hash",
    "seed_rng",
    "random_float",
]
