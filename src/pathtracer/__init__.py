"""Taichi implementation of a Monte Carlo sphere path tracer.

This package estimates the radiance arriving along camera rays by recursively
sampling scattering events until a ray escapes to the sky or the bounce limit
is reached. It provides:
- Ray-sphere intersection and nearest-hit scene queries
- Diffuse, metal, and dielectric material scattering
- An explicitly seeded per-pixel random number generator
- Progressive sample accumulation and image export

Subpackages:
    core: Rays, vector utilities, random numbers, integrator, and render loop
    geometry: Sphere primitive and hit records
    materials: Material tagged union and scattering functions
    scene: Scene storage, nearest-hit queries, and scene building
    camera: Axis-aligned pinhole camera
    preview: Image conversion and export
"""

__version__ = "0.1.0"
