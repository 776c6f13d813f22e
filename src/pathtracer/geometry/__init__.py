"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, hit records, and ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) called from kernels:
    record = hit_sphere(ray, sphere, t_min, t_max)
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_sphere

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
]
