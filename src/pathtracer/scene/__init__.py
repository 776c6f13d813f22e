"""Scene module for scene storage and nearest-hit queries.

Components:
    intersection: Sphere storage in Taichi fields and nearest-hit scan
    manager: Python-side scene builder with freezing and serialization
    four_spheres: The canonical four-sphere test scene

Build scenes through SceneManager, which owns the read-only freeze. The raw
add_sphere() and clear_scene() in the intersection module do not check it.

Spheres are stored in Structure-of-Arrays Taichi fields, each with its own
material copy. Kernels only read the scene; it is built before rendering.
"""

from .four_spheres import create_four_sphere_scene
from .intersection import (
    MAX_SPHERES,
    get_sphere,
    get_sphere_count,
    intersect_scene,
)
from .manager import SceneConfig, SceneManager, SphereInfo, material_from_config

__all__ = [
    # Intersection module
    "get_sphere",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "SceneConfig",
    "SphereInfo",
    "material_from_config",
    # Canonical scene
    "create_four_sphere_scene",
]
