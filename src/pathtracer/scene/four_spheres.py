"""Canonical four-sphere scene.

The scene is a small diffuse sphere resting on a huge diffuse ground sphere,
flanked by a metal sphere on the right and a glass sphere on the left, all
viewed by the default camera:

- Center: diffuse blue sphere at (0, 0, -1), radius 0.5
- Ground: diffuse yellow-green sphere at (0, -100.5, -1), radius 100
- Right: fuzzy gold metal sphere at (1, 0, -1), radius 0.5
- Left: glass sphere at (-1, 0, -1), radius 0.5

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.scene.four_spheres import create_four_sphere_scene
    >>> from pathtracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_four_sphere_scene()
    >>> setup_camera(camera)
"""

from pathtracer.camera.pinhole import Camera
from pathtracer.materials import Dielectric, Diffuse, Metal
from pathtracer.scene.manager import SceneManager

# Recommended output size for the default 2:1 viewport
IMAGE_WIDTH = 200
IMAGE_HEIGHT = 100

CENTER_SPHERE_ALBEDO = (0.1, 0.2, 0.5)
GROUND_SPHERE_ALBEDO = (0.8, 0.8, 0.0)
METAL_SPHERE_ALBEDO = (0.8, 0.6, 0.2)
METAL_SPHERE_FUZZ = 0.3
GLASS_SPHERE_REFRACTIVE_INDEX = 1.5


def create_four_sphere_scene() -> tuple[SceneManager, Camera]:
    """Create the canonical four-sphere scene.

    The returned scene is frozen.

    Returns:
        A tuple of (SceneManager, Camera).
    """
    scene = SceneManager()

    scene.add_sphere((0.0, 0.0, -1.0), 0.5, Diffuse(albedo=CENTER_SPHERE_ALBEDO))
    scene.add_sphere((0.0, -100.5, -1.0), 100.0, Diffuse(albedo=GROUND_SPHERE_ALBEDO))
    scene.add_sphere(
        (1.0, 0.0, -1.0),
        0.5,
        Metal(albedo=METAL_SPHERE_ALBEDO, fuzz=METAL_SPHERE_FUZZ),
    )
    scene.add_sphere(
        (-1.0, 0.0, -1.0),
        0.5,
        Dielectric(refractive_index=GLASS_SPHERE_REFRACTIVE_INDEX),
    )
    scene.freeze()

    return scene, Camera()
