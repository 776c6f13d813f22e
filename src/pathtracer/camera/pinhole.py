"""Axis-aligned pinhole camera for primary ray generation.

The camera is a fixed viewport: an origin, the lower-left corner of the image
plane, and the horizontal and vertical span vectors of that plane. A ray for
normalized image coordinates (u, v) goes from the origin through

    lower_left_corner + u * horizontal + v * vertical

The direction is not normalized. There is no lens, so there is no depth of
field. Coordinates outside [0, 1] are extrapolated across the image plane,
not rejected.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.camera.pinhole import Camera, setup_camera, get_ray
    >>>
    >>> setup_camera(Camera())  # Classic 2:1 viewport looking down -z
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from pathtracer.core.ray import Ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Viewport of a pinhole camera.

    The defaults are the classic 2:1 viewport one unit in front of an origin
    camera looking down -z.

    Attributes:
        lower_left_corner: Lower-left corner of the image plane (x, y, z).
        horizontal: Vector spanning the full image width.
        vertical: Vector spanning the full image height.
        origin: Camera position in world space.
    """

    lower_left_corner: tuple[float, float, float] = (-2.0, -1.0, -1.0)
    horizontal: tuple[float, float, float] = (4.0, 0.0, 0.0)
    vertical: tuple[float, float, float] = (0.0, 2.0, 0.0)
    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)

    @classmethod
    def look_at(
        cls,
        lookfrom: tuple[float, float, float],
        lookat: tuple[float, float, float],
        vup: tuple[float, float, float],
        vfov: float,
        aspect_ratio: float,
    ) -> "Camera":
        """Build a viewport from a position, target, and field of view.

        The image plane sits at unit distance in front of the camera.

        Args:
            lookfrom: Camera position in world space.
            lookat: Point the camera is looking at.
            vup: Up direction (typically (0, 1, 0)).
            vfov: Vertical field of view in degrees.
            aspect_ratio: Width divided by height of the output image.

        Returns:
            A Camera with the corresponding viewport vectors.

        Raises:
            ValueError: If lookfrom equals lookat or vup is parallel to the
                view direction.
        """
        theta = math.radians(vfov)
        viewport_height = 2.0 * math.tan(theta / 2.0)
        viewport_width = aspect_ratio * viewport_height

        origin = np.array(lookfrom, dtype=np.float64)
        w = origin - np.array(lookat, dtype=np.float64)
        w_norm = np.linalg.norm(w)
        if w_norm == 0.0:
            raise ValueError("lookfrom and lookat must be different points.")
        w = w / w_norm

        u = np.cross(np.array(vup, dtype=np.float64), w)
        u_norm = np.linalg.norm(u)
        if u_norm == 0.0:
            raise ValueError("vup must not be parallel to the view direction.")
        u = u / u_norm
        v = np.cross(w, u)

        horizontal = viewport_width * u
        vertical = viewport_height * v
        lower_left = origin - w - horizontal / 2.0 - vertical / 2.0

        return cls(
            lower_left_corner=_as_tuple(lower_left),
            horizontal=_as_tuple(horizontal),
            vertical=_as_tuple(vertical),
            origin=_as_tuple(origin),
        )


def _as_tuple(values: np.ndarray) -> tuple[float, float, float]:
    return (float(values[0]), float(values[1]), float(values[2]))


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Load a camera's viewport into the fields read by get_ray().

    Must be called before rendering. No validation is performed; inverted or
    degenerate viewport vectors are used as given.

    Args:
        camera: The camera to use for subsequent rays.
    """
    _camera_origin[None] = list(camera.origin)
    _lower_left_corner[None] = list(camera.lower_left_corner)
    _horizontal[None] = list(camera.horizontal)
    _vertical[None] = list(camera.vertical)


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Generate a ray through normalized image coordinates (u, v).

    - u = 0: left edge, u = 1: right edge
    - v = 0: bottom edge, v = 1: top edge

    Args:
        u: Horizontal coordinate, nominally in [0, 1].
        v: Vertical coordinate, nominally in [0, 1].

    Returns:
        A Ray from the camera origin toward the image-plane point. The
        direction is not normalized.
    """
    origin = _camera_origin[None]
    target = _lower_left_corner[None] + u * _horizontal[None] + v * _vertical[None]
    return Ray(origin=origin, direction=target - origin)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera origin (position) in world space."""
    return _camera_origin[None]


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the current camera state for debugging.

    Returns:
        Dictionary with origin, lower_left, horizontal, and vertical.
    """
    origin_vec = _camera_origin[None]
    ll_vec = _lower_left_corner[None]
    h_vec = _horizontal[None]
    v_vec = _vertical[None]

    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "lower_left": (float(ll_vec[0]), float(ll_vec[1]), float(ll_vec[2])),
        "horizontal": (float(h_vec[0]), float(h_vec[1]), float(h_vec[2])),
        "vertical": (float(v_vec[0]), float(v_vec[1]), float(v_vec[2])),
    }
