"""Radiance estimation and the render target for Monte Carlo path tracing.

The radiance estimator follows a camera ray through the scene. At each
surface the material scatters the ray and its attenuation multiplies the
path throughput; a ray that escapes picks up the sky gradient. Paths end
when they escape, when a material absorbs the ray, or when a surface is hit
at depth MAX_DEPTH, which contributes black.

Each pixel sample draws its random numbers from its own generator stream
seeded from (seed, pixel, sample index), so a render is reproducible bit for
bit for a fixed seed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.integrator import (
    ...     get_image_numpy, render_image, setup_render_target
    ... )
    >>> from pathtracer.scene.four_spheres import create_four_sphere_scene
    >>> from pathtracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_four_sphere_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(200, 100)
    >>> render_image(num_samples=100, seed=0)
    >>> image = get_image_numpy()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.camera.pinhole import get_ray
from pathtracer.core.ray import Ray, make_unit_vector
from pathtracer.core.rng import random_float, seed_rng
from pathtracer.materials.scatter import scatter
from pathtracer.scene.intersection import intersect_scene

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# A surface hit at this depth contributes black
MAX_DEPTH = 50

# Lower bound on t, avoids re-hitting the surface a ray leaves from
T_MIN = 0.001
T_MAX = float("inf")

WHITE = vec3(1.0, 1.0, 1.0)
SKY_BLUE = vec3(0.5, 0.7, 1.0)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Sum of all sample colors per pixel, indexed (i, j) with j = 0 at the bottom
_color_sum = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Samples per pixel accumulated so far (every pixel has the same count)
_samples_taken = ti.field(dtype=ti.i32, shape=())

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the accumulated colors and the sample count."""
    _color_sum.fill(0.0)
    _samples_taken[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_total_samples() -> int:
    """Get the number of samples per pixel rendered so far.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return int(_samples_taken[None])


# =============================================================================
# Radiance Estimation
# =============================================================================


@ti.func
def background(direction: vec3) -> vec3:
    """Sky gradient seen by rays that escape the scene.

    Blends from white at the horizon (and below) to sky blue straight up,
    based on the height of the normalized direction.
    """
    unit_direction = make_unit_vector(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * WHITE + t * SKY_BLUE


@ti.func
def ray_color(ray: Ray, depth: ti.i32, rng_state: ti.u32):
    """Estimate the radiance arriving along a ray.

    Equivalent to the recursive estimator

        color(ray, d) = background(ray)                          on a miss
                      = black                                    if d >= MAX_DEPTH
                      = attenuation * color(scattered, d + 1)    if scattered
                      = black                                    if absorbed

    written as a loop that carries the product of attenuations forward.

    Args:
        ray: The ray to trace.
        depth: Depth of the first bounce (0 for camera rays).
        rng_state: The current generator state.

    Returns:
        A tuple of (color, next_state).
    """
    throughput = vec3(1.0, 1.0, 1.0)
    color = vec3(0.0, 0.0, 0.0)
    current = ray
    current_depth = depth
    state = rng_state

    while True:
        rec = intersect_scene(current, T_MIN, T_MAX)
        if rec.hit == 0:
            color = throughput * background(current.direction)
            break
        if current_depth >= MAX_DEPTH:
            break

        scattered = scatter(current, rec, state)
        state = scattered.rng_state
        if scattered.did_scatter == 0:
            break

        throughput = throughput * scattered.attenuation
        current = scattered.scattered
        current_depth += 1

    return color, state


@ti.func
def jittered_uv(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32, rng_state: ti.u32):
    """Pick a random image-plane point inside a pixel.

    Returns:
        A tuple of (u, v, next_state) with u = (i + r1) / width and
        v = (j + r2) / height.
    """
    r1, state = random_float(rng_state)
    r2, state = random_float(state)
    u = (ti.cast(pixel_i, ti.f32) + r1) / ti.cast(width, ti.f32)
    v = (ti.cast(pixel_j, ti.f32) + r2) / ti.cast(height, ti.f32)
    return u, v, state


@ti.func
def _pixel_sample(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    seed: ti.u32,
    sample_index: ti.i32,
) -> vec3:
    state = seed_rng(seed, pixel_i, pixel_j, sample_index)
    u, v, state = jittered_uv(pixel_i, pixel_j, width, height, state)
    color, state = ray_color(get_ray(u, v), 0, state)
    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_one_spp(width: ti.i32, height: ti.i32, seed: ti.u32, sample_index: ti.i32):
    """Render one sample per pixel and add it to the color sums."""
    for i, j in ti.ndrange(width, height):
        _color_sum[i, j] += _pixel_sample(i, j, width, height, seed, sample_index)


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    seed: ti.u32,
    sample_index: ti.i32,
) -> vec3:
    return _pixel_sample(pixel_i, pixel_j, width, height, seed, sample_index)


@ti.kernel
def _trace_ray_kernel(origin: vec3, direction: vec3, depth: ti.i32, seed: ti.u32) -> vec3:
    state = seed_rng(seed, 0, 0, 0)
    color, state = ray_color(Ray(origin=origin, direction=direction), depth, state)
    return color


# =============================================================================
# Public Rendering API
# =============================================================================


def render_image(num_samples: int = 1, seed: int = 0) -> None:
    """Render the given number of samples per pixel into the render target.

    Samples add to those already accumulated and continue the sample index
    sequence, so rendering 10 samples twice gives the same image as rendering
    20 samples once with the same seed.

    Args:
        num_samples: Number of samples to render per pixel.
        seed: Seed of the random number streams (32-bit).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    for _ in range(num_samples):
        _render_one_spp(width, height, seed, _samples_taken[None])
        _samples_taken[None] += 1


def render_sample(
    pixel_i: int, pixel_j: int, seed: int = 0, sample_index: int = 0
) -> tuple[float, float, float]:
    """Render a single sample for a specific pixel.

    The result is the same color render_image() would add for that pixel
    and sample index. Nothing is accumulated.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        seed: Seed of the random number streams.
        sample_index: Index of the sample.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height, seed, sample_index)
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
    seed: int = 0,
) -> tuple[float, float, float]:
    """Estimate the radiance along an explicit ray.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        depth: Starting depth; a surface hit at MAX_DEPTH or deeper is black.
        seed: Seed of the random number stream.

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _trace_ray_kernel(vec3(*origin), vec3(*direction), depth, seed)
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy(gamma: float = 2.0) -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Averages the accumulated samples, clamps to [0, 1] and applies gamma
    correction (gamma 2 is a square root per channel). Rows are flipped so
    the first row is the top of the image.

    Args:
        gamma: Gamma correction value. 1.0 leaves values linear.

    Returns:
        NumPy array of shape (height, width, 3) with dtype float32.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    samples = get_total_samples()

    image = _color_sum.to_numpy()[:width, :height, :]
    if samples > 0:
        image = image / samples

    # (width, height, 3) -> (height, width, 3), top row first
    image = np.flipud(np.transpose(image, (1, 0, 2)))
    image = np.clip(image, 0.0, 1.0)

    if gamma != 1.0:
        image = np.power(image, 1.0 / gamma)

    return image.astype(np.float32)
