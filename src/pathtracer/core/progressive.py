"""Progressive renderer for batched sample accumulation.

This module wraps the integrator's render target with:
- Batch rendering (several samples per pixel between progress reports)
- Progress callbacks or a generator for the caller to report progress
- Reset, resize and 8-bit export

The library itself prints nothing; progress reporting is the caller's job.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.progressive import ProgressiveRenderer
    >>> from pathtracer.scene.four_spheres import create_four_sphere_scene
    >>> from pathtracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_four_sphere_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = ProgressiveRenderer(200, 100, seed=0)
    >>> renderer.render(100, batch_size=10)
    >>> renderer.save_image("four_spheres.png")
"""

from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from pathtracer.core.integrator import (
    clear_render_target,
    get_image_numpy,
    get_total_samples,
    render_image,
    setup_render_target,
)
from pathtracer.preview.export import image_to_uint8, save_image

# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A renderer that accumulates samples per pixel over several calls.

    The renderer delegates to the integrator's global buffers (Taichi
    fields), so only one renderer is active at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        seed: Seed of the random number streams.
    """

    def __init__(self, width: int, height: int, seed: int = 0) -> None:
        """Initialize the progressive renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            seed: Seed of the random number streams.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum
                supported size.
        """
        self._width = width
        self._height = height
        self._seed = seed
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def seed(self) -> int:
        """Get the seed of the random number streams."""
        return self._seed

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    def reset(self) -> None:
        """Discard all accumulated samples, keeping the image size."""
        clear_render_target()

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and discard accumulated samples.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum
                supported size.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render samples in batches with an optional progress callback.

        Args:
            num_samples: Total number of samples per pixel to add.
            batch_size: Number of samples to render before each callback.
            callback: Optional callback called after each batch with
                (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples in batches, yielding progress after each batch.

        Args:
            num_samples: Total number of samples per pixel to add.
            batch_size: Number of samples to render before each yield.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if num_samples <= 0:
            return

        target_samples = self.sample_count + num_samples

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch, seed=self._seed)
            remaining -= batch
            yield (self.sample_count, target_samples)

    def get_image_numpy(self, gamma: float = 2.0) -> npt.NDArray[np.float32]:
        """Get the averaged, clamped and gamma-corrected image.

        Args:
            gamma: Gamma correction value. Default 2.0 (square root).

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32.
        """
        return get_image_numpy(gamma=gamma)

    def get_image_uint8(self, gamma: float = 2.0) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        return image_to_uint8(self.get_image_numpy(gamma=gamma))

    def save_image(self, filepath: str, gamma: float = 2.0) -> None:
        """Save the rendered image; the format follows the file extension."""
        save_image(self.get_image_numpy(gamma=gamma), filepath)

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"seed={self.seed}, samples={self.sample_count})"
        )
