"""Image export utilities for rendered images.

Images arrive as float arrays of shape (H, W, 3) that are already averaged,
clamped and gamma-corrected, with the first row at the top. Conversion to
8 bits uses int(255.99 * c) per channel.

Supported formats (chosen from the file extension, encoded by Pillow):
    - PNG
    - PPM (binary P6)
    - any other format Pillow can write from 8-bit RGB

Example:
    >>> from pathtracer.core.integrator import get_image_numpy
    >>> from pathtracer.preview.export import save_image
    >>> save_image(get_image_numpy(), "four_spheres.ppm")
"""

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Slightly below 256 so that 1.0 maps to 255
UINT8_SCALE = 255.99


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a float image in [0, 1] to 8-bit.

    Values are clamped to [0, 1] first, then each channel becomes
    int(255.99 * c).

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    clamped = np.clip(np.asarray(image, dtype=np.float64), 0.0, 1.0)
    return (clamped * UINT8_SCALE).astype(np.uint8)


def save_image(image: npt.NDArray[np.floating], filepath: str | Path) -> None:
    """Save a float image to a file.

    Args:
        image: Image array of shape (H, W, 3) with values in [0, 1].
        filepath: Output path. The extension selects the format.

    Raises:
        ValueError: If the image is not of shape (H, W, 3) or Pillow does
            not know the extension.
        OSError: If the file cannot be written.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")

    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
