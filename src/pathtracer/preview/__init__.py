"""Preview module for image output.

Components:
    export: 8-bit conversion, image file export and image comparison

Example:
    >>> from pathtracer.preview import save_image
    >>> from pathtracer.core.progressive import ProgressiveRenderer
    >>>
    >>> renderer = ProgressiveRenderer(200, 100)
    >>> renderer.render(100)
    >>> save_image(renderer.get_image_numpy(), "output.png")
"""

from pathtracer.preview.export import compute_rmse, image_to_uint8, save_image

__all__ = [
    "image_to_uint8",
    "save_image",
    "compute_rmse",
]
