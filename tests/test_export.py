"""Unit tests for image export utilities.

Tests cover:
- 8-bit conversion with int(255.99 * c)
- Saving PNG and PPM files through Pillow
- Image comparison with RMSE
"""

import numpy as np
import pytest


class TestImageToUint8:
    """Tests for image_to_uint8."""

    def test_conversion_values(self):
        """Test 0, 0.5 and 1 map to 0, 127 and 255."""
        from pathtracer.preview.export import image_to_uint8

        image = np.array([[[0.0, 0.5, 1.0]]], dtype=np.float32)
        result = image_to_uint8(image)
        assert result.dtype == np.uint8
        assert result.tolist() == [[[0, 127, 255]]]

    def test_conversion_clamps(self):
        """Test out-of-range values are clamped before conversion."""
        from pathtracer.preview.export import image_to_uint8

        image = np.array([[[-0.5, 1.5, 2.0]]], dtype=np.float32)
        assert image_to_uint8(image).tolist() == [[[0, 255, 255]]]


class TestSaveImage:
    """Tests for save_image."""

    @pytest.mark.parametrize("suffix", [".png", ".ppm"])
    def test_save_and_reload(self, tmp_path, suffix):
        """Test a saved image reloads with the same 8-bit pixels."""
        from PIL import Image as PILImage

        from pathtracer.preview.export import image_to_uint8, save_image

        rng = np.random.default_rng(0)
        image = rng.random((10, 20, 3)).astype(np.float32)
        path = tmp_path / f"image{suffix}"
        save_image(image, path)

        with PILImage.open(path) as saved:
            assert saved.size == (20, 10)
            assert saved.mode == "RGB"
            np.testing.assert_array_equal(np.asarray(saved), image_to_uint8(image))

    def test_ppm_header(self, tmp_path):
        """Test PPM output is a binary P6 file with the image size."""
        from pathtracer.preview.export import save_image

        path = tmp_path / "image.ppm"
        save_image(np.zeros((100, 200, 3), dtype=np.float32), path)
        header = path.read_bytes()[:16].split()
        assert header[:4] == [b"P6", b"200", b"100", b"255"]

    def test_rejects_wrong_shape(self, tmp_path):
        """Test images that are not (H, W, 3) are rejected."""
        from pathtracer.preview.export import save_image

        with pytest.raises(ValueError, match="shape"):
            save_image(np.zeros((10, 20), dtype=np.float32), tmp_path / "image.png")


class TestComputeRmse:
    """Tests for compute_rmse."""

    def test_identical_images(self):
        """Test identical images have zero error."""
        from pathtracer.preview.export import compute_rmse

        image = np.full((4, 4, 3), 0.25, dtype=np.float32)
        assert compute_rmse(image, image) == 0.0

    def test_constant_difference(self):
        """Test a constant offset gives that offset as RMSE."""
        from pathtracer.preview.export import compute_rmse

        a = np.zeros((4, 4, 3), dtype=np.float32)
        b = np.full((4, 4, 3), 0.5, dtype=np.float32)
        assert abs(compute_rmse(a, b) - 0.5) < 1e-9

    def test_shape_mismatch(self):
        """Test images of different shapes are rejected."""
        from pathtracer.preview.export import compute_rmse

        with pytest.raises(ValueError, match="must match"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((2, 3, 3)))
