"""
Unit tests for ImageRepository and ImageService.

Tests loading, saving, folder streaming and output path derivation.
"""

import cv2
import numpy as np
import pytest

from skin_retouch.models.image import Image
from skin_retouch.repositories.image_repository import ImageRepository
from skin_retouch.services.image_service import ImageService


@pytest.fixture
def pixels():
    rng = np.random.default_rng(3)
    return rng.integers(0, 256, (24, 32, 3), dtype=np.uint8)


class TestImageRepository:
    """Tests for disk I/O."""

    def test_missing_file(self, tmp_path):
        """Unreadable input is an input error."""
        with pytest.raises(FileNotFoundError):
            ImageRepository.load(tmp_path / "nope.png")

    def test_png_round_trip_keeps_bgr_order(self, tmp_path, pixels):
        """Saving through PIL and loading through OpenCV is lossless for PNG."""
        path = tmp_path / "out.png"
        ImageRepository.save(Image(pixels, path=path))

        loaded = ImageRepository.load(path)

        np.testing.assert_array_equal(loaded.pixels, pixels)
        np.testing.assert_array_equal(cv2.imread(str(path)), pixels)
        assert loaded.path == path

    def test_save_without_path(self, pixels):
        """An image must know where it goes."""
        with pytest.raises(OSError):
            ImageRepository.save(Image(pixels))

    def test_save_into_missing_directory(self, tmp_path, pixels):
        """Unwritable destinations surface as OSError."""
        with pytest.raises(OSError):
            ImageRepository.save(Image(pixels, path=tmp_path / "missing" / "out.png"))

    def test_save_unknown_extension(self, tmp_path, pixels):
        """PIL cannot pick a format for an unknown extension."""
        with pytest.raises(OSError):
            ImageRepository.save(Image(pixels, path=tmp_path / "out.xyz"))

    def test_iter_dir_skips_unreadable_and_foreign_files(self, tmp_path, pixels):
        """Broken images are logged and skipped; other extensions are ignored."""
        cv2.imwrite(str(tmp_path / "a.png"), pixels)
        cv2.imwrite(str(tmp_path / "c.png"), pixels)
        (tmp_path / "b.png").write_bytes(b"not an image")
        (tmp_path / "notes.txt").write_text("hello")

        names = [img.path.name for img in ImageRepository().iter_dir(tmp_path)]

        assert names == ["a.png", "c.png"]

    def test_iter_dir_recursive(self, tmp_path, pixels):
        """Sub-folders are only searched when asked."""
        (tmp_path / "sub").mkdir()
        cv2.imwrite(str(tmp_path / "sub" / "x.png"), pixels)

        assert list(ImageRepository().iter_dir(tmp_path)) == []
        assert len(list(ImageRepository().iter_dir(tmp_path, recursive=True))) == 1

    def test_iter_dir_requires_directory(self, tmp_path):
        """A missing folder is an input error."""
        with pytest.raises(NotADirectoryError):
            list(ImageRepository().iter_dir(tmp_path / "missing"))

    def test_original_pixels_kept_once(self, pixels):
        """The first state is preserved across later modifications."""
        img = Image(pixels.copy())
        ImageRepository.update_pixels_preserve_original(img, np.zeros_like(pixels))
        ImageRepository.update_pixels_preserve_original(img, np.ones_like(pixels))

        np.testing.assert_array_equal(img.original_pixels, pixels)
        assert img.pixels.max() == 1


class TestImageService:
    """Tests for the business-level helpers."""

    def test_retouched_path_next_to_source(self, monkeypatch, tmp_path):
        """face.jpg → face_retouched.jpg in the same folder."""
        monkeypatch.delenv("OUTPUT_IMG_EXT", raising=False)
        img = Image(np.zeros((2, 2, 3), np.uint8), path=tmp_path / "face.jpg")

        assert ImageService().retouched_path(img) == tmp_path / "face_retouched.jpg"

    def test_retouched_path_in_out_dir_with_ext_override(self, monkeypatch, tmp_path):
        """OUTPUT_IMG_EXT replaces the source extension."""
        monkeypatch.setenv("OUTPUT_IMG_EXT", ".png")
        img = Image(np.zeros((2, 2, 3), np.uint8), path=tmp_path / "face.jpg")

        out = ImageService().retouched_path(img, tmp_path / "out")

        assert out == tmp_path / "out" / "face_retouched.png"

    def test_retouched_path_requires_source(self):
        """A frame without a path has nothing to derive from."""
        with pytest.raises(ValueError):
            ImageService().retouched_path(Image(np.zeros((2, 2, 3), np.uint8)))
