from __future__ import annotations
from pathlib import Path
from typing import Iterable, Union, Iterator
import logging
import os

import numpy as np
from dotenv import load_dotenv

from ..models.image import Image
from ..repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageService:
    """I/O helpers.  No CV logic, no cascade imports."""
    def __init__(self):
        self.OUTPUT_EXT = os.getenv("OUTPUT_IMG_EXT", "")
        self.image_repository = ImageRepository()

    def load(self, path: str | Path) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def stream_gallery(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Image]:
        """
        Yield images lazily instead of returning a gigantic list.
        """
        return self.image_repository.iter_dir(folder,
                                              recursive=recursive,
                                              exts=exts)

    def preserve_original_state(self, image: Image) -> None:
        """
        Preserve the current image state before processing pipeline.
        """
        self.image_repository.save_original_pixels(image)

    def apply_pipeline_modification(self, image: Image, new_pixels: np.ndarray) -> None:
        """
        Apply a pipeline modification while preserving original for comparison.
        """
        self.image_repository.update_pixels_preserve_original(image, new_pixels)

    def save(self, image: Image) -> None:
        """
        Business-level method to save the image to its path.
        """
        self.image_repository.save(image)
        logger.info(f"Saved {image.path}")

    def retouched_path(
        self,
        img: Image,
        out_dir: Union[str, Path, None] = None,
        suffix: str = "_retouched",
    ) -> Path:
        """
        Output path next to the source (or inside *out_dir*), e.g.
        face.jpg → face_retouched.jpg. OUTPUT_IMG_EXT overrides the extension.
        """
        if img.path is None:
            raise ValueError("Image has no source path to derive an output path from")
        src = Path(img.path)
        ext = self.OUTPUT_EXT or src.suffix
        folder = Path(out_dir) if out_dir is not None else src.parent
        return folder / f"{src.stem}{suffix}{ext}"
