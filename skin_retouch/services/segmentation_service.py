# services/segmentation_service.py
import logging

import numpy as np

from ..models.retouch_settings import RetouchSettings
from ..repositories.segmentation_repository import SegmentationRepository

logger = logging.getLogger(__name__)

# GrabCut fits 5-component GMMs per class and needs samples for each.
_MIN_CLASS_PIXELS = 16


class SegmentationService:
    """
    GrabCut refinement of the colour-threshold skin mask.
    """

    def __init__(self, settings: RetouchSettings = None) -> None:
        self.settings = settings or RetouchSettings()
        self.repo = SegmentationRepository()

    def build_trimap(self, mask: np.ndarray) -> np.ndarray:
        return self.repo.build_trimap(mask, self.settings.trimap_erosion_size)

    def refine(self, frame: np.ndarray, mask: np.ndarray) -> np.ndarray:
        """
        Returns the refined 0/255 mask, same size as *mask*.
        GrabCut needs pixels of both classes; otherwise the mask is returned as is.
        """
        if mask.shape[:2] != frame.shape[:2]:
            raise ValueError(f"Mask {mask.shape[:2]} does not match frame {frame.shape[:2]}")

        skin = int(np.count_nonzero(mask))
        if min(skin, mask.size - skin) < _MIN_CLASS_PIXELS:
            logger.debug("Skipping GrabCut: too few pixels in one class")
            return mask.copy()

        trimap = self.build_trimap(mask)
        refined = self.repo.retrieve_mask(frame, trimap, self.settings.grabcut_iterations)
        logger.debug(f"GrabCut kept {np.count_nonzero(refined)}/{skin} skin pixels")
        return refined
