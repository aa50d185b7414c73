from __future__ import annotations
from typing import Iterable, Optional
import logging

import cv2
import numpy as np

from ..models.face import Face
from ..models.retouch_settings import RetouchSettings
from ..models.roi import Roi
from ..models.skin_color_model import SkinColorModel

logger = logging.getLogger(__name__)


class SkinMaskService:
    """
    Adaptive skin-colour mask.

    • Samples HSV mean / sigma inside the face box.
    • Thresholds the whole frame with mean -/+ k * sigma, opens away speckle.
    • Fills enclosed holes, then cuts the eye boxes out; eyes are never skin.
    """

    def __init__(self, settings: RetouchSettings | None = None):
        self.settings = settings or RetouchSettings()

    @staticmethod
    def _to_hsv(frame: np.ndarray) -> np.ndarray:
        return cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)

    def estimate_color_model(self, frame: np.ndarray, roi: Roi) -> Optional[SkinColorModel]:
        """
        Returns None when the ROI does not overlap the frame.
        """
        roi = roi.clamp(frame.shape)
        if roi.is_empty:
            return None
        rows, cols = roi.slices
        hsv = self._to_hsv(np.ascontiguousarray(frame[rows, cols]))
        mean, std = cv2.meanStdDev(hsv)
        return SkinColorModel(mean=mean.ravel(), std=std.ravel(),
                              sigma_multiplier=self.settings.sigma_multiplier)

    def _open(self, mask_u8: np.ndarray) -> np.ndarray:
        size = self.settings.morph_kernel_size
        kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (size, size))
        return cv2.morphologyEx(mask_u8, cv2.MORPH_OPEN, kernel)

    @staticmethod
    def _fill_holes(mask_u8: np.ndarray) -> np.ndarray:
        """
        Blemishes fall outside the colour bounds and punch holes in the mask;
        filling outer contours brings them back inside the skin region.
        """
        contours, _ = cv2.findContours(mask_u8, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        filled = np.zeros_like(mask_u8)
        cv2.drawContours(filled, contours, -1, 255, thickness=cv2.FILLED)
        return filled

    def build_mask(self, frame: np.ndarray, face: Face) -> np.ndarray:
        """
        Binary (0/255) skin mask over the whole frame for one face.
        """
        model = self.estimate_color_model(frame, face.roi)
        if model is None:
            return np.zeros(frame.shape[:2], np.uint8)

        logger.debug(f"Skin bounds lower={model.lower.tolist()} upper={model.upper.tolist()}")
        mask = cv2.inRange(self._to_hsv(frame), model.lower, model.upper)
        mask = self._fill_holes(self._open(mask))

        for eye in face.eyes:
            eye = eye.clamp(frame.shape)
            if not eye.is_empty:
                rows, cols = eye.slices
                mask[rows, cols] = 0
        return mask

    def build_union_mask(self, frame: np.ndarray, faces: Iterable[Face]) -> np.ndarray:
        mask = np.zeros(frame.shape[:2], np.uint8)
        for face in faces:
            mask = cv2.bitwise_or(mask, self.build_mask(frame, face))
        return mask
