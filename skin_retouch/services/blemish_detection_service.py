from __future__ import annotations
from typing import List
import logging

import cv2
import numpy as np

from ..models.blemish import Blemish
from ..models.retouch_settings import RetouchSettings

logger = logging.getLogger(__name__)


class BlemishDetectionService:
    """
    Finds blemish candidates inside a skin mask.

    • Hue-channel gradient magnitude (Sobel) marks colour discontinuities.
    • The mask is eroded first so the skin/background edge never fires.
    • SimpleBlobDetector turns the thresholded response into keypoints.
    """

    _CLOSE_KERNEL = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (5, 5))

    def __init__(self, settings: RetouchSettings | None = None):
        self.settings = settings or RetouchSettings()
        self.detector = cv2.SimpleBlobDetector_create(self._blob_params())

    def _blob_params(self) -> cv2.SimpleBlobDetector_Params:
        params = cv2.SimpleBlobDetector_Params()
        # Input is a binary map with blemishes drawn dark on white.
        params.minThreshold = 10
        params.maxThreshold = 200
        params.thresholdStep = 10
        params.minRepeatability = 2
        params.minDistBetweenBlobs = 2
        params.filterByColor = True
        params.blobColor = 0
        params.filterByArea = True
        params.minArea = self.settings.blob_min_area
        params.maxArea = self.settings.blob_max_area
        params.filterByCircularity = False
        params.filterByConvexity = False
        params.filterByInertia = False
        return params

    @staticmethod
    def gradient_magnitude(frame: np.ndarray) -> np.ndarray:
        """
        Float32 (H, W) gradient magnitude of the HSV hue channel.
        """
        hue = cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)[:, :, 0]
        gx = cv2.Sobel(hue, cv2.CV_32F, 1, 0, ksize=3)
        gy = cv2.Sobel(hue, cv2.CV_32F, 0, 1, ksize=3)
        return cv2.magnitude(gx, gy)

    def _inner_mask(self, mask: np.ndarray) -> np.ndarray:
        size = 2 * self.settings.morph_kernel_size + 1
        kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (size, size))
        return cv2.erode(mask, kernel)

    def response_map(self, frame: np.ndarray, mask: np.ndarray) -> np.ndarray:
        """
        Binary (0/255) map of strong hue edges inside the skin, holes closed.
        """
        magnitude = self.gradient_magnitude(frame)
        magnitude[self._inner_mask(mask) == 0] = 0
        binary = (magnitude > self.settings.gradient_threshold).astype(np.uint8) * 255
        return cv2.morphologyEx(binary, cv2.MORPH_CLOSE, self._CLOSE_KERNEL)

    def detect(self, frame: np.ndarray, mask: np.ndarray) -> List[Blemish]:
        if mask.shape[:2] != frame.shape[:2]:
            raise ValueError(f"Mask {mask.shape[:2]} does not match frame {frame.shape[:2]}")
        if not mask.any():
            return []

        response = self.response_map(frame, mask)
        if not response.any():
            return []

        keypoints = self.detector.detect(cv2.bitwise_not(response))
        # (x, y, r) order keeps corrections deterministic.
        blemishes = sorted(Blemish.from_keypoint(kp) for kp in keypoints)
        logger.debug(f"Detected {len(blemishes)} blemish candidate(s)")
        return blemishes
