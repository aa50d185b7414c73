# repositories/segmentation_repository.py
import cv2
import numpy as np


class SegmentationRepository:
    """
    One-image GrabCut inference + trimap preparation.

    • Converts a binary skin mask into a GrabCut trimap.
    • Runs cv2.grabCut seeded from that trimap and returns a 0/255 mask.
    """

    # ---------- private helpers ----------
    @staticmethod
    def _ellipse(size: int) -> np.ndarray:
        return cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (size, size))

    # ---------- public API ----------
    def build_trimap(self, mask_u8: np.ndarray, erosion_size: int = 15) -> np.ndarray:
        """
        0 → sure background, mask → probable skin,
        eroded mask → sure skin.
        """
        trimap = np.full(mask_u8.shape[:2], cv2.GC_BGD, np.uint8)
        trimap[mask_u8 > 0] = cv2.GC_PR_FGD

        core = cv2.erode(mask_u8, self._ellipse(erosion_size), iterations=1)
        trimap[core > 0] = cv2.GC_FGD
        return trimap

    @staticmethod
    def retrieve_mask(bgr: np.ndarray, trimap: np.ndarray, iterations: int = 3) -> np.ndarray:
        """
        Returns uint8 mask (H, W) with 0/255 values.
        The trimap is copied; GrabCut writes its labels in place.
        """
        gc_mask = trimap.copy()
        bgd_model = np.zeros((1, 65), np.float64)
        fgd_model = np.zeros((1, 65), np.float64)
        cv2.grabCut(
            np.ascontiguousarray(bgr),
            gc_mask,
            None,
            bgd_model,
            fgd_model,
            iterations,
            cv2.GC_INIT_WITH_MASK,
        )
        refined = (gc_mask == cv2.GC_FGD) | (gc_mask == cv2.GC_PR_FGD)
        return refined.astype("uint8") * 255
