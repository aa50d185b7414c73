from __future__ import annotations
from typing import List, Optional, Tuple
import logging

import cv2
import numpy as np

from ..models.donor_patch import DonorPatch

logger = logging.getLogger(__name__)

_DIAG = 0.7071

# Fixed enumeration order; the first minimum wins on ties.
# Image y grows downward, so north is -y.
COMPASS_DIRECTIONS: Tuple[Tuple[str, float, float], ...] = (
    ("N", 0.0, -1.0),
    ("NE", _DIAG, -_DIAG),
    ("E", 1.0, 0.0),
    ("SE", _DIAG, _DIAG),
    ("S", 0.0, 1.0),
    ("SW", -_DIAG, _DIAG),
    ("W", -1.0, 0.0),
    ("NW", -_DIAG, -_DIAG),
)


class PatchService:
    """
    Donor patch search for blemish correction.
    *   No I/O here: works only with BGR numpy arrays.
    *   Never mutates the frame it searches.
    """

    @staticmethod
    def compute_patch_variance(patch: np.ndarray) -> float:
        """
        Texture score of a patch: sum of squared Laplacian responses on the
        HSV value channel.

        Args:
            patch (np.ndarray): BGR patch, or an already single-channel one.

        Returns:
            (float): Non-negative score, 0 for a perfectly flat patch.
        """
        if patch is None or patch.size == 0:
            raise ValueError("Cannot score an empty patch")

        if patch.ndim == 3:
            value = cv2.cvtColor(patch, cv2.COLOR_BGR2HSV)[:, :, 2]
        else:
            value = patch

        # 4-neighbour kernel: the 3x3 aperture cancels on 1-px alternation.
        lap = cv2.Laplacian(value, cv2.CV_32F, ksize=1, scale=1.0 / (255.0 * 3 * 2),
                            delta=0, borderType=cv2.BORDER_DEFAULT)
        return float(np.square(lap.astype(np.float64)).sum())

    @staticmethod
    def candidate_centers(center: Tuple[int, int], radius: int) -> List[Tuple[str, Tuple[int, int]]]:
        """
        Eight candidate centres at 2 * radius from *center*, in compass order.
        Offsets are truncated toward zero.
        """
        cx, cy = center
        return [
            (name, (int(cx + dx * radius * 2), int(cy + dy * radius * 2)))
            for name, dx, dy in COMPASS_DIRECTIONS
        ]

    @staticmethod
    def patch_bounds(center: Tuple[int, int], radius: int) -> Tuple[int, int, int, int]:
        """(x0, y0, x1, y1) of the (2r+1)^2 square around *center*, x1/y1 exclusive."""
        x, y = center
        return x - radius, y - radius, x + radius + 1, y + radius + 1

    @classmethod
    def in_bounds(cls, shape, center: Tuple[int, int], radius: int) -> bool:
        height, width = shape[:2]
        x0, y0, x1, y1 = cls.patch_bounds(center, radius)
        return x0 >= 0 and y0 >= 0 and x1 <= width and y1 <= height

    @classmethod
    def select_best_patch(
        cls,
        image: np.ndarray,
        center: Tuple[int, int],
        radius: int,
    ) -> Optional[DonorPatch]:
        """
        Pick the smoothest in-bounds donor patch around a blemish.

        Args:
            image (np.ndarray): Frame to search (BGR).
            center (Tuple[int, int]): Blemish centre (x, y).
            radius (int): Patch radius; patches are (2r+1)^2.

        Returns:
            DonorPatch with the lowest variance score, or None when no
            candidate fits inside the frame. Callers must skip the blemish
            on None.
        """
        if radius < 1:
            raise ValueError(f"radius must be >= 1, got {radius}")

        best: Optional[DonorPatch] = None
        for direction, src_center in cls.candidate_centers(center, radius):
            if not cls.in_bounds(image.shape, src_center, radius):
                continue

            x0, y0, x1, y1 = cls.patch_bounds(src_center, radius)
            patch = image[y0:y1, x0:x1]
            score = cls.compute_patch_variance(patch)

            if best is None or score < best.score:
                best = DonorPatch(pixels=patch.copy(), center=src_center,
                                  direction=direction, score=score)

        if best is None:
            logger.debug(f"No donor patch in bounds for blemish at {center} (r={radius})")
        return best
