from __future__ import annotations
from typing import Iterable, Tuple
import logging

import cv2
import numpy as np

from ..models.blemish import Blemish
from ..models.retouch_settings import RetouchSettings
from .patch_service import PatchService

logger = logging.getLogger(__name__)


class RetouchService:
    """
    Blemish correction by seamless cloning + selective bilateral smoothing.
    *   No I/O here: works only with BGR numpy arrays.
    *   Corrections edit the frame in place; smoothing returns a new array.
    """

    def __init__(self, settings: RetouchSettings | None = None,
                 patch_service: PatchService | None = None):
        self.settings = settings or RetouchSettings()
        self.patch_service = patch_service or PatchService()

    # ─── Public API ────────────────────────────────────────────────
    def correct_blemish(self, frame: np.ndarray, center: Tuple[int, int],
                        radius: int | None = None) -> bool:
        """
        Clone the smoothest nearby patch over *center*.

        Only pixels inside the circular mask are written back, so the rest
        of the frame stays bit-identical.

        Returns:
            True if the blemish was corrected, False if it was skipped
            (no donor in bounds, or the target disc leaves the frame).
        """
        radius = radius or self.settings.patch_radius
        center = (int(center[0]), int(center[1]))

        if not self.patch_service.in_bounds(frame.shape, center, radius):
            logger.debug(f"Target disc at {center} (r={radius}) leaves the frame; skipped")
            return False

        donor = self.patch_service.select_best_patch(frame, center, radius)
        if donor is None:
            return False

        mask = self._disc_mask(radius)
        inside = mask > 0
        x0, y0, x1, y1 = self.patch_service.patch_bounds(center, radius)
        target = frame[y0:y1, x0:x1]

        # Nothing to hide; cloning would only add rounding noise.
        if np.array_equal(donor.pixels[inside], target[inside]):
            return True

        # seamlessClone writes into the mask it is given.
        cloned = cv2.seamlessClone(donor.pixels, frame, mask.copy(), center, cv2.NORMAL_CLONE)
        target[inside] = cloned[y0:y1, x0:x1][inside]
        logger.debug(f"Corrected {center} from {donor.direction} (score={donor.score:.4f})")
        return True

    def correct_blemishes(self, frame: np.ndarray, blemishes: Iterable[Blemish],
                          radius: int | None = None) -> Tuple[int, int]:
        """
        Correct every blemish in order. Returns (corrected, skipped).
        """
        corrected = skipped = 0
        for blemish in blemishes:
            if self.correct_blemish(frame, blemish.center, radius):
                corrected += 1
            else:
                skipped += 1
        return corrected, skipped

    def smooth(self, frame: np.ndarray, mask: np.ndarray) -> np.ndarray:
        """
        Bilateral-smooth the frame and blend it back with the soft skin mask
        as weight (frame weight = inverted mask). Pixels outside the mask are
        returned untouched.
        """
        if mask.shape[:2] != frame.shape[:2]:
            raise ValueError(f"Mask {mask.shape[:2]} does not match frame {frame.shape[:2]}")

        strength = self.settings.smoothing_strength / 100.0
        if strength == 0 or not mask.any():
            return frame.copy()

        smoothed = cv2.bilateralFilter(
            frame,
            self.settings.bilateral_diameter,
            self.settings.bilateral_sigma_color,
            self.settings.bilateral_sigma_space,
        )
        return self._compose(smoothed, frame, mask, strength)

    # ─── Internal helpers ──────────────────────────────────────────
    @staticmethod
    def _disc_mask(radius: int) -> np.ndarray:
        diameter = 2 * radius + 1
        mask = np.zeros((diameter, diameter), np.uint8)
        cv2.circle(mask, (radius, radius), radius, 255, thickness=cv2.FILLED)
        return mask

    @staticmethod
    def _compose(
            fg: np.ndarray,
            bg: np.ndarray,
            mask_u8: np.ndarray,
            strength: float,
            radius: int = 3  # ←  edge-softness control
    ) -> np.ndarray:
        """
        Alpha-blend with a feathered mask. The feather only fades inward:
        alpha is forced to 0 wherever the hard mask is 0.
        """
        alpha_u8 = cv2.GaussianBlur(mask_u8, (0, 0), sigmaX=radius, sigmaY=radius)
        alpha = alpha_u8.astype("float32") / 255.0 * strength
        alpha[mask_u8 == 0] = 0.0
        alpha = cv2.merge([alpha, alpha, alpha])  # (H,W,3)

        out = fg.astype("float32") * alpha + bg.astype("float32") * (1.0 - alpha)
        return np.clip(np.rint(out), 0, 255).astype("uint8")
