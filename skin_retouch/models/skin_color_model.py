from __future__ import annotations
from dataclasses import dataclass
import numpy as np

# OpenCV 8-bit HSV ranges: H in [0, 179], S and V in [0, 255].
HSV_MAX = np.array([179.0, 255.0, 255.0])


@dataclass
class SkinColorModel:
    """
    Per-face HSV statistics. Bounds are mean -/+ k * sigma, clipped to the
    valid HSV range.
    """
    mean: np.ndarray            # (3,) float, H/S/V
    std: np.ndarray             # (3,) float, H/S/V
    sigma_multiplier: float = 2.0

    @property
    def lower(self) -> np.ndarray:
        low = self.mean - self.sigma_multiplier * self.std
        return np.clip(np.floor(low), 0, HSV_MAX).astype(np.uint8)

    @property
    def upper(self) -> np.ndarray:
        high = self.mean + self.sigma_multiplier * self.std
        return np.clip(np.ceil(high), 0, HSV_MAX).astype(np.uint8)
