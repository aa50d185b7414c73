from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np


@dataclass
class DonorPatch:
    """
    Square (2r+1 x 2r+1) region chosen as the clone source for a blemish.
    Pixels are a copy; the source frame is never touched through a patch.
    """
    pixels: np.ndarray          # (2r+1, 2r+1, 3) uint8, BGR
    center: Tuple[int, int]     # (x, y) of the patch centre in the frame
    direction: str              # compass direction it was taken from
    score: float                # texture variance, lower = smoother

    @property
    def radius(self) -> int:
        return self.pixels.shape[0] // 2
