from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Roi:
    """Axis-aligned rectangle (x, y, width, height) in frame coordinates."""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_rect(cls, rect) -> "Roi":
        x, y, w, h = (int(v) for v in rect)
        return cls(x, y, w, h)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def area(self) -> int:
        return 0 if self.is_empty else self.width * self.height

    @property
    def slices(self) -> Tuple[slice, slice]:
        """(rows, cols) slices for numpy indexing."""
        return slice(self.y, self.y + self.height), slice(self.x, self.x + self.width)

    def clamp(self, frame_shape) -> "Roi":
        """
        Intersect with the frame. Detector output may hang over the border,
        so every consumer works on the clamped rectangle.
        """
        frame_h, frame_w = frame_shape[:2]
        x1 = min(max(self.x, 0), frame_w)
        y1 = min(max(self.y, 0), frame_h)
        x2 = min(max(self.x + self.width, 0), frame_w)
        y2 = min(max(self.y + self.height, 0), frame_h)
        return Roi(x1, y1, max(0, x2 - x1), max(0, y2 - y1))

    def offset(self, dx: int, dy: int) -> "Roi":
        return Roi(self.x + dx, self.y + dy, self.width, self.height)
