from typing import NamedTuple, Tuple


class Blemish(NamedTuple):
    """Detected blemish candidate; lives for a single pipeline pass."""
    x: int
    y: int
    radius: int

    @classmethod
    def from_keypoint(cls, keypoint) -> "Blemish":
        x, y = keypoint.pt
        return cls(int(round(x)), int(round(y)), max(1, int(round(keypoint.size / 2))))

    @property
    def center(self) -> Tuple[int, int]:
        return self.x, self.y
