from __future__ import annotations
from dataclasses import dataclass


@dataclass
class RetouchReport:
    """
    Outcome of one pipeline pass over one frame.
    `reason` is set when a stage produced nothing and the rest became a no-op.
    """
    faces: int = 0
    blemishes_found: int = 0
    blemishes_corrected: int = 0
    blemishes_skipped: int = 0
    smoothed: bool = False
    reason: str | None = None

    @property
    def changed(self) -> bool:
        return self.blemishes_corrected > 0 or self.smoothed
