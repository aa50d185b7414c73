from dataclasses import dataclass, field
from typing import List

from .roi import Roi


@dataclass
class Face:
    roi: Roi                                        # face box (x, y, w, h)
    eyes: List[Roi] = field(default_factory=list)   # eye boxes, frame coordinates

    @classmethod
    def from_cascade(cls, face_rect, eye_rects=()) -> "Face":
        """
        Build a Face from raw cascade output. Eye rectangles come back
        relative to the face crop and are moved into frame coordinates.
        """
        roi = Roi.from_rect(face_rect)
        eyes = [Roi.from_rect(r).offset(roi.x, roi.y) for r in eye_rects]
        return cls(roi=roi, eyes=eyes)
