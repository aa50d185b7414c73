from __future__ import annotations
from typing import List
import logging

from ..models.face import Face
from ..models.image import Image
from ..models.retouch_settings import RetouchSettings
from ..repositories.face_repository import FaceRepository

logger = logging.getLogger(__name__)


class FaceAnalysisService:
    """
    High-level face logic on top of the cascade `FaceRepository`.
    *   No I/O here: works only with Image objects (BGR numpy arrays).
    *   Caches detection results per Image instance to avoid repeats.
    *   Every returned ROI is clamped to the frame; empty ones are dropped.
    """
    def __init__(self, settings: RetouchSettings | None = None,
                 face_repository: FaceRepository | None = None):
        self.settings = settings or RetouchSettings()
        self._face_repository = face_repository
        self._cache: dict[int, list] = {}             # id(img) → faces

    @property
    def face_repository(self) -> FaceRepository:
        # Cascades load on first use, not at construction.
        if self._face_repository is None:
            self._face_repository = FaceRepository()
        return self._face_repository

    def _faces(self, img: Image) -> List[Face]:
        k = id(img)
        if k not in self._cache:
            raw = self.face_repository.infer_faces(
                img.pixels,
                scale_factor=self.settings.face_scale_factor,
                min_neighbors=self.settings.face_min_neighbors,
                min_size=self.settings.face_min_size,
            )
            self._cache[k] = self._clamp_faces(raw, img.pixels.shape)
            logger.debug(f"Detected {len(self._cache[k])} face(s)")
        return self._cache[k]

    @staticmethod
    def _clamp_faces(faces: List[Face], shape) -> List[Face]:
        clamped = []
        for face in faces:
            roi = face.roi.clamp(shape)
            if roi.is_empty:
                continue
            eyes = [e.clamp(shape) for e in face.eyes]
            clamped.append(Face(roi=roi, eyes=[e for e in eyes if not e.is_empty]))
        return clamped

    def get_faces(self, img: Image) -> List[Face]:
        """
        Returns list of detected faces in an image, largest first.
        """
        return sorted(self._faces(img), key=lambda f: f.roi.area, reverse=True)

    def forget(self, img: Image) -> None:
        """Drop the cached detections of *img* (video frames are one-shot)."""
        self._cache.pop(id(img), None)
