from typing import List

import cv2
import numpy as np

from ..models.face import Face
from ..models.face_detector import FaceDetector


class FaceRepository:
    """
    Thin wrapper around FaceDetector that provides low-level access to the cascades.
    """

    def __init__(self, detector: FaceDetector = None):
        self.detector = detector or FaceDetector()  # Singleton is handled inside

    @staticmethod
    def _to_gray(pixels_bgr: np.ndarray) -> np.ndarray:
        gray = cv2.cvtColor(pixels_bgr, cv2.COLOR_BGR2GRAY)
        return cv2.equalizeHist(gray)

    def infer_faces(
        self,
        pixels_bgr: np.ndarray,
        scale_factor: float = 1.1,
        min_neighbors: int = 5,
        min_size: int = 60,
    ) -> List[Face]:
        gray = self._to_gray(pixels_bgr)
        rects = self.detector.face_cascade.detectMultiScale(
            gray,
            scaleFactor=scale_factor,
            minNeighbors=min_neighbors,
            minSize=(min_size, min_size),
        )

        faces = []
        for (x, y, w, h) in rects:
            eyes = self.infer_eyes(gray[y:y + h, x:x + w], scale_factor, min_neighbors)
            faces.append(Face.from_cascade((x, y, w, h), eyes))
        return faces

    def infer_eyes(self, face_gray: np.ndarray, scale_factor: float, min_neighbors: int):
        if self.detector.eye_cascade is None or face_gray.size == 0:
            return []
        # Eyes sit in the upper half of the face box.
        upper = face_gray[: face_gray.shape[0] // 2 + 1]
        rects = self.detector.eye_cascade.detectMultiScale(
            upper, scaleFactor=scale_factor, minNeighbors=min_neighbors
        )
        return [tuple(int(v) for v in r) for r in rects]
