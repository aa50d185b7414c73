from __future__ import annotations
import logging
import os

import cv2
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class FaceDetector:
    """
    Singleton wrapper around OpenCV's Haar cascades (frontal face + eyes).

    Loads the cascade files once per process and exposes the raw classifiers.
    """

    _instance: FaceDetector | None = None  # Class-level cache for singleton

    def __new__(cls, *args, **kwargs):
        """
        Ensure cascades are loaded only once (Singleton pattern).

        Args:
            face_cascade (str, optional): Path to the face cascade XML.
            eye_cascade (str, optional): Path to the eye cascade XML.
        """
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init_detector(*args, **kwargs)
        return cls._instance

    def _init_detector(self, face_cascade: str = None, eye_cascade: str = None):
        """
        Load the cascades on first instantiation.

        Args:
            face_cascade (str): Face cascade file. Defaults to env var, then
                                OpenCV's bundled haarcascade_frontalface_default.xml.
            eye_cascade (str): Eye cascade file. Defaults to env var, then
                               OpenCV's bundled haarcascade_eye.xml.
        """
        if face_cascade is None:
            face_cascade = os.getenv("FACE_CASCADE_PATH") or _bundled_cascade(
                "haarcascade_frontalface_default.xml"
            )
        if eye_cascade is None:
            eye_cascade = os.getenv("EYE_CASCADE_PATH") or _bundled_cascade("haarcascade_eye.xml")

        self.face_cascade = cv2.CascadeClassifier(face_cascade) if face_cascade else None
        self.eye_cascade = cv2.CascadeClassifier(eye_cascade) if eye_cascade else None
        if self.face_cascade is None or self.face_cascade.empty():
            # Leave the singleton unset so a corrected path can be retried.
            type(self)._instance = None
            raise FileNotFoundError(
                f"Face cascade not found or unreadable: {face_cascade or '<none>'} "
                "(set FACE_CASCADE_PATH when this OpenCV build ships no cv2.data)"
            )
        if self.eye_cascade is None or self.eye_cascade.empty():
            logger.warning(f"Eye cascade unavailable ({eye_cascade}); eyes will not be excluded")
            self.eye_cascade = None

        logger.info(f"FaceDetector loaded cascade: {face_cascade}")


def _bundled_cascade(filename: str) -> str | None:
    """Path of a cascade shipped with opencv-python, None if the build has none."""
    data = getattr(cv2, "data", None)
    if data is None:
        return None
    return data.haarcascades + filename
