from __future__ import annotations
from pathlib import Path
from typing import Iterator, Tuple, Union
import logging

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class VideoRepository:
    """
    Frame-level access to video files through cv2.VideoCapture / VideoWriter.
    """

    @staticmethod
    def open_capture(source: Union[str, Path, int]) -> cv2.VideoCapture:
        cap = cv2.VideoCapture(source if isinstance(source, int) else str(source))
        if not cap.isOpened():
            cap.release()
            raise FileNotFoundError(f"Video not found or unreadable: {source}")
        return cap

    @staticmethod
    def retrieve_properties(cap: cv2.VideoCapture) -> Tuple[float, int, int, int]:
        """(fps, width, height, frame_count); fps falls back to 30 when unknown."""
        fps = cap.get(cv2.CAP_PROP_FPS) or 30.0
        width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        count = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
        return fps, width, height, max(count, 0)

    @staticmethod
    def iter_frames(cap: cv2.VideoCapture) -> Iterator[np.ndarray]:
        """Yield BGR frames until the stream ends. The capture is released on exit."""
        try:
            while True:
                ok, frame = cap.read()
                if not ok:
                    break
                yield frame
        finally:
            cap.release()

    @staticmethod
    def open_writer(path: Union[str, Path], fps: float, size: Tuple[int, int],
                    fourcc: str = "mp4v") -> cv2.VideoWriter:
        path = Path(path)
        writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*fourcc), fps, size)
        if not writer.isOpened():
            writer.release()
            raise OSError(f"Failed to open video writer: {path}")
        logger.debug(f"Writing {size[0]}x{size[1]} @ {fps:.2f} fps to {path}")
        return writer
