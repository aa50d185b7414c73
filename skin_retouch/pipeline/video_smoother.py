"""
Video Smoother Pipeline
Runs the skin smoothing pass on every frame of a video, independently.
No state carries over between frames. Esc in the preview window stops early.
"""
from __future__ import annotations
from pathlib import Path
from typing import Union
import logging

import cv2
from tqdm import tqdm

from ..models.image import Image
from ..repositories.video_repository import VideoRepository
from .skin_smoother import SkinSmoother

PREVIEW_WINDOW = "Skin Smoothing"
ESC_KEY = 27

logger = logging.getLogger(__name__)


def smooth_video(
    source: Union[str, Path, int],
    output: Union[str, Path],
    *,
    smoother: SkinSmoother | None = None,
    video_repository: VideoRepository | None = None,
    preview: bool = False,
) -> int:
    """
    Retouch *source* frame by frame into *output*.

    Args:
        source: Video file path or camera index.
        output: Destination video file (mp4v).
        smoother: Shared SkinSmoother; built from the environment if omitted.
        video_repository: Frame I/O.
        preview: Show each retouched frame; Esc cancels.

    Returns:
        int: Number of frames written.
    """
    smoother = smoother or SkinSmoother()
    video_repository = video_repository or VideoRepository()

    cap = video_repository.open_capture(source)
    fps, width, height, total = video_repository.retrieve_properties(cap)
    try:
        writer = video_repository.open_writer(output, fps, (width, height))
    except OSError:
        cap.release()
        raise

    written = 0
    try:
        frames = video_repository.iter_frames(cap)
        for frame in tqdm(frames, total=total or None, desc="video", ncols=70, unit="frame"):
            img = Image(pixels=frame)
            smoother.run(img)
            writer.write(img.pixels)
            written += 1

            if preview:
                cv2.imshow(PREVIEW_WINDOW, img.pixels)
                if cv2.waitKey(1) & 0xFF == ESC_KEY:
                    logger.info("Preview cancelled by user")
                    break
    finally:
        writer.release()
        cap.release()
        if preview:
            cv2.destroyWindow(PREVIEW_WINDOW)

    logger.info(f"Wrote {written} frame(s) to {output}")
    return written
