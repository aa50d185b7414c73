"""
Interactive Blemish Remover
Click on a blemish to clone the smoothest nearby patch over it.

The interaction is an explicit state machine: a session receives `Click`
and `KeyPress` events and moves between ACTIVE and CLOSED. The OpenCV
window loop in `run_interactive` only translates GUI callbacks into events.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
import logging

import cv2
import numpy as np

from ..models.image import Image
from ..models.retouch_settings import RetouchSettings
from ..services.image_service import ImageService
from ..services.retouch_service import RetouchService

WINDOW_NAME = "Blemish Removal"
WINDOW_SIZE = (1200, 900)
ESC_KEY = 27
RESET_KEYS = (ord("c"), ord("C"))

logger = logging.getLogger(__name__)


class SessionState(Enum):
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass(frozen=True)
class Click:
    x: int
    y: int


@dataclass(frozen=True)
class KeyPress:
    key: int


Event = Union[Click, KeyPress]


class BlemishRemovalSession:
    """
    ACTIVE --Click--> ACTIVE   (blemish corrected when a donor exists)
    ACTIVE --c / C--> ACTIVE   (displayed frame reset to the original)
    ACTIVE --Esc----> CLOSED
    CLOSED --any----> CLOSED   (ignored)
    """

    def __init__(self, pixels: np.ndarray, settings: RetouchSettings | None = None,
                 retouch_service: RetouchService | None = None):
        self.settings = settings or RetouchSettings.from_env()
        self.retouch_service = retouch_service or RetouchService(self.settings)
        self.original = pixels.copy()
        self.frame = pixels.copy()
        self.state = SessionState.ACTIVE
        self.corrections = 0

    @property
    def closed(self) -> bool:
        return self.state is SessionState.CLOSED

    def handle(self, event: Event) -> SessionState:
        if self.closed:
            return self.state

        if isinstance(event, Click):
            self._on_click(event)
        elif isinstance(event, KeyPress):
            self._on_key(event.key & 0xFF)
        else:
            raise TypeError(f"Unsupported event: {event!r}")
        return self.state

    def _on_click(self, click: Click) -> None:
        if self.retouch_service.correct_blemish(self.frame, (click.x, click.y),
                                                self.settings.patch_radius):
            self.corrections += 1
        else:
            logger.info(f"No donor patch for ({click.x}, {click.y}); click ignored")

    def _on_key(self, key: int) -> None:
        if key == ESC_KEY:
            self.state = SessionState.CLOSED
        elif key in RESET_KEYS:
            self.frame = self.original.copy()
            self.corrections = 0
            logger.info("Image reset")


def event_from_mouse(event: int, x: int, y: int) -> Optional[Click]:
    """Only a left-button press is a session event."""
    if event == cv2.EVENT_LBUTTONDOWN:
        return Click(x, y)
    return None


def run_interactive(
    image: Image,
    *,
    settings: RetouchSettings | None = None,
    image_service: ImageService | None = None,
    window: str = WINDOW_NAME,
) -> BlemishRemovalSession:
    """
    Open a window over *image* and run the session until Esc (or the
    window is closed). The final frame is applied to *image* with its
    original pixels preserved.
    """
    image_service = image_service or ImageService()
    session = BlemishRemovalSession(image.pixels, settings)

    def _on_mouse(event, x, y, flags, param):
        click = event_from_mouse(event, x, y)
        if click is not None:
            session.handle(click)

    cv2.namedWindow(window, cv2.WINDOW_NORMAL)
    cv2.resizeWindow(window, *WINDOW_SIZE)
    cv2.setMouseCallback(window, _on_mouse)

    print("Instructions:")
    print(" - Left-click to remove blemish.")
    print(" - Press 'C' to reset image.")
    print(" - Press 'Esc' to exit.")

    try:
        while not session.closed:
            cv2.imshow(window, session.frame)
            key = cv2.waitKey(20)
            if key != -1:
                session.handle(KeyPress(key))
            if cv2.getWindowProperty(window, cv2.WND_PROP_VISIBLE) < 1:
                session.handle(KeyPress(ESC_KEY))
    finally:
        cv2.destroyWindow(window)

    image_service.apply_pipeline_modification(image, session.frame)
    logger.info(f"Session closed after {session.corrections} correction(s)")
    return session
