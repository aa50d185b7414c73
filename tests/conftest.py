"""
Pytest configuration and shared fixtures for skin-retouch tests.

All images are synthetic BGR arrays so the suite needs no data files.
"""

import cv2
import numpy as np
import pytest

from skin_retouch.models.retouch_settings import RetouchSettings

SKIN_BGR = (140, 170, 220)
BACKGROUND_BGR = (200, 80, 20)
SPOT_BGR = (60, 60, 200)
GRAY = 128


@pytest.fixture
def settings():
    """Settings with a radius small enough for 100 px test frames."""
    return RetouchSettings(patch_radius=10)


@pytest.fixture
def gray_blemish_image():
    """
    101x101 uniform gray image with a 5x5 black square at its centre.
    """
    img = np.full((101, 101, 3), GRAY, np.uint8)
    img[48:53, 48:53] = 0
    return img


@pytest.fixture
def checkerboard():
    """Factory for a 1-px BGR checkerboard of the requested size."""
    def _make(height, width):
        board = (np.indices((height, width)).sum(axis=0) % 2 * 255).astype(np.uint8)
        return cv2.merge([board, board, board])
    return _make


@pytest.fixture
def skin_portrait():
    """
    Factory for a 120x120 'portrait': blue background, skin disc of radius
    30 centred at (60, 60), optional red spot, optional seeded noise.
    """
    def _make(spot_radius=0, noise=0, seed=0):
        img = np.full((120, 120, 3), BACKGROUND_BGR, np.uint8)
        cv2.circle(img, (60, 60), 30, SKIN_BGR, thickness=cv2.FILLED)
        if spot_radius:
            cv2.circle(img, (60, 60), spot_radius, SPOT_BGR, thickness=cv2.FILLED)
        if noise:
            rng = np.random.default_rng(seed)
            jitter = rng.integers(-noise, noise + 1, img.shape)
            img = np.clip(img.astype(np.int16) + jitter, 0, 255).astype(np.uint8)
        return img
    return _make


@pytest.fixture
def noisy_settings():
    """Wider skin bounds so jittered synthetic skin stays one region."""
    return RetouchSettings(patch_radius=10, sigma_multiplier=4.0)
