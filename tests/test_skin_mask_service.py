"""
Unit tests for SkinMaskService.

Tests the adaptive HSV model and the colour-threshold skin mask.
"""

import cv2
import numpy as np

from skin_retouch.models.face import Face
from skin_retouch.models.retouch_settings import RetouchSettings
from skin_retouch.models.roi import Roi
from skin_retouch.services.skin_mask_service import SkinMaskService

from conftest import SKIN_BGR


def _hsv_of(bgr):
    return cv2.cvtColor(np.uint8([[bgr]]), cv2.COLOR_BGR2HSV)[0, 0]


class TestEstimateColorModel:
    """Tests for skin colour sampling."""

    def test_uniform_face_has_tight_bounds(self, skin_portrait):
        """Zero spread: lower and upper both equal the sampled colour."""
        frame = skin_portrait()
        model = SkinMaskService().estimate_color_model(frame, Roi(45, 45, 30, 30))

        expected = _hsv_of(SKIN_BGR)
        np.testing.assert_array_equal(model.lower, expected)
        np.testing.assert_array_equal(model.upper, expected)

    def test_uses_configured_sigma_multiplier(self, skin_portrait):
        """The model carries k from the settings."""
        service = SkinMaskService(RetouchSettings(sigma_multiplier=3.5))
        model = service.estimate_color_model(skin_portrait(), Roi(45, 45, 30, 30))
        assert model.sigma_multiplier == 3.5

    def test_roi_outside_frame(self, skin_portrait):
        """Nothing to sample."""
        assert SkinMaskService().estimate_color_model(skin_portrait(), Roi(500, 500, 10, 10)) is None


class TestBuildMask:
    """Tests for the binary skin mask."""

    def test_marks_skin_and_not_background(self, skin_portrait):
        """The skin disc is in, the blue background is out."""
        frame = skin_portrait()
        mask = SkinMaskService().build_mask(frame, Face(Roi(45, 45, 30, 30)))

        assert mask.shape == frame.shape[:2]
        assert mask.dtype == np.uint8
        assert mask[60, 60] == 255
        assert mask[60, 40] == 255
        assert mask[5, 5] == 0
        assert set(np.unique(mask)) <= {0, 255}

    def test_blemish_hole_is_filled(self, skin_portrait):
        """A spot of different hue inside the skin still counts as skin."""
        frame = skin_portrait(spot_radius=4)
        mask = SkinMaskService().build_mask(frame, Face(Roi(45, 45, 30, 30)))
        assert mask[60, 60] == 255

    def test_eyes_are_cut_out(self, skin_portrait):
        """Eye boxes are never skin."""
        frame = skin_portrait()
        face = Face(Roi(45, 45, 30, 30), eyes=[Roi(50, 50, 8, 8)])

        mask = SkinMaskService().build_mask(frame, face)

        assert not mask[50:58, 50:58].any()
        assert mask[65, 65] == 255

    def test_roi_outside_frame_gives_empty_mask(self, skin_portrait):
        """No usable ROI degrades to an empty mask."""
        frame = skin_portrait()
        mask = SkinMaskService().build_mask(frame, Face(Roi(500, 500, 10, 10)))
        assert mask.shape == frame.shape[:2]
        assert not mask.any()

    def test_union_of_faces(self, skin_portrait):
        """Two differently coloured faces both end up in the union mask."""
        frame = np.full((100, 200, 3), (200, 80, 20), np.uint8)
        cv2.circle(frame, (50, 50), 30, SKIN_BGR, thickness=cv2.FILLED)
        cv2.circle(frame, (150, 50), 30, (90, 130, 190), thickness=cv2.FILLED)
        faces = [Face(Roi(40, 40, 20, 20)), Face(Roi(140, 40, 20, 20))]

        mask = SkinMaskService().build_union_mask(frame, faces)

        assert mask[50, 50] == 255
        assert mask[50, 150] == 255
        assert mask[5, 100] == 0

    def test_union_without_faces_is_empty(self, skin_portrait):
        """No faces, no skin."""
        frame = skin_portrait()
        assert not SkinMaskService().build_union_mask(frame, []).any()
