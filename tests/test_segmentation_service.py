"""
Unit tests for SegmentationService.

Tests trimap construction and GrabCut refinement of the skin mask.
"""

import cv2
import numpy as np
import pytest

from skin_retouch.models.retouch_settings import RetouchSettings
from skin_retouch.services.segmentation_service import SegmentationService


@pytest.fixture
def disc_mask():
    mask = np.zeros((120, 120), np.uint8)
    cv2.circle(mask, (60, 60), 30, 255, thickness=cv2.FILLED)
    return mask


class TestBuildTrimap:
    """Tests for mask → trimap conversion."""

    def test_labels(self, disc_mask):
        """Background, probable skin at the rim, sure skin in the core."""
        trimap = SegmentationService().build_trimap(disc_mask)

        assert trimap.shape == disc_mask.shape
        assert set(np.unique(trimap)) == {cv2.GC_BGD, cv2.GC_FGD, cv2.GC_PR_FGD}
        assert trimap[0, 0] == cv2.GC_BGD
        assert trimap[60, 60] == cv2.GC_FGD
        assert trimap[60, 31] == cv2.GC_PR_FGD

    def test_larger_erosion_shrinks_core(self, disc_mask):
        """The sure-skin core shrinks as the erosion grows."""
        small = SegmentationService(RetouchSettings(trimap_erosion_size=5)).build_trimap(disc_mask)
        large = SegmentationService(RetouchSettings(trimap_erosion_size=25)).build_trimap(disc_mask)
        assert np.count_nonzero(large == cv2.GC_FGD) < np.count_nonzero(small == cv2.GC_FGD)


class TestRefine:
    """Tests for GrabCut refinement."""

    def test_refined_mask_stays_within_input_and_keeps_core(self, skin_portrait, disc_mask):
        """Sure background stays out, sure skin stays in."""
        frame = skin_portrait(noise=3)
        service = SegmentationService()

        refined = service.refine(frame, disc_mask)

        assert refined.shape == disc_mask.shape
        assert refined.dtype == np.uint8
        assert set(np.unique(refined)) <= {0, 255}
        assert not refined[disc_mask == 0].any()

        core = service.build_trimap(disc_mask) == cv2.GC_FGD
        assert refined[core].all()

    def test_does_not_modify_inputs(self, skin_portrait, disc_mask):
        """Frame and mask are read only."""
        frame = skin_portrait(noise=3)
        frame_before, mask_before = frame.copy(), disc_mask.copy()

        SegmentationService().refine(frame, disc_mask)

        np.testing.assert_array_equal(frame, frame_before)
        np.testing.assert_array_equal(disc_mask, mask_before)

    def test_empty_mask_returned_unchanged(self, skin_portrait):
        """Nothing to refine without skin pixels."""
        empty = np.zeros((120, 120), np.uint8)
        refined = SegmentationService().refine(skin_portrait(), empty)
        np.testing.assert_array_equal(refined, empty)

    def test_full_mask_returned_unchanged(self, skin_portrait):
        """Nothing to refine without background pixels."""
        full = np.full((120, 120), 255, np.uint8)
        refined = SegmentationService().refine(skin_portrait(), full)
        np.testing.assert_array_equal(refined, full)

    def test_size_mismatch(self, skin_portrait):
        """Mask and frame must share dimensions."""
        with pytest.raises(ValueError):
            SegmentationService().refine(skin_portrait(), np.zeros((10, 10), np.uint8))
