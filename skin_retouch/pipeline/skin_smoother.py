"""
Skin Smoother Pipeline
Single forward pass over one frame:
face boxes → skin colour mask → GrabCut refinement → blemish detection
→ seamless-clone correction → selective bilateral smoothing.

Any stage that comes back empty turns the rest of the pass into a no-op;
nothing here raises for a frame without a face or without skin.
"""
from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Tuple
import logging
import os

from dotenv import load_dotenv
from tqdm import tqdm

from ..models.image import Image
from ..models.retouch_report import RetouchReport
from ..models.retouch_settings import RetouchSettings
from ..services.blemish_detection_service import BlemishDetectionService
from ..services.face_analysis_service import FaceAnalysisService
from ..services.image_service import ImageService
from ..services.retouch_service import RetouchService
from ..services.segmentation_service import SegmentationService
from ..services.skin_mask_service import SkinMaskService

# Load environment variables
load_dotenv()

# Retouched images output directory
RETOUCHED_DIR = os.getenv("RETOUCHED_DIR_PATH", "data/retouched_gallery")

logger = logging.getLogger(__name__)


class SkinSmoother:
    """
    Holds one instance of every stage, all built from the same settings,
    so a video or a gallery reuses them frame after frame.
    """

    def __init__(
        self,
        settings: RetouchSettings | None = None,
        *,
        image_service: ImageService | None = None,
        face_analysis_service: FaceAnalysisService | None = None,
        skin_mask_service: SkinMaskService | None = None,
        segmentation_service: SegmentationService | None = None,
        blemish_detection_service: BlemishDetectionService | None = None,
        retouch_service: RetouchService | None = None,
    ):
        self.settings = settings or RetouchSettings.from_env()
        self.image_service = image_service or ImageService()
        self.face_analysis_service = face_analysis_service or FaceAnalysisService(self.settings)
        self.skin_mask_service = skin_mask_service or SkinMaskService(self.settings)
        self.segmentation_service = segmentation_service or SegmentationService(self.settings)
        self.blemish_detection_service = (
            blemish_detection_service or BlemishDetectionService(self.settings)
        )
        self.retouch_service = retouch_service or RetouchService(self.settings)

    def run(self, image: Image) -> RetouchReport:
        """
        Retouch *image* in memory. Original pixels are preserved on the
        Image for before/after comparison.
        """
        report = RetouchReport()
        self.image_service.preserve_original_state(image)

        try:
            faces = self.face_analysis_service.get_faces(image)
        finally:
            self.face_analysis_service.forget(image)
        report.faces = len(faces)
        if not faces:
            report.reason = "no_face"
            logger.info(f"No face found in {image.path or 'frame'}; left unchanged")
            return report

        frame = image.pixels.copy()

        mask = self.skin_mask_service.build_union_mask(frame, faces)
        if mask.any():
            mask = self.segmentation_service.refine(frame, mask)
        if not mask.any():
            report.reason = "empty_mask"
            logger.info(f"No skin pixels in {image.path or 'frame'}; left unchanged")
            return report

        blemishes = self.blemish_detection_service.detect(frame, mask)
        report.blemishes_found = len(blemishes)
        corrected, skipped = self.retouch_service.correct_blemishes(frame, blemishes)
        report.blemishes_corrected = corrected
        report.blemishes_skipped = skipped

        frame = self.retouch_service.smooth(frame, mask)
        report.smoothed = self.settings.smoothing_strength > 0

        self.image_service.apply_pipeline_modification(image, frame)
        logger.info(
            f"Retouched {image.path or 'frame'}: {report.faces} face(s), "
            f"{corrected}/{report.blemishes_found} blemish(es) corrected, {skipped} skipped"
        )
        return report

    __call__ = run


def smooth_skin(image: Image, settings: RetouchSettings | None = None) -> RetouchReport:
    """Convenience one-shot wrapper around SkinSmoother."""
    return SkinSmoother(settings).run(image)


def retouch_gallery(
    gallery: Iterable[Image],
    *,
    smoother: SkinSmoother | None = None,
    out_dir: str | Path = RETOUCHED_DIR,
) -> List[Tuple[Image, RetouchReport]]:
    """
    For every Image in *gallery*:
        • run the skin smoothing pass in memory
        • point the image at `<out_dir>/<stem>_retouched<ext>`
        • save it
    Returns (image, report) pairs in input order.
    """
    smoother = smoother or SkinSmoother()
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    results = []
    for img in tqdm(gallery, desc="retouch", ncols=70, unit="img"):
        report = smoother.run(img)
        img.path = smoother.image_service.retouched_path(img, out_dir)
        smoother.image_service.save(img)
        results.append((img, report))

    changed = sum(1 for _, r in results if r.changed)
    logger.info(f"Retouched {changed}/{len(results)} image(s) into {out_dir}")
    return results
