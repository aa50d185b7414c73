from __future__ import annotations
from dataclasses import dataclass
import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class RetouchSettings:
    """
    Value-object holding every tunable of the retouch pipeline.
    Passed explicitly to each service instead of living in module globals.
    Slider-style values follow the 0-100 range of the interactive controls.
    """
    patch_radius: int = 20              # donor/target disc radius, px
    sigma_multiplier: float = 2.0       # k in mean +/- k * sigma
    morph_kernel_size: int = 5          # opening kernel for the colour mask
    trimap_erosion_size: int = 15       # erosion that marks sure foreground
    grabcut_iterations: int = 3
    gradient_threshold: float = 20.0   # hue gradient magnitude cut-off
    blob_min_area: float = 4.0
    blob_max_area: float = 400.0
    bilateral_diameter: int = 9
    bilateral_sigma_color: float = 75.0
    bilateral_sigma_space: float = 75.0
    smoothing_strength: int = 80        # 0 = no smoothing, 100 = full bilateral
    face_scale_factor: float = 1.1
    face_min_neighbors: int = 5
    face_min_size: int = 60

    def __post_init__(self):
        self._check_range("patch_radius", self.patch_radius, 1, 100)
        self._check_range("morph_kernel_size", self.morph_kernel_size, 1, 100)
        self._check_range("trimap_erosion_size", self.trimap_erosion_size, 1, 100)
        self._check_range("grabcut_iterations", self.grabcut_iterations, 1, 100)
        self._check_range("smoothing_strength", self.smoothing_strength, 0, 100)
        self._check_range("bilateral_diameter", self.bilateral_diameter, 1, 100)
        if self.sigma_multiplier <= 0:
            raise ValueError(f"sigma_multiplier must be positive, got {self.sigma_multiplier}")
        if self.gradient_threshold < 0:
            raise ValueError(f"gradient_threshold must be non-negative, got {self.gradient_threshold}")
        if not 0 < self.blob_min_area <= self.blob_max_area:
            raise ValueError(
                f"blob area range must satisfy 0 < min <= max, got "
                f"{self.blob_min_area}..{self.blob_max_area}"
            )
        if self.face_scale_factor <= 1.0:
            raise ValueError(f"face_scale_factor must be > 1, got {self.face_scale_factor}")

    @staticmethod
    def _check_range(name: str, value, low, high) -> None:
        if not low <= value <= high:
            raise ValueError(f"{name} must be {low}-{high}, got {value}")

    @classmethod
    def from_env(cls, **overrides) -> "RetouchSettings":
        """
        Build settings from environment variables (.env is honoured).
        Keyword arguments win over the environment.
        """
        values = dict(
            patch_radius=int(os.getenv("PATCH_RADIUS", "20")),
            sigma_multiplier=float(os.getenv("SIGMA_MULTIPLIER", "2.0")),
            morph_kernel_size=int(os.getenv("MORPH_KERNEL_SIZE", "5")),
            trimap_erosion_size=int(os.getenv("TRIMAP_EROSION_SIZE", "15")),
            grabcut_iterations=int(os.getenv("GRABCUT_ITERATIONS", "3")),
            gradient_threshold=float(os.getenv("GRADIENT_THRESHOLD", "20")),
            blob_min_area=float(os.getenv("BLOB_MIN_AREA", "4")),
            blob_max_area=float(os.getenv("BLOB_MAX_AREA", "400")),
            bilateral_diameter=int(os.getenv("BILATERAL_DIAMETER", "9")),
            bilateral_sigma_color=float(os.getenv("BILATERAL_SIGMA_COLOR", "75")),
            bilateral_sigma_space=float(os.getenv("BILATERAL_SIGMA_SPACE", "75")),
            smoothing_strength=int(os.getenv("SMOOTHING_STRENGTH", "80")),
            face_scale_factor=float(os.getenv("FACE_SCALE_FACTOR", "1.1")),
            face_min_neighbors=int(os.getenv("FACE_MIN_NEIGHBORS", "5")),
            face_min_size=int(os.getenv("FACE_MIN_SIZE", "60")),
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
