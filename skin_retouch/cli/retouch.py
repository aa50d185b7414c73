"""
Command-line entry point.

    skin-retouch image portrait.jpg -o portrait_smooth.png
    skin-retouch batch photos/ -o data/retouched_gallery --recursive
    skin-retouch video clip.mp4 -o clip_smooth.mp4 --preview
    skin-retouch remove blemish.png -o result.png --radius 20
"""
from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..models.retouch_settings import RetouchSettings
from ..pipeline.blemish_remover import run_interactive
from ..pipeline.skin_smoother import RETOUCHED_DIR, SkinSmoother, retouch_gallery
from ..pipeline.video_smoother import smooth_video
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skin-retouch",
        description="Automatic skin smoothing and blemish removal.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    # Tuning flags follow the subcommand: `skin-retouch remove x.png --radius 20`.
    tuning = argparse.ArgumentParser(add_help=False)
    tuning.add_argument("--radius", type=int, help="patch radius in pixels (1-100)")
    tuning.add_argument("--strength", type=int, help="smoothing strength (0-100)")
    tuning.add_argument("--sigma", type=float, help="skin model sigma multiplier")

    sub = parser.add_subparsers(dest="command", required=True)

    p_image = sub.add_parser("image", parents=[tuning], help="retouch a single image")
    p_image.add_argument("input", type=Path)
    p_image.add_argument("-o", "--output", type=Path,
                         help="output file (default: <input>_retouched.<ext>)")

    p_batch = sub.add_parser("batch", parents=[tuning], help="retouch every image in a folder")
    p_batch.add_argument("folder", type=Path)
    p_batch.add_argument("-o", "--output", type=Path, default=Path(RETOUCHED_DIR))
    p_batch.add_argument("--recursive", action="store_true")

    p_video = sub.add_parser("video", parents=[tuning], help="retouch a video frame by frame")
    p_video.add_argument("input", help="video file, or a camera index")
    p_video.add_argument("-o", "--output", type=Path, required=True)
    p_video.add_argument("--preview", action="store_true", help="show frames; Esc stops")

    p_remove = sub.add_parser("remove", parents=[tuning], help="click blemishes away interactively")
    p_remove.add_argument("input", type=Path)
    p_remove.add_argument("-o", "--output", type=Path,
                          help="output file (default: <input>_retouched.<ext>)")
    return parser


def _settings_from_args(args: argparse.Namespace) -> RetouchSettings:
    return RetouchSettings.from_env(
        patch_radius=args.radius,
        smoothing_strength=args.strength,
        sigma_multiplier=args.sigma,
    )


def _run_image(args, settings: RetouchSettings) -> None:
    smoother = SkinSmoother(settings)
    img = smoother.image_service.load(args.input)
    report = smoother.run(img)
    img.path = args.output or smoother.image_service.retouched_path(img)
    smoother.image_service.save(img)
    print(f"{img.path}: faces={report.faces} corrected={report.blemishes_corrected} "
          f"skipped={report.blemishes_skipped}" + (f" ({report.reason})" if report.reason else ""))


def _run_batch(args, settings: RetouchSettings) -> None:
    smoother = SkinSmoother(settings)
    gallery = smoother.image_service.stream_gallery(args.folder, recursive=args.recursive)
    results = retouch_gallery(gallery, smoother=smoother, out_dir=args.output)
    print(f"Retouched {len(results)} image(s) into {args.output}")


def _run_video(args, settings: RetouchSettings) -> None:
    source = int(args.input) if args.input.isdigit() else args.input
    written = smooth_video(source, args.output, smoother=SkinSmoother(settings),
                           preview=args.preview)
    print(f"Wrote {written} frame(s) to {args.output}")


def _run_remove(args, settings: RetouchSettings) -> None:
    image_service = ImageService()
    img = image_service.load(args.input)
    session = run_interactive(img, settings=settings, image_service=image_service)
    img.path = args.output or image_service.retouched_path(img)
    image_service.save(img)
    print(f"{img.path}: {session.corrections} correction(s)")


_COMMANDS = {
    "image": _run_image,
    "batch": _run_batch,
    "video": _run_video,
    "remove": _run_remove,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        settings = _settings_from_args(args)
        _COMMANDS[args.command](args, settings)
    except (FileNotFoundError, NotADirectoryError, TimeoutError) as err:
        logger.error(f"Input error: {err}")
        return 1
    except ValueError as err:
        logger.error(f"Invalid parameter: {err}")
        return 2
    except OSError as err:
        logger.error(f"Output error: {err}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
