"""
Document Scanning CLI.

Detects the document in a photo, flattens it, applies an effect and saves
the result.

Usage:
    # Scan one photo with the adaptive threshold effect
    python scripts/scan_document.py --input receipt.jpg --effect adaptive_threshold

    # Scan a directory, fitting pages into 1080x1920
    python scripts/scan_document.py --input photos/ --output scans/ --max-size 1080 1920

    # Only print the detected corners
    python scripts/scan_document.py --input receipt.jpg --detect-only
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.exceptions import ScannerError  # noqa: E402
from src.common.types import Size  # noqa: E402
from src.imaging.bitmap import to_bitmap  # noqa: E402
from src.loading.loader import decode_source  # noqa: E402
from src.pipeline.scanner import DocumentScanner  # noqa: E402
from src.transforms.effects import ImageEffect  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".webp"}


def collect_inputs(input_path: Path) -> list:
    """Image files under ``input_path`` (or the file itself)."""
    if input_path.is_dir():
        return sorted(
            p for p in input_path.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES
        )
    return [input_path]


def scan_file(
    scanner: DocumentScanner,
    image_path: Path,
    output_dir: Path,
    effect: ImageEffect,
    max_size: Size,
    detect_only: bool,
) -> bool:
    """Scan one file; returns False if it could not be processed."""
    try:
        image = decode_source(image_path)
    except (OSError, ScannerError) as e:
        logger.error(f"Cannot read {image_path}: {e}")
        return False

    if detect_only:
        detection = scanner.detect(image)
        print(f"{image_path.name}: {detection.shape!r} ({detection.source.value})")
        return True

    try:
        result = scanner.scan(image, effect=effect, max_size=max_size)
    except ScannerError as e:
        logger.error(f"Scan failed for {image_path}: {e}")
        return False

    output_path = output_dir / f"{image_path.stem}_scan.png"
    to_bitmap(result.image).save(output_path)
    logger.info(f"Saved {output_path}")
    return True


def main():
    """Main entry point for the scanner CLI."""
    parser = argparse.ArgumentParser(
        description="Detect, flatten and clean up photographed documents",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--input", type=str, required=True, help="Input image or directory")
    parser.add_argument("--output", type=str, default="scans", help="Output directory")
    parser.add_argument(
        "--effect",
        type=str,
        default=ImageEffect.NONE.value,
        choices=[effect.value for effect in ImageEffect],
        help="Effect applied to the flattened page",
    )
    parser.add_argument(
        "--max-size",
        type=int,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        default=None,
        help="Fit the page into this size",
    )
    parser.add_argument("--config", type=str, default=None, help="Detection config YAML")
    parser.add_argument(
        "--detect-only", action="store_true", help="Print corners instead of scanning"
    )
    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input not found: {input_path}")
        raise SystemExit(1)

    output_dir = Path(args.output)
    if not args.detect_only:
        output_dir.mkdir(parents=True, exist_ok=True)

    max_size = Size(width=args.max_size[0], height=args.max_size[1]) if args.max_size else None
    scanner = DocumentScanner(config_path=Path(args.config) if args.config else None)
    effect = ImageEffect(args.effect)

    inputs = collect_inputs(input_path)
    failures = 0
    for image_path in inputs:
        if not scan_file(scanner, image_path, output_dir, effect, max_size, args.detect_only):
            failures += 1

    logger.info(f"Processed {len(inputs) - failures}/{len(inputs)} image(s)")
    if failures:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
