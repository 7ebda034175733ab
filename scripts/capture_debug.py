"""
Runs every OCR preprocessing variant on one capture and reports what each
one reads.

Use it to tune the capture region or the filter colours: it prints the raw
OCR text, the parsed candidate and its map projection for each variant, and
saves the filtered images next to each other for visual inspection.

    python scripts/capture_debug.py                  # live capture of the game
    python scripts/capture_debug.py --image strip.png
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
from PIL import Image

# --- Path Setup ---
# This script is intended to be run from the project root directory.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from src.nwminimap.config import Config
from src.nwminimap.core.ocr_engine import OcrEngine
from src.nwminimap.core.pipeline import (
    DEFAULT_VARIANTS,
    HUE_DISTANCE_VARIANT,
    PreprocessVariant,
)
from src.nwminimap.core.position_parser import parse_position
from src.nwminimap.core.projection import game_to_lat_lng
from src.nwminimap.core.screen_capture import ScreenCapturer

DEFAULT_OUTPUT_DIR = PROJECT_ROOT / "debug"


def load_image(path: Path) -> np.ndarray:
    """Loads an image file as an RGB numpy array."""
    with Image.open(path) as img:
        return np.array(img.convert("RGB"))


def capture_live(config: Config) -> np.ndarray | None:
    capturer = ScreenCapturer(
        process_name=config.process_name,
        x_offset=config.capture_x_offset,
        y_offset=config.capture_y_offset,
        width=config.capture_width,
        height=config.capture_height,
    )
    return capturer.grab()


def run_variants(original: np.ndarray, ocr: OcrEngine, output_dir: Path):
    """OCRs the capture once per variant, independently of the retry chain."""
    Image.fromarray(original).save(output_dir / "original.png")

    image = original.copy()
    variants: list[PreprocessVariant] = list(DEFAULT_VARIANTS) + [HUE_DISTANCE_VARIANT]
    for i, variant in enumerate(variants, start=1):
        if variant.from_original:
            image = original.copy()
        if variant.apply is not None:
            variant.apply(image)

        text = ocr.read_text(image)
        candidate = parse_position(text)
        print(f"\n[{i}] {variant.name}")
        print(f"  OCR text:  {text!r}")
        if candidate is None:
            print("  Candidate: none")
        else:
            geo = game_to_lat_lng(candidate.x, candidate.y)
            print(f"  Candidate: ({candidate.x:.0f}, {candidate.y:.0f}) -> lat {geo.lat:.6f}, lng {geo.lng:.6f}")

        out_path = output_dir / f"{i}_{variant.name}.png"
        Image.fromarray(image[..., :3]).save(out_path)
        print(f"  Saved:     {out_path}")


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--image", type=Path, help="Use an image file instead of a live capture")
    parser.add_argument("--out", type=Path, default=DEFAULT_OUTPUT_DIR, help="Where to save the filtered images")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    config = Config()

    if args.image:
        original = load_image(args.image)
    else:
        original = capture_live(config)
        if original is None:
            print(f"ERROR: Could not capture the screen. Is '{config.process_name}' running?")
            sys.exit(1)

    ocr = OcrEngine(config.ocr_languages, gpu=config.ocr_gpu)
    if not ocr.available:
        print("ERROR: The OCR engine could not be initialized.")
        sys.exit(1)

    args.out.mkdir(parents=True, exist_ok=True)
    print(f"--- Capture {original.shape[1]}x{original.shape[0]} ---")
    run_variants(original, ocr, args.out)


if __name__ == "__main__":
    main()
