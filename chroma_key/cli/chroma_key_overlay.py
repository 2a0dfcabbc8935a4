import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..exceptions import ImageLoadError
from ..pipeline import overlay_compositor
from ..pipeline.overlay_compositor import compose_overlay

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Key out the dominant foreground color and show the background through it."
    )
    p.add_argument("--foreground", default=overlay_compositor.FOREGROUND_PATH,
                   help="foreground image (default: %(default)s)")
    p.add_argument("--background", default=overlay_compositor.BACKGROUND_PATH,
                   help="background image, tiled when smaller (default: %(default)s)")
    p.add_argument("--output", default=overlay_compositor.OVERLAY_PATH,
                   help="overlay written after every change (default: %(default)s)")
    p.add_argument("--buckets", type=int, default=overlay_compositor.BUCKETS,
                   help="histogram buckets per channel, 1-256 (default: %(default)s)")
    p.add_argument("--tolerance", type=int, default=None,
                   help="render once at this tolerance without opening a window")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        compose_overlay(
            foreground_path=args.foreground,
            background_path=args.background,
            output_path=args.output,
            buckets=args.buckets,
            tolerance=args.tolerance,
        )
    except ImageLoadError as err:
        logger.error(f"Error: could not load input images: {err}")
        print(f"Error: {err}", file=sys.stderr)
        return 1
    except ValueError as err:
        logger.error(str(err))
        print(f"Error: {err}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
