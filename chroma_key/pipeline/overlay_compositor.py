# pipeline/overlay_compositor.py
from pathlib import Path
import os
from typing import List, Optional

from dotenv import load_dotenv

from ..models.color_histogram import DominantBin
from ..models.image import Image
from ..models.keying_session import KeyingSession
from ..repositories.display_repository import DisplayRepository
from ..services.histogram_service import HistogramService
from ..services.image_service import ImageService
from ..services.tolerance_controller import ToleranceController

# ------------------------------------------------------------------
# env‑vars
load_dotenv()
FOREGROUND_PATH  = os.getenv("FOREGROUND_PATH", "foreground.jpg")
BACKGROUND_PATH  = os.getenv("BACKGROUND_PATH", "background.jpg")
OVERLAY_PATH     = os.getenv("OVERLAY_PATH", "overlay.jpg")
BUCKETS          = int(os.getenv("HISTOGRAM_BUCKETS", "4"))
DISPLAY_MAX_SIDE = int(os.getenv("DISPLAY_MAX_SIDE", "1400"))
POLL_INTERVAL_MS = int(os.getenv("POLL_INTERVAL_MS", "30"))
WINDOW_NAME      = "Chroma Key Result"


# ------------------------------------------------------------------
def build_session(
    foreground: Image,
    background: Image,
    *,
    buckets: int = BUCKETS,
    histogram_service: HistogramService = HistogramService(),
) -> tuple[KeyingSession, DominantBin]:
    """
    Find the key color of *foreground* and wrap everything the
    controller needs in a KeyingSession at the default tolerance.
    """
    bucket_size = histogram_service.bucket_size(buckets)
    dominant = histogram_service.dominant_color(foreground, buckets)
    session = KeyingSession(
        foreground=foreground,
        background=background,
        key_color=dominant.color,
        tolerance=bucket_size // 2,
        tolerance_max=max(bucket_size, 255),
    )
    return session, dominant


def format_report(dominant: DominantBin) -> List[str]:
    x, y, z = dominant.index
    r, g, b = dominant.color
    return [
        f"Most common bin (B,G,R): [{x}, {y}, {z}]",
        f"Representative color:     [{b}, {g}, {r}]",
        f"Pixel count: {dominant.count}",
    ]


def compose_overlay(
    *,
    foreground_path: str | Path = FOREGROUND_PATH,
    background_path: str | Path = BACKGROUND_PATH,
    output_path: str | Path     = OVERLAY_PATH,
    buckets: int                = BUCKETS,
    tolerance: Optional[int]    = None,
    image_service: ImageService = ImageService(),
    display: Optional[DisplayRepository] = None,
) -> KeyingSession:
    """
    Load both images, report the dominant color, then either
        • tolerance given  → render once at that tolerance and persist, or
        • tolerance None   → run the interactive slider loop until exit.
    Returns the final KeyingSession (its .result is the last overlay).

    Raises ImageLoadError when either input cannot be decoded.
    """
    fg = image_service.load(foreground_path)
    bg = image_service.load(background_path)

    session, dominant = build_session(fg, bg, buckets=buckets)
    for line in format_report(dominant):
        print(line)

    if tolerance is not None:
        controller = ToleranceController(session, output_path, image_service=image_service)
        controller.on_tolerance_change(tolerance)
        return session

    if display is None:
        display = DisplayRepository(window_name=WINDOW_NAME, max_side=DISPLAY_MAX_SIDE)
    controller = ToleranceController(
        session,
        output_path,
        image_service=image_service,
        display=display,
        poll_interval_ms=POLL_INTERVAL_MS,
    )
    return controller.run()
