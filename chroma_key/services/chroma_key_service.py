# services/chroma_key_service.py
import logging
from typing import Tuple
import numpy as np

from ..models.image import Image

logger = logging.getLogger(__name__)


class ChromaKeyService:
    """
    Business-level helper for key-color replacement.

    Returns a **new** Image (no path) holding the composited result;
    foreground and background are never modified.
    """

    @staticmethod
    def key_mask(
            fg: np.ndarray,
            key_color: Tuple[int, int, int],
            tolerance: int,
    ) -> np.ndarray:
        """
        Boolean (H, W) mask of key-colored pixels.

        A pixel matches when every channel is within *tolerance* of the
        key color (Chebyshev distance, not Euclidean).
        """
        if tolerance < 0:
            raise ValueError(f"tolerance must be non-negative, got {tolerance}")
        diff = np.abs(fg.astype(np.int16) - np.asarray(key_color, dtype=np.int16))
        return (diff <= tolerance).all(axis=2)

    @staticmethod
    def tile_background(bg: np.ndarray, height: int, width: int) -> np.ndarray:
        """
        Background pixels for an (height, width) canvas, wrapped around.

        Position (r, c) reads bg[r % bh, c % bw]: a small background
        repeats, a large one is cropped to its top-left tile.
        """
        bh, bw = bg.shape[:2]
        rows = np.arange(height) % bh
        cols = np.arange(width) % bw
        return bg[rows[:, None], cols[None, :]]

    def replace(
            self,
            fg: Image,
            bg: Image,
            key_color: Tuple[int, int, int],
            tolerance: int,
    ) -> Image:
        mask = self.key_mask(fg.pixels, key_color, tolerance)

        if bg.is_empty:
            logger.warning("Background has zero extent; foreground passed through unchanged")
            return Image(pixels=fg.pixels.copy())

        h, w = fg.pixels.shape[:2]
        tiled = self.tile_background(bg.pixels, h, w)
        out = np.where(mask[:, :, None], tiled, fg.pixels).astype(np.uint8)

        logger.debug(f"tolerance={tolerance}: replaced {int(mask.sum())}/{mask.size} px")
        return Image(pixels=out)
