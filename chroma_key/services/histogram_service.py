# services/histogram_service.py
import logging
from typing import Tuple
import numpy as np

from ..models.image import Image
from ..models.color_histogram import ColorHistogram, DominantBin

logger = logging.getLogger(__name__)


class HistogramService:
    """
    Dominant-color detection by 3-D color histogram.

    • build_histogram   → quantize every pixel into buckets³ cells
    • find_dominant_bin → most populated cell (first max wins)
    • bin_center        → representative color of a cell
    """

    MIN_BUCKETS = 1
    MAX_BUCKETS = 256

    @classmethod
    def bucket_size(cls, buckets: int) -> int:
        if not cls.MIN_BUCKETS <= buckets <= cls.MAX_BUCKETS:
            raise ValueError(
                f"buckets must be in [{cls.MIN_BUCKETS}, {cls.MAX_BUCKETS}], got {buckets}"
            )
        return 256 // buckets

    @classmethod
    def bucket_indices(cls, values: np.ndarray, buckets: int) -> np.ndarray:
        """
        Map channel values (any shape) to bucket indices in [0, buckets-1].
        When 256 is not a multiple of buckets the top values spill past the
        last bucket and are clamped back into it.
        """
        size = cls.bucket_size(buckets)
        idx = np.asarray(values, dtype=np.int64) // size
        return np.clip(idx, 0, buckets - 1)

    def build_histogram(self, img: Image, buckets: int) -> ColorHistogram:
        """
        Args:
            img (Image): image to scan, (H, W, 3) uint8.
            buckets (int): cells per channel.

        Returns:
            ColorHistogram whose counts sum to H * W. Axes are (B, G, R)
            bucket indices, the order OpenCV stores channels in.
        """
        flat_pixels = img.pixels.reshape(-1, 3)
        idx = self.bucket_indices(flat_pixels, buckets)

        # row-major cell number: blue outer, red inner
        cell = (idx[:, 2] * buckets + idx[:, 1]) * buckets + idx[:, 0]
        counts = np.bincount(cell, minlength=buckets ** 3).astype(np.int64)

        logger.debug(f"Histogram built: {flat_pixels.shape[0]} pixels into {buckets}³ bins")
        return ColorHistogram(counts=counts.reshape(buckets, buckets, buckets), buckets=buckets)

    @staticmethod
    def find_dominant_bin(histogram: ColorHistogram) -> Tuple[Tuple[int, int, int], int]:
        """
        Index triple and count of the fullest cell.

        Ties go to the lexicographically smallest index: cells are visited
        first channel outermost and a cell only takes over on a strictly
        greater count. np.argmax over the C-ordered array returns the first
        maximum in exactly that order.
        """
        counts = histogram.counts
        flat = int(np.argmax(counts))
        index = tuple(int(i) for i in np.unravel_index(flat, counts.shape))
        return index, int(counts[index])

    @staticmethod
    def bin_center(index: Tuple[int, int, int], bucket_size: int) -> Tuple[int, int, int]:
        return tuple(int(i) * bucket_size + bucket_size // 2 for i in index)

    def dominant_color(self, img: Image, buckets: int) -> DominantBin:
        histogram = self.build_histogram(img, buckets)
        index, count = self.find_dominant_bin(histogram)
        color = self.bin_center(index[::-1], histogram.bucket_size)
        logger.info(f"Dominant bin (B,G,R) {list(index)} holds {count} px → key color {list(color)}")
        return DominantBin(index=index, count=count, color=color)
