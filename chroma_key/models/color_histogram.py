from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np


@dataclass
class ColorHistogram:
    """
    3-D occupancy counts over quantized color space.

    counts[b, g, r] is the number of pixels whose blue/green/red
    channel fell into bucket b/g/r.
    """
    counts: np.ndarray  # Shape (buckets, buckets, buckets), int64
    buckets: int

    @property
    def bucket_size(self) -> int:
        return 256 // self.buckets

    @property
    def total(self) -> int:
        return int(self.counts.sum())


@dataclass(frozen=True)
class DominantBin:
    index: Tuple[int, int, int]   # bucket index per channel (B, G, R)
    count: int                    # pixels that landed in this bin
    color: Tuple[int, int, int]   # representative (bin center) color, RGB
