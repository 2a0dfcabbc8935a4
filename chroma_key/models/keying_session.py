from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from .image import Image


@dataclass
class KeyingSession:
    """
    Owned state of one interactive keying run.

    Foreground, background and key color are fixed for the session;
    tolerance and result are rewritten on every tolerance change.
    """
    foreground: Image
    background: Image
    key_color: Tuple[int, int, int]
    tolerance: int
    tolerance_max: int
    result: Image | None = None

    def clamp_tolerance(self, value: int) -> int:
        return max(0, min(self.tolerance_max, int(value)))
