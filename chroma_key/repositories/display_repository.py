# repositories/display_repository.py
import cv2
import numpy as np
from typing import Callable


class DisplayRepository:
    """
    Thin wrapper around OpenCV HighGUI: one window, one trackbar,
    key polling.

    • Pixels come in as RGB and are flipped to BGR for cv2.imshow.
    • Frames larger than max_side are downscaled for display only.
    """

    def __init__(self, window_name: str = "Chroma Key Result", max_side: int = 1400):
        self.window_name = window_name
        self.max_side = max_side

    # ---------- private helpers ----------
    def _fit_to_screen(self, bgr: np.ndarray) -> np.ndarray:
        h, w = bgr.shape[:2]
        longest = max(h, w)
        if self.max_side > 0 and longest > self.max_side:
            s = self.max_side / float(longest)
            return cv2.resize(bgr, None, fx=s, fy=s, interpolation=cv2.INTER_AREA)
        return bgr

    # ---------- public API ----------
    def open(self, x: int = 60, y: int = 60) -> None:
        cv2.namedWindow(self.window_name, cv2.WINDOW_AUTOSIZE)
        cv2.moveWindow(self.window_name, x, y)

    def add_trackbar(
            self,
            name: str,
            initial: int,
            maximum: int,
            on_change: Callable[[int], None],
    ) -> None:
        """
        Register a slider; on_change receives the new integer position.
        Setting the initial position fires on_change once when it differs
        from 0.
        """
        cv2.createTrackbar(name, self.window_name, 0, maximum, on_change)
        cv2.setTrackbarPos(name, self.window_name, initial)

    def show(self, pixels_rgb: np.ndarray) -> None:
        if pixels_rgb.size == 0:
            return
        bgr = np.ascontiguousarray(pixels_rgb[:, :, ::-1])
        cv2.imshow(self.window_name, self._fit_to_screen(bgr))

    def poll_key(self, delay_ms: int) -> int:
        """Wait up to delay_ms for a key press. Returns -1 on timeout."""
        key = cv2.waitKey(delay_ms)
        return -1 if key < 0 else key & 0xFF

    def is_open(self) -> bool:
        """False once the user has closed the window with its close button."""
        try:
            return cv2.getWindowProperty(self.window_name, cv2.WND_PROP_VISIBLE) >= 1
        except cv2.error:
            return False

    def close(self) -> None:
        cv2.destroyAllWindows()
