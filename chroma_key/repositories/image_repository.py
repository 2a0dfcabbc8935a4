from pathlib import Path
from typing import Union
import signal
import numpy as np
import cv2
from PIL import Image as PILImage

from ..exceptions import ImageLoadError
from ..models.image import Image


class ImageRepository:
    """
    Handles file I/O for Image entities (OpenCV decode, Pillow encode).
    """

    @staticmethod
    def retrieve_image_dimensions(img: Image):
        return img.pixels.shape[:2]

    @staticmethod
    def load(path: Union[str, Path], rgb: bool = True, timeout: int = 5) -> Image:
        path = Path(path)

        # ─── timeout wrapper (5 s default) ────────────────────────────────
        def _handler(signum, frame):
            raise ImageLoadError(path, f"decode timed out after {timeout}s")

        previous = signal.signal(signal.SIGALRM, _handler)
        signal.alarm(timeout)
        try:
            arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        finally:
            signal.alarm(0)  # always disarm
            if previous is not None:
                signal.signal(signal.SIGALRM, previous)
        # ──────────────────────────────────────────────────────────────────

        if arr_bgr is None:
            raise ImageLoadError(path)

        arr = np.ascontiguousarray(arr_bgr[:, :, ::-1]) if rgb else arr_bgr
        return Image(pixels=arr, path=path)

    @staticmethod
    def save(image: Image) -> None:
        PILImage.fromarray(image.pixels).save(image.path)

