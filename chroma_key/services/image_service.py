from pathlib import Path
from typing import Union
import logging
import os
from dotenv import load_dotenv

from ..models.image import Image
from ..repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageService:
    """I/O helpers.  No keying logic, no window handling."""
    def __init__(self):
        self.LOAD_TIMEOUT = int(os.getenv("IMAGE_LOAD_TIMEOUT", "5"))
        self.image_repository = ImageRepository()

    def load(self, path: Union[str, Path]) -> Image:
        """
        Load a single image from disk into an Image object.

        Raises:
            ImageLoadError: missing, corrupt or zero-byte file.
        """
        img = self.image_repository.load(path, timeout=self.LOAD_TIMEOUT)
        h, w = self.image_repository.retrieve_image_dimensions(img)
        logger.info(f"Loaded {img.path} ({w}x{h})")
        return img

    def save(self, image: Image) -> bool:
        """
        Business-level method to save the image to image.path.

        A failed write (permissions, full disk, bad extension) is logged
        and reported through the return value instead of raised, so an
        interactive session keeps running.
        """
        if image.path is None:
            raise ValueError("Image has no destination path")
        if image.is_empty:
            logger.warning(f"Not writing empty image to {image.path}")
            return False
        try:
            self.image_repository.save(image)
        except (OSError, ValueError) as err:
            logger.warning(f"Could not write {image.path}: {err}")
            return False
        return True

    def save_as(self, image: Image, path: Union[str, Path]) -> bool:
        """Point *image* at *path* and save it there."""
        image.path = Path(path)
        return self.save(image)
