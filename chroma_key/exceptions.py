class ChromaKeyError(Exception):
    """Base class for errors raised by the chroma key package."""


class ImageLoadError(ChromaKeyError):
    """
    An input image could not be decoded (missing, corrupt, zero-byte or
    timed out). Fatal for the overlay program.
    """

    def __init__(self, path, reason: str = "not found or unreadable"):
        self.path = path
        super().__init__(f"Image {reason}: {path}")
