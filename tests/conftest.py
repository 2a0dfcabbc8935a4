import numpy as np
import pytest

from chroma_key.models.image import Image


def solid(h, w, rgb):
    px = np.empty((h, w, 3), dtype=np.uint8)
    px[:, :] = rgb
    return Image(pixels=px)


class FakeDisplay:
    """Stands in for DisplayRepository; replays a scripted key sequence."""

    def __init__(self, keys=(), open_for=None):
        self.keys = list(keys)
        self.open_for = open_for  # polls before the window "closes"
        self.polls = 0
        self.shown = []
        self.trackbar = None
        self.opened = False
        self.closed = False

    def open(self, x=60, y=60):
        self.opened = True

    def add_trackbar(self, name, initial, maximum, on_change):
        self.trackbar = (name, initial, maximum, on_change)

    def show(self, pixels_rgb):
        self.shown.append(pixels_rgb.copy())

    def poll_key(self, delay_ms):
        self.polls += 1
        return self.keys.pop(0) if self.keys else 27

    def is_open(self):
        return self.open_for is None or self.polls < self.open_for

    def close(self):
        self.closed = True


class RecordingImageService:
    """Keeps saved frames in memory instead of writing files."""

    def __init__(self, fail=False):
        self.saved = []
        self.fail = fail

    def save(self, image):
        self.saved.append((image.path, image.pixels.copy()))
        return not self.fail


@pytest.fixture
def fake_display():
    return FakeDisplay()


@pytest.fixture
def recording_service():
    return RecordingImageService()
