import numpy as np
import pytest

from chroma_key.models.keying_session import KeyingSession
from chroma_key.services.tolerance_controller import ToleranceController

from conftest import FakeDisplay, RecordingImageService, solid

GREEN_CENTER = (32, 224, 32)
BLUE = (0, 0, 255)


def make_session(tolerance=32):
    fg = solid(8, 8, (0, 255, 0))
    fg.pixels[0, 0] = (255, 0, 0)
    return KeyingSession(
        foreground=fg,
        background=solid(3, 3, BLUE),
        key_color=GREEN_CENTER,
        tolerance=tolerance,
        tolerance_max=255,
    )


def test_change_clamps_recomputes_and_persists(tmp_path, recording_service):
    session = make_session()
    ctrl = ToleranceController(session, tmp_path / "overlay.jpg", image_service=recording_service)

    ctrl.on_tolerance_change(400)
    assert session.tolerance == 255
    assert (session.result.pixels == np.array(BLUE, np.uint8)).all()

    ctrl.on_tolerance_change(-5)
    assert session.tolerance == 0
    # (0,255,0) is 32 away from the key color on two channels
    assert (session.result.pixels == session.foreground.pixels).all()

    assert len(recording_service.saved) == 2
    assert all(path == tmp_path / "overlay.jpg" for path, _ in recording_service.saved)


def test_threshold_at_exact_distance(tmp_path, recording_service):
    session = make_session()
    ctrl = ToleranceController(session, tmp_path / "o.png", image_service=recording_service)
    out = ctrl.on_tolerance_change(31).pixels
    assert tuple(out[4, 4]) == (0, 255, 0)
    out = ctrl.on_tolerance_change(32).pixels
    assert tuple(out[4, 4]) == BLUE
    assert tuple(out[0, 0]) == (255, 0, 0)


def test_apply_all_consumes_lazy_positions(tmp_path, recording_service):
    session = make_session()
    ctrl = ToleranceController(session, tmp_path / "o.png", image_service=recording_service)
    ctrl.apply_all(p for p in (10, 50, 20))
    assert session.tolerance == 20
    assert len(recording_service.saved) == 3


def test_run_renders_first_frame_and_saves_on_exit(tmp_path, recording_service):
    display = FakeDisplay(keys=[-1, -1, ord("a"), ord("q")])
    session = make_session(tolerance=32)
    ctrl = ToleranceController(session, tmp_path / "o.png",
                               image_service=recording_service, display=display)

    returned = ctrl.run()

    assert returned is session
    assert display.opened and display.closed
    name, initial, maximum, _ = display.trackbar
    assert (name, initial, maximum) == ("Tolerance", 32, 255)
    # one synthetic first frame, one final save at shutdown
    assert len(display.shown) == 1
    assert len(recording_service.saved) == 2
    assert recording_service.saved[0][1].tobytes() == recording_service.saved[1][1].tobytes()
    assert display.keys == []


def test_trackbar_callback_drives_recompute(tmp_path, recording_service):
    display = FakeDisplay()
    session = make_session()
    ctrl = ToleranceController(session, tmp_path / "o.png",
                               image_service=recording_service, display=display)
    ctrl.start()
    on_change = display.trackbar[3]
    on_change(0)
    assert session.tolerance == 0
    assert len(display.shown) == 2


def test_start_requires_display(tmp_path, recording_service):
    ctrl = ToleranceController(make_session(), tmp_path / "o.png", image_service=recording_service)
    with pytest.raises(RuntimeError):
        ctrl.start()


def test_persistence_failure_does_not_stop_loop(tmp_path):
    failing = RecordingImageService(fail=True)
    display = FakeDisplay(keys=[-1, ord(" ")])
    session = make_session()
    ToleranceController(session, tmp_path / "o.png", image_service=failing, display=display).run()
    assert session.result is not None
    assert len(failing.saved) == 2


@pytest.mark.parametrize("key,expected", [
    (27, True), (ord("q"), True), (ord("Q"), True), (ord(" "), True),
    (ord("a"), False), (13, False), (-1, False),
])
def test_exit_keys(key, expected):
    assert ToleranceController.is_exit_key(key) is expected


def test_closing_window_ends_loop(tmp_path, recording_service):
    display = FakeDisplay(keys=[-1] * 10, open_for=3)
    session = make_session()
    ToleranceController(session, tmp_path / "o.png",
                        image_service=recording_service, display=display).run()
    assert display.polls == 3
    assert display.closed
    assert len(recording_service.saved) == 2
