# services/tolerance_controller.py
"""
Interactive tolerance loop.

Every tolerance change recomputes the whole overlay, shows it and
overwrites the persisted file. The loop polls for keys on a short
interval and stops on Esc, q/Q or space, or when the window is closed.
The last result is persisted once more on the way out.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, Union

from ..models.image import Image
from ..models.keying_session import KeyingSession
from ..repositories.display_repository import DisplayRepository
from .chroma_key_service import ChromaKeyService
from .image_service import ImageService

logger = logging.getLogger(__name__)

EXIT_KEYS = frozenset({27, ord("q"), ord("Q"), ord(" ")})


class ToleranceController:
    """
    Single owner of a KeyingSession.

    The trackbar callback is a bound method, so all writes to the
    session's tolerance/result pair happen on the polling thread.
    """

    def __init__(
            self,
            session: KeyingSession,
            output_path: Union[str, Path],
            *,
            chroma_key_service: ChromaKeyService | None = None,
            image_service: ImageService | None = None,
            display: DisplayRepository | None = None,
            poll_interval_ms: int = 30,
            trackbar_name: str = "Tolerance",
    ):
        self.session = session
        self.output_path = Path(output_path)
        self.chroma_key_service = chroma_key_service or ChromaKeyService()
        self.image_service = image_service or ImageService()
        self.display = display
        self.poll_interval_ms = poll_interval_ms
        self.trackbar_name = trackbar_name

    @staticmethod
    def is_exit_key(key: int) -> bool:
        return key in EXIT_KEYS

    def on_tolerance_change(self, position: int) -> Image:
        """
        Clamp *position*, recompute the overlay, display it (if a display
        is attached) and persist it over the previous output.
        """
        s = self.session
        s.tolerance = s.clamp_tolerance(position)

        result = self.chroma_key_service.replace(s.foreground, s.background, s.key_color, s.tolerance)
        result.path = self.output_path
        s.result = result

        if self.display is not None:
            self.display.show(result.pixels)
        self.image_service.save(result)

        logger.debug(f"Tolerance set to {s.tolerance}, overlay written to {self.output_path}")
        return result

    def apply_all(self, positions: Iterable[int]) -> KeyingSession:
        """Feed a (possibly lazy) stream of slider positions through the controller."""
        for position in positions:
            self.on_tolerance_change(position)
        return self.session

    def start(self) -> None:
        """Open the window, attach the slider and render the first frame."""
        if self.display is None:
            raise RuntimeError("ToleranceController.start() needs a display")
        s = self.session
        self.display.open()
        self.display.add_trackbar(self.trackbar_name, s.tolerance, s.tolerance_max,
                                  self.on_tolerance_change)
        # synthetic first event
        self.on_tolerance_change(s.tolerance)

    def finish(self) -> None:
        if self.display is not None:
            self.display.close()
        if self.session.result is not None:
            self.image_service.save(self.session.result)

    def run(self) -> KeyingSession:
        """
        Blocking event loop. Returns the session once an exit key is seen.
        """
        self.start()
        logger.info("Adjust 'Tolerance'; press Esc, q or space to finish")
        try:
            while True:
                key = self.display.poll_key(self.poll_interval_ms)
                if key >= 0 and self.is_exit_key(key):
                    break
                if not self.display.is_open():
                    logger.info("Window closed")
                    break
        finally:
            self.finish()
        return self.session
