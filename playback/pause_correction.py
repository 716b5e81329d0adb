"""
Windowed pause correction for a follower timeline.

The follower is paused, a resume is scheduled on a pyglet clock, and control
returns to the host loop immediately. The in-flight flag is cleared on every
exit path: normal resume, cancellation, or a failing pause/resume call.
"""

import logging
from typing import Callable, Optional

import pyglet

logger = logging.getLogger(__name__)


class PauseCorrection:
    """
    Pause a follower for a fixed window, then resume it.

    Example:
        correction = PauseCorrection(player.set_paused)
        correction.start(0.5)   # pauses now, resumes 0.5s later via pyglet.clock
        ...
        correction.cancel()     # on teardown, before the window elapsed
    """

    def __init__(
        self,
        set_paused: Callable[[bool], None],
        clock: Optional[pyglet.clock.Clock] = None,
        resume_on_cancel: bool = True
    ):
        """
        Args:
            set_paused: Mutator pausing (True) or resuming (False) the follower
            clock: Clock used to schedule the resume (default: global pyglet clock)
            resume_on_cancel: Resume the follower when the correction is cancelled
        """
        self._set_paused = set_paused
        self._clock = clock or pyglet.clock.get_default()
        self.resume_on_cancel = resume_on_cancel

        self.active = False
        self.wait_seconds = 0.0
        self.started_at: Optional[float] = None

    def start(self, wait_seconds: float):
        """
        Pause the follower and schedule the resume.

        Args:
            wait_seconds: Length of the pause window

        Raises:
            RuntimeError: If a correction is already in flight
        """
        if self.active:
            raise RuntimeError("Pause correction already in flight")

        self.active = True
        self.wait_seconds = wait_seconds
        self.started_at = self._clock.time()
        try:
            self._set_paused(True)
            logger.debug(f"Pause: {wait_seconds:.3f} s")
            self._clock.schedule_once(self._resume, wait_seconds)
        except Exception:
            self._finish()
            raise

    def _resume(self, dt):
        """Scheduled callback ending the pause window."""
        try:
            self._set_paused(False)
        finally:
            self._finish()

    def cancel(self) -> bool:
        """
        Cancel the in-flight correction.

        Never raises; a failing resume is logged.

        Returns:
            True if a correction was cancelled, False if none was in flight
        """
        if not self.active:
            return False

        try:
            self._clock.unschedule(self._resume)
            if self.resume_on_cancel:
                try:
                    self._set_paused(False)
                except Exception as e:
                    logger.error(f"Failed to resume follower while cancelling pause correction: {e}")
            logger.debug("Pause correction cancelled")
        finally:
            self._finish()

        return True

    def _finish(self):
        self.active = False
        self.started_at = None
