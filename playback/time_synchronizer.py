"""
Drift-correcting time synchronizer for a leader/follower playback pair.

A TimeSynchronizer is ticked by its host (once per frame) and keeps a follower
timeline within a bounded drift of a leader timeline. Drift is evaluated at
most once per check interval and corrected with one of three strategies:

- Hard sync: |offset| > 2000ms, seek the follower to the leader position
- Soft sync via pause: follower ahead, pause the follower for |offset|
- Soft sync via skip: leader ahead, seek the follower forward by offset + 600ms

Rate-based correction (changing the playback rate) is not used; discrete
pauses and seeks were found to work better with real engines.

Example Usage:
    from playback.time_synchronizer import TimeSynchronizer

    synchronizer = TimeSynchronizer(
        get_leader_time=lambda: leader.time * 1000,
        get_follower_time=lambda: follower.time * 1000,
        set_follower_time=lambda ms: follower.seek(ms / 1000),
        set_follower_paused=lambda paused: follower.pause() if paused else follower.play(),
    )
    pyglet.clock.schedule_interval(lambda dt: synchronizer.update(), 1 / 60)
"""

import logging
from enum import Enum
from typing import Callable, Optional, Protocol

import pyglet

from config.sync_settings import SyncSettings
from core.sync_log import SyncEventLog
from playback.pause_correction import PauseCorrection

logger = logging.getLogger(__name__)


class SyncAction(Enum):
    """Outcome of a single TimeSynchronizer.update() call."""
    LEADER_UNKNOWN = "leader_unknown"  # Leader time negative, nothing done
    SUPPRESSED = "suppressed"          # Pause correction in flight
    RATE_LIMITED = "rate_limited"      # Check interval not yet elapsed
    IN_SYNC = "in_sync"
    HARD_SYNC = "hard_sync"
    PAUSE = "pause"
    SKIP = "skip"


class SyncState(Enum):
    """Observable state of a TimeSynchronizer."""
    IDLE = "idle"
    PAUSE_CORRECTING = "pause_correcting"


class PlaybackTimeline(Protocol):
    """Position/pause capability of a playback engine, in milliseconds."""

    def get_time_ms(self) -> float: ...

    def set_time_ms(self, time_ms: float) -> None: ...

    def set_paused(self, paused: bool) -> None: ...


class TimeSynchronizer:
    """
    Keeps a follower timeline aligned with a leader timeline.

    The synchronizer only talks to the engines through four injected
    functions and performs no locking; update() must be called from a single
    tick context (the pyglet event loop).
    """

    def __init__(
        self,
        get_leader_time: Callable[[], float],
        get_follower_time: Callable[[], float],
        set_follower_time: Callable[[float], None],
        set_follower_paused: Callable[[bool], None],
        settings: Optional[SyncSettings] = None,
        clock: Optional[pyglet.clock.Clock] = None,
        event_log: Optional[SyncEventLog] = None
    ):
        """
        Args:
            get_leader_time: Leader position in ms (negative = not yet available)
            get_follower_time: Follower position in ms
            set_follower_time: Seek the follower to an absolute position in ms
            set_follower_paused: Pause (True) or resume (False) the follower
            settings: Thresholds and policies (default: SyncSettings())
            clock: Clock for rate limiting and the pause window (default: global pyglet clock)
            event_log: Optional log receiving every drift evaluation
        """
        self.get_leader_time = get_leader_time
        self.get_follower_time = get_follower_time
        self.set_follower_time = set_follower_time
        self.set_follower_paused = set_follower_paused

        self.settings = settings or SyncSettings()
        self.clock = clock or pyglet.clock.get_default()
        self.event_log = event_log

        self.last_sync_instant: Optional[float] = None
        if self.settings.defer_first_check:
            self.last_sync_instant = self.clock.time()
        self.last_offset_ms: Optional[float] = None
        self.last_action: Optional[SyncAction] = None

        self._pause_correction = PauseCorrection(
            set_follower_paused,
            clock=self.clock,
            resume_on_cancel=self.settings.resume_on_cancel
        )

    @classmethod
    def from_timelines(
        cls,
        leader: PlaybackTimeline,
        follower: PlaybackTimeline,
        **kwargs
    ) -> 'TimeSynchronizer':
        """Bind a follower timeline to a leader timeline."""
        return cls(
            leader.get_time_ms,
            follower.get_time_ms,
            follower.set_time_ms,
            follower.set_paused,
            **kwargs
        )

    @property
    def syncing_via_pause(self) -> bool:
        """True while a pause correction is in flight."""
        return self._pause_correction.active

    @property
    def state(self) -> SyncState:
        if self.syncing_via_pause:
            return SyncState.PAUSE_CORRECTING
        return SyncState.IDLE

    def update(self) -> SyncAction:
        """
        Host tick: evaluate drift if due and apply at most one correction.

        Accessor and mutator failures propagate to the caller.

        Returns:
            The SyncAction taken on this tick
        """
        target_time = self.get_leader_time()
        if target_time < 0:
            return self._record(SyncAction.LEADER_UNKNOWN)

        if self.syncing_via_pause and self.settings.suppress_while_pausing:
            return self._record(SyncAction.SUPPRESSED)

        return self._sync_to_time(target_time)

    def cancel(self) -> bool:
        """
        Cancel an in-flight pause correction.

        Returns:
            True if a correction was cancelled
        """
        return self._pause_correction.cancel()

    def close(self):
        """Tear down the binding; cancels any in-flight pause correction."""
        if self.cancel():
            logger.info("TimeSynchronizer closed during pause correction")

    def _sync_to_time(self, target_time: float) -> SyncAction:
        now = self.clock.time()
        if (self.last_sync_instant is not None
                and now - self.last_sync_instant < self.settings.check_interval_s):
            return self._record(SyncAction.RATE_LIMITED)
        self.last_sync_instant = now

        # Positive when the leader is ahead
        current_time = self.get_follower_time()
        offset_ms = target_time - current_time
        self.last_offset_ms = offset_ms

        if abs(offset_ms) < self.settings.min_offset_ms:
            logger.debug(f"No sync to leader position. Offset: {offset_ms:.1f} ms")
            self._log_event(SyncAction.IN_SYNC, target_time, current_time, offset_ms)
            return self._record(SyncAction.IN_SYNC)

        if abs(offset_ms) > self.settings.hard_sync_threshold_ms:
            logger.info(f"Hard sync to leader position. Offset: {offset_ms:.1f} ms")
            self._hard_sync(target_time)
            self._log_event(SyncAction.HARD_SYNC, target_time, current_time, offset_ms,
                            target_time_ms=target_time)
            return self._record(SyncAction.HARD_SYNC)

        if offset_ms < 0:
            logger.info(f"Target is behind, pausing a moment. Offset: {offset_ms:.1f} ms")
            pause_s = self._soft_sync_via_pause(offset_ms)
            self._log_event(SyncAction.PAUSE, target_time, current_time, offset_ms,
                            pause_s=pause_s)
            return self._record(SyncAction.PAUSE)

        logger.info(f"Target is ahead, skipping a moment. Offset: {offset_ms:.1f} ms")
        new_time = self._soft_sync_via_skip(current_time, offset_ms)
        self._log_event(SyncAction.SKIP, target_time, current_time, offset_ms,
                        target_time_ms=new_time)
        return self._record(SyncAction.SKIP)

    def _hard_sync(self, target_time: float):
        self.set_follower_time(target_time)

    def _soft_sync_via_pause(self, offset_ms: float) -> float:
        if self._pause_correction.active:
            # Only reachable with suppress_while_pausing disabled
            self._pause_correction.resume_on_cancel = False
            try:
                self._pause_correction.cancel()
            finally:
                self._pause_correction.resume_on_cancel = self.settings.resume_on_cancel

        # Offset is negative because the follower is ahead of the leader
        wait_seconds = abs(offset_ms) / 1000.0
        self._pause_correction.start(wait_seconds)
        return wait_seconds

    def _soft_sync_via_skip(self, current_time: float, offset_ms: float) -> float:
        # Seeking takes time itself, so land a little beyond the leader
        skip_time_ms = offset_ms + self.settings.skip_bias_ms
        logger.debug(f"Skip time: {skip_time_ms:.1f} ms")
        new_time = current_time + skip_time_ms
        self.set_follower_time(new_time)
        return new_time

    def _record(self, action: SyncAction) -> SyncAction:
        self.last_action = action
        return action

    def _log_event(self, action: SyncAction, leader_ms: float, follower_ms: float,
                   offset_ms: float, **extra):
        if self.event_log is not None:
            self.event_log.log_decision(action.value, leader_ms, follower_ms, offset_ms, **extra)
