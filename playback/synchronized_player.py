"""
SynchronizedPlayer class for PlayerSync.

Wraps a pyglet media player and, when bound to a leader player, keeps it in
sync with that leader through a TimeSynchronizer ticked by pyglet.clock.
"""

import logging
import os
from typing import Callable, Optional

import pyglet

from config.sync_settings import SyncSettings
from core.sync_log import SyncEventLog
from playback.time_synchronizer import TimeSynchronizer

logger = logging.getLogger(__name__)


class SynchronizedPlayer:
    """
    Host for one playback timeline.

    Features:
    - Millisecond position/seek/pause interface over pyglet.media.Player
    - Optional leader binding (sync_to) with drift correction
    - Synchronizer ticked from pyglet.clock while the player is playing
    - Manual play/pause toggle and seek steps

    Example:
        leader = SynchronizedPlayer("audio.ogg")
        follower = SynchronizedPlayer("video.mp4", sync_to=leader)
        leader.play_pause()
        follower.play_pause()
        follower.start_sync_loop()
        pyglet.app.run()
    """

    def __init__(
        self,
        media_path: str,
        sync_to: Optional['SynchronizedPlayer'] = None,
        settings: Optional[SyncSettings] = None,
        clock: Optional[pyglet.clock.Clock] = None,
        player=None,
        loader: Optional[Callable] = None,
        event_log: Optional[SyncEventLog] = None
    ):
        """
        Initialize synchronized player.

        Args:
            media_path: Path to the media file
            sync_to: Leader player to follow (None = this player is not corrected)
            settings: Sync settings (default: SyncSettings())
            clock: Clock driving the sync loop (default: global pyglet clock)
            player: pyglet.media.Player-like object (created on first use if None)
            loader: Callable loading a media source from a path (default: pyglet.media.load)
            event_log: Optional log of sync decisions
        """
        self.media_path = media_path
        self.sync_to = sync_to
        self.settings = settings or SyncSettings()
        self.clock = clock or pyglet.clock.get_default()
        self.player = player
        self._loader = loader
        self.playing = False
        self._sync_loop_running = False

        self.time_synchronizer: Optional[TimeSynchronizer] = None
        if sync_to is not None:
            self.time_synchronizer = TimeSynchronizer.from_timelines(
                sync_to,
                self,
                settings=self.settings,
                clock=self.clock,
                event_log=event_log
            )

    # ==================== TIMELINE INTERFACE ====================

    def get_time_ms(self) -> float:
        """
        Current position in milliseconds, or -1.0 while no media is loaded.
        """
        if self.player is None or self.player.source is None:
            return -1.0
        return self.player.time * 1000.0

    def set_time_ms(self, time_ms: float):
        """Seek to an absolute position in milliseconds (clamped at zero)."""
        self._ensure_player()
        self.player.seek(max(time_ms, 0.0) / 1000.0)

    def set_paused(self, paused: bool):
        """Pause (True) or resume (False) the engine."""
        self._ensure_player()
        if paused:
            self.player.pause()
        else:
            self.player.play()

    # ==================== PLAYBACK CONTROL ====================

    def play_pause(self):
        """Toggle playback, loading the media on first play."""
        self._ensure_player()
        if self.player.playing:
            logger.info(f"[Player] Pausing {os.path.basename(self.media_path)}")
            self.player.pause()
            return

        self.playing = True
        if self.player.source is None:
            loader = self._loader or pyglet.media.load
            self.player.queue(loader(self.media_path))

        logger.info(f"[Player] Playing {os.path.basename(self.media_path)}")
        self.player.play()

    def seek_forward(self):
        logger.info("[Player] Seeking forward")
        self.set_time_ms(self.get_time_ms() + self.settings.seek_step_ms)

    def seek_backward(self):
        logger.info("[Player] Seeking backward")
        self.set_time_ms(self.get_time_ms() - self.settings.seek_step_ms)

    def stop(self):
        """Stop playback and rewind; the sync loop stops correcting."""
        logger.info("[Player] Stopping player")
        self.playing = False
        if self.time_synchronizer is not None:
            self.time_synchronizer.cancel()
        if self.player is not None:
            self.player.pause()
            self.player.seek(0.0)

    # ==================== SYNC LOOP ====================

    def update(self, dt=0.0):
        """
        Host tick, scheduled on pyglet.clock by start_sync_loop().

        The synchronizer is only ticked while this player is playing, so a
        pause correction in flight also keeps it from being re-evaluated.
        """
        if not self.playing or self.time_synchronizer is None:
            return
        if self.player is None or not self.player.playing:
            return

        self.time_synchronizer.update()

    def start_sync_loop(self):
        """Tick update() on the clock every settings.update_interval_s."""
        if self._sync_loop_running:
            return
        self.clock.schedule_interval(self.update, self.settings.update_interval_s)
        self._sync_loop_running = True

    def stop_sync_loop(self):
        if not self._sync_loop_running:
            return
        self.clock.unschedule(self.update)
        self._sync_loop_running = False

    def close(self):
        """
        Release the player and the leader binding.
        """
        self.stop_sync_loop()
        if self.time_synchronizer is not None:
            self.time_synchronizer.close()
            self.time_synchronizer = None

        self.playing = False
        if self.player is not None:
            self.player.pause()
            self.player.delete()
            self.player = None

        logger.info(f"[Player] Closed player for {os.path.basename(self.media_path)}")

    def _ensure_player(self):
        if self.player is None:
            self.player = pyglet.media.Player()

    def __repr__(self):
        return (
            f"SynchronizedPlayer("
            f"media='{os.path.basename(self.media_path)}', "
            f"follows={self.sync_to is not None}, "
            f"playing={self.playing})"
        )
