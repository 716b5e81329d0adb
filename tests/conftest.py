"""
Pytest configuration and fixtures for PlayerSync tests.

Provides a manually advanced pyglet clock and fake playback timelines so the
synchronizer can be exercised deterministically without a media engine.
"""

import pytest
import sys
from pathlib import Path

import pyglet

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# ==================== PYTEST CONFIGURATION ====================

def pytest_configure(config):
    """Add custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: unit test (fast, no I/O)")
    config.addinivalue_line("markers", "integration: integration test (simulated engines)")
    config.addinivalue_line("markers", "slow: slow test (real file I/O)")


# ==================== CLOCK HELPERS ====================

class ManualClock:
    """
    pyglet Clock whose time only moves when advance() is called.

    advance() also ticks the clock, so scheduled callbacks that are due run
    exactly as they would in the pyglet event loop.
    """

    def __init__(self, start: float = 100.0):
        self.now = start
        self.clock = pyglet.clock.Clock(time_function=lambda: self.now)
        self.clock.tick()

    def advance(self, seconds: float):
        self.now += seconds
        self.clock.tick()


class FakeTimelines:
    """
    Leader/follower positions with recording mutators.

    calls holds ('set_time', ms) and ('set_paused', bool) tuples in call order.
    """

    def __init__(self, leader_ms: float = 0.0, follower_ms: float = 0.0):
        self.leader_ms = leader_ms
        self.follower_ms = follower_ms
        self.calls = []
        self.follower_reads = 0

    def get_leader_time(self):
        return self.leader_ms

    def get_follower_time(self):
        self.follower_reads += 1
        return self.follower_ms

    def set_follower_time(self, time_ms):
        self.calls.append(('set_time', time_ms))
        self.follower_ms = time_ms

    def set_follower_paused(self, paused):
        self.calls.append(('set_paused', paused))


class SimulatedTimeline:
    """
    Timeline advancing in real time on a ManualClock while not paused.
    Implements the PlaybackTimeline protocol.
    """

    def __init__(self, manual_clock: ManualClock, start_ms: float = 0.0, ready: bool = True):
        self._manual_clock = manual_clock
        self._base_ms = start_ms
        self._since = manual_clock.now
        self.paused = False
        self.ready = ready

    def get_time_ms(self):
        if not self.ready:
            return -1.0
        if self.paused:
            return self._base_ms
        return self._base_ms + (self._manual_clock.now - self._since) * 1000.0

    def set_time_ms(self, time_ms):
        self._base_ms = time_ms
        self._since = self._manual_clock.now

    def set_paused(self, paused):
        if paused == self.paused:
            return
        self._base_ms = self.get_time_ms()
        self._since = self._manual_clock.now
        self.paused = paused


class FakeMediaPlayer:
    """
    Minimal stand-in for pyglet.media.Player driven by a ManualClock.
    """

    def __init__(self, manual_clock: ManualClock, start_s: float = 0.0):
        self._manual_clock = manual_clock
        self._base = start_s
        self._since = manual_clock.now
        self.source = None
        self.playing = False
        self.deleted = False
        self.seeks = []

    @property
    def time(self):
        if self.playing:
            return self._base + (self._manual_clock.now - self._since)
        return self._base

    def queue(self, source):
        self.source = source

    def play(self):
        if not self.playing:
            self._since = self._manual_clock.now
            self.playing = True

    def pause(self):
        if self.playing:
            self._base = self.time
            self.playing = False

    def seek(self, timestamp):
        self._base = timestamp
        self._since = self._manual_clock.now
        self.seeks.append(timestamp)

    def delete(self):
        self.deleted = True
        self.source = None


# ==================== FIXTURES ====================

@pytest.fixture
def manual_clock():
    """Manually advanced clock starting at t=100s."""
    return ManualClock()


@pytest.fixture
def timelines():
    """Fake leader/follower pair, both at position 0."""
    return FakeTimelines()


@pytest.fixture
def make_synchronizer(manual_clock, timelines):
    """
    Factory building a TimeSynchronizer over the timelines fixture.

    Keyword arguments are passed to SyncSettings.
    """
    from config.sync_settings import SyncSettings
    from playback.time_synchronizer import TimeSynchronizer

    def _make(event_log=None, **settings_kwargs):
        return TimeSynchronizer(
            timelines.get_leader_time,
            timelines.get_follower_time,
            timelines.set_follower_time,
            timelines.set_follower_paused,
            settings=SyncSettings(**settings_kwargs),
            clock=manual_clock.clock,
            event_log=event_log
        )

    return _make


@pytest.fixture
def config_path(tmp_path):
    """Path for a sync config file inside pytest's temporary directory."""
    return str(tmp_path / "sync_config.json")
