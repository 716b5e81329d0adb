"""
Playback module for PlayerSync.

Contains the leader/follower time synchronizer and the pyglet player host.
"""

from .pause_correction import PauseCorrection
from .time_synchronizer import TimeSynchronizer, SyncAction, SyncState, PlaybackTimeline
from .synchronized_player import SynchronizedPlayer

__all__ = [
    'PauseCorrection',
    'TimeSynchronizer',
    'SyncAction',
    'SyncState',
    'PlaybackTimeline',
    'SynchronizedPlayer',
]
