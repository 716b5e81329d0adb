"""
Configuration structures for PlayerSync.

Contains the settings dataclass shared by the synchronizer and the player host.
"""

from .sync_settings import SyncSettings

__all__ = ['SyncSettings']
