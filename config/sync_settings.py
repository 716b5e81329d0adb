"""
Synchronization settings for a leader/follower playback pair.
"""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict


@dataclass
class SyncSettings:
    """
    Thresholds and policies used by TimeSynchronizer and SynchronizedPlayer.

    Attributes:
        check_interval_s: Minimum seconds between two drift evaluations
        min_offset_ms: Offsets smaller than this are considered in sync
        hard_sync_threshold_ms: Offsets larger than this are corrected with an absolute seek
        skip_bias_ms: Extra milliseconds added to a skip to cover the seek latency
        suppress_while_pausing: Skip evaluation while a pause correction is in flight
        resume_on_cancel: Resume the follower when a pause correction is cancelled
        update_interval_s: Host tick interval for the synchronizer
        seek_step_ms: Step used by manual seek forward/backward
        defer_first_check: Wait one check interval after construction before the first evaluation
    """
    check_interval_s: float = 4.0
    min_offset_ms: float = 100.0
    hard_sync_threshold_ms: float = 2000.0
    skip_bias_ms: float = 600.0
    suppress_while_pausing: bool = True
    resume_on_cancel: bool = True
    update_interval_s: float = 1 / 60
    seek_step_ms: float = 250.0
    defer_first_check: bool = False

    def __post_init__(self):
        """Validate thresholds."""
        for name in ('min_offset_ms', 'hard_sync_threshold_ms', 'skip_bias_ms', 'seek_step_ms'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

        if self.check_interval_s <= 0:
            raise ValueError(f"check_interval_s must be positive, got {self.check_interval_s}")
        if self.update_interval_s <= 0:
            raise ValueError(f"update_interval_s must be positive, got {self.update_interval_s}")

        if self.min_offset_ms > self.hard_sync_threshold_ms:
            raise ValueError(
                f"min_offset_ms ({self.min_offset_ms}) must not exceed "
                f"hard_sync_threshold_ms ({self.hard_sync_threshold_ms})"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SyncSettings':
        """Create SyncSettings from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
