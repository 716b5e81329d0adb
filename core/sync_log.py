"""
Sync Event Log

Tracks every drift evaluation made by a TimeSynchronizer for:
- Post-session analysis of drift and corrections
- Validation and debugging
- Export to CSV/text format
"""

import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd


@dataclass
class SyncEvent:
    """Record of a single drift evaluation"""
    timestamp: float          # Wall-clock time of the evaluation (time.time())
    action: str               # SyncAction value, e.g. "hard_sync"
    leader_time_ms: float
    follower_time_ms: float
    offset_ms: float          # leader - follower
    target_time_ms: Optional[float] = None  # Position the follower was seeked to
    pause_s: Optional[float] = None         # Pause length for pause corrections

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return asdict(self)


class SyncEventLog:
    """
    Log of sync decisions for one leader/follower binding.

    Usage:
        log = SyncEventLog(session_id="leader-follower")
        synchronizer = TimeSynchronizer(..., event_log=log)

        # At session end
        log.export_to_csv("sync_log.csv")
        log.export_summary("sync_summary.txt")
    """

    def __init__(self, session_id: str = "default"):
        """
        Args:
            session_id: Identifier for this playback session
        """
        self.session_id = session_id
        self.events: List[SyncEvent] = []
        self.session_start_time = time.time()

    def log_decision(
        self,
        action: str,
        leader_time_ms: float,
        follower_time_ms: float,
        offset_ms: float,
        target_time_ms: Optional[float] = None,
        pause_s: Optional[float] = None
    ) -> SyncEvent:
        """Record one evaluation and return the stored event."""
        event = SyncEvent(
            timestamp=time.time(),
            action=action,
            leader_time_ms=leader_time_ms,
            follower_time_ms=follower_time_ms,
            offset_ms=offset_ms,
            target_time_ms=target_time_ms,
            pause_s=pause_s
        )
        self.events.append(event)
        return event

    def get_events(self, action: Optional[str] = None) -> List[SyncEvent]:
        """Return all events, or only those with the given action."""
        if action is None:
            return list(self.events)
        return [e for e in self.events if e.action == action]

    def get_action_counts(self) -> Dict[str, int]:
        """Count of events per action."""
        counts = {}
        for event in self.events:
            counts[event.action] = counts.get(event.action, 0) + 1
        return counts

    def to_dataframe(self) -> pd.DataFrame:
        """
        Events as a DataFrame with an extra relative_time_sec column.
        """
        columns = [
            'timestamp', 'relative_time_sec', 'action', 'leader_time_ms',
            'follower_time_ms', 'offset_ms', 'target_time_ms', 'pause_s'
        ]
        if not self.events:
            return pd.DataFrame(columns=columns)

        df = pd.DataFrame([e.to_dict() for e in self.events])
        df['relative_time_sec'] = (df['timestamp'] - self.session_start_time).round(3)
        return df[columns]

    def export_to_csv(self, output_path: str):
        """
        Export all sync events to CSV file.

        Args:
            output_path: Path to output CSV file
        """
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        self.to_dataframe().to_csv(output_path, index=False)

    def get_drift_stats(self) -> Dict[str, float]:
        """
        Drift statistics over all evaluations.

        Returns:
            Dictionary with 'count', 'mean_abs_offset_ms', 'max_abs_offset_ms'
            (offsets are nan when nothing was logged)
        """
        offsets = self.to_dataframe()['offset_ms'].astype(float).abs()
        return {
            'count': int(offsets.count()),
            'mean_abs_offset_ms': float(offsets.mean()) if len(offsets) else float('nan'),
            'max_abs_offset_ms': float(offsets.max()) if len(offsets) else float('nan'),
        }

    def export_summary(self, output_path: str):
        """
        Export summary statistics to text file.

        Includes total evaluations, drift statistics and an action breakdown.
        """
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        stats = self.get_drift_stats()

        with open(output_path, 'w') as f:
            f.write("Sync Log Summary\n")
            f.write(f"Session ID: {self.session_id}\n")
            f.write(f"Session Start: {time.ctime(self.session_start_time)}\n")
            f.write("\n")

            f.write(f"Total Evaluations: {stats['count']}\n")
            if stats['count']:
                f.write(f"Mean |offset|: {stats['mean_abs_offset_ms']:.1f} ms\n")
                f.write(f"Max |offset|: {stats['max_abs_offset_ms']:.1f} ms\n")
            f.write("\n")

            counts = self.get_action_counts()
            if counts:
                f.write("Action Breakdown:\n")
                f.write("-" * 50 + "\n")
                for action, count in sorted(counts.items(), key=lambda x: x[1], reverse=True):
                    f.write(f"  {action}: {count} events\n")
                f.write("\n")

    def clear(self):
        """Clear all logged events"""
        self.events.clear()

    def get_event_count(self) -> int:
        """Get total number of logged events"""
        return len(self.events)

    def get_last_event(self) -> Optional[SyncEvent]:
        """Get the most recently logged event"""
        return self.events[-1] if self.events else None
