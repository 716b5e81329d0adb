"""
PlayerSync Launcher
Plays a leader and a follower media file and keeps the follower in sync.

Usage:
    python launch_sync_player.py leader.ogg follower.mp4
    python launch_sync_player.py leader.ogg follower.mp4 --duration 60 --sync-log logs/sync.csv
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import pyglet

# Add project directory to path
sys.path.insert(0, str(Path(__file__).parent))

from core.logging_setup import configure_logging
from core.sync_config import SyncConfigHandler
from core.sync_log import SyncEventLog
from playback.synchronized_player import SynchronizedPlayer

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play two media files with the follower synced to the leader.")
    parser.add_argument('leader', help="Media file used as time reference")
    parser.add_argument('follower', help="Media file corrected to match the leader")
    parser.add_argument('--config', default=None, help="Sync config JSON (created with defaults if missing)")
    parser.add_argument('--log-level', default=None, help="Log level (default: LOG_LEVEL, then config value)")
    parser.add_argument('--log-dir', default=None, help="Directory for a timestamped log file")
    parser.add_argument('--duration', type=float, default=None, help="Stop after this many seconds")
    parser.add_argument('--sync-log', default=None, help="Write sync decisions to this CSV on exit")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    config = SyncConfigHandler(args.config)
    try:
        configure_logging(
            level=args.log_level or os.getenv("LOG_LEVEL") or config.get('logging.level'),
            log_dir=args.log_dir or config.get('logging.log_dir'),
            name=os.path.basename(args.follower)
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    valid, message = config.validate_sync_config()
    if not valid:
        logger.error(f"Invalid sync configuration in {config.config_path}: {message}")
        return 1
    settings = config.get_settings()

    event_log = SyncEventLog(session_id=f"{Path(args.leader).stem}-{Path(args.follower).stem}")
    leader = SynchronizedPlayer(args.leader, settings=settings)
    follower = SynchronizedPlayer(args.follower, sync_to=leader, settings=settings, event_log=event_log)

    try:
        leader.play_pause()
        follower.play_pause()
        follower.start_sync_loop()

        if args.duration:
            pyglet.clock.schedule_once(lambda dt: pyglet.app.exit(), args.duration)

        pyglet.app.run()

    except KeyboardInterrupt:
        logger.info("Interrupted by user")

    except Exception as e:
        logger.exception(f"Playback failed: {e}")
        return 1

    finally:
        follower.close()
        leader.close()
        if args.sync_log:
            event_log.export_to_csv(args.sync_log)
            logger.info(f"Saved {event_log.get_event_count()} sync events to {args.sync_log}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
