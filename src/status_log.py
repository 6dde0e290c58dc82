"""
NDJSON status log for classification results.

One compact JSON line per classification. The log doubles as a minimal
status store for the command line: the last line for a node seeds the
hysteresis of the next run.

Event format:
    {"ts": str, "node": str, "event": "STATUS"|"STATUS_CHANGE",
     "status": str, "prev": str, "channels": [str], "max_db": float|null,
     "ratio_pct": int}
"""

import json
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from config import STATUS_LOG_FILE
from frequency_info import ClassificationResult
from status import ChannelStatus, previous_status_from


class StatusLogger:
    """
    History of node statuses, one JSON object per line.

    The file is opened in append mode on the first event, so earlier runs
    stay in place and a run that classifies nothing leaves no file behind.
    """

    def __init__(self, log_path: str = STATUS_LOG_FILE):
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.events_written = 0
        self._stream: Optional[TextIO] = None

    def append(self, event: Dict[str, Any]) -> None:
        """Write one event as a compact JSON line."""
        if self._stream is None:
            self._stream = self.log_path.open('a', encoding='utf-8')
        self._stream.write(json.dumps(event, separators=(',', ':')) + '\n')
        # Each line is durable before the next sample is classified
        self._stream.flush()
        self.events_written += 1

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _finite_or_none(value: float, digits: int = 2) -> Optional[float]:
    # JSON has no -inf
    return round(value, digits) if math.isfinite(value) else None


def log_classification(
    logger: StatusLogger,
    node: str,
    result: ClassificationResult,
    previous_status: Optional[ChannelStatus] = None,
    timestamp: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Log a classification result.

    Args:
        logger: StatusLogger instance
        node: Node name
        result: Result to record
        previous_status: Status the classification was seeded with
        timestamp: Event time (defaults to now, UTC)

    Returns:
        The event that was written
    """
    previous = previous_status_from(previous_status)
    timestamp = timestamp or datetime.now(timezone.utc)

    event = {
        "ts": timestamp.isoformat(timespec='seconds'),
        "node": node,
        "event": "STATUS_CHANGE" if result.status != previous else "STATUS",
        "status": result.status.value,
        "prev": previous.value,
        "channels": [status.value for status in result.channel_statuses],
        "max_db": _finite_or_none(result.max_decibels()),
        "ratio_pct": result.signal_ratio_percent(),
    }

    logger.append(event)
    return event


def last_logged_status(log_path: str, node: str) -> Optional[ChannelStatus]:
    """
    Most recent status logged for a node.

    Malformed lines are skipped. Returns None if the log is missing or has
    no entry for the node.
    """
    path = Path(log_path)
    if not path.exists():
        return None

    last: Optional[ChannelStatus] = None
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                continue
            if event.get("node") != node or "status" not in event:
                continue
            try:
                last = previous_status_from(event["status"])
            except ValueError:
                continue
    return last
