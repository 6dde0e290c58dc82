"""
Online-status values produced by the classifier and the channel aggregator.

Only the four values a spectrum can yield live here. Node-level states
(Offline, Hidden, Unauthorized, NoView, Lagged) belong to the surrounding
monitor and are never produced or consumed by per-channel analysis.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


class ChannelStatus(Enum):
    """Classifier output for one channel or for a whole node."""
    ABSENT = "Absent"
    SILENT = "Silent"
    UNINTELLIGIBLE = "Unintelligible"
    ONLINE = "Online"

    def __str__(self) -> str:
        return self.value


# Higher wins when channels disagree
STATUS_PRIORITY = {
    ChannelStatus.ABSENT: 0,
    ChannelStatus.SILENT: 1,
    ChannelStatus.UNINTELLIGIBLE: 2,
    ChannelStatus.ONLINE: 3,
}

NODE_LEVEL_STATUSES = frozenset({"offline", "hidden", "unauthorized", "noview", "lagged"})


def aggregate_statuses(statuses: Iterable[ChannelStatus]) -> ChannelStatus:
    """
    Reduce per-channel statuses to one node-level status.

    Priority is Online > Unintelligible > Silent > Absent. Absent is the
    starting value, so an empty input yields Absent.

    Args:
        statuses: Per-channel statuses (any iterable)

    Returns:
        The highest-priority status present
    """
    result = ChannelStatus.ABSENT
    for status in statuses:
        if STATUS_PRIORITY[status] > STATUS_PRIORITY[result]:
            result = status
    return result


def parse_status(text: str) -> ChannelStatus:
    """
    Parse a status label such as "Online" (case-insensitive).

    Raises:
        ValueError: If the label is not one of the four classifier values
    """
    normalized = text.strip().lower()
    for status in ChannelStatus:
        if status.value.lower() == normalized:
            return status
    raise ValueError(f"Unknown channel status: {text!r}")


def previous_status_from(value: Optional[object]) -> ChannelStatus:
    """
    Coerce whatever the status store holds into a hysteresis seed.

    None, empty strings and node-level labels all become Absent, which is
    what a first-ever classification for a node sees.
    """
    if value is None:
        return ChannelStatus.ABSENT
    if isinstance(value, ChannelStatus):
        return value
    text = str(value).strip()
    if not text:
        return ChannelStatus.ABSENT
    if text.lower() in NODE_LEVEL_STATUSES:
        logger.warning("Node-level status %r used as previous status; treating as Absent", text)
        return ChannelStatus.ABSENT
    return parse_status(text)
