"""
Channel Aggregator tests: priority reduction and status parsing.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from status import ChannelStatus

ABSENT = ChannelStatus.ABSENT
SILENT = ChannelStatus.SILENT
UNINTELLIGIBLE = ChannelStatus.UNINTELLIGIBLE
ONLINE = ChannelStatus.ONLINE


class TestPriority:
    """Online > Unintelligible > Silent > Absent."""

    @pytest.mark.parametrize("statuses,expected", [
        ([ONLINE, SILENT], ONLINE),
        ([SILENT, ONLINE], ONLINE),
        ([UNINTELLIGIBLE, SILENT], UNINTELLIGIBLE),
        ([SILENT, UNINTELLIGIBLE], UNINTELLIGIBLE),
        ([ONLINE, UNINTELLIGIBLE], ONLINE),
        ([SILENT, SILENT], SILENT),
        ([ABSENT, ABSENT], ABSENT),
        ([ONLINE, UNINTELLIGIBLE, SILENT, ABSENT], ONLINE),
    ])
    def test_highest_priority_wins(self, statuses, expected):
        from status import aggregate_statuses
        assert aggregate_statuses(statuses) == expected

    @pytest.mark.parametrize("other", list(ChannelStatus))
    def test_absent_is_overridden(self, other):
        from status import aggregate_statuses

        assert aggregate_statuses([ABSENT, other]) == other
        assert aggregate_statuses([other, ABSENT]) == other

    def test_empty_is_absent(self):
        from status import aggregate_statuses
        assert aggregate_statuses([]) == ABSENT

    def test_accepts_generators(self):
        from status import aggregate_statuses
        assert aggregate_statuses(s for s in (SILENT, ONLINE)) == ONLINE

    def test_priority_table_covers_enum(self):
        from status import STATUS_PRIORITY
        assert set(STATUS_PRIORITY) == set(ChannelStatus)


class TestParsing:

    @pytest.mark.parametrize("text,expected", [
        ("Online", ONLINE),
        ("online", ONLINE),
        (" UNINTELLIGIBLE ", UNINTELLIGIBLE),
        ("Silent", SILENT),
        ("absent", ABSENT),
    ])
    def test_parse_status(self, text, expected):
        from status import parse_status
        assert parse_status(text) == expected

    def test_parse_unknown_raises(self):
        from status import parse_status

        with pytest.raises(ValueError):
            parse_status("Flapping")

    def test_str_is_label(self):
        assert str(UNINTELLIGIBLE) == "Unintelligible"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_previous_is_absent(self, value):
        from status import previous_status_from
        assert previous_status_from(value) == ABSENT

    @pytest.mark.parametrize("label", ["Offline", "Hidden", "Unauthorized", "NoView", "Lagged"])
    def test_node_level_previous_is_absent(self, label):
        """Node-level states never seed per-channel hysteresis."""
        from status import previous_status_from
        assert previous_status_from(label) == ABSENT

    def test_previous_passthrough(self):
        from status import previous_status_from

        assert previous_status_from(ONLINE) is ONLINE
        assert previous_status_from("Silent") == SILENT

    def test_previous_unknown_raises(self):
        from status import previous_status_from

        with pytest.raises(ValueError):
            previous_status_from("Flapping")
