"""Unit tests for timeline item classification and summaries."""

import pytest

from sprout_track.cli.commands.timeline import activity_kind, summarize


class TestActivityKind:
    """Tests for activity_kind."""

    @pytest.mark.parametrize(
        ("item", "kind"),
        [
            ({"activityType": "MEDICINE", "type": "NAP"}, "medicine"),
            ({"soapUsed": True}, "bath"),
            ({"leftAmount": 2}, "pump"),
            ({"type": "BOTTLE"}, "feed"),
            ({"type": "NIGHT_SLEEP"}, "sleep"),
            ({"type": "DIRTY"}, "diaper"),
            ({"type": "NOTE"}, "unknown"),
            ({}, "unknown"),
        ],
    )
    def test_classification(self, item, kind: str) -> None:
        assert activity_kind(item) == kind


class TestSummarize:
    """Tests for summarize."""

    def test_breast_feed(self) -> None:
        item = {"type": "BREAST", "side": "LEFT", "time": "t"}
        assert summarize(item) == {"type": "feed", "time": "t", "summary": "Breast (LEFT)"}

    def test_solids(self) -> None:
        assert summarize({"type": "SOLIDS", "food": "peas"})["summary"] == "Solids: peas"

    def test_finished_sleep(self) -> None:
        item = {"type": "NAP", "startTime": "s", "endTime": "e", "duration": 40}
        assert summarize(item) == {"type": "sleep", "time": "s", "summary": "NAP (40 min)"}

    def test_diaper_details(self) -> None:
        item = {"type": "BOTH", "blowout": True, "color": "green"}
        assert summarize(item)["summary"] == "BOTH (blowout) - green"

    def test_bath(self) -> None:
        assert summarize({"soapUsed": True, "shampooUsed": False})["summary"] == "Bath (soap)"

    def test_pump(self) -> None:
        item = {"startTime": "s", "totalAmount": 7.5, "unitAbbr": "ML"}
        assert summarize(item) == {"type": "pump", "time": "s", "summary": "Pump: 7.5 ML total"}

    def test_unknown_is_truncated_json(self) -> None:
        item = {"activityType": "NOTE", "time": "t", "content": "x" * 100}

        result = summarize(item)

        assert result["type"] == "note"
        assert result["time"] == "t"
        assert len(result["summary"]) == 45
        assert result["summary"].endswith("...")
