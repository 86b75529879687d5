from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from deadlines.models.domain import Conference, Item, parse_deadline, parse_timezone


def test_item_defaults_for_missing_optional_fields():
    item = Item.model_validate({"title": "FOO"})

    assert item.description == ""
    assert item.rank.ccf is None and item.rank.core is None and item.rank.thcpl is None
    assert item.confs == []
    assert item.latest is None


def test_null_collections_and_numeric_text_are_coerced():
    item = Item.model_validate(
        {
            "title": 3,
            "rank": None,
            "confs": [{"year": "2025", "timeline": None, "place": "  "}],
        }
    )

    assert item.title == "3"
    assert item.confs[0].year == 2025
    assert item.confs[0].timeline == []
    assert item.confs[0].place is None
    assert item.confs[0].next_deadline is None


def test_yaml_datetime_deadline_is_rendered_as_text():
    conf = Conference.model_validate(
        {"year": 2025, "timeline": [{"deadline": datetime(2025, 1, 23, 23, 59, 59)}]}
    )

    assert conf.next_deadline == "2025-01-23 23:59:59"


def test_blank_title_is_rejected():
    with pytest.raises(ValidationError):
        Item.model_validate({"title": "  "})


@pytest.mark.parametrize(
    "label,offset",
    [
        ("AoE", timedelta(hours=-12)),
        ("UTC", timedelta(0)),
        ("UTC+8", timedelta(hours=8)),
        ("UTC-12", timedelta(hours=-12)),
        ("UTC+5:30", timedelta(hours=5, minutes=30)),
    ],
)
def test_parse_timezone_labels(label, offset):
    tz = parse_timezone(label)

    assert tz is not None
    assert tz.utcoffset(None) == offset


def test_parse_deadline_applies_timezone():
    parsed = parse_deadline("2024-08-15 23:59:59", "UTC-12")

    assert parsed == datetime(2024, 8, 16, 11, 59, 59, tzinfo=timezone.utc)


@pytest.mark.parametrize("text", [None, "", "TBD", "2024/08/15"])
def test_parse_deadline_unknown_values(text):
    assert parse_deadline(text, "AoE") is None


def test_parse_deadline_falls_back_to_utc_for_unknown_label():
    parsed = parse_deadline("2024-08-15 00:00:00", "PST")

    assert parsed is not None and parsed.utcoffset() == timedelta(0)
