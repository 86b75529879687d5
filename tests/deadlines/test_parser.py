import pytest

from deadlines.services.parser import ParseError, parse_items

AAAI = """
- title: "AAAI"
  sub: "AI"
  rank: {ccf: "A"}
  confs:
    - {year: 2024, place: "X"}
    - {year: 2025, place: "Y"}
"""


def test_parse_items_reads_sequence_of_mappings():
    items = parse_items(AAAI, "AI/aaai.yml")

    assert len(items) == 1
    assert items[0].title == "AAAI"
    assert items[0].rank.ccf == "A"
    assert [c.year for c in items[0].confs] == [2024, 2025]


def test_empty_document_yields_nothing():
    assert parse_items("", "AI/empty.yml") == []


@pytest.mark.parametrize(
    "text",
    [
        "- title: [unclosed",
        "title: AAAI",
        "- just a string",
        "- sub: AI",
        "- title: AAAI\n  confs:\n    - place: nowhere",
    ],
)
def test_parse_items_raises_on_bad_content(text):
    with pytest.raises(ParseError) as exc:
        parse_items(text, "AI/bad.yml")

    assert exc.value.origin == "AI/bad.yml"

