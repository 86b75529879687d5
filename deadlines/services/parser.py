"""YAML -> Item records."""

from __future__ import annotations

from typing import Any, List

import yaml
from pydantic import ValidationError

from deadlines.models.domain import Item


class ParseError(Exception):
    """A data file could not be turned into Item records."""

    def __init__(self, origin: str, reason: str) -> None:
        super().__init__(f"{origin}: {reason}")
        self.origin = origin
        self.reason = reason


def parse_items(text: str, origin: str = "<memory>") -> List[Item]:
    """Parse one YAML document holding a sequence of conference series."""
    try:
        data: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ParseError(origin, f"invalid YAML: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, list):
        raise ParseError(origin, f"expected a sequence, got {type(data).__name__}")

    items: List[Item] = []
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise ParseError(origin, f"record {index} is not a mapping")
        try:
            items.append(Item.model_validate(record))
        except ValidationError as exc:
            raise ParseError(origin, f"record {index}: {exc.errors()[0]['msg']}") from exc
    return items

