"""Concatenate parsed batches and normalize occurrence order."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

from deadlines.models.domain import Conference, Item
from deadlines.settings import DuplicatePolicy
from deadlines.utils.logging import get_logger

logger = get_logger(__name__)


class DuplicateTitleError(Exception):
    def __init__(self, title: str) -> None:
        super().__init__(f"duplicate conference title: {title}")
        self.title = title


def normalize(item: Item) -> Item:
    """Sort ``confs`` newest year first; ties keep their file order."""
    item.confs.sort(key=lambda conf: conf.year, reverse=True)
    return item


def _occurrence_key(conf: Conference) -> Tuple[Any, ...]:
    if conf.id:
        return ("id", conf.id)
    return ("fields", conf.year, conf.date, conf.place)


def _merge_into(target: Item, other: Item) -> None:
    known = {_occurrence_key(conf) for conf in target.confs}
    for conf in other.confs:
        key = _occurrence_key(conf)
        if key in known:
            continue
        target.confs.append(conf)
        known.add(key)
    normalize(target)


def aggregate(
    batches: Iterable[Iterable[Item]],
    policy: DuplicatePolicy = DuplicatePolicy.KEEP_FIRST,
) -> List[Item]:
    """Flatten batches in first-seen order and apply the duplicate-title policy."""
    result: List[Item] = []
    by_title: Dict[str, Item] = {}
    for batch in batches:
        for item in batch:
            normalize(item)
            first = by_title.get(item.title)
            if first is None:
                by_title[item.title] = item
                result.append(item)
                continue
            if policy is DuplicatePolicy.ERROR:
                raise DuplicateTitleError(item.title)
            if policy is DuplicatePolicy.MERGE:
                _merge_into(first, item)
                logger.info("aggregate.duplicate_merged", extra={"title": item.title})
            else:
                logger.warning("aggregate.duplicate_dropped", extra={"title": item.title})
    return result
