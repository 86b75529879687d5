"""Enumerate -> parse -> aggregate, as one run."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from deadlines.connectors.base import BaseSource, SourceError
from deadlines.models.domain import Item, SourceFile
from deadlines.services.aggregator import DuplicateTitleError, aggregate
from deadlines.services.parser import ParseError, parse_items
from deadlines.settings import Settings, get_settings
from deadlines.utils.logging import get_logger

logger = get_logger(__name__)


class LoadStatus(str, Enum):
    READY = "ready"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class LoadResult:
    status: LoadStatus
    items: List[Item] = field(default_factory=list)
    error: Optional[str] = None
    skipped: Dict[str, str] = field(default_factory=dict)
    trace_id: str = ""


def _unit(file: SourceFile) -> str:
    return f"{file.category}/{file.name}"


async def _load_file(source: BaseSource, file: SourceFile, semaphore: asyncio.Semaphore) -> List[Item]:
    async with semaphore:
        text = await source.read(file)
    return parse_items(text, _unit(file))


async def load_items(source: BaseSource, settings: Optional[Settings] = None) -> LoadResult:
    """Run the pipeline once against ``source``.

    The run fails on a root listing failure, a rejected duplicate title, or when
    every enumerated unit failed. Otherwise a file that cannot be read or
    parsed is logged and contributes nothing.
    """
    cfg = settings or get_settings()
    trace_id = str(uuid.uuid4())
    logger.info("pipeline.start", extra={"trace_id": trace_id, "source": source.name})

    try:
        files = await source.list_files()
    except SourceError as exc:
        logger.error("pipeline.root_failed", extra={"trace_id": trace_id, "error": str(exc)})
        return LoadResult(status=LoadStatus.FAILED, error=str(exc), skipped=dict(source.errors), trace_id=trace_id)

    skipped: Dict[str, str] = dict(source.errors)
    semaphore = asyncio.Semaphore(cfg.fetch_concurrency)
    results = await asyncio.gather(
        *(_load_file(source, file, semaphore) for file in files),
        return_exceptions=True,
    )

    batches: List[List[Item]] = []
    failed = 0
    for file, result in zip(files, results):
        if isinstance(result, (SourceError, ParseError, OSError, UnicodeDecodeError)):
            skipped[_unit(file)] = str(result)
            logger.warning(
                "pipeline.file_skipped",
                extra={"trace_id": trace_id, "unit": _unit(file), "error": str(result)},
            )
            failed += 1
            continue
        if isinstance(result, BaseException):
            raise result
        batches.append(result)

    if (files and failed == len(files)) or (not files and source.errors):
        error = f"all {len(skipped)} units failed to load"
        logger.error("pipeline.all_units_failed", extra={"trace_id": trace_id, "units": len(skipped)})
        return LoadResult(status=LoadStatus.FAILED, error=error, skipped=skipped, trace_id=trace_id)

    try:
        items = aggregate(batches, cfg.duplicate_policy)
    except DuplicateTitleError as exc:
        logger.error("pipeline.duplicate_rejected", extra={"trace_id": trace_id, "title": exc.title})
        return LoadResult(status=LoadStatus.FAILED, error=str(exc), skipped=skipped, trace_id=trace_id)

    status = LoadStatus.READY if items else LoadStatus.EMPTY
    logger.info(
        "pipeline.finished",
        extra={
            "trace_id": trace_id,
            "source": source.name,
            "files": len(files),
            "items": len(items),
            "skipped": len(skipped),
            "status": status.value,
        },
    )
    return LoadResult(status=status, items=items, skipped=skipped, trace_id=trace_id)


async def run(source: BaseSource, settings: Optional[Settings] = None) -> LoadResult:
    """``load_items`` followed by releasing the source's resources."""
    try:
        return await load_items(source, settings)
    finally:
        await source.aclose()


def load_items_sync(source: BaseSource, settings: Optional[Settings] = None) -> LoadResult:
    return asyncio.run(run(source, settings))
