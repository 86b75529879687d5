"""Domain DTOs for conference deadline records.

The shapes mirror the YAML published by the ccf-deadlines project: one file
holds a list of conference series (``Item``), each with yearly occurrences
(``Conference``) and their deadline phases (``Timeline``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEADLINE_FORMAT = "%Y-%m-%d %H:%M:%S"

_UTC_OFFSET = re.compile(r"^UTC(?:([+-])(\d{1,2})(?::?(\d{2}))?)?$", re.IGNORECASE)


def _text_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Timeline(_Record):
    """One deadline phase of an occurrence."""

    abstract_deadline: Optional[str] = None
    deadline: Optional[str] = None
    comment: Optional[str] = None

    @field_validator("abstract_deadline", "deadline", "comment", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> Optional[str]:
        # YAML turns unquoted timestamps into datetime objects
        if isinstance(v, datetime):
            return v.strftime(DEADLINE_FORMAT)
        return _text_or_none(v)


class Conference(_Record):
    """One year's instance of a conference series."""

    year: int
    id: Optional[str] = None
    link: Optional[str] = None
    timeline: List[Timeline] = Field(default_factory=list)
    timezone: Optional[str] = None
    date: Optional[str] = None
    place: Optional[str] = None

    @field_validator("year", mode="before")
    @classmethod
    def _year_from_text(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip().isdigit():
            return int(v.strip())
        return v

    @field_validator("id", "link", "timezone", "date", "place", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> Optional[str]:
        return _text_or_none(v)

    @field_validator("timeline", mode="before")
    @classmethod
    def _null_timeline(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def next_deadline(self) -> Optional[str]:
        if not self.timeline:
            return None
        return self.timeline[0].deadline


class Rank(_Record):
    ccf: Optional[str] = None
    core: Optional[str] = None
    thcpl: Optional[str] = None

    @field_validator("ccf", "core", "thcpl", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> Optional[str]:
        return _text_or_none(v)


class Item(_Record):
    """A conference series and its known occurrences."""

    title: str
    description: str = ""
    sub: str = ""
    rank: Rank = Field(default_factory=Rank)
    dblp: Optional[str] = None
    confs: List[Conference] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title_nonempty(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("title must not be blank.")
        return s

    @field_validator("title", "description", "sub", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Any:
        # short titles such as 3DV or years may be read by YAML as numbers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return "" if v is None else v

    @field_validator("dblp", mode="before")
    @classmethod
    def _dblp_text(cls, v: Any) -> Optional[str]:
        return _text_or_none(v)

    @field_validator("rank", mode="before")
    @classmethod
    def _null_rank(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("confs", mode="before")
    @classmethod
    def _null_confs(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def latest(self) -> Optional[Conference]:
        return self.confs[0] if self.confs else None


@dataclass(frozen=True)
class SourceFile:
    """Handle to one data file; content is read on demand by its source."""

    category: str
    name: str
    location: str


def parse_timezone(label: Optional[str]) -> Optional[timezone]:
    """Map labels like ``AoE``, ``UTC``, ``UTC+8`` or ``UTC-12`` to a tzinfo."""
    if not label:
        return None
    text = label.strip()
    if text.lower() == "aoe":
        return timezone(timedelta(hours=-12))
    match = _UTC_OFFSET.match(text)
    if match is None:
        return None
    sign, hours, minutes = match.groups()
    if sign is None:
        return timezone.utc
    offset = timedelta(hours=int(hours), minutes=int(minutes or 0))
    if offset >= timedelta(hours=24):
        return None
    return timezone(-offset if sign == "-" else offset)


def parse_deadline(text: Optional[str], tz_label: Optional[str] = None) -> Optional[datetime]:
    """Parse a deadline string into an aware datetime; ``None`` when unknown."""
    if not text:
        return None
    try:
        naive = datetime.strptime(text.strip(), DEADLINE_FORMAT)
    except ValueError:
        return None
    tz = parse_timezone(tz_label) or timezone.utc
    return naive.replace(tzinfo=tz)
