"""Display view models for a list host (launcher UI, terminal, JSON).

Every occurrence-dependent field falls back to a placeholder so that series
without any known occurrence still render.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple, Union

from deadlines.models.domain import Conference, Item, parse_deadline
from deadlines.pipeline import LoadResult, LoadStatus

UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"
NOT_ANNOUNCED = "Not announced"


class ActionKind(str, Enum):
    OPEN_URL = "open_url"
    COPY = "copy"
    TOGGLE_DETAIL = "toggle_detail"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    title: str
    payload: Optional[str] = None
    shortcut: Optional[str] = None


@dataclass(frozen=True)
class MetadataLabel:
    title: str
    text: str


@dataclass(frozen=True)
class Separator:
    pass


MetadataEntry = Union[MetadataLabel, Separator]


@dataclass(frozen=True)
class DetailView:
    markdown: str
    metadata: Tuple[MetadataEntry, ...]


@dataclass(frozen=True)
class ListRow:
    key: str
    title: str
    subtitle: str
    accessories: Tuple[str, ...]
    detail: DetailView
    actions: Tuple[Action, ...]


@dataclass
class ListState:
    """Presentation-only state; the loader never sees it."""

    is_showing_detail: bool = True
    query: str = ""
    rows: List[ListRow] = field(default_factory=list)

    def toggle(self) -> bool:
        self.is_showing_detail = not self.is_showing_detail
        return self.is_showing_detail

    def visible_rows(self) -> List[ListRow]:
        needle = self.query.strip().lower()
        if not needle:
            return list(self.rows)
        return [row for row in self.rows if needle in f"{row.title} {row.subtitle}".lower()]


def _or(value: Optional[str], placeholder: str) -> str:
    return value if value else placeholder


def time_left(conf: Optional[Conference], now: Optional[datetime] = None) -> str:
    """Human countdown to the next deadline of ``conf``."""
    if conf is None:
        return NOT_ANNOUNCED
    deadline = parse_deadline(conf.next_deadline, conf.timezone)
    if deadline is None:
        return NOT_ANNOUNCED
    delta = deadline - (now or datetime.now(timezone.utc))
    if delta.total_seconds() <= 0:
        return "Closed"
    days = delta.days
    if days >= 1:
        return f"{days} day{'s' if days != 1 else ''} left"
    hours = int(delta.total_seconds() // 3600)
    return f"{hours} hour{'s' if hours != 1 else ''} left"


def summary_line(item: Item) -> str:
    return f"{item.title}: {item.description}"


def build_accessories(item: Item) -> Tuple[str, ...]:
    latest = item.latest
    place = latest.place if latest is not None else None
    return (f"Rank: {_or(item.rank.ccf, NOT_AVAILABLE)}", _or(place, UNKNOWN))


def build_markdown(item: Item) -> str:
    latest = item.latest
    lines = [f"# {item.title}", "", item.description or NOT_AVAILABLE, "", "## Next Conference"]
    if latest is None:
        lines.append(f"* **Date:** {UNKNOWN}")
        lines.append(f"* **Location:** {UNKNOWN}")
        lines.append(f"* **Deadline:** {NOT_ANNOUNCED}")
        return "\n".join(lines)
    lines.append(f"* **Date:** {_or(latest.date, NOT_AVAILABLE)}")
    lines.append(f"* **Location:** {_or(latest.place, UNKNOWN)}")
    lines.append(f"* **Deadline:** {_or(latest.next_deadline, NOT_ANNOUNCED)}")
    if latest.link:
        lines.append(f"* **Website:** [{latest.link}]({latest.link})")
    return "\n".join(lines)


def build_detail(item: Item, now: Optional[datetime] = None) -> DetailView:
    latest = item.latest
    year = str(latest.year) if latest is not None else None
    metadata: Tuple[MetadataEntry, ...] = (
        MetadataLabel("Conference", item.title),
        MetadataLabel("Description", _or(item.description, NOT_AVAILABLE)),
        Separator(),
        MetadataLabel("Category", _or(item.sub, NOT_AVAILABLE)),
        MetadataLabel("CCF Rank", _or(item.rank.ccf, NOT_AVAILABLE)),
        MetadataLabel("CORE Rank", _or(item.rank.core, NOT_AVAILABLE)),
        MetadataLabel("THCPL Rank", _or(item.rank.thcpl, NOT_AVAILABLE)),
        Separator(),
        MetadataLabel("Year", _or(year, NOT_AVAILABLE)),
        MetadataLabel("Date", _or(latest.date if latest else None, NOT_AVAILABLE)),
        MetadataLabel("Location", _or(latest.place if latest else None, UNKNOWN)),
        MetadataLabel("Next Deadline", _or(latest.next_deadline if latest else None, NOT_ANNOUNCED)),
        MetadataLabel("Time Left", time_left(latest, now)),
        MetadataLabel("Timezone", _or(latest.timezone if latest else None, NOT_AVAILABLE)),
    )
    return DetailView(markdown=build_markdown(item), metadata=metadata)


def build_actions(item: Item) -> Tuple[Action, ...]:
    actions: List[Action] = []
    latest = item.latest
    if latest is not None and latest.link:
        actions.append(Action(ActionKind.OPEN_URL, "Open Conference Website", payload=latest.link))
    actions.append(Action(ActionKind.TOGGLE_DETAIL, "Toggle Detail View", shortcut="cmd+d"))
    actions.append(Action(ActionKind.COPY, "Copy Conference Info", payload=summary_line(item), shortcut="cmd+c"))
    return tuple(actions)


def build_row(item: Item, now: Optional[datetime] = None) -> ListRow:
    return ListRow(
        key=item.title,
        title=item.title,
        subtitle=item.sub,
        accessories=build_accessories(item),
        detail=build_detail(item, now),
        actions=build_actions(item),
    )


def build_rows(items: List[Item], now: Optional[datetime] = None) -> List[ListRow]:
    return [build_row(item, now) for item in items]


def empty_state(result: LoadResult) -> Optional[str]:
    """Message for a list with nothing to show; ``None`` when rows exist."""
    if result.status is LoadStatus.FAILED:
        return f"Failed to load conference data: {result.error or 'unknown error'}"
    if result.status is LoadStatus.EMPTY:
        return "No conferences found."
    return None
