"""
Event repository implementations.

Supplies candidate events to the recommendation engine.
Implementations: in-memory rows, and a JSON file (the bundled London demo data).
Rows may carry start_offset_minutes instead of start_time; such rows are
re-anchored to the current time on every query so demo data stays upcoming.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Union

from recommender.models import Audience, CandidateEvent
from recommender.utils import utc_now

logger = logging.getLogger(__name__)


def _parse_start(row: Dict[str, Any], now: datetime) -> Optional[datetime]:
    if "start_offset_minutes" in row and not row.get("start_time"):
        try:
            return now + timedelta(minutes=float(row["start_offset_minutes"]))
        except (TypeError, ValueError):
            logger.warning("[events] Unparseable start_offset_minutes event_id=%s", row.get("id"))
            return None
    value = row.get("start_time")
    if isinstance(value, str) and value:
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.warning("[events] Unparseable start_time event_id=%s", row.get("id"))
            return None
    if not isinstance(value, datetime):
        return None
    # Naive timestamps from the store are UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def materialize_row(row: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """Copy of row with an absolute, timezone-aware start_time, or none when it cannot be parsed."""
    out = {k: v for k, v in row.items() if k not in ("start_offset_minutes", "start_time")}
    start = _parse_start(row, now)
    if start is not None:
        out["start_time"] = start
    return out


class InMemoryEventRepository:
    """
    Event repository over a list of rows (dicts or CandidateEvent).

    query_events follows the repository contract: status in statuses,
    audience in audience_filter, start time not in the past, soonest first,
    capped at limit. Rows are returned as dicts so the engine validates them.
    """

    def __init__(
        self,
        rows: Iterable[Union[Dict[str, Any], CandidateEvent]] = (),
        clock: Callable[[], datetime] = utc_now,
    ):
        self._rows: List[Dict[str, Any]] = [self._as_dict(r) for r in rows]
        self._clock = clock

    @staticmethod
    def _as_dict(row: Union[Dict[str, Any], CandidateEvent]) -> Dict[str, Any]:
        if isinstance(row, CandidateEvent):
            return row.model_dump()
        return dict(row)

    def replace_events(self, rows: Iterable[Union[Dict[str, Any], CandidateEvent]]) -> None:
        """Swap the full event set (e.g. after an upstream sync)."""
        self._rows = [self._as_dict(r) for r in rows]

    def upsert_event(self, row: Union[Dict[str, Any], CandidateEvent]) -> None:
        row = self._as_dict(row)
        self._rows = [r for r in self._rows if r.get("id") != row.get("id")] + [row]

    def __len__(self) -> int:
        return len(self._rows)

    async def query_events(
        self,
        statuses: Sequence[str],
        audience_filter: FrozenSet[Audience],
        limit: int,
    ) -> List[Dict[str, Any]]:
        now = self._clock()
        allowed_status = set(statuses)
        allowed_audience = {a.value for a in audience_filter}
        matched = []
        for row in self._rows:
            out = materialize_row(row, now)
            start = out.get("start_time")
            if not isinstance(start, datetime) or start < now:
                continue
            if out.get("status", "active") not in allowed_status:
                continue
            if out.get("audience", "everyone") not in allowed_audience:
                continue
            matched.append(out)
        matched.sort(key=lambda r: (r["start_time"], str(r.get("id"))))
        return matched[:limit]


class JsonEventRepository(InMemoryEventRepository):
    """Event repository backed by a JSON file: a list of events or {"events": [...]}."""

    def __init__(self, path: Union[Path, str], clock: Callable[[], datetime] = utc_now):
        self._path = Path(path)
        if not self._path.exists():
            raise FileNotFoundError(f"Events JSON not found: {self._path}")
        with open(self._path) as f:
            data = json.load(f)
        rows = data.get("events", []) if isinstance(data, dict) else data
        super().__init__(rows, clock=clock)
        logger.info("[events] Loaded %d events from %s", len(self), self._path)
