from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
import logging
from typing import Literal

from resourcedesk.services.snapshot import EntryView, FacultyView

logger = logging.getLogger(__name__)

MatchMode = Literal["start_time", "slot_id"]


def weekday_index(value: date) -> int:
    """Day of week with Sunday as 0, matching ``TimetableEntry.day_of_week``."""
    return (value.weekday() + 1) % 7


@dataclass(frozen=True)
class SubstituteCandidate:
    id: str
    name: str


@dataclass
class SubstituteResolution:
    faculty_id: str
    absence_date: date
    day_of_week: int
    affected_classes: list[EntryView] = field(default_factory=list)
    available_substitutes: list[SubstituteCandidate] = field(default_factory=list)


class SubstituteResolver:
    """Finds the classes an absent faculty member leaves uncovered and who is free to take them.

    Busy faculty are found by matching the *start time* of each affected
    class against every active entry on the same weekday. Two slot rows that
    share a start time are therefore treated as the same instant. Pass
    ``match_mode="slot_id"`` to match on the slot row instead.
    """

    def __init__(
        self,
        *,
        entries: Iterable[EntryView],
        faculty: Iterable[FacultyView],
        match_mode: MatchMode = "start_time",
    ) -> None:
        self.entries = [item for item in entries if item.is_active]
        self.faculty = list(faculty)
        self.match_mode = match_mode

    def _time_key(self, entry: EntryView) -> str | None:
        if self.match_mode == "slot_id":
            return entry.time_slot_id
        return entry.start_time

    def resolve(self, faculty_id: str, absence_date: date) -> SubstituteResolution:
        day = weekday_index(absence_date)
        day_entries = [item for item in self.entries if item.day_of_week == day]

        affected = [item for item in day_entries if item.faculty_id == faculty_id]
        occupied_times = {key for key in (self._time_key(item) for item in affected) if key}

        busy: set[str] = set()
        if occupied_times:
            for item in day_entries:
                if item.faculty_id and self._time_key(item) in occupied_times:
                    busy.add(item.faculty_id)

        available = [
            SubstituteCandidate(id=item.id, name=item.name)
            for item in self.faculty
            if item.is_available and item.id != faculty_id and item.id not in busy
        ]
        logger.debug(
            "Absence of %s on %s: %d affected class(es), %d busy, %d available",
            faculty_id,
            absence_date.isoformat(),
            len(affected),
            len(busy),
            len(available),
        )
        return SubstituteResolution(
            faculty_id=faculty_id,
            absence_date=absence_date,
            day_of_week=day,
            affected_classes=affected,
            available_substitutes=available,
        )
