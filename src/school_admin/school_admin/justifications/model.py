from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class DateSpan:
    """Inclusive absence interval of one student."""

    student_id: int
    start: date
    end: date


@dataclass(frozen=True)
class Justification:
    justification_id: int
    kind: str
    department: str
    student_id: int
    student_name: str
    group: str
    tutor: str
    reason: str
    start_date: date
    return_date: date
    duration_days: int
    monthly_total: int = 0
    created_by: Optional[int] = None

    @property
    def id(self) -> int:
        return self.justification_id

    @property
    def span(self) -> DateSpan:
        return DateSpan(student_id=self.student_id, start=self.start_date, end=self.return_date)


@dataclass(frozen=True)
class JustificationDraft:
    """Form input before validation. Duration is never part of it."""

    kind: str
    student_id: Optional[int]
    tutor: str
    reason: str
    start_date: Optional[date]
    return_date: Optional[date]
    group: str = ""
