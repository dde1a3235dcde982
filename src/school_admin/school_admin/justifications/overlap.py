"""Advisory overlap check for justifications.

It only sees the collection this request loaded, which another user may have
changed since. The REST service performs the authoritative check; its
rejection is reported with the same message.
"""
from __future__ import annotations

from typing import Iterable, Optional

from .model import DateSpan, Justification


def spans_overlap(a: DateSpan, b: DateSpan) -> bool:
    if a.student_id != b.student_id:
        return False
    return a.start <= b.end and a.end >= b.start


def has_overlap(candidate: DateSpan, existing: Iterable[Justification], *, ignore_id: Optional[int] = None) -> bool:
    for j in existing:
        if ignore_id is not None and j.justification_id == ignore_id:
            continue
        if spans_overlap(candidate, j.span):
            return True
    return False
