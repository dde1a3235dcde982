from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    student_id: int
    name: str
    group: str
    shift: str
    enrollment_year: Optional[int]

    @property
    def id(self) -> int:
        return self.student_id

    @property
    def grade(self) -> str:
        """Digits of the group: "2B" -> "2"."""
        return re.sub(r"[^0-9]", "", self.group or "")

    @property
    def letter(self) -> str:
        """Letters of the group: "2B" -> "B"."""
        return re.sub(r"[^A-Za-z]", "", self.group or "").upper()


@dataclass(frozen=True)
class StudentInput:
    name: str
    group: str
    shift: str
    enrollment_year: int

    def to_payload(self) -> dict:
        return {"nombre": self.name, "grupo": self.group, "turno": self.shift, "ingreso": self.enrollment_year}
