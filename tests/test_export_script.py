from datetime import date, datetime

import pytest

from scripts.export_justifications import export_list
from src.school_admin.school_admin.api.session import SessionContext
from src.school_admin.school_admin.container import build_services
from src.school_admin.school_admin.core.enums import Role
from src.school_admin.school_admin.core.exceptions import ValidationError
from src.school_admin.school_admin.justifications.model import Justification
from src.school_admin.school_admin.justifications.service import JustificationFilters

CTX = SessionContext(token="t", user_id=1, name="Dora", role=Role.DIRECCION)


class FakeJustifications:
    def list_all(self, *, ctx):
        return [
            Justification(
                justification_id=1,
                kind="Escolar",
                department="Direccion",
                student_id=3,
                student_name="Ana",
                group="1A",
                tutor="Madre",
                reason="Concurso",
                start_date=date(2024, 3, 4),
                return_date=date(2024, 3, 8),
                duration_days=4,
            )
        ]


class Unused:
    pass


def _container():
    return build_services(
        users_repo=Unused(),
        students_repo=Unused(),
        justifications_repo=FakeJustifications(),
        entries_repo=Unused(),
    )


def test_export_writes_pdf(tmp_path):
    out = export_list(
        _container(),
        CTX,
        JustificationFilters(kind="Escolar"),
        tmp_path / "reports",
        now=datetime(2024, 3, 9, 10, 0),
    )

    assert out.name == "justificantes_20240309_100000.pdf"
    assert out.read_bytes().startswith(b"%PDF")


def test_export_refuses_unfiltered_list(tmp_path):
    with pytest.raises(ValidationError):
        export_list(_container(), CTX, JustificationFilters(), tmp_path)
    assert list(tmp_path.iterdir()) == []
