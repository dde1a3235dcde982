from datetime import date

import pytest

from src.school_admin.school_admin.api.session import SessionContext
from src.school_admin.school_admin.core.constants import OVERLAP_MESSAGE
from src.school_admin.school_admin.core.enums import DatePreset, Role
from src.school_admin.school_admin.core.exceptions import RemoteServiceError, ValidationError
from src.school_admin.school_admin.justifications.model import Justification, JustificationDraft
from src.school_admin.school_admin.justifications.service import (
    JustificationFilters,
    JustificationService,
    draft_from_form,
)

PREFECTO = SessionContext(token="t", user_id=5, name="Pedro", role=Role.PREFECTO)
DIRECCION = SessionContext(token="t", user_id=1, name="Dora", role=Role.DIRECCION)


class FakeJustificationsRepo:
    def __init__(self, rows=None, error=None):
        self.rows = list(rows or [])
        self.error = error
        self.created = []
        self.updated = []

    def list_all(self, *, ctx):
        return list(self.rows)

    def create(self, *, ctx, payload):
        if self.error:
            raise self.error
        self.created.append(payload)
        return 99

    def update(self, *, ctx, justification_id, payload):
        if self.error:
            raise self.error
        self.updated.append((justification_id, payload))

    def delete(self, *, ctx, justification_id):
        self.rows = [r for r in self.rows if r.justification_id != justification_id]


def _row(jid, student_id, start, end, **kw):
    values = dict(
        justification_id=jid,
        kind="Enfermedad",
        department="Prefectura",
        student_id=student_id,
        student_name="Ana López",
        group="2B",
        tutor="Madre",
        reason="Gripe",
        start_date=start,
        return_date=end,
        duration_days=3,
    )
    values.update(kw)
    return Justification(**values)


def _draft(start, end, student_id=1):
    return JustificationDraft(
        kind="Enfermedad",
        student_id=student_id,
        tutor="Madre",
        reason="Gripe",
        start_date=start,
        return_date=end,
        group="2B",
    )


def test_create_sends_computed_days_and_department():
    repo = FakeJustificationsRepo()
    svc = JustificationService(repo)

    assert svc.create(PREFECTO, _draft(date(2024, 1, 1), date(2024, 1, 6)), []) == 99

    payload = repo.created[0]
    assert payload["tiempo_dias"] == 5
    assert payload["departamento"] == "Prefectura"
    assert payload["fecha_inicio"] == "2024-01-01"
    assert payload["fecha_regreso"] == "2024-01-06"


def test_equal_dates_are_rejected_before_any_call():
    repo = FakeJustificationsRepo()
    svc = JustificationService(repo)

    with pytest.raises(ValidationError, match="igual"):
        svc.create(PREFECTO, _draft(date(2024, 1, 3), date(2024, 1, 3)), [])
    assert repo.created == []


def test_return_before_start_is_rejected():
    svc = JustificationService(FakeJustificationsRepo())
    with pytest.raises(ValidationError, match="anterior"):
        svc.validate(PREFECTO, _draft(date(2024, 1, 5), date(2024, 1, 3)), [])


def test_missing_fields_are_reported():
    svc = JustificationService(FakeJustificationsRepo())
    draft = JustificationDraft(kind="", student_id=1, tutor="x", reason="y", start_date=None, return_date=None)
    with pytest.raises(ValidationError) as exc:
        svc.validate(PREFECTO, draft, [])
    assert exc.value.fields == ("tipo_justificante",)


def test_weekend_only_range_is_accepted_with_zero_days():
    svc = JustificationService(FakeJustificationsRepo())
    assert svc.validate(PREFECTO, _draft(date(2024, 1, 6), date(2024, 1, 8)), []) == 0


def test_direccion_needs_four_business_days():
    repo = FakeJustificationsRepo()
    svc = JustificationService(repo)

    with pytest.raises(ValidationError, match="mínimo 4"):
        svc.create(DIRECCION, _draft(date(2024, 1, 1), date(2024, 1, 4)), [])
    assert repo.created == []

    svc.create(DIRECCION, _draft(date(2024, 1, 1), date(2024, 1, 5)), [])
    assert repo.created[0]["tiempo_dias"] == 4
    assert repo.created[0]["departamento"] == "Direccion"


def test_local_overlap_blocks_create():
    existing = [_row(10, 1, date(2024, 1, 2), date(2024, 1, 4))]
    repo = FakeJustificationsRepo()
    svc = JustificationService(repo)

    with pytest.raises(ValidationError, match=OVERLAP_MESSAGE):
        svc.create(PREFECTO, _draft(date(2024, 1, 1), date(2024, 1, 3)), existing)
    assert repo.created == []


def test_update_ignores_its_own_span():
    existing = [_row(10, 1, date(2024, 1, 2), date(2024, 1, 4))]
    repo = FakeJustificationsRepo()
    svc = JustificationService(repo)

    svc.update(PREFECTO, 10, _draft(date(2024, 1, 1), date(2024, 1, 3)), existing)
    assert repo.updated[0][0] == 10


def test_server_overlap_rejection_is_reported_as_validation_error():
    error = RemoteServiceError("El alumno ya tiene un justificante que abarca parte o todo ese periodo", status=400)
    svc = JustificationService(FakeJustificationsRepo(error=error))

    with pytest.raises(ValidationError) as exc:
        svc.create(PREFECTO, _draft(date(2024, 1, 1), date(2024, 1, 3)), [])
    assert str(exc.value) == OVERLAP_MESSAGE


def test_other_server_errors_pass_through():
    svc = JustificationService(FakeJustificationsRepo(error=RemoteServiceError("Error al crear justificante", 500)))
    with pytest.raises(RemoteServiceError):
        svc.create(PREFECTO, _draft(date(2024, 1, 1), date(2024, 1, 3)), [])


def test_list_is_newest_first():
    repo = FakeJustificationsRepo([_row(1, 1, date(2024, 1, 1), date(2024, 1, 2)), _row(4, 2, date(2024, 1, 1), date(2024, 1, 2))])
    assert [j.justification_id for j in JustificationService(repo).list_justifications(PREFECTO)] == [4, 1]


def test_monthly_counts_come_from_api_totals():
    rows = [
        _row(1, 1, date(2024, 1, 1), date(2024, 1, 2), monthly_total=2),
        _row(2, 1, date(2024, 1, 8), date(2024, 1, 9), monthly_total=2),
        _row(3, 7, date(2024, 1, 1), date(2024, 1, 2), monthly_total=1),
    ]
    assert JustificationService.monthly_counts(rows) == {1: 2, 7: 1}


def test_draft_from_form_tolerates_bad_dates():
    draft = draft_from_form({"alumno_id": "3", "tipo_justificante": "Familiar", "fecha_inicio": "no", "fecha_regreso": "2024-01-05"})
    assert draft.student_id == 3
    assert draft.start_date is None
    assert draft.return_date == date(2024, 1, 5)


def test_filters_from_query_args():
    rows = [
        _row(1, 1, date(2024, 1, 1), date(2024, 1, 2), group="2B", created_by=5),
        _row(2, 2, date(2024, 1, 1), date(2024, 1, 2), group="3A", student_name="Luis", created_by=1),
    ]
    f = JustificationFilters.from_args({"q": "lopez", "grado": "2", "grupo": "b", "mios": "1", "fecha": "nunca"})

    assert f.preset is None
    assert f.is_active()
    assert [p(rows[0]) for p in f.predicates(PREFECTO)] == [True, True, True, True]
    assert not all(p(rows[1]) for p in f.predicates(PREFECTO))


def test_inactive_filters():
    f = JustificationFilters.from_args({})
    assert not f.is_active()
    assert f.describe() == []
    assert JustificationFilters(preset=DatePreset.MONTH).describe() == ["Fecha: Mes"]
