from datetime import date, datetime

import pytest
import responses

from src.school_admin.school_admin.api.client import ApiClient, ApiConfig
from src.school_admin.school_admin.api.session import SessionContext
from src.school_admin.school_admin.core.enums import Role
from src.school_admin.school_admin.core.exceptions import AuthorizationError, ValidationError
from src.school_admin.school_admin.entries.http_entry_repository import HttpEntryRepository
from src.school_admin.school_admin.entries.model import EntryExit
from src.school_admin.school_admin.entries.service import EntryFilters, EntryService

PREFECTO = SessionContext(token="t", user_id=3, name="Pedro", role=Role.PREFECTO)
ENFERMERIA = SessionContext(token="t", user_id=4, name="Eva", role=Role.ENFERMERIA)


class FakeEntriesRepo:
    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.created = []

    def list_all(self, *, ctx):
        return list(self.rows)

    def create(self, *, ctx, data):
        self.created.append(data)
        return 1

    def update(self, *, ctx, entry_id, data):
        pass

    def delete(self, *, ctx, entry_id):
        pass


ROWS = [
    EntryExit(1, "Sra. Pérez", "Recoger alumno", "Salida", 5, "Ana López", datetime(2024, 3, 4, 9, 15)),
    EntryExit(2, "Técnico", "Mantenimiento", "Entrada", None, "", datetime(2024, 3, 5, 13, 0)),
]


def test_reason_limited_to_35_characters():
    EntryService.build_input(visitor_name="A", reason="x" * 35, direction="Entrada")
    with pytest.raises(ValidationError) as exc:
        EntryService.build_input(visitor_name="A", reason="x" * 36, direction="Entrada")
    assert exc.value.fields == ("motivo",)


def test_direction_must_be_entrada_or_salida():
    with pytest.raises(ValidationError):
        EntryService.build_input(visitor_name="A", reason="b", direction="Adentro")


def test_blank_student_means_none():
    data = EntryService.build_input(visitor_name="A", reason="b", direction="Salida", student_id="")
    assert data.to_payload()["alumno_id"] is None


def test_enfermeria_has_no_access():
    svc = EntryService(FakeEntriesRepo(ROWS))
    with pytest.raises(AuthorizationError):
        svc.list_entries(ENFERMERIA)
    assert [e.entry_id for e in svc.list_entries(PREFECTO)] == [2, 1]


def test_filters():
    f = EntryFilters.from_args({"alumnos": "1", "q": "perez"})
    assert [e.entry_id for e in ROWS if all(p(e) for p in f.predicates())] == [1]

    f = EntryFilters.from_args({"dia": "2024-03-05", "tipo": "Entrada", "hora": "13"})
    assert f.day == date(2024, 3, 5)
    assert [e.entry_id for e in ROWS if all(p(e) for p in f.predicates())] == [2]

    f = EntryFilters.from_args({"desde": "2024-03-01", "hasta": "2024-03-04"})
    assert [e.entry_id for e in ROWS if all(p(e) for p in f.predicates())] == [1]


@responses.activate
def test_http_repository_parses_timestamps():
    responses.add(
        responses.GET,
        "http://api.test/api/entradas-salidas",
        json=[
            {
                "id": 8,
                "nombre_visita": "Luis",
                "motivo": "Junta",
                "tipo": "Entrada",
                "alumno_id": None,
                "nombre_alumno": None,
                "fecha_registro": "2024-03-04T08:00:00.000Z",
            }
        ],
    )
    repo = HttpEntryRepository(ApiClient(ApiConfig(base_url="http://api.test/api")))

    [entry] = repo.list_all(ctx=PREFECTO)
    assert entry.registered_at == datetime(2024, 3, 4, 8, 0)
    assert entry.student_id is None
