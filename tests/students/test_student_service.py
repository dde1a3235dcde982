import pytest

from src.school_admin.school_admin.api.session import SessionContext
from src.school_admin.school_admin.core.enums import Role
from src.school_admin.school_admin.core.exceptions import AuthorizationError, RemoteServiceError, ValidationError
from src.school_admin.school_admin.students.model import Student
from src.school_admin.school_admin.students.service import StudentFilters, StudentService

DIRECCION = SessionContext(token="t", user_id=1, name="Dora", role=Role.DIRECCION)
MAESTRO = SessionContext(token="t", user_id=2, name="Mario", role=Role.MAESTRO)


class FakeStudentsRepo:
    def __init__(self, rows=None, fail=False):
        self.rows = list(rows or [])
        self.fail = fail
        self.calls = []

    def list_all(self, *, ctx):
        if self.fail:
            raise RemoteServiceError("Error al obtener alumnos", 500)
        return list(self.rows)

    def create(self, *, ctx, data):
        self.calls.append(("create", data))
        return 1

    def update(self, *, ctx, student_id, data):
        self.calls.append(("update", student_id, data))

    def delete(self, *, ctx, student_id):
        self.calls.append(("delete", student_id))

    def bulk_create(self, *, ctx, students):
        self.calls.append(("bulk_create", list(students)))

    def update_group(self, *, ctx, group, new_group, new_year, exclude_ids):
        self.calls.append(("update_group", group, new_group, new_year, list(exclude_ids)))

    def delete_group(self, *, ctx, grade, letter, exclude_ids):
        self.calls.append(("delete_group", grade, letter, list(exclude_ids)))


ROWS = [
    Student(1, "Ana López", "2B", "Matutino", 2023),
    Student(2, "Beto Ruiz", "2B", "Matutino", 2023),
    Student(3, "Carla Díaz", "3H", "Vespertino", 2022),
]


def test_group_parts():
    assert ROWS[2].grade == "3"
    assert ROWS[2].letter == "H"


def test_build_input_checks_letter_against_shift():
    svc = StudentService(FakeStudentsRepo())

    data = svc.build_input(name=" Ana ", grade="1", letter="a", shift="Matutino", enrollment_year="2024")
    assert data.to_payload() == {"nombre": "Ana", "grupo": "1A", "turno": "Matutino", "ingreso": 2024}

    with pytest.raises(ValidationError) as exc:
        svc.build_input(name="Ana", grade="1", letter="G", shift="Matutino", enrollment_year="2024")
    assert exc.value.fields == ("grupo",)


def test_only_direccion_and_trabajo_social_manage_students():
    svc = StudentService(FakeStudentsRepo(ROWS))
    with pytest.raises(AuthorizationError):
        svc.list_students(MAESTRO)
    assert [s.student_id for s in svc.list_students(DIRECCION)] == [3, 2, 1]


def test_picker_is_open_to_every_role_and_empty_on_failure():
    assert [s.name for s in StudentService(FakeStudentsRepo(ROWS)).picker(MAESTRO)][0] == "Ana López"
    assert StudentService(FakeStudentsRepo(fail=True)).picker(MAESTRO) == []


def test_bulk_create_one_per_non_blank_line():
    repo = FakeStudentsRepo()
    svc = StudentService(repo)

    added = svc.bulk_create(
        DIRECCION, grade="1", letter="C", shift="Matutino", enrollment_year=2024, names_text="Ana\n\n  Beto \n"
    )

    assert added == 2
    batch = repo.calls[0][1]
    assert [s.name for s in batch] == ["Ana", "Beto"]
    assert {s.group for s in batch} == {"1C"}


def test_bulk_create_needs_names():
    with pytest.raises(ValidationError):
        StudentService(FakeStudentsRepo()).bulk_create(
            DIRECCION, grade="1", letter="C", shift="Matutino", enrollment_year=2024, names_text="  \n"
        )


def test_excluded_ids_are_the_unticked_visible_ones():
    assert StudentService.excluded_ids([1, 2, 3], [1, 3]) == [2]


def test_group_update_excludes_unticked():
    repo = FakeStudentsRepo()
    svc = StudentService(repo)
    filters = StudentFilters(grade="2", letter="B")

    svc.bulk_update_group(
        DIRECCION, filters=filters, visible_ids=[1, 2], selected_ids=[1], new_grade="3", new_letter="b"
    )

    assert repo.calls == [("update_group", "2B", "3B", None, [2])]


def test_group_actions_need_grade_and_letter():
    svc = StudentService(FakeStudentsRepo())
    with pytest.raises(ValidationError):
        svc.bulk_update_group(DIRECCION, filters=StudentFilters(grade="2"), visible_ids=[], selected_ids=[], new_year=2025)
    with pytest.raises(ValidationError):
        svc.bulk_delete_group(DIRECCION, filters=StudentFilters(grade="2"), visible_ids=[1], selected_ids=[1])


def test_group_update_needs_a_change():
    svc = StudentService(FakeStudentsRepo())
    with pytest.raises(ValidationError):
        svc.bulk_update_group(DIRECCION, filters=StudentFilters(grade="2", letter="B"), visible_ids=[1], selected_ids=[1])


def test_group_delete():
    repo = FakeStudentsRepo()
    StudentService(repo).bulk_delete_group(
        DIRECCION, filters=StudentFilters(grade="2", letter="B"), visible_ids=[1, 2], selected_ids=[1, 2]
    )
    assert repo.calls == [("delete_group", "2", "B", [])]


def test_group_delete_with_nothing_selected_is_refused():
    repo = FakeStudentsRepo()
    with pytest.raises(ValidationError):
        StudentService(repo).bulk_delete_group(
            DIRECCION, filters=StudentFilters(grade="2", letter="B"), visible_ids=[1, 2], selected_ids=[]
        )
    assert repo.calls == []


def test_filters():
    f = StudentFilters.from_args({"q": "diaz", "turno": "Vespertino"})
    assert [s.student_id for s in ROWS if all(p(s) for p in f.predicates())] == [3]
    assert not f.targets_group
