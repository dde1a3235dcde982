import json

import pytest
import responses

from src.school_admin.school_admin.api.client import ApiClient, ApiConfig
from src.school_admin.school_admin.api.session import SessionContext
from src.school_admin.school_admin.core.enums import Role
from src.school_admin.school_admin.core.exceptions import AuthorizationError, ValidationError
from src.school_admin.school_admin.users.http_user_repository import HttpUserRepository
from src.school_admin.school_admin.users.model import StaffProfile
from src.school_admin.school_admin.users.service import AuthService, UserFilters, UserService

BASE = "http://api.test/api"
DIRECCION = SessionContext(token="t", user_id=1, name="Dora", role=Role.DIRECCION)
MAESTRO = SessionContext(token="t", user_id=2, name="Mario", role=Role.MAESTRO)


class FakeUsersRepo:
    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.updates = []
        self.login_calls = 0

    def login(self, *, name, secret):
        self.login_calls += 1
        return SessionContext(token="new", user_id=9, name=name, role=Role.PREFECTO)

    def list_all(self, *, ctx):
        return list(self.rows)

    def create(self, *, ctx, name, password, role):
        return 10

    def update(self, *, ctx, user_id, name, role, password=None):
        self.updates.append((user_id, name, role, password))

    def delete(self, *, ctx, user_id):
        pass


def test_login_requires_both_fields():
    repo = FakeUsersRepo()
    with pytest.raises(ValidationError, match="completa todos los campos"):
        AuthService(repo).login("Pedro", "")
    assert repo.login_calls == 0


def test_login_start_and_logout():
    store = {}
    auth = AuthService(FakeUsersRepo())

    ctx = auth.login(" Pedro ", "secreto")
    auth.start(store, ctx)
    assert auth.restore(store).name == "Pedro"

    auth.logout(store)
    assert auth.restore(store) is None


def test_only_direccion_manages_profiles():
    svc = UserService(FakeUsersRepo([StaffProfile(1, "Dora", Role.DIRECCION)]))
    with pytest.raises(AuthorizationError):
        svc.list_profiles(MAESTRO)
    with pytest.raises(AuthorizationError):
        svc.create_profile(MAESTRO, name="x", password="y", role="Maestro")


def test_blank_password_keeps_current():
    repo = FakeUsersRepo()
    svc = UserService(repo)

    svc.update_profile(DIRECCION, 4, name="Eva", role="enfermeria", password="  ")
    svc.update_profile(DIRECCION, 4, name="Eva", role=Role.ENFERMERIA, password="nueva")

    assert repo.updates == [(4, "Eva", Role.ENFERMERIA, None), (4, "Eva", Role.ENFERMERIA, "nueva")]


def test_unknown_role_is_rejected():
    with pytest.raises(ValidationError):
        UserService(FakeUsersRepo()).create_profile(DIRECCION, name="x", password="y", role="Conserje")


def test_filters():
    rows = [StaffProfile(1, "Dora", Role.DIRECCION), StaffProfile(2, "Mario", Role.MAESTRO)]
    f = UserFilters.from_args({"rol": "maestro"})
    assert [u.user_id for u in rows if all(p(u) for p in f.predicates())] == [2]


@responses.activate
def test_http_login():
    responses.add(
        responses.POST,
        f"{BASE}/users/login",
        json={"token": "jwt", "user": {"id": 3, "nombre": "Pedro", "rol": "Prefecto"}},
    )

    ctx = HttpUserRepository(ApiClient(ApiConfig(base_url=BASE))).login(name="Pedro", secret="s")

    assert ctx == SessionContext(token="jwt", user_id=3, name="Pedro", role=Role.PREFECTO)
    assert json.loads(responses.calls[0].request.body) == {"nombre": "Pedro", "contraseña": "s"}
    assert "Authorization" not in responses.calls[0].request.headers


@responses.activate
def test_http_update_without_password():
    responses.add(responses.PUT, f"{BASE}/users/4", json={})

    HttpUserRepository(ApiClient(ApiConfig(base_url=BASE))).update(ctx=DIRECCION, user_id=4, name="Eva", role=Role.ENFERMERIA)

    assert json.loads(responses.calls[0].request.body) == {"nombre": "Eva", "rol": "Enfermeria"}
