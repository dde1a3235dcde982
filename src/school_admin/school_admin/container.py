from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .api.client import ApiClient, ApiConfig
from .entries.http_entry_repository import HttpEntryRepository
from .entries.repository import EntryRepository
from .entries.service import EntryService
from .justifications.http_justification_repository import HttpJustificationRepository
from .justifications.repository import JustificationRepository
from .justifications.service import JustificationService
from .students.http_student_repository import HttpStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.http_user_repository import HttpUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    client: Optional[ApiClient]

    users_repo: UserRepository
    students_repo: StudentRepository
    justifications_repo: JustificationRepository
    entries_repo: EntryRepository

    auth_service: AuthService
    user_service: UserService
    student_service: StudentService
    justification_service: JustificationService
    entry_service: EntryService


def build_services(
    *,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    justifications_repo: JustificationRepository,
    entries_repo: EntryRepository,
    client: Optional[ApiClient] = None,
) -> Container:
    return Container(
        client=client,
        users_repo=users_repo,
        students_repo=students_repo,
        justifications_repo=justifications_repo,
        entries_repo=entries_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        student_service=StudentService(students_repo),
        justification_service=JustificationService(justifications_repo),
        entry_service=EntryService(entries_repo),
    )


def build_container(*, api_config: dict) -> Container:
    config = ApiConfig(
        base_url=str(api_config["base_url"]),
        timeout=api_config.get("timeout"),
    )
    client = ApiClient(config)

    return build_services(
        client=client,
        users_repo=HttpUserRepository(client),
        students_repo=HttpStudentRepository(client),
        justifications_repo=HttpJustificationRepository(client),
        entries_repo=HttpEntryRepository(client),
    )
