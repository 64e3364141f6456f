from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_TOKEN_TTL_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .groups.mysql_group_repository import MySQLGroupRepository
from .groups.repository import GroupRepository
from .groups.service import GroupService
from .meetings.mysql_meeting_repository import MySQLMeetingRepository
from .meetings.repository import MeetingRepository
from .meetings.service import MeetingService
from .memberships.mysql_membership_repository import MySQLMembershipRepository
from .memberships.repository import MembershipRepository
from .memberships.service import MembershipService
from .persons.mysql_person_repository import MySQLPersonRepository
from .persons.repository import PersonRepository
from .persons.service import AuthService, PersonService
from .persons.tokens import TokenCodec


@dataclass(frozen=True)
class Container:
    persons_repo: PersonRepository
    groups_repo: GroupRepository
    memberships_repo: MembershipRepository
    meetings_repo: MeetingRepository
    attendance_repo: AttendanceRepository

    tokens: TokenCodec
    auth_service: AuthService
    person_service: PersonService
    group_service: GroupService
    membership_service: MembershipService
    meeting_service: MeetingService
    attendance_service: AttendanceService

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    persons_repo: PersonRepository,
    groups_repo: GroupRepository,
    memberships_repo: MembershipRepository,
    meetings_repo: MeetingRepository,
    attendance_repo: AttendanceRepository,
    tokens: TokenCodec,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of any set of repositories (MySQL or in-memory)."""
    person_service = PersonService(persons_repo)
    auth_service = AuthService(persons_repo, tokens, person_service)
    group_service = GroupService(groups_repo)
    membership_service = MembershipService(memberships_repo, persons_repo, groups_repo)
    meeting_service = MeetingService(meetings_repo, groups_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        meetings_repo,
        persons_repo,
        groups_repo,
        membership_service,
    )

    return Container(
        persons_repo=persons_repo,
        groups_repo=groups_repo,
        memberships_repo=memberships_repo,
        meetings_repo=meetings_repo,
        attendance_repo=attendance_repo,
        tokens=tokens,
        auth_service=auth_service,
        person_service=person_service,
        group_service=group_service,
        membership_service=membership_service,
        meeting_service=meeting_service,
        attendance_service=attendance_service,
        conn=conn,
    )


def build_container(*, db_config: dict, jwt_secret: str, token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return assemble(
        persons_repo=MySQLPersonRepository(conn),
        groups_repo=MySQLGroupRepository(conn),
        memberships_repo=MySQLMembershipRepository(conn),
        meetings_repo=MySQLMeetingRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        tokens=TokenCodec(jwt_secret, ttl_hours=token_ttl_hours),
        conn=conn,
    )
