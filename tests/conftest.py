from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.group_attendance.group_attendance.attendance.model import (
    AttendanceEntry,
    AttendanceRecord,
    AttendanceSummary,
)
from src.group_attendance.group_attendance.container import assemble
from src.group_attendance.group_attendance.core.enums import AttendanceStatus
from src.group_attendance.group_attendance.core.exceptions import ConflictError
from src.group_attendance.group_attendance.groups.model import Group
from src.group_attendance.group_attendance.meetings.model import Meeting
from src.group_attendance.group_attendance.memberships.model import Membership, term_from_end_date
from src.group_attendance.group_attendance.persons.model import Person
from src.group_attendance.group_attendance.persons.tokens import TokenCodec

TEST_JWT_SECRET = "test-jwt-secret-0123456789abcdef0123456789"
ADMIN_PASSWORD = "admin123"


class InMemoryStore:
    """Tables kept in dicts; deletes cascade like the MySQL foreign keys."""

    def __init__(self):
        self.persons: dict[int, Person] = {}
        self.groups: dict[int, Group] = {}
        self.memberships: dict[int, Membership] = {}
        self.meetings: dict[int, Meeting] = {}
        self.attendance: dict[tuple[int, int], dict] = {}
        self._ids = {name: itertools.count(1) for name in ("persons", "groups", "memberships", "meetings", "attendance")}

    def next_id(self, table: str) -> int:
        return next(self._ids[table])

    def drop_meeting(self, meeting_id: int) -> None:
        self.meetings.pop(meeting_id, None)
        for key in [k for k in self.attendance if k[0] == meeting_id]:
            del self.attendance[key]


class InMemoryPersons:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, person_id: int) -> Optional[Person]:
        return self._s.persons.get(int(person_id))

    def get_by_email(self, email: str) -> Optional[Person]:
        return next((p for p in self._s.persons.values() if p.email == email), None)

    def list_all(self):
        return sorted(self._s.persons.values(), key=lambda p: (p.first_surname, p.first_name, p.person_id))

    def create_person(self, **fields) -> int:
        if self.get_by_email(fields["email"]):
            raise ConflictError("El registro ya existe")
        person_id = self._s.next_id("persons")
        now = datetime.now()
        self._s.persons[person_id] = Person(person_id=person_id, created_at=now, updated_at=now, **fields)
        return person_id

    def update_person(self, person_id: int, **fields) -> bool:
        current = self._s.persons.get(int(person_id))
        if not current:
            return False
        self._s.persons[current.person_id] = replace(current, updated_at=datetime.now(), **fields)
        return True

    def set_password_hash(self, person_id: int, password_hash: str) -> bool:
        return self.update_person(person_id, password_hash=password_hash)

    def delete_by_id(self, person_id: int) -> bool:
        if self._s.persons.pop(int(person_id), None) is None:
            return False
        for mid in [k for k, m in self._s.memberships.items() if m.person_id == person_id]:
            del self._s.memberships[mid]
        for key in [k for k in self._s.attendance if k[1] == person_id]:
            del self._s.attendance[key]
        return True


class InMemoryGroups:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, group_id: int) -> Optional[Group]:
        return self._s.groups.get(int(group_id))

    def list_all(self):
        return sorted(self._s.groups.values(), key=lambda g: (g.name, g.group_id))

    def create_group(self, *, name: str, description: Optional[str]) -> int:
        group_id = self._s.next_id("groups")
        now = datetime.now()
        self._s.groups[group_id] = Group(group_id=group_id, name=name, description=description, created_at=now, updated_at=now)
        return group_id

    def update_group(self, group_id: int, *, name: str, description: Optional[str]) -> bool:
        current = self._s.groups.get(int(group_id))
        if not current:
            return False
        self._s.groups[current.group_id] = replace(current, name=name, description=description, updated_at=datetime.now())
        return True

    def delete_by_id(self, group_id: int) -> bool:
        if self._s.groups.pop(int(group_id), None) is None:
            return False
        for mid in [k for k, m in self._s.memberships.items() if m.group_id == group_id]:
            del self._s.memberships[mid]
        for meeting_id in [k for k, m in self._s.meetings.items() if m.group_id == group_id]:
            self._s.drop_meeting(meeting_id)
        return True


class InMemoryMemberships:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _with_person(self, m: Membership) -> Membership:
        return replace(m, person=self._s.persons.get(m.person_id))

    def get_by_id(self, membership_id: int) -> Optional[Membership]:
        m = self._s.memberships.get(int(membership_id))
        return self._with_person(m) if m else None

    def list_memberships(self, *, group_id=None, person_id=None):
        items = [
            m
            for m in self._s.memberships.values()
            if (group_id is None or m.group_id == group_id) and (person_id is None or m.person_id == person_id)
        ]
        items.sort(key=lambda m: (m.start_date, m.membership_id))
        return [self._with_person(m) for m in items]

    def create_membership(self, *, person_id: int, group_id: int, start_date: date, end_date: Optional[date]) -> int:
        if person_id not in self._s.persons or group_id not in self._s.groups:
            raise ConflictError("El registro referenciado no existe")
        for m in self._s.memberships.values():
            if (m.group_id, m.person_id, m.start_date) == (group_id, person_id, start_date):
                raise ConflictError("El registro ya existe")
        membership_id = self._s.next_id("memberships")
        self._s.memberships[membership_id] = Membership(
            membership_id=membership_id,
            person_id=person_id,
            group_id=group_id,
            start_date=start_date,
            term=term_from_end_date(end_date),
        )
        return membership_id

    def update_membership(self, membership_id: int, *, start_date: date, end_date: Optional[date]) -> bool:
        current = self._s.memberships.get(int(membership_id))
        if not current:
            return False
        self._s.memberships[current.membership_id] = replace(
            current, start_date=start_date, term=term_from_end_date(end_date)
        )
        return True

    def delete_by_id(self, membership_id: int) -> bool:
        return self._s.memberships.pop(int(membership_id), None) is not None


class InMemoryMeetings:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, meeting_id: int) -> Optional[Meeting]:
        return self._s.meetings.get(int(meeting_id))

    def list_meetings(self, *, group_id=None):
        items = [m for m in self._s.meetings.values() if group_id is None or m.group_id == group_id]
        items.sort(key=lambda m: (m.meeting_date, m.meeting_time, m.meeting_id), reverse=True)
        return items

    def create_meeting(self, *, group_id, meeting_date, meeting_time, location, description) -> int:
        if group_id not in self._s.groups:
            raise ConflictError("El registro referenciado no existe")
        meeting_id = self._s.next_id("meetings")
        self._s.meetings[meeting_id] = Meeting(
            meeting_id=meeting_id,
            group_id=group_id,
            meeting_date=meeting_date,
            meeting_time=meeting_time,
            location=location,
            description=description,
        )
        return meeting_id

    def update_meeting(self, meeting_id, *, meeting_date, meeting_time, location, description) -> bool:
        current = self._s.meetings.get(int(meeting_id))
        if not current:
            return False
        self._s.meetings[current.meeting_id] = replace(
            current,
            meeting_date=meeting_date,
            meeting_time=meeting_time,
            location=location,
            description=description,
        )
        return True

    def delete_by_id(self, meeting_id: int) -> bool:
        if int(meeting_id) not in self._s.meetings:
            return False
        self._s.drop_meeting(int(meeting_id))
        return True


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._s = store
        self.upsert_calls = 0

    def list_for_meeting(self, meeting_id: int):
        rows = []
        for (mid, pid), row in self._s.attendance.items():
            if mid != meeting_id:
                continue
            p = self._s.persons[pid]
            rows.append(
                AttendanceRecord(
                    record_id=row["id"],
                    meeting_id=mid,
                    person_id=pid,
                    status=row["status"],
                    notes=row["notes"],
                    first_name=p.first_name,
                    first_surname=p.first_surname,
                    second_surname=p.second_surname,
                )
            )
        rows.sort(key=lambda r: (r.first_surname, r.first_name, r.person_id))
        return rows

    def upsert_many(self, meeting_id: int, entries) -> None:
        self.upsert_calls += 1
        # Check every row first so a failure leaves nothing written.
        if meeting_id not in self._s.meetings:
            raise ConflictError("El registro referenciado no existe")
        for entry in entries:
            if entry.person_id not in self._s.persons:
                raise ConflictError("El registro referenciado no existe")

        for entry in entries:
            key = (meeting_id, entry.person_id)
            existing = self._s.attendance.get(key)
            record_id = existing["id"] if existing else self._s.next_id("attendance")
            self._s.attendance[key] = {"id": record_id, "status": entry.status, "notes": entry.notes}

    def summary_for(self, *, person_id: int, group_id: int) -> AttendanceSummary:
        meeting_ids = [m.meeting_id for m in self._s.meetings.values() if m.group_id == group_id]
        statuses = [
            self._s.attendance[(mid, person_id)]["status"]
            for mid in meeting_ids
            if (mid, person_id) in self._s.attendance
        ]
        return AttendanceSummary(
            total_meetings=len(meeting_ids),
            attended=statuses.count(AttendanceStatus.ATTENDED),
            excused=statuses.count(AttendanceStatus.EXCUSED),
        )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def tokens() -> TokenCodec:
    return TokenCodec(TEST_JWT_SECRET, ttl_hours=24)


@pytest.fixture
def container(store, tokens):
    return assemble(
        persons_repo=InMemoryPersons(store),
        groups_repo=InMemoryGroups(store),
        memberships_repo=InMemoryMemberships(store),
        meetings_repo=InMemoryMeetings(store),
        attendance_repo=InMemoryAttendance(store),
        tokens=tokens,
    )


@pytest.fixture
def admin(container) -> Person:
    person_id = container.persons_repo.create_person(
        first_name="Admin",
        first_surname="User",
        second_surname=None,
        national_id=None,
        email="admin@example.com",
        phone=None,
        job_title="Administrador",
        notes=None,
        password_hash=generate_password_hash(ADMIN_PASSWORD),
        is_admin=True,
        is_active=True,
    )
    return container.persons_repo.get_by_id(person_id)


@pytest.fixture
def app(container, monkeypatch):
    from src.group_attendance.group_attendance.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(tokens, admin) -> dict:
    return {"Authorization": f"Bearer {tokens.issue(admin.person_id)}"}
