from __future__ import annotations

from datetime import date, time

import pytest

from src.group_attendance.group_attendance.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def group(container):
    return container.group_service.create_group({"nombre": "Finance", "descripcion": "Equipo financiero"})


def test_create_meeting_parses_date_and_time(container, group):
    meeting = container.meeting_service.create_meeting(
        {"grupo_id": group.group_id, "fecha": "2024-03-05", "hora": "09:30:00", "ubicacion": "Sala 1"}
    )

    assert meeting.meeting_date == date(2024, 3, 5)
    assert meeting.meeting_time == time(9, 30)
    assert meeting.to_dict()["hora"] == "09:30"


def test_create_meeting_lists_missing_fields(container, group):
    with pytest.raises(ValidationError, match="hora, ubicacion"):
        container.meeting_service.create_meeting({"grupo_id": group.group_id, "fecha": "2024-03-05"})


def test_create_meeting_rejects_bad_values(container, group):
    base = {"grupo_id": group.group_id, "fecha": "2024-03-05", "hora": "10:00", "ubicacion": "Sala 1"}

    with pytest.raises(ValidationError):
        container.meeting_service.create_meeting({**base, "fecha": "05/03/2024"})
    with pytest.raises(ValidationError):
        container.meeting_service.create_meeting({**base, "hora": "25:00"})
    with pytest.raises(ValidationError):
        container.meeting_service.create_meeting({**base, "grupo_id": 999})


def test_list_is_newest_first_and_filterable(container, group):
    other = container.group_service.create_group({"nombre": "Ventas"})
    svc = container.meeting_service
    first = svc.create_meeting({"grupo_id": group.group_id, "fecha": "2024-03-05", "hora": "10:00", "ubicacion": "A"})
    later = svc.create_meeting({"grupo_id": group.group_id, "fecha": "2024-03-05", "hora": "16:00", "ubicacion": "A"})
    svc.create_meeting({"grupo_id": other.group_id, "fecha": "2024-04-01", "hora": "10:00", "ubicacion": "B"})

    listed = svc.list_meetings(group_id=group.group_id)

    assert [m.meeting_id for m in listed] == [later.meeting_id, first.meeting_id]
    assert len(svc.list_meetings()) == 3


def test_update_is_partial_and_keeps_group(container, group):
    other = container.group_service.create_group({"nombre": "Ventas"})
    svc = container.meeting_service
    meeting = svc.create_meeting(
        {"grupo_id": group.group_id, "fecha": "2024-03-05", "hora": "10:00", "ubicacion": "Sala 1"}
    )

    updated = svc.update_meeting(meeting.meeting_id, {"ubicacion": "Sala 2", "grupo_id": other.group_id})

    assert updated.location == "Sala 2"
    assert updated.meeting_date == date(2024, 3, 5)
    assert updated.group_id == group.group_id


def test_deleting_meeting_drops_its_attendance(container, group):
    ana = container.person_service.create_person(
        {"nombre": "Ana", "primer_apellido": "Diaz", "email": "ana@example.com"}
    )
    meeting = container.meeting_service.create_meeting(
        {"grupo_id": group.group_id, "fecha": "2024-03-05", "hora": "10:00", "ubicacion": "Sala 1"}
    )
    container.attendance_service.save_attendance(meeting.meeting_id, [{"persona_id": ana.person_id, "estado": "asistio"}])

    container.meeting_service.delete_meeting(meeting.meeting_id)

    with pytest.raises(NotFoundError):
        container.meeting_service.get_meeting(meeting.meeting_id)
    assert container.attendance_service.summary(person_id=ana.person_id, group_id=group.group_id).total_meetings == 0
