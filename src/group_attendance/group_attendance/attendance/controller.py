from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, make_token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.auth_service.resolve_token)

    @app.route("/meetings/<int:meeting_id>/attendance", methods=["GET"], endpoint="list_attendance")
    @token_required
    def list_attendance(meeting_id: int):
        rows = container.attendance_service.list_attendance(meeting_id)
        return jsonify([r.to_dict() for r in rows])

    @app.route("/meetings/<int:meeting_id>/attendance", methods=["POST"], endpoint="save_attendance")
    @token_required
    def save_attendance(meeting_id: int):
        body = json_body()
        # Accept a bare list or {"asistencias": [...]}.
        entries = body.get("asistencias") if isinstance(body, dict) else body
        rows = container.attendance_service.save_attendance(meeting_id, entries)
        return jsonify([r.to_dict() for r in rows])

    @app.route("/meetings/<int:meeting_id>/roster", methods=["GET"], endpoint="meeting_roster")
    @token_required
    def meeting_roster(meeting_id: int):
        meeting = container.meeting_service.get_meeting(meeting_id)
        members = container.attendance_service.meeting_roster(meeting_id)
        return jsonify([m.to_dict(on=meeting.meeting_date) for m in members])

    @app.route("/persons/<int:person_id>/groups/<int:group_id>/stats", methods=["GET"], endpoint="attendance_stats")
    @token_required
    def attendance_stats(person_id: int, group_id: int):
        summary = container.attendance_service.summary(person_id=person_id, group_id=group_id)
        return jsonify(summary.to_dict())
