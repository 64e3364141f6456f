from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_object, make_token_required, query_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.auth_service.resolve_token)

    @app.route("/meetings", methods=["GET"], endpoint="list_meetings")
    @token_required
    def list_meetings():
        meetings = container.meeting_service.list_meetings(group_id=query_id("groupId", "grupoId"))
        return jsonify([m.to_dict() for m in meetings])

    @app.route("/meetings", methods=["POST"], endpoint="create_meeting")
    @token_required
    def create_meeting():
        meeting = container.meeting_service.create_meeting(json_object())
        return jsonify(meeting.to_dict()), 201

    @app.route("/meetings/<int:meeting_id>", methods=["GET"], endpoint="get_meeting")
    @token_required
    def get_meeting(meeting_id: int):
        data = container.meeting_service.get_meeting(meeting_id).to_dict()
        data["asistencias"] = [r.to_dict() for r in container.attendance_service.list_attendance(meeting_id)]
        return jsonify(data)

    @app.route("/meetings/<int:meeting_id>", methods=["PUT"], endpoint="update_meeting")
    @token_required
    def update_meeting(meeting_id: int):
        return jsonify(container.meeting_service.update_meeting(meeting_id, json_object()).to_dict())

    @app.route("/meetings/<int:meeting_id>", methods=["DELETE"], endpoint="delete_meeting")
    @token_required
    def delete_meeting(meeting_id: int):
        container.meeting_service.delete_meeting(meeting_id)
        return "", 204
