from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_object, make_token_required, query_date, query_flag, query_id
from ..common.validators import parse_flag
from ..container import Container


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.auth_service.resolve_token)

    @app.route("/memberships", methods=["GET"], endpoint="list_memberships")
    @token_required
    def list_memberships():
        # `on` moves the reference date for the active filter and the `activo` field.
        on = query_date("on", "fecha")
        items = container.membership_service.list_memberships(
            group_id=query_id("groupId", "grupoId"),
            person_id=query_id("personId", "personaId"),
            active=query_flag("active", "activo"),
            on=on,
        )
        return jsonify([m.to_dict(on=on) for m in items])

    @app.route("/memberships", methods=["POST"], endpoint="create_membership")
    @token_required
    def create_membership():
        membership = container.membership_service.create_membership(json_object())
        return jsonify(membership.to_dict()), 201

    @app.route("/memberships/<int:membership_id>", methods=["GET"], endpoint="get_membership")
    @token_required
    def get_membership(membership_id: int):
        return jsonify(container.membership_service.get_membership(membership_id).to_dict())

    @app.route("/memberships/<int:membership_id>", methods=["PUT"], endpoint="update_membership")
    @token_required
    def update_membership(membership_id: int):
        membership = container.membership_service.update_membership(membership_id, json_object())
        return jsonify(membership.to_dict())

    @app.route("/memberships/<int:membership_id>", methods=["DELETE"], endpoint="delete_membership")
    @token_required
    def delete_membership(membership_id: int):
        if parse_flag(request.args.get("hard", "false"), "hard"):
            container.membership_service.delete_membership(membership_id)
            return "", 204

        membership = container.membership_service.end_membership(membership_id)
        if membership is None:
            return "", 204
        return jsonify(membership.to_dict())
