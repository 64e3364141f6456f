from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_object, make_token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.auth_service.resolve_token)

    @app.route("/groups", methods=["GET"], endpoint="list_groups")
    @token_required
    def list_groups():
        return jsonify([grp.to_dict() for grp in container.group_service.list_groups()])

    @app.route("/groups", methods=["POST"], endpoint="create_group")
    @token_required
    def create_group():
        group = container.group_service.create_group(json_object())
        return jsonify(group.to_dict()), 201

    @app.route("/groups/<int:group_id>", methods=["GET"], endpoint="get_group")
    @token_required
    def get_group(group_id: int):
        return jsonify(container.group_service.get_group(group_id).to_dict())

    @app.route("/groups/<int:group_id>", methods=["PUT"], endpoint="update_group")
    @token_required
    def update_group(group_id: int):
        return jsonify(container.group_service.update_group(group_id, json_object()).to_dict())

    @app.route("/groups/<int:group_id>", methods=["DELETE"], endpoint="delete_group")
    @token_required
    def delete_group(group_id: int):
        container.group_service.delete_group(group_id)
        return "", 204
