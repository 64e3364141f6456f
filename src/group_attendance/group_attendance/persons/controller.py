from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.http import json_object, make_token_required
from ..common.logging_utils import get_logger
from ..container import Container

logger = get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.auth_service.resolve_token)

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_object()
        result = container.auth_service.login(body.get("email"), body.get("password"))
        logger.info("Login ok person=%s", result.person.person_id)
        return jsonify(result.to_dict())

    @app.route("/auth/register", methods=["POST"], endpoint="register")
    def register_person():
        result = container.auth_service.register(json_object())
        return jsonify(result.to_dict()), 201

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @token_required
    def me():
        return jsonify(container.auth_service.current_person(g.person_id).to_dict())

    @app.route("/admin/users", methods=["POST"], endpoint="create_admin")
    @token_required
    def create_admin():
        person = container.person_service.create_admin(caller_id=g.person_id, payload=json_object())
        return jsonify(person.to_dict()), 201

    @app.route("/persons", methods=["GET"], endpoint="list_persons")
    @token_required
    def list_persons():
        return jsonify([p.to_dict() for p in container.person_service.list_persons()])

    @app.route("/persons", methods=["POST"], endpoint="create_person")
    @token_required
    def create_person():
        person = container.person_service.create_person(json_object())
        return jsonify(person.to_dict()), 201

    @app.route("/persons/<int:person_id>", methods=["GET"], endpoint="get_person")
    @token_required
    def get_person(person_id: int):
        return jsonify(container.person_service.get_person(person_id).to_dict())

    @app.route("/persons/<int:person_id>", methods=["PUT"], endpoint="update_person")
    @token_required
    def update_person(person_id: int):
        person = container.person_service.update_person(person_id, json_object())
        return jsonify(person.to_dict())

    @app.route("/persons/<int:person_id>", methods=["DELETE"], endpoint="delete_person")
    @token_required
    def delete_person(person_id: int):
        container.person_service.delete_person(person_id)
        return "", 204
