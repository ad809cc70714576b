from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_errors
from ..common.validators import require_object
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="admin_login")
    @json_errors
    def admin_login():
        data = require_object(request.get_json(silent=True))
        result = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        return jsonify(
            {
                "token": result.token,
                "admin": {"id": result.admin_id, "email": result.email, "name": result.name},
            }
        ), 200
