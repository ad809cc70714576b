from __future__ import annotations

import logging

from flask import Flask, g, jsonify, request

from ..admins.tokens import make_token_required
from ..container import Container
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.tokens)

    @app.route("/api/config/get-config", methods=["GET"], endpoint="get_config")
    @token_required
    def get_config():
        return jsonify({"success": True, "data": container.config_service.current().to_document()}), 200

    @app.route("/api/config/update-config", methods=["PUT"], endpoint="update_config")
    @token_required
    def update_config():
        data = request.get_json(silent=True) or {}
        claims = getattr(g, "token_claims", {}) or {}
        try:
            updated = container.config_service.update(data, updated_by=claims.get("sub"))
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e), "errors": e.errors}), 400
        except Exception:
            logger.exception("Error updating lab configuration")
            return jsonify({"success": False, "message": "Error updating the configuration"}), 500

        logger.info(
            "Lab configuration updated by %s: %s-%s capacity=%s",
            updated.updated_by, updated.inicial_hour, updated.final_hour, updated.max_capacity,
        )
        return jsonify(
            {"success": True, "message": "Configuration updated successfully", "data": updated.to_document()}
        ), 200
