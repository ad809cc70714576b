from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.http import json_errors
from ..container import Container


def register(app: Flask, container: Container) -> None:
    monitor = container.heartbeat_monitor
    instance = container.instance

    @app.route("/api/heartbeat-status/", methods=["GET"], endpoint="heartbeat_status")
    @json_errors
    def heartbeat_status():
        now = now_local()
        status = monitor.status(now=now)
        recent = status.pop("recentHistory")
        return jsonify(
            {
                "message": "Local heartbeat status retrieved successfully",
                "instance": {
                    "id": instance.instance_id,
                    "name": instance.name,
                    "port": instance.port,
                    "environment": instance.environment.value,
                    "mainServerUrl": instance.main_server_url,
                },
                "heartbeat": status,
                "recentHistory": recent,
                "timestamp": now.isoformat(),
            }
        ), 200

    @app.route("/api/heartbeat-status/history", methods=["GET"], endpoint="heartbeat_history")
    @json_errors
    def heartbeat_history():
        try:
            limit = int(request.args.get("limit", 20))
        except ValueError:
            limit = 20
        return jsonify(
            {
                "message": "Heartbeat history retrieved successfully",
                "history": [a.to_dict() for a in monitor.history(limit)],
                "totalEntries": len(monitor),
                "requestedLimit": limit,
            }
        ), 200

    @app.route("/api/heartbeat-status/reset", methods=["POST"], endpoint="heartbeat_reset")
    @json_errors
    def heartbeat_reset():
        monitor.reset()
        return jsonify(
            {"message": "Heartbeat statistics reset successfully", "timestamp": now_local().isoformat()}
        ), 200

    @app.route("/api/heartbeat-status/manual", methods=["POST"], endpoint="heartbeat_manual")
    @json_errors
    def heartbeat_manual():
        attempt = container.heartbeat_client.send()
        return jsonify(
            {
                "message": "Manual heartbeat triggered successfully",
                "attempt": attempt.to_dict(),
                "timestamp": now_local().isoformat(),
            }
        ), 200
