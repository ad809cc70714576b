from __future__ import annotations

from flask import Flask, jsonify, request

from ..admins.tokens import make_token_required
from ..common.datetime_utils import parse_iso_date
from ..common.http import json_errors
from ..container import Container
from ..core.enums import SessionState
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.tokens)
    attendance = container.attendance_service
    utilization = container.utilization_service

    def _check_in():
        interval = attendance.check_in(request.get_json(silent=True) or {})
        return jsonify(interval.to_dict()), 201

    def _check_out():
        attendance.check_out(request.get_json(silent=True) or {})
        return jsonify({"message": "Checked out successfully."}), 200

    def _date_arg():
        value = request.args.get("date")
        return parse_iso_date(value) if value else None

    def _int_arg(name: str):
        value = request.args.get(name)
        if value in (None, ""):
            return None
        try:
            return int(value)
        except ValueError:
            raise ValidationError(f"{name} must be an integer")

    # Kiosk verification flow: no token.
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="public_check_in")
    @json_errors
    def public_check_in():
        return _check_in()

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="public_check_out")
    @json_errors
    def public_check_out():
        return _check_out()

    @app.route("/api/attendance/check-in-user", methods=["POST"], endpoint="check_in_user")
    @token_required
    @json_errors
    def check_in_user():
        return _check_in()

    @app.route("/api/attendance/check-out-user", methods=["POST"], endpoint="check_out_user")
    @token_required
    @json_errors
    def check_out_user():
        return _check_out()

    @app.route("/api/attendance/list-active-users", methods=["GET"], endpoint="list_active_users")
    @token_required
    @json_errors
    def list_active_users():
        rows = attendance.list_sessions(SessionState.OPEN)
        return jsonify([r.to_dict() for r in rows]), 200

    @app.route("/api/attendance/list-inactive-users", methods=["GET"], endpoint="list_inactive_users")
    @token_required
    @json_errors
    def list_inactive_users():
        rows = attendance.list_sessions(SessionState.CLOSED)
        return jsonify([r.to_dict() for r in rows]), 200

    @app.route("/api/attendance/list-all-users", methods=["GET"], endpoint="list_all_users")
    @token_required
    @json_errors
    def list_all_users():
        rows = attendance.list_sessions(SessionState.ALL)
        return jsonify([r.to_dict() for r in rows]), 200

    @app.route("/api/attendance/top-users", methods=["GET"], endpoint="top_users")
    @token_required
    @json_errors
    def top_users():
        return jsonify([u.to_dict() for u in attendance.top_users()]), 200

    @app.route("/api/attendance/lab-utilization", methods=["GET"], endpoint="lab_utilization")
    @token_required
    @json_errors
    def lab_utilization():
        return jsonify(utilization.daily(_date_arg()).to_dict()), 200

    @app.route("/api/attendance/hourly-utilization", methods=["GET"], endpoint="hourly_utilization")
    @token_required
    @json_errors
    def hourly_utilization():
        return jsonify([h.to_dict() for h in utilization.hourly(_date_arg())]), 200

    @app.route("/api/attendance/monthly-utilization", methods=["GET"], endpoint="monthly_utilization")
    @token_required
    @json_errors
    def monthly_utilization():
        report = utilization.monthly(_int_arg("month"), _int_arg("year"))
        return jsonify(report.to_dict()), 200

    @app.route("/api/attendance/force-auto-checkout", methods=["POST"], endpoint="force_auto_checkout")
    @token_required
    @json_errors
    def force_auto_checkout():
        closed = attendance.force_checkout()
        return jsonify({"message": "Force auto-checkout executed.", "closed": closed}), 200
