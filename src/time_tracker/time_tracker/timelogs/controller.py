from __future__ import annotations

import logging
from datetime import datetime
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..common.datetime_utils import parse_iso_date
from ..core.enums import HoursPolicy, Role
from ..core.exceptions import DomainError, ValidationError
from ..stats.model import StatsRecord, WindowTotals
from ..container import Container
from .model import TimeSession

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation": 400,
    "authorization": 403,
    "not_found": 404,
    "conflict": 409,
}


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def session_to_json(s: TimeSession, policy: HoursPolicy) -> dict:
    data = {
        "id": s.session_id,
        "employeeId": s.employee_id,
        "loginTime": _iso(s.login_time),
        "logoutTime": _iso(s.logout_time),
        "status": s.status.value.lower(),
        "breaks": [
            {
                "startTime": _iso(b.start_time),
                "endTime": _iso(b.end_time),
                "status": b.status.value.lower(),
                "duration": b.duration,
            }
            for b in s.breaks
        ],
        "totalBreakHours": s.total_break_hours,
        "totalHours": s.total_hours,
        "notes": s.notes,
    }
    # Only the deployment policy's derived field goes on the wire.
    if policy == HoursPolicy.FIXED_LUNCH_DEDUCTION:
        data["adjustedHours"] = s.adjusted_hours
        data["lunchBreakDeducted"] = s.lunch_break_deducted
    else:
        data["netWorkHours"] = s.net_work_hours
    return data


def stats_to_json(stats: StatsRecord) -> dict:
    def window(w: WindowTotals) -> dict:
        return {"hours": w.hours, "breaks": w.breaks, "net": w.net}

    return {
        "policy": stats.policy.value,
        "today": window(stats.today),
        "week": window(stats.week),
        "month": window(stats.month),
        "allTime": window(stats.all_time),
        "totalDaysWorked": stats.total_days_worked,
        "avgDailyHours": stats.avg_daily_hours,
        "avgBreakTime": stats.avg_break_time,
        "breakDistribution": {
            "morning": stats.break_distribution.morning,
            "afternoon": stats.break_distribution.afternoon,
            "evening": stats.break_distribution.evening,
        },
    }


def register(app: Flask, container: Container) -> None:
    service = container.timelog_service

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "employee_id" not in session:
                return jsonify({"message": "Not authorized, no identity"}), 401
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "employee_id" not in session:
                return jsonify({"message": "Not authorized, no identity"}), 401
            if session.get("role") not in {Role.ADMIN.value, Role.SUPERADMIN.value}:
                return jsonify({"message": "Not authorized as an admin"}), 403
            return view(*args, **kwargs)

        return wrapper

    def _me() -> str:
        return str(session["employee_id"])

    def _date_range():
        start_s = request.args.get("startDate")
        end_s = request.args.get("endDate")
        try:
            start = parse_iso_date(start_s) if start_s else None
            end = parse_iso_date(end_s) if end_s else None
        except ValueError:
            raise ValidationError("Dates must use the YYYY-MM-DD format")
        return start, end

    def _json(s: TimeSession) -> dict:
        return session_to_json(s, service.policy)

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"kind": e.kind, "message": str(e)}), STATUS_BY_KIND.get(e.kind, 400)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error", extra={"path": request.path, "method": request.method})
        return jsonify({"kind": "internal", "message": "Internal server error"}), 500

    @app.route("/api/timelogs/login", methods=["POST"], endpoint="timelog_login")
    @login_required
    def clock_in():
        return jsonify(_json(service.clock_in(_me()))), 201

    @app.route("/api/timelogs/logout", methods=["PUT"], endpoint="timelog_logout")
    @login_required
    def clock_out():
        return jsonify(_json(service.clock_out(_me())))

    @app.route("/api/timelogs/break/start", methods=["POST"], endpoint="timelog_break_start")
    @login_required
    def start_break():
        return jsonify(_json(service.start_break(_me())))

    @app.route("/api/timelogs/break/end", methods=["PUT"], endpoint="timelog_break_end")
    @login_required
    def end_break():
        return jsonify(_json(service.end_break(_me())))

    @app.route("/api/timelogs/me", methods=["GET"], endpoint="timelog_me")
    @login_required
    def my_sessions():
        start, end = _date_range()
        return jsonify([_json(s) for s in service.list_sessions(_me(), start=start, end=end)])

    @app.route("/api/timelogs/me/active", methods=["GET"], endpoint="timelog_me_active")
    @login_required
    def my_active_session():
        s = service.get_active_session(_me())
        return jsonify(_json(s) if s else None)

    @app.route("/api/timelogs/me/stats", methods=["GET"], endpoint="timelog_me_stats")
    @login_required
    def my_stats():
        return jsonify(stats_to_json(service.get_stats(_me())))

    @app.route("/api/timelogs/<int:session_id>/notes", methods=["PUT"], endpoint="timelog_notes")
    @login_required
    def set_notes(session_id: int):
        payload = request.get_json(silent=True)
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        s = service.set_note(
            session_id,
            payload.get("notes"),
            caller_employee_id=_me(),
            caller_role=session.get("role", Role.EMPLOYEE.value),
        )
        return jsonify(_json(s))

    @app.route("/api/timelogs", methods=["GET"], endpoint="timelog_all")
    @admin_required
    def all_sessions():
        start, end = _date_range()
        rows = service.list_all_sessions(current_role=session["role"], start=start, end=end)
        return jsonify([_json(s) for s in rows])

    @app.route("/api/timelogs/employee/<employee_id>", methods=["GET"], endpoint="timelog_employee")
    @admin_required
    def employee_sessions(employee_id: str):
        start, end = _date_range()
        rows = service.list_employee_sessions(
            current_role=session["role"], employee_id=employee_id, start=start, end=end
        )
        return jsonify([_json(s) for s in rows])
