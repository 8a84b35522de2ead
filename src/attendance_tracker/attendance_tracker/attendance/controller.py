from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.exceptions import SessionConflictError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def login_required(view):
        """Authentication is external; it leaves the user id in the Flask session."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Please sign in to continue"}), 401
            return view(*args, **kwargs)

        return wrapper

    def _payload() -> dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def _transition(action, message: str):
        user_id = str(session["user_id"])
        try:
            ctx = service.load_session(user_id)
            record = action(ctx)
        except SessionConflictError as e:
            return jsonify({"success": False, "message": str(e)}), 409
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError as e:
            logger.error("user=%s storage failure: %s", user_id, e)
            return jsonify({"success": False, "message": "Attendance storage is unavailable"}), 503

        return jsonify({
            "success": True,
            "message": message,
            "state": ctx.state.value,
            "record": service.to_ui(record),
        }), 200

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        try:
            ctx = service.load_session(str(session["user_id"]))
        except StorageError as e:
            logger.error("user=%s storage failure: %s", session["user_id"], e)
            return jsonify({"success": False, "message": "Attendance storage is unavailable"}), 503
        return jsonify({"success": True, **service.get_today_ui(ctx)}), 200

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @login_required
    def attendance_clock_in():
        data = _payload()
        return _transition(
            lambda ctx: service.clock_in(
                ctx,
                work_modality=data.get("work_modality"),
                location_in=data.get("location_in"),
                branch_location=data.get("branch_location"),
                facial_status=data.get("facial_status"),
            ),
            "Clocked in",
        )

    @app.route("/api/attendance/lunch/start", methods=["POST"], endpoint="attendance_lunch_start")
    @login_required
    def attendance_lunch_start():
        return _transition(lambda ctx: service.start_lunch(ctx), "Lunch break started")

    @app.route("/api/attendance/lunch/end", methods=["POST"], endpoint="attendance_lunch_end")
    @login_required
    def attendance_lunch_end():
        return _transition(lambda ctx: service.end_lunch(ctx), "Lunch break ended")

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @login_required
    def attendance_clock_out():
        data = _payload()
        return _transition(
            lambda ctx: service.clock_out(ctx, location_out=data.get("location_out")),
            "Clocked out",
        )
