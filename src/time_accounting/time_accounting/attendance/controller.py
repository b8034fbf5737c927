from __future__ import annotations

from flask import Flask, jsonify

from ..common.validators import require_positive_id
from ..common.web import current_role, current_user_id, json_body, login_required
from ..core.exceptions import ValidationError
from ..container import Container
from .model import AttendanceRecord


def record_to_dict(record: AttendanceRecord) -> dict:
    return {
        "attendance_id": record.attendance_id,
        "user_id": record.user_id,
        "work_date": record.work_date.isoformat(),
        "clock_in_time": record.clock_in_time,
        "clock_out_time": record.clock_out_time,
        "work_minutes": record.work_minutes,
        "state": record.state.value,
        "clock_in_device": record.clock_in_device,
        "clock_out_device": record.clock_out_device,
    }


def _optional_time(data: dict, key: str):
    if key not in data:
        return None
    value = data[key]
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be HH:MM")
    return value


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="api_clock_in")
    @login_required
    def api_clock_in():
        record = container.attendance_service.clock_in(current_user_id())
        return jsonify({"success": True, "message": "Clocked in", "data": record_to_dict(record)}), 200

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="api_clock_out")
    @login_required
    def api_clock_out():
        record = container.attendance_service.clock_out(current_user_id())
        return jsonify({"success": True, "message": "Clocked out", "data": record_to_dict(record)}), 200

    @app.route("/api/attendance/<attendance_id>", methods=["PUT"], endpoint="api_update_attendance")
    @login_required
    def api_update_attendance(attendance_id: str):
        data = json_body()
        record = container.attendance_service.update_record(
            current_role=current_role(),
            attendance_id=require_positive_id(attendance_id, "Attendance"),
            clock_in_time=_optional_time(data, "clock_in_time"),
            clock_out_time=_optional_time(data, "clock_out_time"),
        )
        return jsonify({"success": True, "data": record_to_dict(record)}), 200

    @app.route("/api/attendance/recalculate", methods=["POST"], endpoint="api_recalculate_attendance")
    @login_required
    def api_recalculate_attendance():
        result = container.attendance_service.recalculate_all_work_minutes(current_role=current_role())
        return (
            jsonify(
                {
                    "success": True,
                    "data": {"total": result.total, "updated": result.updated, "errors": result.errors},
                }
            ),
            200,
        )
