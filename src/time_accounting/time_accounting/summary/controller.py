from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_positive_id
from ..common.web import current_role, current_user_id, login_required
from ..core.enums import SUPERVISOR_ROLES
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .model import DailySummary


def summary_to_dict(summary: DailySummary) -> dict:
    return {
        "user_id": summary.user_id,
        "work_date": summary.work_date.isoformat(),
        "attendance_minutes": summary.attendance_minutes,
        "work_minutes": summary.work_minutes,
        "difference_minutes": summary.difference_minutes,
        "has_attendance": summary.has_attendance,
        "attendance_open": summary.attendance_open,
        "open_segments": summary.open_segments,
        "segments": [
            {
                "segment_id": s.segment_id,
                "start_time": s.start_time.isoformat(),
                "end_time": s.end_time.isoformat() if s.end_time else None,
                "base_minutes": s.base_minutes,
                "net_minutes": s.net_minutes,
                "breaks": [{"rule": b.rule_name, "minutes": b.overlap_minutes} for b in s.break_breakdown],
            }
            for s in summary.segments
        ],
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/summary/<user_id>/<work_date>", methods=["GET"], endpoint="api_daily_summary")
    @login_required
    def api_daily_summary(user_id: str, work_date: str):
        uid = require_positive_id(user_id, "User")
        try:
            day = parse_iso_date(work_date)
        except ValueError:
            raise ValidationError("Date must be YYYY-MM-DD") from None

        # Workers may only look at their own days
        if uid != current_user_id() and current_role() not in SUPERVISOR_ROLES:
            raise AuthorizationError("Not allowed to view other users' summaries")

        summary = container.summary_service.compute_daily_summary(uid, day)
        data = summary_to_dict(summary)
        data["discrepancy"] = container.classifier.classify(summary).value
        return jsonify({"success": True, "data": data}), 200
