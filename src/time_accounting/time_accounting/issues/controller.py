from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_positive_id
from ..common.web import current_role, current_user_id, json_body, login_required
from ..core.enums import SUPERVISOR_ROLES
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .model import IssueClear, PendingIssue


def _issue_to_dict(issue: PendingIssue) -> dict:
    return {
        "user_id": issue.user_id,
        "user_name": issue.user_name,
        "work_date": issue.work_date.isoformat(),
        "kind": issue.kind.value,
        "difference_minutes": issue.difference_minutes,
    }


def _clear_to_dict(clear: IssueClear) -> dict:
    return {
        "clear_id": clear.clear_id,
        "user_id": clear.user_id,
        "work_date": clear.work_date.isoformat(),
        "cleared_by": clear.cleared_by,
        "cleared_at": clear.cleared_at.isoformat(),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/issues", methods=["GET"], endpoint="api_pending_issues")
    @login_required
    def api_pending_issues():
        if current_role() not in SUPERVISOR_ROLES:
            raise AuthorizationError("Only supervisors can review discrepancies")

        lookback = request.args.get("lookback_days")
        if lookback is not None:
            try:
                lookback = int(lookback)
            except ValueError:
                raise ValidationError("lookback_days must be a number") from None

        issues = container.issue_service.list_pending_issues(lookback_days=lookback)
        return jsonify({"success": True, "data": [_issue_to_dict(i) for i in issues]}), 200

    @app.route("/api/issues/clear", methods=["POST"], endpoint="api_clear_issue")
    @login_required
    def api_clear_issue():
        data = json_body()
        user_id = require_positive_id(data.get("user_id"), "User")
        try:
            work_date = parse_iso_date(str(data.get("work_date") or ""))
        except ValueError:
            raise ValidationError("work_date must be YYYY-MM-DD") from None

        clear = container.issue_service.clear_issue(user_id, work_date, current_user_id())
        return jsonify({"success": True, "data": _clear_to_dict(clear)}), 200

    @app.route("/api/issues/clears", methods=["GET"], endpoint="api_issue_clears")
    @login_required
    def api_issue_clears():
        clears = container.issue_service.list_clears(current_user_id())
        return jsonify({"success": True, "data": [_clear_to_dict(c) for c in clears]}), 200
