from __future__ import annotations

from flask import Flask, jsonify

from ..common.validators import require_positive_id
from ..common.web import current_role, json_body, login_required
from ..core.exceptions import ValidationError
from ..container import Container
from .model import BreakRule


def rule_to_dict(rule: BreakRule) -> dict:
    return {
        "break_rule_id": rule.break_rule_id,
        "name": rule.name,
        "start_time": rule.start_time,
        "end_time": rule.end_time,
        "duration_minutes": rule.duration_minutes,
        "is_active": rule.is_active,
    }


def _optional_bool(data: dict, key: str):
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return value
    raise ValidationError(f"{key} must be true or false")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/break-rules", methods=["GET"], endpoint="api_list_break_rules")
    @login_required
    def api_list_break_rules():
        rules = container.break_rule_service.list_rules()
        return jsonify({"success": True, "data": [rule_to_dict(r) for r in rules]}), 200

    @app.route("/api/break-rules", methods=["POST"], endpoint="api_create_break_rule")
    @login_required
    def api_create_break_rule():
        data = json_body()
        is_active = _optional_bool(data, "is_active")
        rule_id = container.break_rule_service.create_rule(
            current_role=current_role(),
            name=str(data.get("name") or ""),
            start_time=str(data.get("start_time") or ""),
            end_time=str(data.get("end_time") or ""),
            is_active=True if is_active is None else is_active,
        )
        return jsonify({"success": True, "data": {"break_rule_id": rule_id}}), 201

    @app.route("/api/break-rules/<break_rule_id>", methods=["PUT"], endpoint="api_update_break_rule")
    @login_required
    def api_update_break_rule(break_rule_id: str):
        data = json_body()
        rule = container.break_rule_service.update_rule(
            current_role=current_role(),
            break_rule_id=require_positive_id(break_rule_id, "Break rule"),
            name=None if data.get("name") is None else str(data["name"]),
            start_time=None if data.get("start_time") is None else str(data["start_time"]),
            end_time=None if data.get("end_time") is None else str(data["end_time"]),
            is_active=_optional_bool(data, "is_active"),
        )
        return jsonify({"success": True, "data": rule_to_dict(rule)}), 200
