from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_date
from ..container import Container
from ..core.enums import Badge
from ..core.exceptions import ValidationError
from ..web.serializers import member_to_json, require_json_object
from .model import NewMember


def _new_member(data: dict) -> NewMember:
    override = data.get("badge_override")
    try:
        badge_override = Badge(override) if override else None
    except ValueError:
        raise ValidationError(f"Unknown badge: {override!r}")

    return NewMember(
        full_name=str(data.get("full_name") or ""),
        gender=str(data.get("gender") or ""),
        phone=data.get("phone"),
        age=str(data["age"]) if data.get("age") is not None else None,
        level=data.get("level"),
        parent_name=data.get("parent_name"),
        parent_phone=data.get("parent_phone"),
        ministries=tuple(data.get("ministries") or ()),
        is_visitor=bool(data.get("is_visitor", False)),
        join_date=require_date(data["join_date"]) if data.get("join_date") else None,
        badge_override=badge_override,
    )


def register(app: Flask, container: Container) -> None:
    manager = container.month_manager
    members = container.member_service

    @app.route("/api/months/<table_name>/members", methods=["GET"], endpoint="members_list")
    def members_list(table_name: str):
        month = manager.require_month(table_name)
        found = members.search(month, request.args.get("q", ""))
        return jsonify({"month": month.table_name, "members": [member_to_json(m) for m in found]})

    @app.route("/api/months/<table_name>/members", methods=["POST"], endpoint="members_add")
    def members_add(table_name: str):
        month = manager.require_month(table_name)
        data = require_json_object(request.get_json(silent=True))
        created = members.add_member(month, _new_member(data))
        return jsonify(member_to_json(created)), 201

    @app.route("/api/months/<table_name>/members/<int:member_id>", methods=["PATCH"], endpoint="members_update")
    def members_update(table_name: str, member_id: int):
        month = manager.require_month(table_name)
        data = dict(require_json_object(request.get_json(silent=True)))
        if data.get("join_date"):
            data["join_date"] = require_date(data["join_date"])
        updated = members.update_member(month, member_id, data)
        return jsonify(member_to_json(updated))

    @app.route("/api/months/<table_name>/members/<int:member_id>", methods=["DELETE"], endpoint="members_delete")
    def members_delete(table_name: str, member_id: int):
        month = manager.require_month(table_name)
        members.delete_member(month, member_id)
        return "", 204
