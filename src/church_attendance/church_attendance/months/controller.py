from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..dates.mapping import sundays_in_month
from ..web.serializers import require_json_object


def register(app: Flask, container: Container) -> None:
    manager = container.month_manager

    @app.route("/api/months", methods=["GET"], endpoint="months_list")
    def months_list():
        months = manager.list_months()
        return jsonify(
            {
                "months": [m.table_name for m in months],
                "latest": months[-1].table_name if months else None,
            }
        )

    @app.route("/api/months", methods=["POST"], endpoint="months_create")
    def months_create():
        data = require_json_object(request.get_json(silent=True))
        result = manager.create_month(
            data.get("month") or "",
            data.get("year"),
            data.get("copy_mode") or "empty",
            data.get("selected_member_ids") or [],
        )
        return jsonify(result.as_dict()), 201 if result.created else 200

    @app.route("/api/months/<table_name>", methods=["GET"], endpoint="months_detail")
    def months_detail(table_name: str):
        month = manager.require_month(table_name)
        overview = container.attendance_service.month_overview(month)
        payload = overview.as_dict()
        payload["state"] = manager.state(month).value
        return jsonify(payload)

    @app.route("/api/months/<table_name>/sundays", methods=["GET"], endpoint="months_sundays")
    def months_sundays(table_name: str):
        month = manager.require_month(table_name)
        return jsonify({"month": month.table_name, "sundays": [d.isoformat() for d in sundays_in_month(month.name, month.year)]})
