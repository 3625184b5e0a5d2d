from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_date, require_int
from ..container import Container
from ..core.exceptions import ValidationError
from ..web.serializers import require_json_object


def register(app: Flask, container: Container) -> None:
    manager = container.month_manager
    attendance = container.attendance_service

    @app.route("/api/months/<table_name>/attendance", methods=["GET"], endpoint="attendance_for_date")
    def attendance_for_date(table_name: str):
        month = manager.require_month(table_name)
        day = require_date(request.args.get("date"))
        statuses = attendance.attendance_for_date(month, day)
        return jsonify(
            {
                "month": month.table_name,
                "date": day.isoformat(),
                "attendance": {str(member_id): s.value for member_id, s in statuses.items()},
            }
        )

    @app.route("/api/months/<table_name>/attendance", methods=["PUT"], endpoint="attendance_mark")
    def attendance_mark(table_name: str):
        month = manager.require_month(table_name)
        data = require_json_object(request.get_json(silent=True))
        if data.get("member_id") is None:
            raise ValidationError("member_id is required")
        member_id = require_int(data["member_id"], "member_id")
        day = require_date(data.get("date"))
        status = attendance.mark_attendance(month, member_id, day, data.get("status"))
        return jsonify({"member_id": member_id, "date": day.isoformat(), "status": status.value})

    @app.route("/api/months/<table_name>/attendance/bulk", methods=["POST"], endpoint="attendance_bulk")
    def attendance_bulk(table_name: str):
        month = manager.require_month(table_name)
        data = require_json_object(request.get_json(silent=True))
        day = require_date(data.get("date"))
        result = attendance.bulk_mark_attendance(month, data.get("member_ids") or [], day, data.get("status"))
        return jsonify(
            {
                "date": result.day.isoformat(),
                "status": result.status.value,
                "succeeded_ids": list(result.succeeded_ids),
                "failed_ids": [],
            }
        )
