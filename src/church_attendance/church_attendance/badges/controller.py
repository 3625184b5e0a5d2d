from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_date
from ..container import Container
from ..web.serializers import member_to_json


def register(app: Flask, container: Container) -> None:
    manager = container.month_manager
    analytics = container.analytics_service

    @app.route("/api/months/<table_name>/badges/process", methods=["POST"], endpoint="badges_process")
    def badges_process(table_name: str):
        month = manager.require_month(table_name)
        report = container.badge_service.process_month(month)
        return jsonify(report.as_dict())

    @app.route("/api/months/<table_name>/badges", methods=["GET"], endpoint="badges_distribution")
    def badges_distribution(table_name: str):
        month = manager.require_month(table_name)
        dist = analytics.badge_distribution(month)
        return jsonify({"month": month.table_name, "badges": {b.value: ids for b, ids in dist.items()}})

    @app.route("/api/months/<table_name>/outreach", methods=["GET"], endpoint="badges_outreach")
    def badges_outreach(table_name: str):
        month = manager.require_month(table_name)
        today = require_date(request.args["today"]) if request.args.get("today") else None
        report = analytics.outreach(month, today=today)
        payload = report.as_dict()
        payload["levels"] = [
            {"level": s.level, "total_members": s.total_members, "average_attendance": s.average_attendance}
            for s in analytics.level_summary(month)
        ]
        payload["recent_joiners"] = [member_to_json(m) for m in analytics.recent_joiners(month, today=today)]
        return jsonify(payload)
