from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.constants import DEFAULT_ACTIVITY_LIMIT
from ..web.serializers import activity_to_json


def register(app: Flask, container: Container) -> None:
    @app.route("/api/activity", methods=["GET"], endpoint="activity_recent")
    def activity_recent():
        limit = request.args.get("limit", type=int) or DEFAULT_ACTIVITY_LIMIT
        entries = container.activity_service.recent(limit=min(limit, 500))
        return jsonify({"activity": [activity_to_json(e) for e in entries]})
