from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.datetime_utils import now_local
from ..common.web import json_object, view_required
from ..container import Container
from ..core.constants import INSIGHTS_RECENT_LOGS
from ..core.enums import View


def register(app: Flask, container: Container) -> None:
    @app.route("/api/insights", methods=["POST"], endpoint="api_insights")
    @view_required(container.session_service, View.INSIGHTS)
    def insights():
        data = json_object()
        answer = container.insights_service.answer(
            str(data.get("query") or ""),
            container.attendance_service.list_visible(g.user),
            container.users_repo.list_all(),
            container.audit_repo.list_recent(INSIGHTS_RECENT_LOGS),
            now=now_local(),
        )
        return jsonify({"success": True, "answer": answer, "configured": container.insights_service.configured})
