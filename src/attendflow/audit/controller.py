from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import parse_int
from ..common.web import view_required
from ..container import Container
from ..core.constants import DEFAULT_RECENT_LOGS_LIMIT
from ..core.enums import View


def register(app: Flask, container: Container) -> None:
    @app.route("/api/audit", methods=["GET"], endpoint="api_audit")
    @view_required(container.session_service, View.AUDIT)
    def audit_log():
        limit = parse_int(request.args.get("limit", DEFAULT_RECENT_LOGS_LIMIT), "limit")
        limit = max(1, min(limit, 1000))
        entries = container.audit_repo.list_recent(limit)
        return jsonify({"success": True, "logs": [e.to_dict() for e in entries]})
