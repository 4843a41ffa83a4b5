from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import now_local
from ..common.validators import parse_int
from ..common.web import view_required
from ..container import Container
from ..core.constants import ALL_USERS
from ..core.enums import View
from ..core.exceptions import ValidationError
from .model import DashboardFilterSelection


def register(app: Flask, container: Container) -> None:
    sessions = container.session_service

    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    @view_required(sessions, View.DASHBOARD)
    def dashboard():
        now = now_local()
        month = parse_int(request.args.get("month", now.month), "month")
        year = parse_int(request.args.get("year", now.year), "year")
        if not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12")

        selection = DashboardFilterSelection(
            user_id=(request.args.get("user") or ALL_USERS).strip(),
            month=month,
            year=year,
        )
        view = container.dashboard_service.build(
            g.user,
            container.attendance_repo.list_attendance(),
            container.users_repo.list_all(),
            selection,
            now=now,
        )
        return jsonify({"success": True, "dashboard": view.to_dict()})
