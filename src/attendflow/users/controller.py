from __future__ import annotations

from flask import Flask, g, jsonify, session

from ..access.policy import allowed_views, can_check_in
from ..common.datetime_utils import now_local
from ..common.web import json_object, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    sessions = container.session_service

    @app.route("/api/users", methods=["GET"], endpoint="api_users")
    def list_users():
        """Identities offered on the login screen."""
        return jsonify({"success": True, "users": [u.to_dict() for u in sessions.list_users()]})

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_object()
        user = sessions.login(str(data.get("user_id") or ""), now=now_local())

        session.clear()
        session["user_id"] = user.id
        session["role"] = user.role.value
        return jsonify({"success": True, "user": user.to_dict(), "views": [v.value for v in allowed_views(user.role)]})

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    @login_required(sessions)
    def me():
        user = g.user
        return jsonify({"success": True, "user": user.to_dict(), "can_check_in": can_check_in(user.role)})

    @app.route("/api/views", methods=["GET"], endpoint="api_views")
    @login_required(sessions)
    def views():
        return jsonify({"success": True, "views": [v.value for v in allowed_views(g.user.role)]})

    @app.route("/api/config", methods=["GET"], endpoint="api_config")
    def client_config():
        geofence = container.geofence
        return jsonify(
            {
                "success": True,
                "geofence": {
                    "name": geofence.name,
                    "latitude": geofence.latitude,
                    "longitude": geofence.longitude,
                    "radius_meters": geofence.radius_meters,
                },
                "position_timeout_ms": container.position_timeout_ms,
                "allow_simulated_location": container.attendance_service.allow_simulation,
            }
        )
