from __future__ import annotations

from flask import Flask, Response, g, json, jsonify, stream_with_context

from ..access.policy import can_check_in, is_view_allowed
from ..common.datetime_utils import now_local
from ..common.web import json_object, login_required
from ..container import Container
from ..core.enums import View
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    sessions = container.session_service
    service = container.attendance_service

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    @login_required(sessions)
    def scan():
        """Check in or out, depending on today's record.

        Body: {"lat": .., "lng": ..} or {"unavailable": true} when the client
        could not obtain a position in time.
        """
        result = service.scan(g.user, json_object(), now=now_local())
        return jsonify({"success": True, **result.to_dict()})

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @login_required(sessions)
    def today():
        state = service.today_state(g.user, now=now_local())
        return jsonify({"success": True, "can_check_in": can_check_in(g.user.role), **state.to_dict()})

    @app.route("/api/attendance/stream", methods=["GET"], endpoint="api_attendance_stream")
    @login_required(sessions)
    def stream():
        """Server-sent events for record changes the session user may see."""
        changes = service.watch(g.user)

        @stream_with_context
        def events():
            try:
                for record in changes:
                    if record is None:
                        yield ": keep-alive\n\n"
                    else:
                        yield f"event: attendance\ndata: {json.dumps(record.to_dict())}\n\n"
            finally:
                changes.close()

        return Response(events(), mimetype="text/event-stream", headers={"Cache-Control": "no-cache"})

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_list")
    @login_required(sessions)
    def list_records():
        user = g.user
        # Staff read the log through the attendance view, students through reports.
        if not (is_view_allowed(user.role, View.ATTENDANCE) or is_view_allowed(user.role, View.REPORTS)):
            raise AuthorizationError(f"{user.role.value} cannot access attendance records")

        records = service.list_visible(user)
        return jsonify({"success": True, "count": len(records), "records": [r.to_dict() for r in records]})
