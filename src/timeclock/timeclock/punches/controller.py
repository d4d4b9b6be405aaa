from __future__ import annotations

from datetime import tzinfo

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_utc
from ..common.validators import parse_choice, parse_optional_float, parse_optional_int
from ..common.web import current_user_id, json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import CaptureMethod, PunchKind
from .model import PunchEvent
from .service import NewPunch


def punch_to_dict(p: PunchEvent, tz: tzinfo) -> dict:
    return {
        "punch_id": p.punch_id,
        "user_id": p.user_id,
        "instant": p.instant.isoformat(),
        "local_time": p.instant.astimezone(tz).isoformat(),
        "kind": p.kind.value,
        "method": p.method.value,
        "latitude": p.location.latitude if p.location else None,
        "longitude": p.location.longitude if p.location else None,
        "address": p.location.address if p.location else None,
        "photo_ref": p.photo_ref,
        "note": p.note,
    }


def register(app: Flask, container: Container) -> None:
    tz = container.tz

    @app.route("/api/punches", methods=["POST"], endpoint="record_punch")
    @login_required
    def record_punch():
        data = json_body()
        kind = data.get("kind")
        method = data.get("method")

        punch = container.punch_service.record_punch(
            current_user_id(),
            NewPunch(
                kind=parse_choice(PunchKind, kind, "Kind") if kind else None,
                method=parse_choice(CaptureMethod, method, "Method") if method else CaptureMethod.APP,
                latitude=parse_optional_float(data.get("latitude"), "Latitude"),
                longitude=parse_optional_float(data.get("longitude"), "Longitude"),
                address=data.get("address"),
                photo_ref=data.get("photo_ref"),
                note=data.get("note"),
            ),
        )
        return jsonify({"success": True, "message": f"Punch '{punch.kind.value}' recorded", "punch": punch_to_dict(punch, tz)}), 201

    @app.route("/api/punches", methods=["GET"], endpoint="punch_history")
    @login_required
    def punch_history():
        kind = request.args.get("kind")
        limit = parse_optional_int(request.args.get("limit"), "Limit") or DEFAULT_HISTORY_LIMIT

        rows = container.punch_service.history(
            current_user_id(),
            kind=parse_choice(PunchKind, kind, "Kind") if kind else None,
            limit=limit,
        )
        return jsonify({"success": True, "punches": [punch_to_dict(p, tz) for p in rows]})

    @app.route("/api/punches/status", methods=["GET"], endpoint="punch_status")
    @login_required
    def punch_status():
        user_id = current_user_id()
        now = now_utc()
        today = container.punch_service.list_day(user_id, now=now)
        status = container.punch_service.current_status(user_id, now=now)
        next_kind = container.punch_service.next_kind(user_id, now=now)
        return jsonify(
            {
                "success": True,
                "status": status.value,
                "next_kind": next_kind.value,
                "today": [punch_to_dict(p, tz) for p in today],
            }
        )
