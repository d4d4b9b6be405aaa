from __future__ import annotations

from datetime import tzinfo

from flask import Flask, jsonify

from ..common.validators import parse_choice, parse_optional_int
from ..common.web import current_user_id, json_body, login_required, role_required
from ..container import Container
from ..core.enums import PunchKind, Role
from .model import AdjustmentRequest


def request_to_dict(r: AdjustmentRequest, tz: tzinfo) -> dict:
    return {
        "request_id": r.request_id,
        "user_id": r.user_id,
        "punch_id": r.punch_id,
        "proposed_instant": r.proposed_instant.isoformat(),
        "proposed_local_time": r.proposed_instant.astimezone(tz).isoformat(),
        "kind": r.kind.value,
        "justification": r.justification,
        "status": r.status.value,
        "reviewer_id": r.reviewer_id,
        "decided_at": r.decided_at.isoformat() if r.decided_at else None,
        "reviewer_justification": r.reviewer_justification,
        "created_at": r.created_at.isoformat(),
    }


def register(app: Flask, container: Container) -> None:
    tz = container.tz

    @app.route("/api/adjustments", methods=["POST"], endpoint="submit_adjustment")
    @login_required
    def submit_adjustment():
        data = json_body()
        kind = data.get("kind")

        req = container.adjustment_service.submit(
            user_id=current_user_id(),
            punch_id=parse_optional_int(data.get("punch_id"), "Punch"),
            proposed_instant=data.get("proposed_instant"),
            justification=str(data.get("justification") or ""),
            kind=parse_choice(PunchKind, kind, "Kind") if kind else None,
        )
        return jsonify({"success": True, "message": "Adjustment request submitted", "request": request_to_dict(req, tz)}), 201

    @app.route("/api/adjustments/mine", methods=["GET"], endpoint="my_adjustments")
    @login_required
    def my_adjustments():
        rows = container.adjustment_service.list_mine(user_id=current_user_id())
        return jsonify({"success": True, "requests": [request_to_dict(r, tz) for r in rows]})

    @app.route("/api/adjustments/pending", methods=["GET"], endpoint="pending_adjustments")
    @role_required(Role.MANAGER)
    def pending_adjustments():
        rows = container.adjustment_service.list_pending_for_reviewer(reviewer_id=current_user_id())
        return jsonify({"success": True, "requests": [request_to_dict(r, tz) for r in rows]})

    @app.route("/api/adjustments/<int:request_id>/approve", methods=["POST"], endpoint="approve_adjustment")
    @role_required(Role.MANAGER)
    def approve_adjustment(request_id: int):
        data = json_body()
        decision = container.adjustment_service.approve(
            reviewer_id=current_user_id(),
            request_id=request_id,
            reviewer_justification=str(data.get("reviewer_justification") or ""),
        )
        return jsonify(
            {
                "success": True,
                "message": "Request approved",
                "punch_updated": decision.punch_updated,
                "request": request_to_dict(decision.request, tz),
            }
        )

    @app.route("/api/adjustments/<int:request_id>/reject", methods=["POST"], endpoint="reject_adjustment")
    @role_required(Role.MANAGER)
    def reject_adjustment(request_id: int):
        data = json_body()
        decision = container.adjustment_service.reject(
            reviewer_id=current_user_id(),
            request_id=request_id,
            reviewer_justification=str(data.get("reviewer_justification") or ""),
        )
        return jsonify({"success": True, "message": "Request rejected", "request": request_to_dict(decision.request, tz)})
