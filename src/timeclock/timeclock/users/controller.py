from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(
            str(data.get("username") or ""),
            str(data.get("password") or ""),
        )

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["dept_id"] = s_user.dept_id

        return jsonify(
            {
                "success": True,
                "message": "Logged in",
                "user": {
                    "user_id": s_user.user_id,
                    "full_name": s_user.full_name,
                    "role": s_user.role.value,
                    "dept_id": s_user.dept_id,
                },
            }
        )

    @app.route("/logout", methods=["POST"], endpoint="logout")
    @login_required
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out"})
