from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_month
from ..common.formatting import format_minutes, progress_percentage
from ..common.validators import parse_optional_int
from ..common.web import current_user_id, login_required, role_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/balances/<month>", methods=["GET"], endpoint="monthly_balance")
    @login_required
    def monthly_balance(month: str):
        report = container.balance_service.recompute_month(current_user_id(), parse_month(month))
        totals = report.totals

        return jsonify(
            {
                "success": True,
                "month": totals.month.strftime("%Y-%m"),
                "worked_minutes": totals.total_worked,
                "expected_minutes": totals.total_expected,
                "balance_minutes": report.balance.balance_minutes,
                "overtime_minutes": report.balance.overtime_minutes,
                "deficit_minutes": report.balance.deficit_minutes,
                "days_worked": totals.days_worked,
                "balance_display": format_minutes(report.balance.balance_minutes),
                "progress_percent": round(
                    progress_percentage(totals.total_worked, totals.total_expected, cap=container.progress_cap),
                    1,
                ),
                "days": [
                    {
                        "date": d.day.isoformat(),
                        "worked_minutes": d.worked_minutes,
                        "expected_minutes": d.expected_minutes,
                        "unpaired_punches": d.unpaired_punches,
                    }
                    for d in report.days
                ],
            }
        )

    @app.route("/api/reports/team/<month>", methods=["GET"], endpoint="team_report")
    @role_required(Role.HR)
    def team_report(month: str):
        dept_id = parse_optional_int(request.args.get("dept_id"), "Department")
        report = container.team_report_service.build_month_report(month=parse_month(month), dept_id=dept_id)

        return jsonify(
            {
                "success": True,
                "rows": report.rows,
                "departments": report.departments,
                "headcount": report.headcount,
                "present_headcount": report.present_headcount,
                "presence_rate": round(report.presence_rate, 1),
                "total_overtime_minutes": report.total_overtime_minutes,
            }
        )
