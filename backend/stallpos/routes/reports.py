from flask import Blueprint, Response, current_app, jsonify, request

from ..services import export_service, reporting_service, snapshot_service
from ..time_utils import local_date, resolve_timezone, utcnow


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _period_arg() -> str:
    period = request.args.get("period")
    if period:
        return period
    tz = resolve_timezone(current_app.config["STALL_TIMEZONE"])
    return local_date(utcnow(), tz).strftime("%Y-%m")


@reports_bp.get("/vendors")
def vendor_report():
    state = snapshot_service.get_state()
    try:
        report = reporting_service.period_vendor_report(state.sales, _period_arg())
        return jsonify(report), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400


@reports_bp.get("/vendors/export")
def vendor_report_export():
    state = snapshot_service.get_state()
    try:
        report = reporting_service.period_vendor_report(state.sales, _period_arg())
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400

    return Response(
        export_service.vendor_report_csv(report),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=vendor_report_{report['period']}.csv"},
    )
