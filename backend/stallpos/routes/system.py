# Overview: Flask API routes for health and snapshot status.

from flask import Blueprint, jsonify

from ..services import snapshot_service
from ..time_utils import to_utc_z, utcnow


system_bp = Blueprint("system", __name__)


@system_bp.get("/health")
def health():
    return jsonify({"status": "ok", "time": to_utc_z(utcnow())}), 200


@system_bp.get("/api/system/snapshots")
def snapshots_route():
    """Saved snapshot keys with their record counts and last save time."""
    return jsonify({"snapshots": snapshot_service.snapshot_status()}), 200
