from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.constants import MAX_GRACE_MINUTES, MIN_GRACE_MINUTES
from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)


def register(app: Flask, container, *, trigger_on_request: bool = False) -> None:
    service = container.auto_absence_service

    if trigger_on_request:

        @app.before_request
        def auto_absence_checkpoint():
            # Opportunistic sweep; must never fail the request it rides on.
            try:
                container.trigger.maybe_run()
            except Exception:
                logger.exception("Opportunistic auto-absence check failed")

    def _storage_unavailable():
        return jsonify({"success": False, "message": "Database unavailable, try again"}), 503

    @app.route("/api/admin/auto-absence/run", methods=["POST"], endpoint="auto_absence_run")
    def auto_absence_run():
        try:
            result = service.run_now()
            return jsonify({"success": True, "message": "Manual check completed", "data": result.to_dict()}), 200
        except StorageError:
            logger.exception("Manual auto-absence run failed")
            return _storage_unavailable()
        except Exception:
            logger.exception("Error running manual auto-absence check")
            return jsonify({"success": False, "message": "Error running manual check"}), 500

    @app.route("/api/admin/auto-absence/settings", methods=["POST"], endpoint="auto_absence_settings")
    def auto_absence_settings():
        data = request.get_json(silent=True) or {}
        grace = data.get("grace_period")
        if isinstance(grace, bool) or not isinstance(grace, int) or not MIN_GRACE_MINUTES <= grace <= MAX_GRACE_MINUTES:
            return jsonify(
                {
                    "success": False,
                    "message": f"Grace period must be between {MIN_GRACE_MINUTES} and {MAX_GRACE_MINUTES} minutes",
                }
            ), 400

        if service.set_grace_period(grace):
            return jsonify({"success": True, "message": "Settings saved"}), 200
        return jsonify({"success": False, "message": "Error saving settings"}), 500

    @app.route("/api/admin/auto-absence/status", methods=["GET"], endpoint="auto_absence_status")
    def auto_absence_status():
        try:
            return jsonify({"success": True, "data": service.status()}), 200
        except StorageError:
            logger.exception("Error getting auto-absence status")
            return _storage_unavailable()

    @app.route("/api/admin/auto-absence/stats", methods=["GET"], endpoint="auto_absence_stats")
    def auto_absence_stats():
        try:
            return jsonify({"success": True, "data": service.stats()}), 200
        except StorageError:
            logger.exception("Error getting auto-absence stats")
            return _storage_unavailable()

    @app.route("/api/admin/auto-absence/scheduler/start", methods=["POST"], endpoint="auto_absence_scheduler_start")
    def auto_absence_scheduler_start():
        started = container.scheduler.start()
        message = "Scheduler started" if started else "Scheduler already running"
        return jsonify({"success": True, "message": message, "data": container.scheduler.status().to_dict()}), 200

    @app.route("/api/admin/auto-absence/scheduler/stop", methods=["POST"], endpoint="auto_absence_scheduler_stop")
    def auto_absence_scheduler_stop():
        stopped = container.scheduler.stop()
        message = "Scheduler stopped" if stopped else "Scheduler was not running"
        return jsonify({"success": True, "message": message, "data": container.scheduler.status().to_dict()}), 200
