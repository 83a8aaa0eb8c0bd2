from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import parse_bool, require_int, require_non_empty
from ..core.exceptions import AlreadyRecordedError, StorageError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_ACTOR = "front-desk"


def register(app: Flask, container) -> None:
    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    def _mark(kind: str):
        data = _payload()
        try:
            code = str(data.get("code") or "").strip()
            marked_by = str(data.get("marked_by") or DEFAULT_ACTOR)
            if kind == "present":
                result = container.attendance_service.mark_present(
                    code,
                    marked_by=marked_by,
                    is_makeup=parse_bool(data.get("is_makeup"), "Makeup flag"),
                )
                message = "Attendance recorded."
            else:
                result = container.attendance_service.mark_absent(
                    code,
                    marked_by=marked_by,
                    notes=str(data["notes"]) if data.get("notes") is not None else None,
                )
                message = "Absence recorded."
            return jsonify(
                {
                    "success": True,
                    "message": message,
                    "student_name": result.student_name,
                    "status": result.status.value,
                    "date": result.attendance_date.strftime("%Y-%m-%d"),
                }
            ), 200
        except AlreadyRecordedError as e:
            # Not a failure: the student simply has today's record already.
            return jsonify({"success": False, "message": str(e), "student_name": e.student_name}), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            logger.exception("Storage unavailable while marking attendance")
            return jsonify({"success": False, "message": "Database unavailable, try again"}), 503
        except Exception:
            logger.exception("Unexpected error while marking attendance")
            return jsonify({"success": False, "message": "System error while marking attendance"}), 500

    @app.route("/api/attendance/present", methods=["POST"], endpoint="api_attendance_present")
    def api_attendance_present():
        return _mark("present")

    @app.route("/api/attendance/absent", methods=["POST"], endpoint="api_attendance_absent")
    def api_attendance_absent():
        return _mark("absent")

    @app.route("/api/attendance/override", methods=["POST"], endpoint="api_attendance_override")
    def api_attendance_override():
        data = _payload()
        try:
            student_id = require_int(data.get("student_id"), "Student")
            day = parse_iso_date(require_non_empty(data.get("date"), "Date"))
            changed = container.attendance_service.override(
                student_id,
                day,
                str(data.get("overridden_by") or ""),
            )
            message = "Auto-absence overridden to present." if changed else "No auto-absence to override."
            return jsonify({"success": True, "changed": changed, "message": message}), 200
        except ValueError:
            return jsonify({"success": False, "message": "Date must be YYYY-MM-DD"}), 400
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            logger.exception("Storage unavailable while overriding attendance")
            return jsonify({"success": False, "message": "Database unavailable, try again"}), 503
        except Exception:
            logger.exception("Unexpected error while overriding attendance")
            return jsonify({"success": False, "message": "System error while overriding attendance"}), 500

    @app.route("/api/attendance/<int:student_id>/<day>", methods=["GET"], endpoint="api_attendance_get")
    def api_attendance_get(student_id: int, day: str):
        try:
            record = container.attendance_service.get_record(student_id, parse_iso_date(day))
        except ValueError:
            return jsonify({"success": False, "message": "Date must be YYYY-MM-DD"}), 400
        except StorageError:
            logger.exception("Storage unavailable while reading attendance")
            return jsonify({"success": False, "message": "Database unavailable, try again"}), 503

        if record is None:
            return jsonify({"success": True, "state": "UNRECORDED", "record": None}), 200
        return jsonify({"success": True, "state": record.status.value, "record": record.to_dict()}), 200
