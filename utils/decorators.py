from functools import wraps
from flask import redirect, url_for, flash, jsonify, request
from services.auth_service import load_admin_session
from services.errors import RemoteCallError

# Endpoints called with fetch() that answer JSON outside /api/
JSON_ENDPOINTS = {"admin.dashboard_stats"}


def _wants_json():
    return (
        request.path.startswith("/api/")
        or request.endpoint in JSON_ENDPOINTS
        or request.accept_mimetypes.best == "application/json"
    )


def admin_required(func):
    """Re-validate the admin session on every request.

    The view receives the session as ``admin_session``. Anyone else is sent
    to the login page (or gets a 401 on JSON endpoints).
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        wants_json = _wants_json()

        try:
            admin_session = load_admin_session()
        except RemoteCallError as e:
            if wants_json:
                return jsonify({"status": "error", "message": e.message}), e.status_code
            flash(e.message, "danger")
            return redirect(url_for("auth.login"))

        if admin_session is None:
            if wants_json:
                return jsonify({"status": "error", "message": "Admin login required"}), 401
            flash("Please log in as an admin to continue.", "warning")
            return redirect(url_for("auth.login"))

        kwargs["admin_session"] = admin_session
        return func(*args, **kwargs)
    return wrapper
