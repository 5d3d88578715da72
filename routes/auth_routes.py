import logging

from flask import Blueprint, request, render_template, redirect, url_for, flash
from flask_login import current_user

from services import auth_service
from services.errors import AppError

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/admin")

# =========================================================
# LOGIN ROUTE
# =========================================================
@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        email = request.form.get("email", "")
        password = request.form.get("password", "")

        try:
            auth_service.authenticate_admin(email, password)
        except AppError as e:
            logger.info(f"Admin login failed for {email!r}: {e.message}")
            flash(e.message, "danger")
            return render_template("admin_login.html", email=email), e.status_code

        flash("Successfully logged in as admin", "success")
        return redirect(url_for("admin.admin_dashboard"))

    return render_template("admin_login.html", email="")

# =========================================================
# LOGOUT ROUTE
# =========================================================
@auth_bp.route("/logout")
def logout():
    if current_user.is_authenticated:
        logger.info(f"Admin {current_user.email} signed out")
    auth_service.sign_out()
    return redirect(url_for("auth.login"))
