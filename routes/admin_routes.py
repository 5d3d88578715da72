import logging
from datetime import date

from flask import (
    Blueprint, render_template, request, redirect, url_for,
    jsonify, send_file, flash
)

from services import admin_service, data_client
from services.errors import AppError, RemoteCallError
from utils.decorators import admin_required

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


def _dashboard_papers():
    return data_client.list_visible_papers()


@admin_bp.route("/dashboard")
@admin_required
def admin_dashboard(admin_session):
    query = request.args.get("q", "")

    papers, branches, semesters = [], [], []
    try:
        papers = _dashboard_papers()
        branches = data_client.list_branches()
        semesters = data_client.list_semesters()
    except RemoteCallError as e:
        flash("Failed to fetch dashboard data", "danger")
        logger.warning(f"Dashboard load failed: {e}")

    return render_template(
        "admin_dashboard.html",
        admin_session=admin_session,
        stats=admin_service.dashboard_stats(papers),
        papers=admin_service.filter_papers(papers, query),
        branches=branches,
        semesters=semesters,
        query=query,
        current_year=date.today().year,
    )


@admin_bp.route("/dashboard-stats")
@admin_required
def dashboard_stats(admin_session):
    try:
        papers = _dashboard_papers()
    except RemoteCallError as e:
        return jsonify({"status": "error", "message": e.message}), e.status_code

    return jsonify({"status": "success", **admin_service.dashboard_stats(papers).to_dict()})


# =========================================================
# PAPER CRUD
# =========================================================

@admin_bp.route("/papers", methods=["POST"])
@admin_required
def create_paper(admin_session):
    try:
        paper = admin_service.create_paper(request.form)
    except AppError as e:
        flash(e.message, e.category)
        return redirect(url_for("admin.admin_dashboard"))

    logger.info(f"{admin_session.email} added paper {paper.id}")
    flash("Question paper URL added successfully", "success")
    return redirect(url_for("admin.admin_dashboard"))


@admin_bp.route("/papers/<int:paper_id>/edit", methods=["POST"])
@admin_required
def edit_paper(paper_id, admin_session):
    try:
        admin_service.edit_paper(paper_id, request.form)
    except AppError as e:
        flash(e.message, e.category)
        return redirect(url_for("admin.admin_dashboard"))

    logger.info(f"{admin_session.email} updated paper {paper_id}")
    flash("Question paper updated successfully", "success")
    return redirect(url_for("admin.admin_dashboard"))


@admin_bp.route("/papers/<int:paper_id>/delete", methods=["POST"])
@admin_required
def delete_paper(paper_id, admin_session):
    # The dashboard asks "Are you sure?" and only then posts confirm=yes
    if request.form.get("confirm") != "yes":
        flash("Deletion was not confirmed", "warning")
        return redirect(url_for("admin.admin_dashboard"))

    try:
        admin_service.delete_paper(paper_id)
    except AppError as e:
        if isinstance(e, RemoteCallError):
            flash("Failed to delete question paper. Please try again.", "danger")
        else:
            flash(e.message, e.category)
        return redirect(url_for("admin.admin_dashboard"))

    logger.info(f"{admin_session.email} deleted paper {paper_id}")
    flash("Question paper deleted successfully", "success")
    return redirect(url_for("admin.admin_dashboard", q=request.form.get("q") or None))


# =========================================================
# EXPORT
# =========================================================

@admin_bp.route("/export")
@admin_required
def export_papers(admin_session):
    file_format = request.args.get("format", "csv")
    try:
        output, mimetype, download_name = admin_service.export_papers(
            _dashboard_papers(), file_format
        )
    except AppError as e:
        flash(e.message, e.category)
        return redirect(url_for("admin.admin_dashboard"))

    return send_file(
        output,
        mimetype=mimetype,
        as_attachment=True,
        download_name=download_name
    )
