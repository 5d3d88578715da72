import logging
import uuid

from flask import (
    Blueprint, render_template, request, redirect, url_for,
    session, jsonify, flash, abort, current_app
)

from services import catalog_service, data_client, search_service, viewer_service
from services.errors import RemoteCallError

logger = logging.getLogger(__name__)

public_bp = Blueprint("public", __name__)


def _client_channel(name):
    client_id = session.get("client_id")
    if client_id is None:
        client_id = session["client_id"] = uuid.uuid4().hex
    return f"{client_id}:{name}"


@public_bp.before_app_request
def ensure_client_id():
    # Set on page loads so concurrent searches from one browser share a channel
    if "client_id" not in session:
        session["client_id"] = uuid.uuid4().hex


# =========================================================
# CATALOG
# =========================================================

@public_bp.route("/")
def index():
    query = request.args.get("q", "")
    result = search_service.search_papers(query)
    if result.error:
        flash(result.error, "danger")

    branches = []
    try:
        branches = catalog_service.home_branches()
    except RemoteCallError as e:
        flash(e.message, "danger")

    return render_template(
        "index.html",
        query=query,
        search=result,
        branches=branches,
        reserved_codes=current_app.config["RESERVED_BRANCH_CODES"],
    )


@public_bp.route("/cse-branches")
def cse_branches():
    branches = []
    try:
        branches = catalog_service.reserved_branches()
    except RemoteCallError as e:
        flash(e.message, "danger")
    return render_template("cse_branches.html", branches=branches)


def _branch_or_redirect(branch_code):
    try:
        branch = catalog_service.find_branch(branch_code)
    except RemoteCallError as e:
        flash(e.message, "danger")
        return None, redirect(url_for("public.index"))

    if branch is None:
        flash("Branch not found: the requested branch does not exist", "danger")
        return None, redirect(url_for("public.index"))
    return branch, None


@public_bp.route("/branch/<branch_code>")
def branch_years(branch_code):
    branch, response = _branch_or_redirect(branch_code)
    if response:
        return response
    return render_template(
        "branch_years.html",
        branch=branch,
        years=catalog_service.year_list(),
    )


@public_bp.route("/branch/<branch_code>/year/<int:year>")
def branch_semesters(branch_code, year):
    branch, response = _branch_or_redirect(branch_code)
    if response:
        return response

    semesters = []
    try:
        semesters = catalog_service.semesters()
    except RemoteCallError as e:
        flash(e.message, "danger")

    return render_template(
        "branch_semesters.html", branch=branch, year=year, semesters=semesters
    )


@public_bp.route("/branch/<branch_code>/year/<int:year>/semester/<int:semester>/papers")
def exam_papers(branch_code, year, semester):
    branch, response = _branch_or_redirect(branch_code)
    if response:
        return response

    try:
        listing = catalog_service.semester_papers(branch, year, semester)
    except RemoteCallError as e:
        flash(e.message, "danger")
        listing = catalog_service.SemesterPapers(branch=branch, year=year, semester_number=semester)

    return render_template("exam_papers.html", listing=listing)


@public_bp.route("/cse-papers")
def cse_papers():
    papers = []
    try:
        papers = catalog_service.reserved_branch_papers()
    except RemoteCallError as e:
        flash(e.message, "danger")
    return render_template("cse_papers.html", papers=papers)


# =========================================================
# JSON API
# =========================================================

@public_bp.route("/api/search")
def api_search():
    query = request.args.get("q", "")
    seq = request.args.get("seq", type=int)

    search_sequencer = current_app.extensions["search_sequencer"]
    channel = _client_channel("search")
    if seq is not None:
        search_sequencer.observe(channel, seq)

    result = search_service.search_papers(query)

    payload = {
        "status": "error" if result.error else "success",
        "searching": result.searching,
        "papers": [p.to_dict() for p in result.papers],
        "seq": seq,
        "stale": seq is not None and not search_sequencer.is_current(channel, seq),
    }
    if result.error:
        payload["message"] = result.error
    return jsonify(payload)


def _open_paper(paper_id, counter, to_url):
    try:
        paper = data_client.get_paper(paper_id)
    except RemoteCallError as e:
        return jsonify({"status": "error", "message": e.message}), e.status_code

    if paper is None or paper.is_deleted:
        abort(404)

    payload = {"status": "success", "paper_id": paper.id, "url": to_url(paper.file_url)}
    try:
        counter(paper.id)
    except RemoteCallError:
        # The paper still opens; only the count is lost
        payload["status"] = "partial_success"
        payload["message"] = "Failed to update count"

    return jsonify(payload)


@public_bp.route("/api/papers/<int:paper_id>/view", methods=["POST"])
def view_paper(paper_id):
    return _open_paper(paper_id, data_client.increment_views, viewer_service.to_preview_url)


@public_bp.route("/api/papers/<int:paper_id>/download", methods=["POST"])
def download_paper(paper_id):
    return _open_paper(paper_id, data_client.increment_downloads, viewer_service.to_download_url)
