import io
import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import List
from urllib.parse import urlparse

import pandas as pd
from flask import current_app
from fpdf import FPDF

from services import data_client
from services.errors import ConfigurationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("branch_id", "semester_id", "year", "subject_name", "file_url")


@dataclass
class MonthlyUploads:
    month: str
    year: int
    uploads: int


@dataclass
class DashboardStats:
    total_papers: int = 0
    total_downloads: int = 0
    total_views: int = 0
    monthly_activity: List[MonthlyUploads] = field(default_factory=list)

    def to_dict(self):
        return asdict(self)


# =========================================================
# VALIDATION
# =========================================================

def is_valid_url(url):
    try:
        parsed = urlparse(url or "")
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def _as_int(value, label):
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}: {value}")


def clean_paper_fields(data, require_year=True):
    """Validate submitted form data for a paper.

    Every editable field must be present; partial updates are not accepted.
    Returns a dict ready to be written to the papers table.
    """
    missing = [
        name for name in ("branch_id", "semester_id", "subject_name", "file_url")
        if not str(data.get(name) or "").strip()
    ]
    if require_year and not str(data.get("year") or "").strip():
        missing.append("year")
    if missing:
        logger.info(f"Paper form rejected, missing: {missing}")
        raise ValidationError("Please fill in all required fields including the PDF URL")

    file_url = str(data["file_url"]).strip()
    if not is_valid_url(file_url):
        raise ValidationError("Please enter a valid URL")

    year_value = data.get("year")
    if year_value in (None, ""):
        year = date.today().year
    else:
        year = _as_int(year_value, "year")
    oldest = current_app.config["OLDEST_PAPER_YEAR"]
    if not oldest <= year <= date.today().year:
        raise ValidationError(f"Year must be between {oldest} and {date.today().year}")

    branch_id = _as_int(data["branch_id"], "branch")
    semester_id = _as_int(data["semester_id"], "semester")
    if data_client.get_branch(branch_id) is None:
        raise ValidationError("Selected branch does not exist")
    if data_client.get_semester(semester_id) is None:
        raise ValidationError("Selected semester does not exist")

    return {
        "branch_id": branch_id,
        "semester_id": semester_id,
        "year": year,
        "subject_name": str(data["subject_name"]).strip(),
        "file_url": file_url,
    }


# =========================================================
# WRITES
# =========================================================

def create_paper(data):
    fields = clean_paper_fields(data, require_year=False)

    code = current_app.config["DEFAULT_EXAM_TYPE_CODE"]
    exam_type = data_client.get_exam_type_by_code(code)
    if exam_type is None:
        logger.error(f"No default exam type found (code {code})")
        raise ConfigurationError(
            "System configuration error: Default exam type not found. Please contact support."
        )

    return data_client.insert_paper(exam_type_id=exam_type.id, **fields)


def edit_paper(paper_id, data):
    fields = clean_paper_fields(data, require_year=True)
    paper = data_client.update_paper(paper_id, fields)
    if paper is None:
        raise NotFoundError("Question paper not found")
    return paper


def delete_paper(paper_id):
    """Soft-delete a paper. Deleting an already-deleted paper is a no-op."""
    deleted = data_client.soft_delete_paper(paper_id)
    if deleted is None:
        raise NotFoundError("Question paper not found")
    if not deleted:
        logger.info(f"Paper {paper_id} was already deleted")
    return deleted


# =========================================================
# DASHBOARD
# =========================================================

def monthly_upload_histogram(papers, now=None, months=None):
    """Uploads per calendar month for the trailing window ending at ``now``.

    Buckets are absolute year-months, so the same month name in two
    different years never shares a bucket.
    """
    if now is None:
        now = datetime.now()
    if months is None:
        months = current_app.config["HISTOGRAM_MONTHS"]

    window = pd.period_range(end=pd.Period(now, freq="M"), periods=months, freq="M")
    counts = pd.Series(0, index=window)

    created = [p.created_at for p in papers if p.created_at is not None]
    if created:
        observed = pd.DatetimeIndex(created).to_period("M").value_counts()
        counts = observed.reindex(window, fill_value=0)

    return [
        MonthlyUploads(month=period.strftime("%b"), year=period.year, uploads=int(n))
        for period, n in counts.items()
    ]


def dashboard_stats(papers, now=None):
    return DashboardStats(
        total_papers=len(papers),
        total_downloads=sum(p.downloads or 0 for p in papers),
        total_views=sum(p.views or 0 for p in papers),
        monthly_activity=monthly_upload_histogram(papers, now=now),
    )


def filter_papers(papers, text):
    """Keep papers matching every whitespace-separated term of ``text``."""
    terms = (text or "").lower().split()
    if not terms:
        return list(papers)

    def haystack(paper):
        branch = paper.branch.name if paper.branch else ""
        semester = paper.semester.number if paper.semester else ""
        return f"{branch} {semester} {paper.subject_name or ''} {paper.year}".lower()

    return [p for p in papers if all(term in haystack(p) for term in terms)]


# =========================================================
# EXPORT
# =========================================================

EXPORT_COLUMNS = [
    "ID", "Subject", "Branch", "Semester", "Exam Type",
    "Year", "Downloads", "Views", "Uploaded", "File URL",
]


def papers_frame(papers):
    rows = [
        {
            "ID": p.id,
            "Subject": p.subject_name or "Unnamed",
            "Branch": p.branch.name if p.branch else "",
            "Semester": p.semester.number if p.semester else "",
            "Exam Type": p.exam_type.name if p.exam_type else "",
            "Year": p.year,
            "Downloads": p.downloads or 0,
            "Views": p.views or 0,
            "Uploaded": p.created_at.strftime("%Y-%m-%d") if p.created_at else "",
            "File URL": p.file_url,
        }
        for p in papers
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def _latin1(text):
    # Core PDF fonts only cover latin-1
    return str(text).encode("latin-1", "replace").decode("latin-1")


def _papers_pdf(df):
    pdf = FPDF(orientation="L")
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 10, "QUESTION PAPERS", align="C")
    pdf.ln(14)

    columns = [c for c in df.columns if c != "File URL"]
    col_width = (pdf.w - pdf.l_margin - pdf.r_margin) / len(columns)

    pdf.set_font("Helvetica", "B", 9)
    for col in columns:
        pdf.cell(col_width, 8, col, border=1, align="C")
    pdf.ln()

    pdf.set_font("Helvetica", size=9)
    for _, row in df.iterrows():
        for col in columns:
            pdf.cell(col_width, 8, _latin1(row[col])[:40], border=1, align="C")
        pdf.ln()

    return bytes(pdf.output())


def export_papers(papers, file_format="csv"):
    """Render the catalog as a file. Returns (buffer, mimetype, download_name)."""
    df = papers_frame(papers)
    output = io.BytesIO()
    stamp = datetime.now().strftime("%Y-%m-%d")

    if file_format == "excel":
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Papers")
        mimetype = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        download_name = f"papers_{stamp}.xlsx"
    elif file_format == "pdf":
        output.write(_papers_pdf(df))
        mimetype = "application/pdf"
        download_name = f"papers_{stamp}.pdf"
    elif file_format == "csv":
        output.write(df.to_csv(index=False).encode("utf-8"))
        mimetype = "text/csv"
        download_name = f"papers_{stamp}.csv"
    else:
        raise ValidationError(f"Unsupported export format: {file_format}")

    output.seek(0)
    logger.info(f"Exported {len(df)} papers as {file_format}")
    return output, mimetype, download_name
