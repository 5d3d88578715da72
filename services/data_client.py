"""Thin wrapper over the database tables used by the site.

All reads and writes go through here so that driver errors are turned into
``RemoteCallError`` in one place. Callers never see ``SQLAlchemyError``.
"""
import logging
from functools import wraps

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import AdminUser, Branch, ExamType, Paper, Semester, User
from services.errors import RemoteCallError

logger = logging.getLogger(__name__)


def remote_call(func_):
    @wraps(func_)
    def wrapper(*args, **kwargs):
        try:
            return func_(*args, **kwargs)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Database call {func_.__name__} failed: {e}", exc_info=True)
            raise RemoteCallError() from e
    return wrapper


# =========================================================
# REFERENCE DATA
# =========================================================

@remote_call
def list_branches(only_codes=None, exclude_codes=None):
    query = Branch.query
    if only_codes is not None:
        query = query.filter(Branch.code.in_(list(only_codes)))
    if exclude_codes:
        query = query.filter(Branch.code.notin_(list(exclude_codes)))
    return query.order_by(Branch.name.asc()).all()


@remote_call
def find_branch_ids_by_name(pattern, escape="\\"):
    rows = (
        db.session.query(Branch.id)
        .filter(Branch.name.ilike(pattern, escape=escape))
        .all()
    )
    return [row[0] for row in rows]


@remote_call
def get_branch(branch_id):
    return db.session.get(Branch, branch_id)


@remote_call
def get_branch_by_code(code):
    return Branch.query.filter_by(code=code).first()


@remote_call
def list_semesters():
    return Semester.query.order_by(Semester.number.asc()).all()


@remote_call
def get_semester(semester_id):
    return db.session.get(Semester, semester_id)


@remote_call
def get_semester_by_number(number):
    return Semester.query.filter_by(number=number).first()


@remote_call
def get_exam_type_by_code(code):
    return ExamType.query.filter_by(code=code).first()


# =========================================================
# PAPERS
# =========================================================

def visible_papers():
    """Base query for papers that have not been soft-deleted."""
    return Paper.query.filter(Paper.deleted_at.is_(None))


@remote_call
def list_visible_papers(branch_id=None, semester_id=None, year=None):
    query = visible_papers()
    if branch_id is not None:
        query = query.filter(Paper.branch_id == branch_id)
    if semester_id is not None:
        query = query.filter(Paper.semester_id == semester_id)
    if year is not None:
        query = query.filter(Paper.year == year)
    return query.order_by(Paper.created_at.desc(), Paper.id.desc()).all()


@remote_call
def search_visible_papers(criteria):
    return (
        visible_papers()
        .filter(criteria)
        .order_by(Paper.created_at.desc(), Paper.id.desc())
        .all()
    )


@remote_call
def list_papers_for_branch_codes(branch_codes, excluded_exam_type_codes=()):
    query = (
        visible_papers()
        .join(Branch, Paper.branch_id == Branch.id)
        .join(ExamType, Paper.exam_type_id == ExamType.id)
        .filter(Branch.code.in_(list(branch_codes)))
    )
    if excluded_exam_type_codes:
        query = query.filter(ExamType.code.notin_(list(excluded_exam_type_codes)))
    return query.order_by(Paper.created_at.desc(), Paper.id.desc()).all()


@remote_call
def get_paper(paper_id):
    """Fetch a paper by id, soft-deleted or not."""
    return db.session.get(Paper, paper_id)


@remote_call
def insert_paper(**fields):
    paper = Paper(downloads=0, views=0, **fields)
    db.session.add(paper)
    db.session.commit()
    logger.info(f"Inserted paper {paper.id} ({paper.subject_name}, {paper.year})")
    return paper


@remote_call
def update_paper(paper_id, fields):
    paper = db.session.get(Paper, paper_id)
    # Deleted papers are not editable
    if paper is None or paper.deleted_at is not None:
        return None
    for key, value in fields.items():
        setattr(paper, key, value)
    db.session.commit()
    logger.info(f"Updated paper {paper_id}")
    return paper


@remote_call
def soft_delete_paper(paper_id):
    """Mark a paper deleted.

    Returns None for an unknown id, False if the paper was already deleted and
    True if this call deleted it.
    """
    if db.session.get(Paper, paper_id) is None:
        return None

    result = db.session.execute(
        update(Paper)
        .where(Paper.id == paper_id, Paper.deleted_at.is_(None))
        .values(deleted_at=func.now())
        .execution_options(synchronize_session=False)
    )
    db.session.commit()
    deleted = result.rowcount > 0
    if deleted:
        logger.info(f"Soft-deleted paper {paper_id}")
    return deleted


def _increment(column_name, paper_id):
    column = getattr(Paper, column_name)
    # Single UPDATE so concurrent callers never lose an increment
    result = db.session.execute(
        update(Paper)
        .where(Paper.id == paper_id)
        .values({column_name: func.coalesce(column, 0) + 1})
        .execution_options(synchronize_session=False)
    )
    db.session.commit()
    return result.rowcount > 0


@remote_call
def increment_views(paper_id):
    return _increment("views", paper_id)


@remote_call
def increment_downloads(paper_id):
    return _increment("downloads", paper_id)


# =========================================================
# AUTH STORE
# =========================================================

@remote_call
def get_user_by_email(email):
    return User.query.filter(func.lower(User.email) == email.strip().lower()).first()


@remote_call
def get_user(user_id):
    return db.session.get(User, user_id)


@remote_call
def touch_last_sign_in(user):
    user.last_sign_in_at = func.now()
    db.session.commit()


@remote_call
def is_admin_email(email):
    if not email:
        return False
    admin = AdminUser.query.filter(
        func.lower(AdminUser.email) == email.strip().lower()
    ).first()
    return admin is not None
