import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from flask import current_app

from models import Branch, Paper, Semester
from services import data_client

logger = logging.getLogger(__name__)


@dataclass
class SemesterPapers:
    branch: Branch
    year: int
    semester_number: int
    semester: Optional[Semester] = None
    papers: List[Paper] = field(default_factory=list)


def year_list(current_year=None, count=None):
    """Most recent ``count`` years, newest first. Generated, never queried."""
    if current_year is None:
        current_year = date.today().year
    if count is None:
        count = current_app.config["YEAR_LIST_LENGTH"]
    return list(range(current_year, current_year - count, -1))


def home_branches():
    """Branches shown directly on the home page.

    Reserved codes are left out; they are listed under /cse-branches instead.
    """
    return data_client.list_branches(
        exclude_codes=current_app.config["RESERVED_BRANCH_CODES"]
    )


def reserved_branches():
    return data_client.list_branches(
        only_codes=current_app.config["RESERVED_BRANCH_CODES"]
    )


def find_branch(branch_code):
    return data_client.get_branch_by_code(branch_code)


def semesters():
    return data_client.list_semesters()


def semester_papers(branch, year, semester_number):
    """Papers of one branch/year/semester.

    An unknown semester number gives an empty list rather than an error.
    """
    result = SemesterPapers(branch=branch, year=year, semester_number=semester_number)

    semester = data_client.get_semester_by_number(semester_number)
    if semester is None:
        logger.info(f"Semester not found: {semester_number}")
        return result
    result.semester = semester

    result.papers = data_client.list_visible_papers(
        branch_id=branch.id,
        semester_id=semester.id,
        year=year,
    )
    logger.debug(
        f"Found {len(result.papers)} papers for {branch.code} {year} sem {semester_number}"
    )
    return result


def reserved_branch_papers():
    return data_client.list_papers_for_branch_codes(
        current_app.config["RESERVED_BRANCH_CODES"],
        current_app.config["CSE_PAPERS_EXCLUDED_EXAM_TYPES"],
    )
