import logging
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urlparse

from flask import current_app
from sqlalchemy import or_

from models import Paper
from services import data_client
from services.errors import RemoteCallError

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


@dataclass
class SearchResult:
    papers: List[Paper] = field(default_factory=list)
    searching: bool = False
    error: Optional[str] = None


def contains_pattern(text):
    """ILIKE pattern matching ``text`` anywhere, with wildcards escaped."""
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def compose_search_criteria(query, branch_ids):
    """OR of subject-name token matches, full-query match and branch ids."""
    predicates = []

    for word in query.lower().split():
        predicates.append(Paper.subject_name.ilike(contains_pattern(word), escape=LIKE_ESCAPE))

    predicates.append(Paper.subject_name.ilike(contains_pattern(query), escape=LIKE_ESCAPE))

    if branch_ids:
        predicates.append(Paper.branch_id.in_(list(branch_ids)))

    return or_(*predicates)


def is_recognized_pdf_url(url, domains=None):
    if domains is None:
        domains = current_app.config["RECOGNIZED_PDF_DOMAINS"]
    try:
        parsed = urlparse(url or "")
        hostname = parsed.hostname
    except ValueError:
        logger.debug(f"Invalid URL skipped: {url!r}")
        return False
    if not parsed.scheme or not hostname:
        return False
    return any(domain in hostname for domain in domains)


def search_papers(query):
    """Free-text search over subject names and branch names.

    Only non-deleted papers hosted on a recognized PDF sharing domain are
    returned, newest first. A blank query means "not searching". Database
    failures are reported through ``SearchResult.error`` instead of raising.
    """
    query = (query or "").strip()
    if not query:
        return SearchResult()

    try:
        branch_ids = data_client.find_branch_ids_by_name(
            contains_pattern(query), escape=LIKE_ESCAPE
        )
        logger.debug(f"Search {query!r}: matching branch ids {branch_ids}")

        papers = data_client.search_visible_papers(
            compose_search_criteria(query, branch_ids)
        )
    except RemoteCallError as e:
        logger.warning(f"Search for {query!r} failed: {e}")
        return SearchResult(searching=True, error="Failed to search papers")

    domains = current_app.config["RECOGNIZED_PDF_DOMAINS"]
    valid = [p for p in papers if is_recognized_pdf_url(p.file_url, domains)]
    logger.info(f"Search {query!r}: {len(valid)} of {len(papers)} results kept")
    return SearchResult(papers=valid, searching=True)
