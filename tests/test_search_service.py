from datetime import datetime

from services import data_client, search_service
from services.errors import RemoteCallError


def _subjects(result):
    return [p.subject_name for p in result.papers]


def test_blank_query_is_not_searching(app_ctx, make_paper):
    make_paper()
    for query in ("", "   ", None):
        result = search_service.search_papers(query)
        assert result.searching is False
        assert result.papers == []
        assert result.error is None


def test_matches_any_subject_word(app_ctx, make_paper):
    make_paper(subject_name="Data Structures")
    make_paper(subject_name="Operating Systems")
    make_paper(subject_name="Thermodynamics")

    assert _subjects(search_service.search_papers("data")) == ["Data Structures"]
    assert sorted(_subjects(search_service.search_papers("DATA systems"))) == [
        "Data Structures", "Operating Systems",
    ]


def test_matches_branch_name(app_ctx, make_paper):
    make_paper(subject_name="Signals", branch="ECE")
    make_paper(subject_name="Compilers", branch="CSE")

    result = search_service.search_papers("electronics")
    assert _subjects(result) == ["Signals"]
    assert result.papers[0].branch.code == "ECE"


def test_newest_first(app_ctx, make_paper):
    make_paper(subject_name="Maths I", created_at=datetime(2024, 1, 1))
    make_paper(subject_name="Maths II", created_at=datetime(2024, 6, 1))

    assert _subjects(search_service.search_papers("maths")) == ["Maths II", "Maths I"]


def test_deleted_papers_are_never_returned(app_ctx, make_paper):
    make_paper(subject_name="Networks", deleted=True)
    make_paper(subject_name="Networks Lab")

    assert _subjects(search_service.search_papers("networks")) == ["Networks Lab"]


def test_only_recognized_hosts_are_returned(app_ctx, make_paper):
    make_paper(subject_name="Physics", file_url="https://drive.google.com/file/d/P1/view")
    make_paper(subject_name="Physics Docs", file_url="https://docs.google.com/document/d/P2/edit")
    make_paper(subject_name="Physics Mirror", file_url="https://example.com/physics.pdf")
    make_paper(subject_name="Physics Broken", file_url="not a url")

    result = search_service.search_papers("physics")
    assert sorted(_subjects(result)) == ["Physics", "Physics Docs"]
    for paper in result.papers:
        assert search_service.is_recognized_pdf_url(paper.file_url)


def test_like_wildcards_in_query_are_literal(app_ctx, make_paper):
    make_paper(subject_name="Data Structures")
    make_paper(subject_name="Probability 100% Solved")

    assert _subjects(search_service.search_papers("%")) == ["Probability 100% Solved"]
    assert _subjects(search_service.search_papers("_")) == []


def test_database_failure_gives_empty_result_and_message(app_ctx, make_paper, monkeypatch):
    make_paper()

    def broken(criteria):
        raise RemoteCallError()

    monkeypatch.setattr(data_client, "search_visible_papers", broken)

    result = search_service.search_papers("data")
    assert result.papers == []
    assert result.error == "Failed to search papers"


def test_is_recognized_pdf_url(app_ctx):
    assert search_service.is_recognized_pdf_url("https://drive.google.com/open?id=1")
    assert not search_service.is_recognized_pdf_url("https://drive.example.com/x")
    assert not search_service.is_recognized_pdf_url("drive.google.com/file/d/1/view")
    assert not search_service.is_recognized_pdf_url("http://[::1")
    assert not search_service.is_recognized_pdf_url(None)
