from datetime import date

from extensions import db
from models import Paper


def test_home_groups_reserved_branches(client):
    response = client.get("/")
    assert response.status_code == 200
    assert b'href="/cse-branches"' in response.data
    assert b'href="/branch/ECE"' in response.data
    assert b'href="/branch/CSE"' not in response.data
    assert b'href="/branch/CSE-AIML"' not in response.data


def test_cse_branches_lists_only_reserved(client):
    response = client.get("/cse-branches")
    assert b'href="/branch/CSE"' in response.data
    assert b'href="/branch/CSE-AIML"' in response.data
    assert b'href="/branch/ECE"' not in response.data


def test_branch_page_lists_last_ten_years(client):
    this_year = date.today().year
    response = client.get("/branch/ECE")

    assert response.status_code == 200
    for year in range(this_year - 9, this_year + 1):
        assert f'href="/branch/ECE/year/{year}"'.encode() in response.data
    assert f'href="/branch/ECE/year/{this_year - 10}"'.encode() not in response.data


def test_unknown_branch_redirects_home_with_message(client):
    response = client.get("/branch/NOPE")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/")

    followed = client.get("/branch/NOPE/year/2023/semester/1/papers", follow_redirects=True)
    assert b"Branch not found" in followed.data


def test_year_page_lists_semesters(client):
    response = client.get("/branch/ECE/year/2023")
    assert response.status_code == 200
    assert b'href="/branch/ECE/year/2023/semester/8/papers"' in response.data


def test_semester_papers_page(client, make_paper):
    make_paper(subject_name="Analog Circuits", branch="ECE", semester=3, year=2023)
    make_paper(subject_name="Deleted Circuits", branch="ECE", semester=3, year=2023, deleted=True)

    response = client.get("/branch/ECE/year/2023/semester/3/papers")
    assert response.status_code == 200
    assert b"Analog Circuits" in response.data
    assert b"Deleted Circuits" not in response.data


def test_unknown_semester_shows_empty_list(client):
    response = client.get("/branch/ECE/year/2023/semester/99/papers")
    assert response.status_code == 200
    assert b"No question papers available" in response.data


def test_home_search_results(client, make_paper):
    make_paper(subject_name="Fluid Mechanics", branch="MECH")
    make_paper(subject_name="Hidden Mechanics", branch="MECH", file_url="https://example.com/a.pdf")

    response = client.get("/?q=mechanics")
    assert b"Search results" in response.data
    assert b"Fluid Mechanics" in response.data
    assert b"Hidden Mechanics" not in response.data

    blank = client.get("/?q=+++")
    assert b"Search results" not in blank.data
    assert b'href="/branch/MECH"' in blank.data


def test_cse_papers_page(client, make_paper):
    make_paper(subject_name="Deep Learning Quiz", branch="CSE-AIML", exam_type="SUPPLY")
    make_paper(subject_name="Regular End Sem", branch="CSE", exam_type="END_SEM")

    response = client.get("/cse-papers")
    assert b"Deep Learning Quiz" in response.data
    assert b"Regular End Sem" not in response.data


# =========================================================
# JSON API
# =========================================================

def test_api_search_returns_joined_fields(client, make_paper):
    make_paper(subject_name="Data Structures", branch="CSE", semester=2)

    data = client.get("/api/search?q=data").get_json()
    assert data["status"] == "success"
    assert data["searching"] is True
    paper = data["papers"][0]
    assert paper["branch"]["code"] == "CSE"
    assert paper["semester"]["number"] == 2
    assert paper["downloads"] == 0


def test_api_search_flags_superseded_requests(client, make_paper):
    make_paper()

    newer = client.get("/api/search?q=data&seq=2").get_json()
    older = client.get("/api/search?q=dat&seq=1").get_json()

    assert newer["seq"] == 2 and newer["stale"] is False
    assert older["seq"] == 1 and older["stale"] is True


def test_api_search_without_sequence(client):
    data = client.get("/api/search?q=").get_json()
    assert data["searching"] is False
    assert data["stale"] is False
    assert data["seq"] is None


def test_view_increments_views_and_returns_preview(app, client, make_paper):
    paper_id = make_paper(file_url="https://drive.google.com/open?id=XYZ")

    data = client.post(f"/api/papers/{paper_id}/view").get_json()
    assert data["status"] == "success"
    assert data["url"] == "https://drive.google.com/file/d/XYZ/preview"

    with app.app_context():
        paper = db.session.get(Paper, paper_id)
        assert paper.views == 1
        assert paper.downloads == 0


def test_download_increments_downloads(app, client, make_paper):
    paper_id = make_paper(file_url="https://drive.google.com/file/d/XYZ/view")

    data = client.post(f"/api/papers/{paper_id}/download").get_json()
    assert data["url"] == "https://drive.google.com/uc?export=download&id=XYZ"

    with app.app_context():
        assert db.session.get(Paper, paper_id).downloads == 1


def test_deleted_or_unknown_papers_cannot_be_opened(client, make_paper):
    deleted_id = make_paper(deleted=True)
    assert client.post(f"/api/papers/{deleted_id}/view").status_code == 404
    assert client.post("/api/papers/9999/download").status_code == 404


def test_page_load_assigns_search_channel(client):
    client.get("/")
    with client.session_transaction() as sess:
        client_id = sess["client_id"]

    client.get("/api/search?q=data&seq=1")
    with client.session_transaction() as sess:
        assert sess["client_id"] == client_id
