"""
Question paper repository - test configuration and fixtures
"""
from datetime import datetime

import pytest

from app import create_app
from config.config import TestConfig
from extensions import db
from models import AdminUser, Branch, ExamType, Paper, Semester, User
from utils.password_utils import hash_password
from utils.seed_data import create_admin, run_seed

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse"
DRIVE_URL = "https://drive.google.com/file/d/ABC123/view"


@pytest.fixture
def app(tmp_path):
    # A file database so that threads get separate connections to the same data
    app = create_app(TestConfig, {
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
        "SQLALCHEMY_ENGINE_OPTIONS": {"connect_args": {"timeout": 30}},
    })

    with app.app_context():
        db.create_all()
        run_seed()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ids(app):
    """Reference-data ids keyed by code / number."""
    with app.app_context():
        return {
            "branch": {b.code: b.id for b in Branch.query.all()},
            "semester": {s.number: s.id for s in Semester.query.all()},
            "exam_type": {e.code: e.id for e in ExamType.query.all()},
        }


@pytest.fixture
def make_paper(app, ids):
    def _make(
        subject_name="Data Structures",
        branch="CSE",
        semester=1,
        year=2023,
        file_url=DRIVE_URL,
        exam_type="END_SEM",
        created_at=None,
        deleted=False,
        downloads=0,
        views=0,
    ):
        with app.app_context():
            paper = Paper(
                branch_id=ids["branch"][branch],
                semester_id=ids["semester"][semester],
                exam_type_id=ids["exam_type"][exam_type],
                subject_name=subject_name,
                year=year,
                file_url=file_url,
                downloads=downloads,
                views=views,
                created_at=created_at or datetime.now(),
                deleted_at=datetime.now() if deleted else None,
            )
            db.session.add(paper)
            db.session.commit()
            return paper.id
    return _make


@pytest.fixture
def admin(app):
    with app.app_context():
        create_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    return {"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}


@pytest.fixture
def plain_user(app):
    """Valid credential that is not on the admin allow-list."""
    with app.app_context():
        db.session.add(User(email="x@y.com", password_hash=hash_password("right-password")))
        db.session.commit()
    return {"email": "x@y.com", "password": "right-password"}


@pytest.fixture
def admin_client(client, admin):
    response = client.post("/admin/login", data=admin)
    assert response.status_code == 302
    return client


@pytest.fixture
def revoke_admin(app):
    def _revoke(email):
        with app.app_context():
            AdminUser.query.filter_by(email=email).delete()
            db.session.commit()
    return _revoke
