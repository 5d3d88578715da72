import logging

from extensions import db
from models import AdminUser, Branch, ExamType, Semester, User
from utils.password_utils import hash_password

logger = logging.getLogger(__name__)

BRANCHES = [
    {"code": "CSE", "name": "Computer Science and Engineering"},
    {"code": "CSE-AIML", "name": "Computer Science and Engineering (AI & ML)"},
    {"code": "ECE", "name": "Electronics and Communication Engineering"},
    {"code": "EEE", "name": "Electrical and Electronics Engineering"},
    {"code": "MECH", "name": "Mechanical Engineering"},
    {"code": "CIVIL", "name": "Civil Engineering"},
    {"code": "IT", "name": "Information Technology"},
]

EXAM_TYPES = [
    {"code": "END_SEM", "name": "End Semester"},
    {"code": "MID_SEM", "name": "Mid Semester"},
    {"code": "SUPPLY", "name": "Supplementary"},
]

SEMESTER_COUNT = 8


def seed_branches():
    for b in BRANCHES:
        existing = Branch.query.filter_by(code=b["code"]).first()
        if not existing:
            db.session.add(Branch(code=b["code"], name=b["name"]))

    db.session.commit()
    logger.info("Branches seeded")


def seed_semesters():
    for number in range(1, SEMESTER_COUNT + 1):
        if not Semester.query.filter_by(number=number).first():
            db.session.add(Semester(number=number))

    db.session.commit()
    logger.info(f"Semesters 1-{SEMESTER_COUNT} seeded")


def seed_exam_types():
    for e in EXAM_TYPES:
        if not ExamType.query.filter_by(code=e["code"]).first():
            db.session.add(ExamType(code=e["code"], name=e["name"]))

    db.session.commit()
    logger.info("Exam types seeded")


def create_admin(email, password):
    """Create (or reset) a credential and put the email on the allow-list."""
    email = email.strip().lower()

    user = User.query.filter_by(email=email).first()
    if user:
        user.password_hash = hash_password(password)
        user.is_active = True
    else:
        user = User(email=email, password_hash=hash_password(password), is_active=True)
        db.session.add(user)

    if not AdminUser.query.filter_by(email=email).first():
        db.session.add(AdminUser(email=email))

    db.session.commit()
    logger.info(f"Admin {email} ready")
    return user


def run_seed():
    seed_branches()
    seed_semesters()
    seed_exam_types()
