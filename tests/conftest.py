"""
测试公共 fixture
"""
import os
from decimal import Decimal

import pytest

from database import Database
from snapshots import CourseInfo, CompletedCourse

DATA_DIR = os.path.join(os.path.dirname(__file__), '..', 'data', 'templates')


def make_course(course_id, subject, number, credits=3, title="", prerequisites=()):
    return CourseInfo(
        id=course_id,
        subject_code=subject,
        course_number=number,
        credit_hours=Decimal(str(credits)),
        title=title,
        prerequisite_ids=tuple(prerequisites),
    )


def take(course, grade="A", term=None, credits=None):
    """CourseInfo → CompletedCourse"""
    completed = CompletedCourse.from_course(course, grade, term)
    if credits is not None:
        return CompletedCourse(
            course_id=completed.course_id,
            grade=grade,
            credit_hours=Decimal(str(credits)),
            term=term,
            subject_code=completed.subject_code,
            course_number=completed.course_number,
            title=completed.title,
        )
    return completed


@pytest.fixture
def catalog():
    """小型课程目录：{key: CourseInfo}"""
    courses = [
        make_course(101, "CS", "101", 3, "Intro"),
        make_course(201, "CS", "201", 3, "Data Structures", [101]),
        make_course(301, "CS", "301", 3, "Algorithms", [201]),
        make_course(310, "CS", "310", 4, "Operating Systems", [201]),
        make_course(350, "CS", "350", 2, "Seminar"),
        make_course(410, "CS", "410", 4, "Compilers", [301]),
        make_course(501, "CS", "501", 3, "Graduate Topics I"),
        make_course(502, "CS", "502", 3, "Graduate Topics II"),
        make_course(1110, "MATH", "110", 4, "Calculus I"),
        make_course(1220, "MATH", "220", 3, "Linear Algebra"),
        make_course(2101, "ENGL", "101", 3, "Writing"),
        make_course(3101, "HIST", "101", 3, "World History"),
        make_course(3210, "HIST", "210", 3, "History of Science"),
    ]
    return {c.id: c for c in courses}


@pytest.fixture
def data_dir():
    return os.path.normpath(DATA_DIR)


@pytest.fixture
def db():
    """SQLite 内存数据库"""
    database = Database("sqlite://")
    database.create_tables()
    return database


@pytest.fixture
def session(db):
    session = db.get_session()
    yield session
    session.close()
