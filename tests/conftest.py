"""Shared fixtures for the coordinator tests."""

import pytest

from app import create_app
from db_config import CoordinatorConfig
from fakes import FakeSiteClient
from partitioning import SITE_A, SITE_B
from router import DecisionRouter


@pytest.fixture
def config():
    return CoordinatorConfig(
        supported_department="CS",
        site_urls={SITE_A: "http://site-a.test", SITE_B: "http://site-b.test"},
        timeout=1.0,
    )


@pytest.fixture
def site_a():
    return FakeSiteClient(SITE_A, {
        "/course_enrollments": {"enrollment_count": 4},
        "/course_enrollment_details": [
            {"student_id": 1, "student_name": "Ada", "date": "2024-01-10", "course_name": "Compilers"},
            {"student_id": 2, "student_name": "Brian", "date": "2024-01-11", "course_name": "Compilers"},
        ],
        "/cs_faculty": [{"f_id": 7, "name": "Dr. Hopper", "department": "CS"}],
        "/faculty_students": [
            {"s_id": 1, "name": "Ada", "department": "CS", "year": 4},
            {"s_id": 2, "name": "Brian", "department": "CS", "year": 3},
        ],
    })


@pytest.fixture
def site_b():
    return FakeSiteClient(SITE_B, {
        "/course_enrollments": {"enrollment_count": 9},
        "/course_enrollment_details": [
            {"student_id": 3, "student_name": "Chen", "date": "2024-02-01", "course_name": "Compilers"},
        ],
        "/cs_faculty": [{"f_id": 7, "name": "Dr. Hopper", "department": "CS"}],
        "/faculty_students": [
            {"s_id": 3, "name": "Chen", "department": "CS", "year": 1},
        ],
    })


@pytest.fixture
def router(config, site_a, site_b):
    return DecisionRouter(config, clients={SITE_A: site_a, SITE_B: site_b})


@pytest.fixture
def client(router):
    app = create_app(router)
    app.config["TESTING"] = True
    return app.test_client()
