"""Tests for the fragment site template with the MySQL driver mocked out."""

from datetime import date, datetime
from unittest.mock import MagicMock, patch

import pytest
from mysql.connector import Error

from fragment_site import create_site_app
from partitioning import PARTITIONS, SITE_A, SITE_B

DB = {"host": "db.test", "user": "u", "password": "p", "database": "d", "port": 3306}


def fake_connection(rows=None, row=None, fail_with=None):
    cursor = MagicMock()
    cursor.fetchall.return_value = rows or []
    cursor.fetchone.return_value = row
    if fail_with is not None:
        cursor.execute.side_effect = fail_with
    conn = MagicMock()
    conn.cursor.return_value = cursor
    return conn, cursor


def site_client(site):
    app = create_site_app(PARTITIONS[site], DB)
    app.config["TESTING"] = True
    return app.test_client()


def executed(cursor):
    query, params = cursor.execute.call_args[0]
    return " ".join(query.split()), params


@pytest.mark.parametrize("site,clause", [(SITE_A, "c.credits > 2"), (SITE_B, "c.credits <= 2")])
def test_course_enrollments_uses_credit_predicate(site, clause):
    conn, cursor = fake_connection(row={"enrollment_count": 5})
    with patch("fragment_site.mysql.connector.connect", return_value=conn) as connect:
        resp = site_client(site).get("/course_enrollments?courseId=10")

    connect.assert_called_once_with(**DB)
    assert resp.status_code == 200
    assert resp.get_json() == {"enrollment_count": 5}
    query, params = executed(cursor)
    assert "COUNT(DISTINCT e.s_id) AS enrollment_count" in query
    assert clause in query
    assert params == ("10", "CS")
    conn.close.assert_called_once()


@pytest.mark.parametrize("site,status", [(SITE_A, "DONE"), (SITE_B, "NOT DONE")])
def test_enrollment_details_filtered_by_status(site, status):
    row = {"student_id": 1, "student_name": "Ada", "date": "2024-01-10", "course_name": "Compilers"}
    conn, cursor = fake_connection(rows=[row])
    with patch("fragment_site.mysql.connector.connect", return_value=conn):
        resp = site_client(site).get("/course_enrollment_details?courseId=10")

    assert resp.get_json() == [row]
    query, params = executed(cursor)
    assert "s.s_id AS student_id" in query
    assert params == ("10", status)


def test_faculty_is_the_same_query_on_both_sites():
    queries = []
    for site in (SITE_A, SITE_B):
        conn, cursor = fake_connection(rows=[{"f_id": 7, "name": "Dr. Hopper", "department": "CS"}])
        with patch("fragment_site.mysql.connector.connect", return_value=conn):
            resp = site_client(site).get("/cs_faculty")
        assert resp.status_code == 200
        queries.append(executed(cursor))
    assert queries[0] == queries[1]


@pytest.mark.parametrize("site,clause", [(SITE_A, "s.year > 2"), (SITE_B, "s.year <= 2")])
def test_faculty_students_uses_year_predicate(site, clause):
    conn, cursor = fake_connection(rows=[])
    with patch("fragment_site.mysql.connector.connect", return_value=conn):
        resp = site_client(site).get("/faculty_students?facultyId=7")

    assert resp.get_json() == []
    query, params = executed(cursor)
    assert clause in query
    assert params == ("7", "CS")


@pytest.mark.parametrize("path", ["/course_enrollments", "/course_enrollment_details", "/faculty_students"])
def test_missing_parameter_is_bad_request(path):
    with patch("fragment_site.mysql.connector.connect") as connect:
        resp = site_client(SITE_A).get(path)
    assert resp.status_code == 400
    connect.assert_not_called()


def test_unknown_path_is_not_found():
    assert site_client(SITE_B).get("/students").status_code == 404


def test_store_unreachable():
    with patch("fragment_site.mysql.connector.connect", side_effect=Error("Can't connect")):
        resp = site_client(SITE_A).get("/cs_faculty")
    assert resp.status_code == 500
    assert "site_a" in resp.get_json()["error"]


def test_query_error_closes_connection():
    conn, _ = fake_connection(fail_with=Error("Unknown column"))
    with patch("fragment_site.mysql.connector.connect", return_value=conn):
        resp = site_client(SITE_B).get("/faculty_students?facultyId=7")
    assert resp.status_code == 500
    conn.close.assert_called_once()


def test_dates_serialized_as_stored():
    row = {"student_id": 1, "student_name": "Ada", "date": date(2024, 1, 10), "course_name": "Compilers"}
    conn, _ = fake_connection(rows=[row])
    with patch("fragment_site.mysql.connector.connect", return_value=conn):
        resp = site_client(SITE_A).get("/course_enrollment_details?courseId=10")

    assert resp.get_json()[0]["date"] == "2024-01-10"
    assert resp.get_json()[0]["student_name"] == "Ada"


def test_datetimes_serialized_as_iso():
    row = {"student_id": 3, "student_name": "Chen", "date": datetime(2024, 2, 1, 9, 30), "course_name": "OS"}
    conn, _ = fake_connection(rows=[row])
    with patch("fragment_site.mysql.connector.connect", return_value=conn):
        resp = site_client(SITE_B).get("/course_enrollment_details?courseId=10")

    assert resp.get_json()[0]["date"] == "2024-02-01T09:30:00"
