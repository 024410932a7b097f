"""Maps an inbound query to a routing plan without touching any site."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from db_config import SUPPORTED_DEPARTMENT
from partitioning import SITE_A, SITE_B, site_for_credits


class QueryType(Enum):
    COURSE_ENROLLMENTS = "course_enrollments"
    COURSE_ENROLLMENT_DETAILS = "course_enrollment_details"
    FACULTY_MEMBERS = "faculty_members"
    FACULTY_STUDENTS = "faculty_students"


def parse_query_type(raw) -> Optional[QueryType]:
    try:
        return QueryType(raw)
    except ValueError:
        return None


@dataclass(frozen=True)
class Reject:
    reason: str
    error_code: str


@dataclass(frozen=True)
class Single:
    site: str
    endpoint: str
    params: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ScatterGather:
    endpoint: str
    params: Dict[str, str] = field(default_factory=dict)
    # Merge order of the partial results
    sites: Tuple[str, ...] = (SITE_A, SITE_B)


def classify(department, query_type, course_id=None, faculty_id=None, credits=0,
             supported_department=SUPPORTED_DEPARTMENT):
    """Return the routing plan for one query.

    The query type is checked before the department, so an unknown type is
    reported as such whatever department was asked for.
    """
    kind = query_type if isinstance(query_type, QueryType) else parse_query_type(query_type)
    if kind is None:
        return Reject("Invalid query type", "invalid_query_type")

    if department != supported_department:
        return Reject(
            f"Only {supported_department} department queries are supported",
            "unsupported_department",
        )

    if kind is QueryType.COURSE_ENROLLMENTS:
        return Single(site_for_credits(credits), "/course_enrollments", {"courseId": course_id})

    if kind is QueryType.COURSE_ENROLLMENT_DETAILS:
        # Enrollments are split by status, so both fragments hold rows
        return ScatterGather("/course_enrollment_details", {"courseId": course_id})

    if kind is QueryType.FACULTY_MEMBERS:
        # Faculty is replicated; either site answers authoritatively
        return Single(SITE_A, "/cs_faculty", {})

    # Students are split by year
    return ScatterGather("/faculty_students", {"facultyId": faculty_id})
