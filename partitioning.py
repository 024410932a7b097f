"""Horizontal fragmentation rules shared by the router and the fragment sites.

Site A holds the "senior/advanced" fragment, Site B the "junior/basic" one.
Faculty is replicated on both. Course routing in the coordinator must agree
with these predicates or queries return zero rows for records that exist.
"""

from dataclasses import dataclass

SITE_A = "site_a"
SITE_B = "site_b"

# Courses with credits above this live on Site A
ADVANCED_CREDITS_THRESHOLD = 2
# Students with year above this live on Site A
SENIOR_YEAR_THRESHOLD = 2

STATUS_DONE = "DONE"
STATUS_NOT_DONE = "NOT DONE"


@dataclass(frozen=True)
class Partition:
    """Which slice of each fragmented relation a site owns."""

    site: str
    upper: bool
    enrollment_status: str

    def owns_course(self, credits):
        return (int(credits) > ADVANCED_CREDITS_THRESHOLD) == self.upper

    def owns_student(self, year):
        return (int(year) > SENIOR_YEAR_THRESHOLD) == self.upper

    def credits_clause(self, column="c.credits"):
        op = ">" if self.upper else "<="
        return f"{column} {op} {ADVANCED_CREDITS_THRESHOLD}"

    def year_clause(self, column="s.year"):
        op = ">" if self.upper else "<="
        return f"{column} {op} {SENIOR_YEAR_THRESHOLD}"


PARTITIONS = {
    SITE_A: Partition(site=SITE_A, upper=True, enrollment_status=STATUS_DONE),
    SITE_B: Partition(site=SITE_B, upper=False, enrollment_status=STATUS_NOT_DONE),
}


def site_for_credits(credits):
    # Unset credits (0) falls through to the basic-course site
    if PARTITIONS[SITE_A].owns_course(credits or 0):
        return SITE_A
    return SITE_B
