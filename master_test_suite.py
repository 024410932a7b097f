import os
import time

import requests

from partitioning import PARTITIONS, SITE_A, SITE_B

# ==============================================================================
# CONFIGURATION
# ==============================================================================
COORDINATOR_URL = os.environ.get("COORDINATOR_URL", "http://localhost:3000")
SITES = [
    {"site": SITE_A, "name": "Site A (senior / advanced)", "url": os.environ.get("SITE_A_URL", "http://localhost:3001")},
    {"site": SITE_B, "name": "Site B (junior / basic)", "url": os.environ.get("SITE_B_URL", "http://localhost:3002")},
]

# TARGETS
DEPARTMENT = "CS"
COURSE_ID = os.environ.get("TEST_COURSE_ID", "10")
FACULTY_ID = os.environ.get("TEST_FACULTY_ID", "7")
TIMEOUT = 10


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================
def ask_coordinator(**params):
    start_time = time.time()
    resp = requests.get(COORDINATOR_URL, params=params, timeout=TIMEOUT)
    return resp, time.time() - start_time


def ask_site(base_url, endpoint, **params):
    start_time = time.time()
    resp = requests.get(f"{base_url}{endpoint}", params=params, timeout=TIMEOUT)
    return resp, time.time() - start_time


def report(passed, label, detail=""):
    verdict = "PASS" if passed else "FAIL"
    print(f">>> {verdict}: {label} {detail}".rstrip())
    return passed


def foreign_students(site, students):
    partition = PARTITIONS[site]
    return [s for s in students if not partition.owns_student(s["year"])]


# ==============================================================================
# PART 1: REJECTIONS (no site should be involved)
# ==============================================================================
def run_rejection_checks():
    print("\n" + "=" * 60)
    print("PART 1: REJECTIONS")
    print("Goal: Bad department / query type answer 400 before any routing")
    print("=" * 60)

    resp, _ = ask_coordinator(department=DEPARTMENT, queryType="bogus")
    report(
        resp.status_code == 400 and resp.json().get("error") == "invalid_query_type",
        "Unknown query type rejected",
        f"(status {resp.status_code})",
    )

    for query_type in [
        "course_enrollments",
        "course_enrollment_details",
        "faculty_members",
        "faculty_students",
    ]:
        resp, _ = ask_coordinator(department="MATH", queryType=query_type, courseId=COURSE_ID)
        report(
            resp.status_code == 400
            and resp.json().get("error") == "unsupported_department",
            f"Non-{DEPARTMENT} {query_type} rejected",
            f"(status {resp.status_code})",
        )


# ==============================================================================
# PART 2: SINGLE-SITE ROUTING (credits decide the fragment)
# ==============================================================================
def run_routing_checks():
    print("\n" + "=" * 60)
    print("PART 2: SINGLE-SITE ROUTING")
    print("Goal: credits > 2 answered by Site A, otherwise by Site B")
    print("=" * 60)

    for credits, site in [(3, SITES[0]), (2, SITES[1]), (0, SITES[1])]:
        resp, _ = ask_coordinator(
            department=DEPARTMENT,
            queryType="course_enrollments",
            courseId=COURSE_ID,
            credits=credits,
        )
        expected, _ = ask_site(site["url"], "/course_enrollments", courseId=COURSE_ID)
        report(
            resp.status_code == 200 and resp.json() == expected.json(),
            f"credits={credits} passed through from {site['name']}",
            f"-> {resp.json()}",
        )

    resp, _ = ask_coordinator(department=DEPARTMENT, queryType="faculty_members")
    replicas = [ask_site(s["url"], "/cs_faculty")[0].json() for s in SITES]
    report(
        resp.status_code == 200 and all(r == resp.json() for r in replicas),
        "Faculty identical on every replica",
        f"({len(resp.json())} members)",
    )


# ==============================================================================
# PART 3: SCATTER-GATHER (merge order + concurrency)
# ==============================================================================
def run_scatter_gather_checks():
    print("\n" + "=" * 60)
    print("PART 3: SCATTER-GATHER")
    print("Goal: merged = Site A ++ Site B, fetched in parallel")
    print("=" * 60)

    cases = [
        ("course_enrollment_details", "/course_enrollment_details", {"courseId": COURSE_ID}),
        ("faculty_students", "/faculty_students", {"facultyId": FACULTY_ID}),
    ]

    for query_type, endpoint, params in cases:
        parts = [ask_site(s["url"], endpoint, **params) for s in SITES]
        expected = parts[0][0].json() + parts[1][0].json()
        sequential = sum(duration for _, duration in parts)

        resp, duration = ask_coordinator(department=DEPARTMENT, queryType=query_type, **params)
        report(
            resp.status_code == 200 and resp.json() == expected,
            f"{query_type} merged in site order",
            f"({len(parts[0][0].json())} + {len(parts[1][0].json())} rows)",
        )

        if query_type == "faculty_students":
            for site, (part, _) in zip(SITES, parts):
                strays = foreign_students(site["site"], part.json())
                report(
                    not strays,
                    f"{site['name']} only returned students of its year range",
                    f"({len(strays)} misplaced)",
                )

        # Interpretation Logic: parallel dispatch costs ~max, not ~sum
        print(
            f"       -> Coordinator: {round(duration, 3)}s | "
            f"Sites back-to-back: {round(sequential, 3)}s"
        )


# ==============================================================================
# MAIN RUNNER
# ==============================================================================
if __name__ == "__main__":
    try:
        run_rejection_checks()
        run_routing_checks()
        run_scatter_gather_checks()
        print("\n=== FULL TEST SUITE COMPLETE ===")
    except requests.RequestException as e:
        print(f"\nCould not reach the deployment: {e}")
    except KeyboardInterrupt:
        print("\nTest Cancelled.")
