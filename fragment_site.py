import sys
from datetime import date

import mysql.connector
import structlog
from flask import Flask, jsonify, request
from mysql.connector import Error

import db_config
from partitioning import PARTITIONS

logger = structlog.get_logger()


# --- HELPER: Connect to this site's own store ---
def get_db_connection(settings):
    try:
        return mysql.connector.connect(**settings)
    except Error as e:
        logger.error("db_connection_failed", host=settings.get("host"), error=str(e))
        return None


# --- HELPER: Dates as stored (YYYY-MM-DD), not as HTTP dates ---
def plain_row(row):
    if row is None:
        return None
    return {
        key: value.isoformat() if isinstance(value, date) else value
        for key, value in row.items()
    }


def create_site_app(partition, db_settings=None):
    """One fragment site, parametrized by the slice it owns.

    Site A and Site B run the same code; only the partition differs.
    """
    app = Flask(__name__)
    settings = db_settings or db_config.NODE_CONFIG[partition.site]
    department = db_config.SUPPORTED_DEPARTMENT

    def run_query(query, params, single=False):
        conn = get_db_connection(settings)
        if not conn:
            return jsonify({"error": f"Failed to connect to {partition.site} store"}), 500

        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(query, params)
            if single:
                result = plain_row(cursor.fetchone())
            else:
                result = [plain_row(row) for row in cursor.fetchall()]
            cursor.close()
            return jsonify(result)
        except Error as e:
            logger.error("site_query_failed", site=partition.site, error=str(e))
            return jsonify({"error": str(e)}), 500
        finally:
            conn.close()

    def missing(param):
        return jsonify({"error": f"Missing required parameter: {param}"}), 400

    @app.route("/course_enrollments", methods=["GET"])
    def course_enrollments():
        # Distinct students enrolled in a course of this site's credit range
        course_id = request.args.get("courseId")
        if not course_id:
            return missing("courseId")

        query = f"""
            SELECT COUNT(DISTINCT e.s_id) AS enrollment_count
            FROM enrollments e
            JOIN courses c ON e.c_id = c.c_id
            JOIN faculty f ON c.f_id = f.f_id
            WHERE c.c_id = %s
            AND f.department = %s
            AND {partition.credits_clause()}"""
        return run_query(query, (course_id, department), single=True)

    @app.route("/course_enrollment_details", methods=["GET"])
    def course_enrollment_details():
        course_id = request.args.get("courseId")
        if not course_id:
            return missing("courseId")

        query = """
            SELECT s.s_id AS student_id, s.name AS student_name, e.date, c.name AS course_name
            FROM enrollments e
            JOIN students s ON e.s_id = s.s_id
            JOIN courses c ON e.c_id = c.c_id
            WHERE c.c_id = %s
            AND e.status = %s"""
        return run_query(query, (course_id, partition.enrollment_status))

    @app.route("/cs_faculty", methods=["GET"])
    def cs_faculty():
        # Replicated: identical on every site
        query = "SELECT * FROM faculty WHERE department = %s"
        return run_query(query, (department,))

    @app.route("/faculty_students", methods=["GET"])
    def faculty_students():
        faculty_id = request.args.get("facultyId")
        if not faculty_id:
            return missing("facultyId")

        query = f"""
            SELECT DISTINCT s.*
            FROM students s
            JOIN enrollments e ON s.s_id = e.s_id
            JOIN courses c ON e.c_id = c.c_id
            JOIN faculty f ON c.f_id = f.f_id
            WHERE f.f_id = %s
            AND s.department = %s
            AND {partition.year_clause()}"""
        return run_query(query, (faculty_id, department))

    return app


if __name__ == "__main__":
    site = sys.argv[1] if len(sys.argv) > 1 else "site_a"
    if site not in PARTITIONS:
        print(f"Unknown site '{site}', expected one of: {', '.join(PARTITIONS)}")
        sys.exit(1)

    site_app = create_site_app(PARTITIONS[site])
    logger.info("fragment_site_started", site=site, port=db_config.SITE_PORTS[site])
    site_app.run(host="0.0.0.0", port=db_config.SITE_PORTS[site], threaded=True)
