import structlog
from flask import Flask, jsonify, request

import db_config
from errors import CoordinatorError
from router import DecisionRouter

logger = structlog.get_logger()


# --- HELPER: Read an integer query parameter the lenient way ---
# Missing or non-numeric values count as 0 ("unset")
def get_int_arg(name):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return 0
    try:
        return int(raw)
    except ValueError:
        logger.warning("ignored_non_integer_param", param=name, value=raw)
        return 0


def create_app(router=None):
    app = Flask(__name__)
    app.config["ROUTER"] = router or DecisionRouter()

    # =====================================================
    #  DECISION SITE: classify, route, merge
    # =====================================================
    @app.route("/", methods=["GET"])
    @app.route("/query", methods=["GET"])
    def handle_query():
        department = request.args.get("department")
        query_type = request.args.get("queryType")
        course_id = request.args.get("courseId")
        faculty_id = request.args.get("facultyId")
        credits = get_int_arg("credits")
        # Reserved: accepted but not used by any routing decision
        get_int_arg("year")

        try:
            result = app.config["ROUTER"].route(
                department,
                query_type,
                course_id=course_id,
                faculty_id=faculty_id,
                credits=credits,
            )
            return jsonify(result)
        except CoordinatorError as e:
            logger.warning(
                "query_failed",
                query_type=query_type,
                error=e.error_code,
                message=e.message,
            )
            return jsonify(e.to_dict()), e.status_code
        except Exception:
            logger.exception("query_crashed", query_type=query_type)
            return jsonify({"error": "internal_error", "message": "Internal server error"}), 500

    return app


app = create_app()


if __name__ == "__main__":
    logger.info("decision_site_started", port=db_config.COORDINATOR_PORT)
    app.run(host="0.0.0.0", port=db_config.COORDINATOR_PORT, threaded=True)
