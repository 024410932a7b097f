"""
Error taxonomy for the coordinator.

Classification errors are raised before any site is contacted. Site errors
carry the id of the site that failed so callers can tell them apart.
"""

from typing import Any, Dict, Optional


class CoordinatorError(Exception):
    """Base exception for all coordinator failures."""

    status_code = 500
    error_code = "coordinator_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class UnsupportedDepartment(CoordinatorError):
    """Raised when the department is not served by the fragment sites."""

    status_code = 400
    error_code = "unsupported_department"


class InvalidQueryType(CoordinatorError):
    """Raised when the query type is not one of the known kinds."""

    status_code = 400
    error_code = "invalid_query_type"


class SiteFailure(CoordinatorError):
    """Common base for failures attributable to one fragment site."""

    def __init__(self, site: str, message: str, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        details.setdefault("site", site)
        super().__init__(message, details)
        self.site = site


class SiteUnreachable(SiteFailure):
    """Raised when a fragment site cannot be reached at all."""

    error_code = "site_unreachable"


class SiteTimeout(SiteUnreachable):
    """Raised when a fragment site does not answer within the timeout."""

    error_code = "site_timeout"


class SiteError(SiteFailure):
    """Raised when a site answers with a non-success status or a bad body."""

    error_code = "site_error"

    def __init__(self, site: str, message: str, status: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if status is not None:
            details["upstream_status"] = status
        super().__init__(site, message, details)
        self.status = status


class AggregationFailure(CoordinatorError):
    """Raised when scatter-gather partial results cannot be merged."""

    error_code = "aggregation_failure"
