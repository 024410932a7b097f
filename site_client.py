"""
Clients for the fragment sites.

Every call returns a SiteResponse instead of raising, so the router can join
concurrent calls and apply one failure policy. A retrying or circuit-breaking
client can be slotted in by implementing SiteClient.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
import structlog

from errors import SiteError, SiteFailure, SiteTimeout, SiteUnreachable

logger = structlog.get_logger()


@dataclass
class SiteResponse:
    """Outcome of one call to one fragment site."""

    site: str
    payload: Any = None
    error: Optional[SiteFailure] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self):
        if self.error is not None:
            raise self.error
        return self.payload


class SiteClient(ABC):
    """Query surface of a single fragment site."""

    def __init__(self, site: str):
        self.site = site

    @abstractmethod
    def fetch(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> SiteResponse:
        """Issue one query against the site."""
        pass


class HttpSiteClient(SiteClient):
    """Talks to a fragment site over HTTP GET."""

    def __init__(self, site: str, base_url: str, timeout: float):
        super().__init__(site)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch(self, endpoint, params=None):
        url = f"{self.base_url}{endpoint}"
        start = time.monotonic()
        try:
            resp = requests.get(url, params=params or {}, timeout=self.timeout)
        except requests.Timeout:
            return self._failed(start, SiteTimeout(
                self.site, f"{self.site} did not answer within {self.timeout}s",
            ))
        except requests.RequestException as e:
            return self._failed(start, SiteUnreachable(
                self.site, f"Failed to connect to {self.site}", {"reason": str(e)},
            ))

        if not resp.ok:
            return self._failed(start, SiteError(
                self.site, f"{self.site} responded with status {resp.status_code}",
                status=resp.status_code,
            ))

        try:
            payload = resp.json()
        except ValueError:
            return self._failed(start, SiteError(
                self.site, f"{self.site} returned a malformed response body",
                status=resp.status_code,
                details={"reason": "malformed response body"},
            ))

        elapsed = time.monotonic() - start
        logger.debug("site_call_succeeded", site=self.site, endpoint=endpoint,
                     elapsed=round(elapsed, 3))
        return SiteResponse(site=self.site, payload=payload, elapsed=elapsed)

    def _failed(self, start, error):
        elapsed = time.monotonic() - start
        logger.warning("site_call_failed", site=self.site, error=error.error_code,
                       message=error.message, elapsed=round(elapsed, 3))
        return SiteResponse(site=self.site, error=error, elapsed=elapsed)
