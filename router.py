"""
Decision router: executes routing plans against the fragment sites.

Every plan, single-site or scatter-gather, is dispatched on a thread pool and
joined against the configured deadline. A site that has not answered by then
is reported as timed out; its worker is left to finish in the background.

Scatter-gather plans dispatch to both sites at once and wait for both. If
either site fails the whole request fails; a partial answer is never
returned. The error reported is that of the first failing site in merge
order, so the outcome does not depend on which site answered first.
"""

from concurrent.futures import ThreadPoolExecutor, wait

import structlog

from aggregator import merge_responses
from db_config import CoordinatorConfig
from errors import InvalidQueryType, SiteTimeout, UnsupportedDepartment
from query_classifier import Reject, ScatterGather, Single, classify
from site_client import HttpSiteClient, SiteResponse

logger = structlog.get_logger()

REJECTIONS = {
    "invalid_query_type": InvalidQueryType,
    "unsupported_department": UnsupportedDepartment,
}


class DecisionRouter:
    """Stateless between requests; safe to share across handler threads."""

    def __init__(self, config=None, clients=None):
        self.config = config or CoordinatorConfig.from_env()
        if clients is None:
            clients = {
                site: HttpSiteClient(site, url, self.config.timeout)
                for site, url in self.config.site_urls.items()
            }
        self.clients = clients

    def route(self, department, query_type, course_id=None, faculty_id=None, credits=0):
        plan = classify(
            department,
            query_type,
            course_id=course_id,
            faculty_id=faculty_id,
            credits=credits,
            supported_department=self.config.supported_department,
        )
        return self.execute(plan)

    def execute(self, plan):
        if isinstance(plan, Reject):
            logger.info("query_rejected", reason=plan.reason)
            raise REJECTIONS[plan.error_code](plan.reason)

        if isinstance(plan, Single):
            logger.info("dispatch_single", site=plan.site, endpoint=plan.endpoint)
            return self._dispatch((plan.site,), plan.endpoint, plan.params)[0].unwrap()

        if isinstance(plan, ScatterGather):
            return self._scatter_gather(plan)

        raise TypeError(f"Unknown routing plan: {plan!r}")

    def _dispatch(self, sites, endpoint, params):
        """Fetch from every site concurrently; one SiteResponse per site, in order."""
        timeout = self.config.timeout
        executor = ThreadPoolExecutor(max_workers=len(sites))
        try:
            futures = [
                executor.submit(self.clients[site].fetch, endpoint, params)
                for site in sites
            ]
            wait(futures, timeout=timeout)
        finally:
            executor.shutdown(wait=False)

        responses = []
        for site, future in zip(sites, futures):
            if future.done():
                responses.append(future.result())
                continue
            future.cancel()
            logger.warning("site_call_timed_out", site=site, endpoint=endpoint, timeout=timeout)
            error = SiteTimeout(site, f"{site} did not answer within {timeout}s")
            responses.append(SiteResponse(site=site, error=error, elapsed=timeout))
        return responses

    def _scatter_gather(self, plan):
        logger.info("dispatch_scatter_gather", sites=list(plan.sites), endpoint=plan.endpoint)

        responses = self._dispatch(plan.sites, plan.endpoint, plan.params)

        failed = [r for r in responses if not r.ok]
        if failed:
            error = failed[0].error
            error.details["failed_sites"] = [r.site for r in failed]
            logger.warning(
                "scatter_gather_failed",
                endpoint=plan.endpoint,
                failed_sites=error.details["failed_sites"],
            )
            raise error

        logger.info(
            "scatter_gather_completed",
            endpoint=plan.endpoint,
            elapsed={r.site: round(r.elapsed, 3) for r in responses},
        )
        return merge_responses(responses)
