"""Combines scatter-gather partial results into one record list.

The fragments are disjoint by construction, so the merge is a plain
concatenation in site order: no dedup, no re-sorting. A site that returns
records it does not own shows up as a duplicate in the output.
"""

import structlog

from errors import AggregationFailure

logger = structlog.get_logger()


def merge(partials):
    """Concatenate (site, records) pairs in the order given."""
    merged = []
    for site, records in partials:
        if not isinstance(records, list):
            raise AggregationFailure(
                f"Expected a list of records from {site}",
                {"site": site, "received": type(records).__name__},
            )
        merged.extend(records)
    return merged


def merge_responses(responses):
    partials = [(r.site, r.unwrap()) for r in responses]
    merged = merge(partials)
    logger.debug(
        "merged_partials",
        sizes={site: len(records) for site, records in partials},
        total=len(merged),
    )
    return merged
