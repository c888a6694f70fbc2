"""Entry points for comparing two API documents."""

import logging
from concurrent.futures import ThreadPoolExecutor

from breaking_change_detect.fetch import DEFAULT_TIMEOUT, fetch_document
from breaking_change_detect.parser.base import ApiDocument
from .extract import extract_endpoints
from .models import DifferenceCase, Endpoint
from .rules import RULES

logger = logging.getLogger(__name__)


def compare_specifications(
    old: ApiDocument | dict[str, Endpoint],
    new: ApiDocument | dict[str, Endpoint],
) -> list[DifferenceCase]:
    """Compare a baseline document against a candidate.

    Accepts parsed documents or endpoint indexes already built by
    ``extract_endpoints``. Returns every breaking change found, in rule
    order: removed paths, request field differences, removed response
    fields, parameter changes. An empty list means no breaking change.
    """
    old_index = _as_index(old)
    new_index = _as_index(new)

    result = []
    for rule in RULES:
        result.extend(rule(old_index, new_index))

    logger.debug(
        "Compared %d old endpoints with %d new endpoints: %d breaking change(s)",
        len(old_index), len(new_index), len(result),
    )
    return result


def compare_sources(old_locator: str, new_locator: str, timeout: float = DEFAULT_TIMEOUT) -> list[DifferenceCase]:
    """Fetch both documents (URL or file path) in parallel, then compare them.

    A fetch or parse failure of either document propagates; no partial
    comparison is made.
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        old_future = pool.submit(fetch_document, old_locator, timeout)
        new_future = pool.submit(fetch_document, new_locator, timeout)
        old_doc = old_future.result()
        new_doc = new_future.result()
    return compare_specifications(old_doc, new_doc)


def _as_index(source: ApiDocument | dict[str, Endpoint]) -> dict[str, Endpoint]:
    if isinstance(source, ApiDocument):
        return extract_endpoints(source)
    return source
