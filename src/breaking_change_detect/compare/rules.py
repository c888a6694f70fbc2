"""The four breaking-change rules.

Each rule takes the old and new endpoint indexes and returns a list of
DifferenceCase. Rules are independent; none of them reads another's output.
"""

import logging

from breaking_change_detect.parser.base import Param
from .models import CaseType, DifferenceCase, Endpoint, Entry

logger = logging.getLogger(__name__)


def removed_paths(old: dict[str, Endpoint], new: dict[str, Endpoint]) -> list[DifferenceCase]:
    """Flag endpoints present in ``old`` but missing from ``new``.

    Endpoints only present in ``new`` are additive and never flagged.
    """
    removed = sorted(set(old) - set(new))
    if removed:
        logger.info("Paths removed: %s", ", ".join(removed))
    return [_case(CaseType.REMOVED_PATH, key) for key in removed]


def request_field_differences(old: dict[str, Endpoint], new: dict[str, Endpoint]) -> list[DifferenceCase]:
    """Flag shared endpoints whose request fields differ in any way."""
    result = []
    for key, old_endpoint in old.items():
        new_endpoint = new.get(key)
        if new_endpoint is not None and old_endpoint.request_fields != new_endpoint.request_fields:
            logger.info("%s: request fields differ", key)
            result.append(_case(CaseType.REQUEST_FIELD_DIFFER, key))
    return result


def removed_response_fields(old: dict[str, Endpoint], new: dict[str, Endpoint]) -> list[DifferenceCase]:
    """Flag response fields of shared endpoints that are gone in ``new``.

    One finding is emitted per missing field, so a key repeats when several
    fields were removed. Added response fields are not flagged.
    """
    result = []
    for key, old_endpoint in old.items():
        new_endpoint = new.get(key)
        if new_endpoint is None:
            continue
        for field_path in old_endpoint.response_fields:
            if field_path not in new_endpoint.response_fields:
                logger.info("%s: response field %s removed", key, field_path)
                result.append(_case(CaseType.RESPONSE_FIELD_REMOVED, key))
    return result


def parameters_equal(old_param: Param, new_param: Param) -> bool:
    """Two parameters are the same declaration only if name, location, required and ref all match."""
    return (
        old_param.name == new_param.name
        and old_param.location == new_param.location
        and old_param.required == new_param.required
        and old_param.ref == new_param.ref
    )


def parameter_changes(old: dict[str, Endpoint], new: dict[str, Endpoint]) -> list[DifferenceCase]:
    """Flag required parameters that changed, disappeared or were introduced.

    At most one finding of each kind per endpoint.
    """
    result = []
    for key, old_endpoint in old.items():
        new_endpoint = new.get(key)
        if new_endpoint is None:
            continue
        old_params = old_endpoint.parameters
        new_params = new_endpoint.parameters

        if _required_param_changed(old_params, new_params):
            logger.info("%s: required parameter changed", key)
            result.append(_case(CaseType.REQUIRED_PARAM_CHANGED, key))

        removed = [p for p in old_params if not any(parameters_equal(p, n) for n in new_params)]
        added = [n for n in new_params if not any(parameters_equal(p, n) for p in old_params)]

        if any(p.required for p in removed):
            logger.info("%s: required parameter no longer exists", key)
            result.append(_case(CaseType.REQUIRED_PARAM_NOT_EXIST, key))

        if any(p.required for p in added):
            logger.info("%s: required parameter added", key)
            result.append(_case(CaseType.REQUIRED_PARAM_ADDED, key))

    return result


def _required_param_changed(old_params, new_params) -> bool:
    # Match by (name, location) only: the parameter is still there but its
    # required flag or reference moved, and one of the two versions is required.
    for old_param in old_params:
        if old_param.name is None:
            continue
        for new_param in new_params:
            if (new_param.name, new_param.location) != (old_param.name, old_param.location):
                continue
            if not parameters_equal(old_param, new_param) and (old_param.required or new_param.required):
                return True
    return False


def _case(kind: CaseType, key: str) -> DifferenceCase:
    return DifferenceCase(kind=kind, entry=Entry.ENDPOINT, endpoint=key)


RULES = (
    removed_paths,
    request_field_differences,
    removed_response_fields,
    parameter_changes,
)
