"""Endpoint snapshots and the breaking-change findings produced from them."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from breaking_change_detect.parser.base import Param


class CaseType(str, Enum):
    REMOVED_PATH = "REMOVED_PATH"
    REQUEST_FIELD_DIFFER = "REQUEST_FIELD_DIFFER"
    RESPONSE_FIELD_REMOVED = "RESPONSE_FIELD_REMOVED"
    REQUIRED_PARAM_CHANGED = "REQUIRED_PARAM_CHANGED"
    REQUIRED_PARAM_NOT_EXIST = "REQUIRED_PARAM_NOT_EXIST"
    REQUIRED_PARAM_ADDED = "REQUIRED_PARAM_ADDED"


class Entry(str, Enum):
    """What a finding is about. Only ENDPOINT is produced today."""

    ENDPOINT = "ENDPOINT"
    SCHEMA = "SCHEMA"
    COMPONENT = "COMPONENT"


class Endpoint(BaseModel):
    """Immutable snapshot of one operation, keyed by ``"<path> <METHOD>"``."""

    model_config = ConfigDict(frozen=True)

    key: str  # /api/books GET
    request_fields: dict[str, str | None] = {}
    response_fields: dict[str, str | None] = {}
    parameters: tuple[Param, ...] = ()


class DifferenceCase(BaseModel):
    """A single breaking-change finding."""

    model_config = ConfigDict(frozen=True)

    kind: CaseType
    entry: Entry = Entry.ENDPOINT
    endpoint: str | None = None  # unset for collection-level findings


def endpoint_key(path: str, method: str) -> str:
    return f"{path} {method.upper()}"
