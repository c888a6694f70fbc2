"""Builds the endpoint index of a parsed document."""

import logging

from breaking_change_detect.errors import UnresolvedSchemaReference
from breaking_change_detect.parser.base import ApiDocument, MediaType, Operation
from .models import Endpoint, endpoint_key
from .schema import build_schema, flatten, resolve_reference

logger = logging.getLogger(__name__)

METHOD_ORDER = ("GET", "POST", "PUT", "PATCH", "DELETE")

REQUEST_MEDIA_TYPE = "application/json"
RESPONSE_MEDIA_TYPE = "*/*"
SUCCESS_STATUS = "200"


def extract_endpoints(document: ApiDocument) -> dict[str, Endpoint]:
    """Return ``{"<path> <METHOD>": Endpoint}`` for every declared operation."""
    endpoints = {}
    for path, operations in document.paths.items():
        for method in METHOD_ORDER:
            operation = operations.get(method)
            if operation is None:
                continue
            key = endpoint_key(path, method)
            endpoints[key] = Endpoint(
                key=key,
                request_fields=_request_fields(key, operation, document.schemas),
                response_fields=_response_fields(key, operation, document.schemas),
                parameters=tuple(operation.parameters),
            )
    return endpoints


def _request_fields(key: str, operation: Operation, schemas: dict) -> dict[str, str | None]:
    if not operation.request_content:
        return {}
    media = operation.request_content.get(REQUEST_MEDIA_TYPE)
    if media is None:
        return {}
    return _flatten_media(key, "request", media, schemas)


def _response_fields(key: str, operation: Operation, schemas: dict) -> dict[str, str | None]:
    # Only the 200 response's */* entry is considered.
    content = operation.responses.get(SUCCESS_STATUS)
    if not content:
        return {}
    media = content.get(RESPONSE_MEDIA_TYPE)
    if media is None:
        return {}
    return _flatten_media(key, "response", media, schemas)


def _flatten_media(key: str, side: str, media: MediaType, schemas: dict) -> dict[str, str | None]:
    if media.schema_ref is None:
        logger.debug("%s: %s schema has no $ref, no fields recorded", key, side)
        return {}
    try:
        definition = resolve_reference(media.schema_ref, schemas)
    except UnresolvedSchemaReference as e:
        logger.debug("%s: %s, no fields recorded", key, e)
        return {}
    schema = build_schema(definition, schemas, frozenset({media.schema_ref}))
    return flatten(schema, "")
