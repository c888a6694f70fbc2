"""OpenAPI document parser.

Parses OpenAPI 3.x documents (YAML or JSON) into ApiDocument models.
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from breaking_change_detect.errors import ParseError
from .base import ApiDocument, MediaType, Operation, Param

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


def load_openapi(file_path: Path) -> ApiDocument:
    """Parse an OpenAPI file into an ApiDocument."""
    text = file_path.read_text(encoding="utf-8")
    return parse_openapi(text, source=str(file_path))


def parse_openapi(text: str, source: str | None = None) -> ApiDocument:
    """Parse OpenAPI text into an ApiDocument.

    Raises ParseError when the text is not a well-formed OpenAPI 3 document.
    """
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"not valid YAML or JSON: {e}", source) from e

    if not isinstance(doc, dict):
        raise ParseError("document root must be a mapping", source)
    if "openapi" not in doc:
        if "swagger" in doc:
            raise ParseError(f"Swagger {doc['swagger']} documents are not supported", source)
        raise ParseError("missing 'openapi' version field", source)

    paths = doc.get("paths") or {}
    if not isinstance(paths, dict):
        raise ParseError("'paths' must be a mapping", source)

    components = doc.get("components") or {}
    if not isinstance(components, dict):
        raise ParseError("'components' must be a mapping", source)
    schemas = components.get("schemas") or {}
    if not isinstance(schemas, dict):
        raise ParseError("'components.schemas' must be a mapping", source)

    route_table = {}
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            raise ParseError(f"path item for {path} must be a mapping", source)
        operations = {}
        for method, operation in path_item.items():
            method = str(method).upper()
            if method not in HTTP_METHODS:
                continue
            where = f"{method} {path}"
            if not isinstance(operation, dict):
                raise ParseError(f"{where}: operation must be a mapping", source)
            operations[method] = _parse_operation(method, operation, where, source)
        route_table[str(path)] = operations

    return ApiDocument(version=str(doc["openapi"]), paths=route_table, schemas=schemas)


def _parse_operation(method: str, operation: dict, where: str, source: str | None) -> Operation:
    request_body = operation.get("requestBody")
    if request_body is not None and not isinstance(request_body, dict):
        raise ParseError(f"{where}: 'requestBody' must be a mapping", source)

    try:
        return Operation(
            method=method,
            parameters=_parse_parameters(operation.get("parameters") or [], where, source),
            request_content=(
                _parse_content(request_body.get("content"), f"{where} requestBody", source)
                if request_body else None
            ),
            responses=_parse_responses(operation.get("responses") or {}, where, source),
        )
    except ValidationError as e:
        raise ParseError(f"{where}: {e}", source) from e


def _parse_parameters(params: list, where: str, source: str | None) -> list[Param]:
    if not isinstance(params, list):
        raise ParseError(f"{where}: 'parameters' must be a list", source)
    result = []
    for p in params:
        if not isinstance(p, dict):
            raise ParseError(f"{where}: parameter {p!r} must be a mapping", source)
        if "$ref" in p:
            result.append(Param(ref=p["$ref"]))
            continue
        required = p.get("required", False)
        if not isinstance(required, bool):
            raise ParseError(f"{where}: 'required' of parameter {p.get('name')} must be a boolean", source)
        result.append(
            Param(
                name=p.get("name"),
                location=p.get("in"),
                required=required,
            )
        )
    return result


def _parse_content(content: dict | None, where: str, source: str | None) -> dict[str, MediaType] | None:
    if content is None:
        return None
    if not isinstance(content, dict):
        raise ParseError(f"{where}: 'content' must be a mapping", source)
    result = {}
    for media_type, media in content.items():
        media = media or {}
        if not isinstance(media, dict):
            raise ParseError(f"{where}: media type {media_type} must be a mapping", source)
        schema = media.get("schema") or {}
        if not isinstance(schema, dict):
            # OpenAPI 3.1 boolean schema
            result[str(media_type)] = MediaType()
        elif "$ref" in schema:
            result[str(media_type)] = MediaType(schema_ref=schema["$ref"])
        else:
            result[str(media_type)] = MediaType(schema_def=schema or None)
    return result


def _parse_responses(responses: dict, where: str, source: str | None) -> dict[str, dict[str, MediaType] | None]:
    if not isinstance(responses, dict):
        raise ParseError(f"{where}: 'responses' must be a mapping", source)
    result = {}
    for status_code, resp in responses.items():
        resp = resp or {}
        if not isinstance(resp, dict):
            raise ParseError(f"{where}: response {status_code} must be a mapping", source)
        result[str(status_code)] = _parse_content(resp.get("content"), f"{where} {status_code}", source)
    return result
