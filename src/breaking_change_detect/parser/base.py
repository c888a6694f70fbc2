"""Data models for a parsed OpenAPI document.

The parser reduces a raw document to the parts the comparison needs:
operations per path and method, their parameters, request and response
media types, and the component schema table.
"""

from pydantic import BaseModel


class Param(BaseModel):
    """A single declared parameter.

    Parameters declared by reference carry only ``ref``; name and location
    stay unset until someone resolves them.
    """

    name: str | None = None
    location: str | None = None  # query / path / header / cookie
    required: bool = False
    ref: str | None = None


class MediaType(BaseModel):
    """One entry of a ``content`` map."""

    schema_ref: str | None = None  # "#/components/schemas/Book"
    schema_def: dict | None = None  # inline schema, when there is no $ref


class Operation(BaseModel):
    """A single HTTP operation on a path."""

    method: str  # GET / POST / PUT / PATCH / DELETE
    parameters: list[Param] = []
    request_content: dict[str, MediaType] | None = None
    responses: dict[str, dict[str, MediaType] | None] = {}


class ApiDocument(BaseModel):
    """A parsed OpenAPI 3.x document."""

    version: str
    paths: dict[str, dict[str, Operation]]  # {path: {METHOD: Operation}}
    schemas: dict = {}  # raw components.schemas
