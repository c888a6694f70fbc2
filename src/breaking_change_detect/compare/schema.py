"""Schema flattening.

Raw schema dicts are first resolved into a small tagged variant
(object / primitive / unresolved), then flattened into a map of dotted
property path to declared type name::

    {".address.city": "string", ".id": "integer"}

Only object schemas with declared properties are descended into. Arrays,
``allOf``/``oneOf`` and anything else are recorded as opaque leaves.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from breaking_change_detect.errors import UnresolvedSchemaReference


class ObjectSchema(BaseModel):
    kind: Literal["object"] = "object"
    properties: dict[str, "SchemaNode"] = {}


class PrimitiveSchema(BaseModel):
    kind: Literal["primitive"] = "primitive"
    type_name: str | None = None


class UnresolvedSchema(BaseModel):
    kind: Literal["unresolved"] = "unresolved"
    ref: str | None = None


SchemaNode = Annotated[
    Union[ObjectSchema, PrimitiveSchema, UnresolvedSchema],
    Field(discriminator="kind"),
]

ObjectSchema.model_rebuild()


def resolve_reference(ref: str, schemas: dict[str, dict]) -> dict:
    """Look up a ``$ref`` by its local name in the component schema table."""
    if not isinstance(ref, str):
        raise UnresolvedSchemaReference(str(ref))
    name = ref[ref.rfind("/") + 1:]
    definition = schemas.get(name)
    if not isinstance(definition, dict):
        raise UnresolvedSchemaReference(ref)
    return definition


def build_schema(raw, schemas: dict, _expanding: frozenset = frozenset()):
    """Convert a raw schema into an ObjectSchema, PrimitiveSchema or UnresolvedSchema.

    A root reference that is missing becomes an UnresolvedSchema. Property
    schemas always keep their path: a property whose reference is missing,
    or is already being expanded further up the same branch, is recorded as
    a leaf without a type.
    """
    if raw is None:
        return UnresolvedSchema()
    if not isinstance(raw, dict):
        # OpenAPI 3.1 boolean schema
        return PrimitiveSchema()

    ref = raw.get("$ref")
    if ref is not None:
        if not isinstance(ref, str):
            return UnresolvedSchema()
        if ref in _expanding:
            return UnresolvedSchema(ref=ref)
        try:
            definition = resolve_reference(ref, schemas)
        except UnresolvedSchemaReference:
            return UnresolvedSchema(ref=ref)
        return build_schema(definition, schemas, _expanding | {ref})

    properties = raw.get("properties")
    if raw.get("type") == "object" and isinstance(properties, dict):
        return ObjectSchema(
            properties={
                str(name): _build_property(prop, schemas, _expanding)
                for name, prop in properties.items()
            }
        )

    return PrimitiveSchema(type_name=_type_name(raw.get("type")))


def _build_property(raw, schemas: dict, expanding: frozenset):
    schema = build_schema(raw, schemas, expanding)
    if isinstance(schema, UnresolvedSchema):
        return PrimitiveSchema()
    return schema


def flatten(schema, prefix: str = "") -> dict[str, str | None]:
    """Flatten a resolved schema into ``{dotted path: type name}``.

    A missing or unresolved schema contributes no fields. A root leaf is
    recorded under ``"."``.
    """
    if schema is None or isinstance(schema, UnresolvedSchema):
        return {}

    if isinstance(schema, ObjectSchema):
        fields = {}
        for name, child in schema.properties.items():
            fields.update(flatten(child, f"{prefix}.{name}"))
        return fields

    return {prefix or ".": schema.type_name}


def _type_name(declared) -> str | None:
    # OpenAPI 3.1 allows a list of types, e.g. ["string", "null"]
    if isinstance(declared, list):
        return "|".join(str(t) for t in declared)
    return None if declared is None else str(declared)
