# =============================================================================
# core/schema.py  -  JSON Schema -> pydantic Input Validator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Arcade describes each tool's input with a JSON Schema.  ADK tools
#   receive plain dicts from the model, so we build a pydantic model per tool
#   and validate every call against it before anything goes over the wire.
#
# THE MAPPING TABLE:
#   Every JSON Schema keyword we understand is listed below, grouped by what
#   it turns into.  A keyword that is NOT in one of these tables makes the
#   whole tool fail conversion with UnsupportedSchemaError.  We never guess
#   and never silently drop a constraint: a tool that is rejected is logged
#   and skipped, a tool that is accepted is enforced exactly.
#
#     JSON Schema                      pydantic
#     -----------                      --------
#     type: string/integer/...         str / int / float / bool / None
#     type: [a, b]                     Union[a, b]
#     type: array + items              list[item]
#     type: object + properties        nested model
#     enum / const                     Literal[...]
#     required                         required field vs may be absent
#                                      (null only where the type allows it)
#     additionalProperties: false      extra="forbid"  (absent/true: "allow")
#     minLength, minimum, ...          Field(min_length=..., ge=..., ...)
#     pattern                          Python re (look-ahead etc. work)
#     title, description, format, ...  annotations only
# =============================================================================

import keyword
import re
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, create_model
from pydantic_core import SchemaError

from core.errors import UnsupportedSchemaError


_SCALARS: dict[str, Any] = {
    "string": str,
    "integer": int,
    "number": float,
    "boolean": bool,
    "null": type(None),
}

# keyword -> (pydantic Field kwarg, JSON types it applies to)
_CONSTRAINTS: dict[str, tuple[str, frozenset]] = {
    "minLength": ("min_length", frozenset({"string"})),
    "maxLength": ("max_length", frozenset({"string"})),
    "pattern": ("pattern", frozenset({"string"})),
    "minimum": ("ge", frozenset({"integer", "number"})),
    "maximum": ("le", frozenset({"integer", "number"})),
    "exclusiveMinimum": ("gt", frozenset({"integer", "number"})),
    "exclusiveMaximum": ("lt", frozenset({"integer", "number"})),
    "multipleOf": ("multiple_of", frozenset({"integer", "number"})),
    "minItems": ("min_length", frozenset({"array"})),
    "maxItems": ("max_length", frozenset({"array"})),
}

_STRUCTURAL = frozenset({"type", "properties", "required", "items", "enum", "const", "additionalProperties"})

# Annotation-only keywords.  They describe, they don't validate.
_ANNOTATIONS = frozenset({"title", "description", "format", "examples", "default", "$schema", "$id", "$comment"})
_TEXT_ANNOTATIONS = ("title", "description", "format", "$schema", "$id", "$comment")

SUPPORTED_KEYWORDS = _STRUCTURAL | frozenset(_CONSTRAINTS) | _ANNOTATIONS


def json_schema_to_model(name: str, schema: dict[str, Any]) -> type[BaseModel]:
    """Build a pydantic model that validates input for one tool.

    ``schema`` must describe an object (a tool's ``parameters``).  Raises
    UnsupportedSchemaError when it uses a keyword outside the mapping table,
    or when a keyword's value is malformed.
    """
    if _json_types(schema, "") not in ([], ["object"]):
        raise UnsupportedSchemaError("type", "")
    try:
        return _object_model(_model_name(name), schema, "")
    except (SchemaError, TypeError, ValueError) as exc:
        raise UnsupportedSchemaError("parameters", "", str(exc)) from exc


def validate_input(model: type[BaseModel], arguments: dict[str, Any]) -> dict[str, Any]:
    """Validate ``arguments`` and return them the way Arcade expects them.

    Keys keep their original (aliased) spelling and optional fields the
    caller didn't send stay absent, so the platform applies its own defaults.
    """
    instance = model.model_validate(arguments)
    return instance.model_dump(mode="json", by_alias=True, exclude_unset=True)


# -----------------------------------------------------------------------------
# Internals
# -----------------------------------------------------------------------------


def _model_name(tool_name: str) -> str:
    cleaned = re.sub(r"\W", "_", tool_name) or "Tool"
    return f"{cleaned}Input"


def _check_keywords(schema: dict[str, Any], path: str) -> None:
    for key in schema:
        if key not in SUPPORTED_KEYWORDS:
            raise UnsupportedSchemaError(key, path)
    for key in _TEXT_ANNOTATIONS:
        if key in schema and not isinstance(schema[key], str):
            raise UnsupportedSchemaError(key, path, "expected a string")
    for key in _CONSTRAINTS:
        if key in schema:
            _check_constraint(key, schema[key], path)


def _check_constraint(key: str, value: Any, path: str) -> None:
    # Checked even where the constraint doesn't apply to the node's type:
    # the function declaration carries these values as they are.
    if key == "pattern":
        if not isinstance(value, str):
            raise UnsupportedSchemaError(key, path, "expected a string")
        try:
            re.compile(value)
        except re.error as exc:
            raise UnsupportedSchemaError(key, path, f"invalid regular expression: {exc}") from exc
    elif key in ("minLength", "maxLength", "minItems", "maxItems"):
        if not _is_number(value) or isinstance(value, float) or value < 0:
            raise UnsupportedSchemaError(key, path, "expected a non-negative integer")
    elif not _is_number(value):
        # also catches the draft-04 boolean exclusiveMinimum/exclusiveMaximum
        raise UnsupportedSchemaError(key, path, "expected a number")
    elif key == "multipleOf" and value <= 0:
        raise UnsupportedSchemaError(key, path, "expected a positive number")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _json_types(schema: dict[str, Any], path: str) -> list[str]:
    declared = schema.get("type")
    if declared is None:
        if "properties" in schema or schema.get("additionalProperties") is False:
            return ["object"]
        if "items" in schema:
            return ["array"]
        return []
    types = declared if isinstance(declared, list) else [declared]
    if not types:
        raise UnsupportedSchemaError("type", path, "empty type list")
    for json_type in types:
        if not isinstance(json_type, str):
            raise UnsupportedSchemaError("type", path, "expected a type name")
        if json_type not in _SCALARS and json_type not in ("array", "object"):
            raise UnsupportedSchemaError(f"type={json_type}", path)
    return types


def _allows_null(schema: Any) -> bool:
    """Whether ``null`` is a valid instance of ``schema``."""
    if not isinstance(schema, dict):
        return schema is True
    if "const" in schema:
        return schema["const"] is None
    if "enum" in schema:
        return None in schema["enum"]
    declared = schema.get("type")
    if declared is None:
        # untyped: anything goes, unless the shape implies object/array
        return not ("properties" in schema or "items" in schema or schema.get("additionalProperties") is False)
    return declared == "null" or (isinstance(declared, list) and "null" in declared)


def _python_type(schema: Any, path: str, model_name: str) -> Any:
    if schema is True or schema == {}:
        return Any
    if not isinstance(schema, dict):
        raise UnsupportedSchemaError("schema", path)
    _check_keywords(schema, path)

    if "const" in schema:
        return _literal([schema["const"]], "const", path)
    if "enum" in schema:
        return _literal(schema["enum"], "enum", path)

    types = _json_types(schema, path)
    if not types:
        if any(key in schema for key in _CONSTRAINTS):
            # A constraint with no type to hang it on can't be enforced.
            raise UnsupportedSchemaError(next(k for k in schema if k in _CONSTRAINTS), path)
        return Any

    members = [_member_type(json_type, schema, path, model_name) for json_type in types]
    if len(members) == 1:
        return members[0]
    return Union[tuple(members)]


def _member_type(json_type: str, schema: dict[str, Any], path: str, model_name: str) -> Any:
    if json_type == "object":
        base = _object_type(model_name, schema, path)
    elif json_type == "array":
        items = schema.get("items", True)
        if isinstance(items, list):
            raise UnsupportedSchemaError("items", path)
        base = list[_python_type(items, _join(path, "items"), f"{model_name}Item")]
    else:
        base = _SCALARS[json_type]

    constraints = {
        kwarg: schema[key]
        for key, (kwarg, applies_to) in _CONSTRAINTS.items()
        if key in schema and json_type in applies_to
    }
    if constraints:
        return Annotated[base, Field(**constraints)]
    return base


def _object_type(model_name: str, schema: dict[str, Any], path: str) -> Any:
    extra = schema.get("additionalProperties", True)
    if not isinstance(extra, bool):
        raise UnsupportedSchemaError("additionalProperties", path)
    if "properties" not in schema and "required" not in schema and extra:
        return dict[str, Any]
    return _object_model(model_name, schema, path)


def _object_model(model_name: str, schema: dict[str, Any], path: str) -> type[BaseModel]:
    _check_keywords(schema, path)
    extra = schema.get("additionalProperties", True)
    if not isinstance(extra, bool):
        raise UnsupportedSchemaError("additionalProperties", path)

    declared = schema.get("properties", {})
    if not isinstance(declared, dict) or not all(isinstance(prop, str) for prop in declared):
        raise UnsupportedSchemaError("properties", path, "expected an object")
    required = schema.get("required", [])
    if not isinstance(required, list) or not all(isinstance(prop, str) for prop in required):
        raise UnsupportedSchemaError("required", path, "expected a list of property names")

    properties = dict(declared)
    for prop in required:
        # required but never described: any value will do, but it must be there
        properties.setdefault(prop, True)

    fields: dict[str, Any] = {}
    for prop, prop_schema in properties.items():
        prop_path = _join(path, f"properties.{prop}")
        annotation = _python_type(prop_schema, prop_path, f"{model_name}_{_model_name(prop)}")
        field_name = _field_name(prop, fields, properties)

        field_kwargs: dict[str, Any] = {}
        if field_name != prop:
            field_kwargs["alias"] = prop
        if isinstance(prop_schema, dict) and isinstance(prop_schema.get("description"), str):
            field_kwargs["description"] = prop_schema["description"]

        if prop in required:
            fields[field_name] = (annotation, Field(..., **field_kwargs))
            continue
        # Optional means "may be left out", not "may be null".  The default
        # is never validated, so leaving the field out still works.
        default = prop_schema.get("default") if isinstance(prop_schema, dict) else None
        if _allows_null(prop_schema):
            annotation = Optional[annotation]
        fields[field_name] = (annotation, Field(default, **field_kwargs))

    config = ConfigDict(
        extra="allow" if extra else "forbid",
        populate_by_name=True,
        protected_namespaces=(),
        regex_engine="python-re",
    )
    try:
        return create_model(model_name, __config__=config, **fields)
    except (SchemaError, TypeError, ValueError) as exc:
        raise UnsupportedSchemaError("properties", path, str(exc)) from exc


def _field_name(prop: str, taken: dict[str, Any], properties: dict[str, Any]) -> str:
    if (
        prop.isidentifier()
        and not keyword.iskeyword(prop)
        and not prop.startswith("_")
        and not hasattr(BaseModel, prop)
    ):
        return prop
    index = len(taken)
    candidate = f"field_{index}"
    while candidate in taken or candidate in properties:
        index += 1
        candidate = f"field_{index}"
    return candidate


def _literal(values: Any, key: str, path: str) -> Any:
    if not isinstance(values, list) or not values:
        raise UnsupportedSchemaError(key, path)
    for value in values:
        if not isinstance(value, (str, int, float, bool)) and value is not None:
            raise UnsupportedSchemaError(key, path)
    return Literal[tuple(values)]


def _join(path: str, part: str) -> str:
    return f"{path}.{part}" if path else part
