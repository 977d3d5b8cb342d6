# =============================================================================
# tools/declarations.py  -  JSON Schema -> google.genai FunctionDeclaration
# =============================================================================
#
# The pydantic model from core/schema.py VALIDATES input.  This module builds
# what the model SEES: the function declaration ADK sends to the LLM (and
# LiteLlm translates into Anthropic's tool format).
#
# It only runs on schemas core/schema.py already accepted, so it can assume
# every keyword is one it knows.  Constraints the declaration format can't
# carry (non-string enums, multipleOf) are still enforced by the validator.
# =============================================================================

from typing import Any

from google.genai import types


_TYPES = {
    "string": types.Type.STRING,
    "integer": types.Type.INTEGER,
    "number": types.Type.NUMBER,
    "boolean": types.Type.BOOLEAN,
    "array": types.Type.ARRAY,
    "object": types.Type.OBJECT,
}

# JSON Schema keyword -> types.Schema attribute
_PASSTHROUGH = {
    "description": "description",
    "title": "title",
    "format": "format",
    "pattern": "pattern",
    "minimum": "minimum",
    "maximum": "maximum",
}

_COUNTS = {
    "minLength": "min_length",
    "maxLength": "max_length",
    "minItems": "min_items",
    "maxItems": "max_items",
}

# Constraint -> the JSON types it means something for
_APPLIES_TO = {
    "pattern": ("string",),
    "minLength": ("string",),
    "maxLength": ("string",),
    "minimum": ("integer", "number"),
    "maximum": ("integer", "number"),
    "minItems": ("array",),
    "maxItems": ("array",),
}


def build_declaration(name: str, description: str, parameters: dict[str, Any]) -> types.FunctionDeclaration:
    return types.FunctionDeclaration(
        name=name,
        description=description,
        parameters=to_genai_schema(parameters, force_object=True),
    )


def to_genai_schema(schema: Any, force_object: bool = False) -> types.Schema:
    if not isinstance(schema, dict):
        # `true` / {}: any value
        return types.Schema()

    kwargs: dict[str, Any] = {}
    json_types = schema.get("type")
    if isinstance(json_types, str):
        json_types = [json_types]
    json_types = list(json_types or [])
    if "null" in json_types:
        kwargs["nullable"] = True
        json_types.remove("null")
    if not json_types:
        if force_object or "properties" in schema:
            json_types = ["object"]
        elif "items" in schema:
            json_types = ["array"]

    if len(json_types) > 1:
        # e.g. ["string", "integer"]: one member per type, each keeping only
        # the constraints for its own type
        kwargs["any_of"] = [to_genai_schema({**schema, "type": member}) for member in json_types]
        if "description" in schema:
            kwargs["description"] = schema["description"]
        return types.Schema(**kwargs)

    json_type = json_types[0] if json_types else None
    if json_type:
        kwargs["type"] = _TYPES[json_type]

    for key, attr in _PASSTHROUGH.items():
        if key in schema and _applies(key, json_type):
            kwargs[attr] = schema[key]
    for key, attr in _COUNTS.items():
        if key in schema and _applies(key, json_type):
            kwargs[attr] = int(schema[key])
    if "default" in schema:
        kwargs["default"] = schema["default"]

    values = schema.get("enum")
    if values is None and "const" in schema:
        values = [schema["const"]]
    if values and all(isinstance(value, str) for value in values):
        kwargs["enum"] = list(values)

    if json_type in (None, "object"):
        if "properties" in schema:
            kwargs["properties"] = {
                prop: to_genai_schema(prop_schema) for prop, prop_schema in schema["properties"].items()
            }
        if schema.get("required"):
            kwargs["required"] = list(schema["required"])
    if json_type in (None, "array"):
        if "items" in schema:
            kwargs["items"] = to_genai_schema(schema["items"])
        elif json_type == "array":
            kwargs["items"] = types.Schema()

    return types.Schema(**kwargs)


def _applies(key: str, json_type: Any) -> bool:
    if json_type is None or key not in _APPLIES_TO:
        return True
    return json_type in _APPLIES_TO[key]
