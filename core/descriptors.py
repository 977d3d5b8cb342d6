# =============================================================================
# core/descriptors.py  -  Minimum-Shape Check for Catalog Records
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Arcade hands us tool definitions in the OpenAI function-call format:
#
#     {"type": "function",
#      "function": {"name": "...", "description": "...", "parameters": {...}}}
#
#   Before we build anything from a record we make sure it has the three
#   fields an ADK tool can't live without.  Everything else in the record
#   (type, strict, ...) is ignored.
#
# WHY PYDANTIC STRICT TYPES?
#   A name of 42 or a description of None would otherwise be coerced or
#   accepted and blow up later inside ADK with a much worse message.
# =============================================================================

from typing import Any

from pydantic import BaseModel, StrictStr, ValidationError

from core.errors import SchemaValidationError
from core.models import ToolDescriptor


class _FunctionShape(BaseModel):
    name: StrictStr
    parameters: dict[str, Any]
    description: StrictStr


class _OpenAIToolShape(BaseModel):
    function: _FunctionShape


def parse_descriptor(record: Any) -> ToolDescriptor:
    """Validate one raw catalog record and turn it into a ToolDescriptor.

    Accepts both the OpenAI envelope (``{"function": {...}}``) and a bare
    function object.  Raises SchemaValidationError when the name,
    parameters, or description is missing or has the wrong type.
    """
    if isinstance(record, dict) and "function" not in record and "name" in record:
        record = {"function": record}

    try:
        shape = _OpenAIToolShape.model_validate(record)
    except ValidationError as exc:
        raise SchemaValidationError(
            f"invalid tool definition: {exc.error_count()} error(s)", record=record
        ) from exc

    fn = shape.function
    return ToolDescriptor(name=fn.name, description=fn.description, parameters=fn.parameters)
