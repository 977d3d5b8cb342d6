# =============================================================================
# core/registry.py  -  Catalog Records -> Tool Registry
# =============================================================================
#
# Folds the raw catalog into a name -> tool mapping, one record at a time.
# A broken record never stops the fold: it's logged and skipped.  Duplicate
# names follow an explicit policy instead of whatever a dict happens to do.
#
# This module doesn't know what a "tool" is.  The caller passes ``adapt``,
# a function from raw record to finished tool, so the same fold works for
# ADK tools in production and plain objects in tests.
# =============================================================================

import enum
import json
import logging
from typing import Any, Callable, Iterable, TypeVar

from core.errors import DuplicateToolError, SchemaValidationError, UnsupportedSchemaError


T = TypeVar("T")


class DuplicatePolicy(str, enum.Enum):
    OVERRIDE = "override"   # last record wins, a warning is logged
    ERROR = "error"         # startup fails with DuplicateToolError


def build_registry(
    records: Iterable[Any],
    adapt: Callable[[Any], T],
    duplicates: DuplicatePolicy = DuplicatePolicy.OVERRIDE,
) -> dict[str, T]:
    """Adapt every valid record and key the results by tool name.

    ``adapt`` must return an object with a ``name`` attribute and may raise
    SchemaValidationError or UnsupportedSchemaError for records it can't
    handle.  Any other exception propagates.
    """
    registry: dict[str, T] = {}
    for record in records:
        try:
            tool = adapt(record)
        except (SchemaValidationError, UnsupportedSchemaError) as exc:
            logging.warning("Skipping tool due to invalid schema: %s (%s)", _describe(record), exc)
            continue

        name = tool.name
        if name in registry:
            if duplicates is DuplicatePolicy.ERROR:
                raise DuplicateToolError(name)
            logging.warning("Duplicate tool name %r in catalog, keeping the later definition", name)
        registry[name] = tool
    return registry


def _describe(record: Any) -> str:
    try:
        return json.dumps(record, default=str)
    except (TypeError, ValueError):
        return repr(record)
