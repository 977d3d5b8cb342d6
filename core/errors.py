# =============================================================================
# core/errors.py  -  Error Taxonomy
# =============================================================================
#
# Four things can go wrong between Arcade and the agent:
#
#   1. The catalog fetch fails (network, bad API key).  That is NOT defined
#      here: arcadepy's own APIError family propagates untouched and kills
#      startup, because an agent without tools is useless.
#   2. A catalog record has the wrong shape          -> SchemaValidationError
#   3. A record's JSON Schema uses a feature we can't
#      enforce in pydantic                            -> UnsupportedSchemaError
#   4. A tool call fails because the user hasn't
#      granted access yet                             -> AuthorizationRequiredError
#
# (2) and (3) are NON-FATAL: the record is skipped and a warning is logged.
# (4) is RECOVERED: it becomes a normal return value carrying a URL.
# =============================================================================

from typing import Any, Optional


class ArcadeAgentError(Exception):
    """Base class for every error raised by this project."""


class SchemaValidationError(ArcadeAgentError):
    """A catalog record is missing its name, parameters, or description."""

    def __init__(self, message: str, record: Any = None):
        super().__init__(message)
        self.record = record


class UnsupportedSchemaError(ArcadeAgentError):
    """A JSON Schema feature has no equivalent in the input validator.

    Raised instead of silently dropping the constraint.  ``path`` points at
    the offending node, e.g. ``properties.labels.items``.
    """

    def __init__(self, keyword: str, path: str = "", detail: Optional[str] = None):
        location = path or "<root>"
        message = f"unsupported JSON Schema keyword '{keyword}' at {location}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.keyword = keyword
        self.path = path
        self.detail = detail


class DuplicateToolError(ArcadeAgentError):
    """Two catalog records share a name and duplicates are not allowed."""

    def __init__(self, name: str):
        super().__init__(f"duplicate tool name in catalog: {name}")
        self.name = name


class AuthorizationRequiredError(ArcadeAgentError):
    """The platform refused a tool call until the user authorizes it."""
