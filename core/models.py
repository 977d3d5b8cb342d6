# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# Only two shapes cross the boundary between Arcade and the agent:
#
#   ToolDescriptor         what Arcade says a tool IS   (startup, read once)
#   AuthorizationResponse  what a tool call returns when the user still has
#                          to grant access              (per call, never stored)
#
# Both are frozen dataclasses.  A descriptor is consumed once to build an
# ADK tool and is never mutated afterwards; an authorization response is a
# value handed straight back to the model.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any


# Default text the model sees next to the authorization URL.
AUTHORIZATION_MESSAGE = "Forward this url to the user for authorization"


@dataclass(frozen=True)
class ToolDescriptor:
    """One callable capability as listed by the Arcade catalog."""

    name: str                          # "Github_CreateIssue" - also the ADK tool name
    description: str                   # Read by the LLM to decide WHEN to call it
    parameters: dict[str, Any] = field(default_factory=dict)
    # parameters is a JSON Schema object describing the accepted input.


@dataclass(frozen=True)
class AuthorizationResponse:
    """Returned (not raised) when a tool needs the user's permission first.

    The agent's instructions tell the model to show ``url`` to the user and
    ask them to visit it before trying again.
    """

    url: str
    message: str = AUTHORIZATION_MESSAGE
    authorization_required: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "authorization_required": self.authorization_required,
            "url": self.url,
            "message": self.message,
        }
