# =============================================================================
# tools/arcade_tool.py  -  Arcade Tools as Google ADK Tools
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Turns each Arcade catalog record into an ADK tool the agent can call.
#   Each ArcadeTool carries three things:
#
#     input_model    pydantic model built from the record's JSON Schema
#     declaration    what the LLM sees (name, description, parameters)
#     execute()      the call to Arcade, with the authorization-required
#                    recovery path
#
# HOW A CALL FLOWS:
#   1. The model decides to call e.g. "Github_CreateIssue"
#   2. ADK calls run_async() with the model's arguments
#   3. We validate them against input_model
#   4. arcade.tools.execute(tool_name, input, user_id)
#   5a. Success -> Arcade's result goes back to the model unchanged
#   5b. Permission denied -> arcade.tools.authorize() gives us a URL, and
#       the model gets {"authorization_required": true, "url": ..., ...}
#       as a NORMAL result.  The prompt tells it to show the URL to the user.
#   5c. Any other error -> re-raised, ADK's own error path handles it
#
# WHICH USER?
#   The user id comes from the ADK session (tool_context.user_id).  The
#   configured ARCADE_USER_ID is only the fallback, so one process can serve
#   several users without code changes.
# =============================================================================

import json
import logging
from typing import Any, Optional

import arcadepy
from arcadepy import Arcade, AsyncArcade
from google.adk.tools.base_tool import BaseTool
from google.adk.tools.tool_context import ToolContext
from google.genai import types
from pydantic import BaseModel, ValidationError

from core.authorization import authorization_response, is_authorization_required
from core.descriptors import parse_descriptor
from core.errors import UnsupportedSchemaError
from core.models import AuthorizationResponse, ToolDescriptor
from core.registry import DuplicatePolicy, build_registry
from core.schema import json_schema_to_model, validate_input
from tools.catalog import fetch_tool_catalog
from tools.declarations import build_declaration


# Exception types arcadepy raises when the user hasn't granted access.
PLATFORM_AUTHORIZATION_ERRORS = (arcadepy.PermissionDeniedError,)

# =============================================================================
# Logging helpers
# =============================================================================
# Same color scheme as the rest of the console output:
#   CYAN   = tool call + arguments
#   YELLOW = status (authorization needed, bad arguments)
#   GREEN  = what goes back to the model
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"


def _log_request(tool_name: str, params: dict[str, Any]) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: Any) -> Any:
    """Log the tool response as compact JSON in GREEN, then return it."""
    logging.info(
        f"{_GREEN}  ← {tool_name} response: {json.dumps(result, separators=(',', ':'), default=str)}{_RESET}"
    )
    return result


# =============================================================================
# The tool
# =============================================================================
class ArcadeTool(BaseTool):
    """An ADK tool that forwards calls to one Arcade tool."""

    def __init__(
        self,
        descriptor: ToolDescriptor,
        client: AsyncArcade,
        user_id: str,
        match_error_messages: bool = True,
    ):
        # Build the validator first: an unsupported schema raises
        # UnsupportedSchemaError and the tool is never registered.
        self.input_model: type[BaseModel] = json_schema_to_model(descriptor.name, descriptor.parameters)
        super().__init__(name=descriptor.name, description=descriptor.description)
        self.descriptor = descriptor
        try:
            self._declaration = build_declaration(descriptor.name, descriptor.description, descriptor.parameters)
        except (TypeError, ValueError) as exc:
            raise UnsupportedSchemaError("parameters", "", f"no function declaration: {exc}") from exc
        self._client = client
        self._user_id = user_id
        self._match_error_messages = match_error_messages

    def _get_declaration(self) -> Optional[types.FunctionDeclaration]:
        return self._declaration

    async def execute(self, args: dict[str, Any], user_id: Optional[str] = None) -> Any:
        """Run the tool on Arcade for ``user_id``.

        Returns Arcade's result unchanged, or an AuthorizationResponse when
        the user must grant access first.  Raises pydantic's ValidationError
        for bad arguments and re-raises every other platform error as is.
        """
        user_id = user_id or self._user_id
        tool_input = validate_input(self.input_model, args)
        try:
            return await self._client.tools.execute(tool_name=self.name, input=tool_input, user_id=user_id)
        except Exception as exc:
            if not is_authorization_required(exc, PLATFORM_AUTHORIZATION_ERRORS, self._match_error_messages):
                raise
            _log_status(f"{self.name} needs authorization for {user_id}")
            auth = await self._client.tools.authorize(tool_name=self.name, user_id=user_id)
            if not auth.url:
                # Nothing to send the user to (already authorized); the
                # original failure stands.
                raise
            return authorization_response(auth.url)

    async def run_async(self, *, args: dict[str, Any], tool_context: ToolContext) -> Any:
        _log_request(self.name, args)
        user_id = getattr(tool_context, "user_id", None) or self._user_id
        try:
            result = await self.execute(args, user_id=user_id)
        except ValidationError as exc:
            # Let the model fix its own arguments instead of failing the turn.
            _log_status(f"invalid arguments for {self.name}")
            return _log_response(self.name, {"error": f"Invalid arguments for {self.name}: {exc}"})
        return _log_response(self.name, _to_payload(result))


def _to_payload(result: Any) -> Any:
    if isinstance(result, AuthorizationResponse):
        return result.to_dict()
    if isinstance(result, BaseModel):
        # arcadepy responses are pydantic models
        return result.model_dump(mode="json")
    return result


# =============================================================================
# Startup pipeline: catalog -> validated, adapted tools
# =============================================================================
def adapt_tool(
    record: Any,
    client: AsyncArcade,
    user_id: str,
    match_error_messages: bool = True,
) -> ArcadeTool:
    """Validate one raw catalog record and wrap it as an ArcadeTool."""
    return ArcadeTool(parse_descriptor(record), client, user_id, match_error_messages)


def load_arcade_tools(
    catalog_client: Arcade,
    tool_client: AsyncArcade,
    user_id: str,
    toolkit: Optional[str] = None,
    duplicates: DuplicatePolicy = DuplicatePolicy.OVERRIDE,
    match_error_messages: bool = True,
) -> dict[str, ArcadeTool]:
    """Fetch ``toolkit`` from Arcade and return the finished tool registry.

    Blocks on one catalog request.  Invalid or unsupported records are
    skipped with a warning; catalog errors propagate.
    """
    records = fetch_tool_catalog(catalog_client, toolkit=toolkit, user_id=user_id)
    registry = build_registry(
        records,
        lambda record: adapt_tool(record, tool_client, user_id, match_error_messages),
        duplicates=duplicates,
    )
    logging.info("Registered %d Arcade tools: %s", len(registry), ", ".join(sorted(registry)))
    return registry
