"""
Unit tests for ArcadeTool and the startup pipeline.
"""

import logging
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from google.genai import types
from pydantic import BaseModel, ValidationError

from core.errors import UnsupportedSchemaError
from core.models import AuthorizationResponse
from core.registry import DuplicatePolicy
from tools.arcade_tool import ArcadeTool, adapt_tool, load_arcade_tools
from tests.conftest import AUTH_URL, make_record, permission_denied_error


USER_ID = "user@example.com"


class TestArcadeToolAdaptation:
    """Test what the adapted tool exposes to ADK."""

    def test_identity(self, create_issue_record, tool_client):
        """Test that the ADK tool keeps the Arcade name and description."""
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        assert isinstance(tool, ArcadeTool)
        assert tool.name == "create_issue"
        assert tool.description == "Create a GitHub issue"
        assert tool.descriptor.parameters["required"] == ["title"]

    def test_declaration(self, create_issue_record, tool_client):
        """Test the function declaration the model sees."""
        declaration = adapt_tool(create_issue_record, tool_client, USER_ID)._get_declaration()

        assert declaration.name == "create_issue"
        assert declaration.parameters.type == types.Type.OBJECT
        assert declaration.parameters.required == ["title"]
        assert declaration.parameters.properties["title"].type == types.Type.STRING

    def test_unsupported_schema(self, tool_client):
        """Test that an unconvertible schema never becomes a tool."""
        record = make_record("union", parameters={"type": "object", "properties": {"x": {"oneOf": []}}})
        with pytest.raises(UnsupportedSchemaError):
            adapt_tool(record, tool_client, USER_ID)

    def test_declaration_failure_rejects_tool(self, create_issue_record, tool_client):
        """Test that a schema the declaration can't carry is rejected, not fatal."""
        with patch("tools.arcade_tool.build_declaration", side_effect=ValueError("bad minimum")):
            with pytest.raises(UnsupportedSchemaError) as exc_info:
                adapt_tool(create_issue_record, tool_client, USER_ID)

        assert "bad minimum" in str(exc_info.value)


class TestExecute:
    """Test ArcadeTool.execute() outcomes."""

    @pytest.mark.asyncio
    async def test_success_returns_result_unchanged(self, create_issue_record, tool_client):
        """Test that Arcade's result comes back as is."""
        result = {"id": 42}
        tool_client.tools.execute.return_value = result
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        assert await tool.execute({"title": "Bug"}) is result
        tool_client.tools.execute.assert_awaited_once_with(
            tool_name="create_issue", input={"title": "Bug"}, user_id=USER_ID
        )
        tool_client.tools.authorize.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_explicit_user_id(self, create_issue_record, tool_client):
        """Test that a per-call user id overrides the configured one."""
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        await tool.execute({"title": "Bug"}, user_id="other@example.com")

        assert tool_client.tools.execute.await_args.kwargs["user_id"] == "other@example.com"

    @pytest.mark.asyncio
    async def test_permission_denied_returns_authorization(self, create_issue_record, tool_client):
        """Test that arcadepy's PermissionDeniedError becomes a URL, not an exception."""
        tool_client.tools.execute.side_effect = permission_denied_error()
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        result = await tool.execute({"title": "Bug"})

        assert isinstance(result, AuthorizationResponse)
        assert result.to_dict() == {
            "authorization_required": True,
            "url": AUTH_URL,
            "message": "Forward this url to the user for authorization",
        }
        tool_client.tools.authorize.assert_awaited_once_with(tool_name="create_issue", user_id=USER_ID)

    @pytest.mark.asyncio
    async def test_authorization_required_message(self, create_issue_record, tool_client):
        """Test the message fallback for errors without a structured type."""
        tool_client.tools.execute.side_effect = RuntimeError("authorization required")
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        result = await tool.execute({"title": "Bug"})

        assert result.authorization_required is True
        assert result.url == AUTH_URL

    @pytest.mark.asyncio
    async def test_message_fallback_disabled(self, create_issue_record, tool_client):
        """Test that with message matching off, only typed errors are recovered."""
        error = RuntimeError("authorization required")
        tool_client.tools.execute.side_effect = error
        tool = adapt_tool(create_issue_record, tool_client, USER_ID, match_error_messages=False)

        with pytest.raises(RuntimeError) as exc_info:
            await tool.execute({"title": "Bug"})

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_other_errors_reraised(self, create_issue_record, tool_client):
        """Test that unrelated errors propagate unmodified."""
        error = RuntimeError("rate limit exceeded")
        tool_client.tools.execute.side_effect = error
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        with pytest.raises(RuntimeError) as exc_info:
            await tool.execute({"title": "Bug"})

        assert exc_info.value is error
        tool_client.tools.authorize.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_url_reraises(self, create_issue_record, tool_client):
        """Test that an authorization with no URL leaves the original error standing."""
        error = permission_denied_error()
        tool_client.tools.execute.side_effect = error
        tool_client.tools.authorize.return_value = SimpleNamespace(url=None, status="completed")
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        with pytest.raises(type(error)) as exc_info:
            await tool.execute({"title": "Bug"})

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, create_issue_record, tool_client):
        """Test that arguments are validated before anything is sent."""
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        with pytest.raises(ValidationError):
            await tool.execute({})

        tool_client.tools.execute.assert_not_awaited()


class TestRunAsync:
    """Test the ADK entry point."""

    @pytest.mark.asyncio
    async def test_user_id_from_session(self, create_issue_record, tool_client):
        """Test that the ADK session's user id is forwarded to Arcade."""
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)
        context = SimpleNamespace(user_id="session-user@example.com")

        await tool.run_async(args={"title": "Bug"}, tool_context=context)

        assert tool_client.tools.execute.await_args.kwargs["user_id"] == "session-user@example.com"

    @pytest.mark.asyncio
    async def test_user_id_fallback(self, create_issue_record, tool_client):
        """Test that the configured user id is used when the context has none."""
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        await tool.run_async(args={"title": "Bug"}, tool_context=SimpleNamespace())

        assert tool_client.tools.execute.await_args.kwargs["user_id"] == USER_ID

    @pytest.mark.asyncio
    async def test_authorization_as_dict(self, create_issue_record, tool_client):
        """Test that the model receives a plain dict for authorization results."""
        tool_client.tools.execute.side_effect = permission_denied_error()
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        result = await tool.run_async(args={"title": "Bug"}, tool_context=SimpleNamespace())

        assert result == {
            "authorization_required": True,
            "url": AUTH_URL,
            "message": "Forward this url to the user for authorization",
        }

    @pytest.mark.asyncio
    async def test_pydantic_result_dumped(self, create_issue_record, tool_client):
        """Test that arcadepy response models are turned into dicts."""

        class FakeResponse(BaseModel):
            success: bool
            output: dict

        tool_client.tools.execute.return_value = FakeResponse(success=True, output={"value": {"id": 42}})
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        result = await tool.run_async(args={"title": "Bug"}, tool_context=SimpleNamespace())

        assert result == {"success": True, "output": {"value": {"id": 42}}}

    @pytest.mark.asyncio
    async def test_invalid_arguments_reported(self, create_issue_record, tool_client):
        """Test that bad arguments come back as an error the model can read."""
        tool = adapt_tool(create_issue_record, tool_client, USER_ID)

        result = await tool.run_async(args={"title": 7}, tool_context=SimpleNamespace())

        assert "error" in result
        assert "create_issue" in result["error"]
        tool_client.tools.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_null_for_optional_field_not_forwarded(self, tool_client):
        """Test that null for a non-nullable optional field never reaches Arcade."""
        record = make_record(
            "create_issue",
            parameters={
                "type": "object",
                "properties": {"title": {"type": "string"}, "body": {"type": "string"}},
                "required": ["title"],
            },
        )
        tool = adapt_tool(record, tool_client, USER_ID)

        with pytest.raises(ValidationError):
            await tool.execute({"title": "Bug", "body": None})
        result = await tool.run_async(args={"title": "Bug", "body": None}, tool_context=SimpleNamespace())

        assert "error" in result
        tool_client.tools.execute.assert_not_awaited()


class TestLoadArcadeTools:
    """Test the startup pipeline: catalog fetch + registry build."""

    def test_builds_registry(self, catalog_client, tool_client, create_issue_record):
        """Test that valid records are registered and broken ones skipped."""
        broken = make_record("broken")
        del broken["function"]["description"]
        catalog_client.tools.formatted.list.return_value = [create_issue_record, broken, make_record("list_repos")]

        registry = load_arcade_tools(catalog_client, tool_client, USER_ID, toolkit="github")

        assert set(registry) == {"create_issue", "list_repos"}
        catalog_client.tools.formatted.list.assert_called_once_with(
            format="openai", toolkit="github", user_id=USER_ID
        )

    def test_duplicate_policy_passed_through(self, catalog_client, tool_client):
        """Test that the error policy reaches the registry fold."""
        from core.errors import DuplicateToolError

        catalog_client.tools.formatted.list.return_value = [make_record("a"), make_record("a")]

        with pytest.raises(DuplicateToolError):
            load_arcade_tools(catalog_client, tool_client, USER_ID, duplicates=DuplicatePolicy.ERROR)

    @pytest.mark.parametrize(
        "parameters",
        [
            {"type": "object", "properties": {"ref": {"type": "string", "pattern": "(?<=refs/"}}},
            {"type": "object", "properties": {"title": {"type": "string"}}, "required": 5},
            {"type": "object", "properties": {"title": {"type": {"const": "string"}}}},
            {"type": "object", "properties": [{"name": "title", "type": "string"}]},
            {"type": "object", "properties": {"title": {"type": "string", "minLength": "3"}}},
            {"type": "object", "properties": {"title": {"type": "string", "minimum": "low"}}},
        ],
    )
    def test_malformed_schema_skipped(self, catalog_client, tool_client, parameters, caplog):
        """Test that one broken schema is skipped and its neighbour still loads."""
        catalog_client.tools.formatted.list.return_value = [
            make_record("broken", parameters=parameters),
            make_record("list_repos"),
        ]

        with caplog.at_level(logging.WARNING):
            registry = load_arcade_tools(catalog_client, tool_client, USER_ID)

        assert set(registry) == {"list_repos"}
        assert "Skipping tool due to invalid schema" in caplog.text

    def test_look_ahead_pattern_loads(self, catalog_client, tool_client):
        """Test that a look-ahead pattern is a working tool, not a startup failure."""
        catalog_client.tools.formatted.list.return_value = [
            make_record(
                "get_branch",
                parameters={
                    "type": "object",
                    "properties": {"ref": {"type": "string", "pattern": "^(?!refs/).+$"}},
                    "required": ["ref"],
                },
            ),
            make_record("list_repos"),
        ]

        registry = load_arcade_tools(catalog_client, tool_client, USER_ID)

        assert set(registry) == {"get_branch", "list_repos"}
        assert registry["get_branch"]._get_declaration().parameters.properties["ref"].pattern == "^(?!refs/).+$"


class TestEndToEnd:
    """The create_issue scenario from catalog to result."""

    @pytest.mark.asyncio
    async def test_create_issue(self, catalog_client, tool_client, create_issue_record):
        catalog_client.tools.formatted.list.return_value = [create_issue_record]
        registry = load_arcade_tools(catalog_client, tool_client, USER_ID, toolkit="github")
        tool = registry["create_issue"]

        tool_client.tools.execute.return_value = {"id": 42}
        assert await tool.execute({"title": "Bug"}) == {"id": 42}

        tool_client.tools.execute.side_effect = permission_denied_error()
        result = await tool.execute({"title": "Bug"})
        assert result.to_dict() == {
            "authorization_required": True,
            "url": AUTH_URL,
            "message": "Forward this url to the user for authorization",
        }
