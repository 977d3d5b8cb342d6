# =============================================================================
# agent/github_agent.py  -  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds the one agent this project ships: a GitHub assistant whose tools
#   are loaded from Arcade at startup.
#
#   ┌──────────────────────────────────────────────────────────────────┐
#   │                       Google ADK Agent                           │
#   │                                                                  │
#   │  ┌─────────────┐    ┌──────────────┐    ┌───────────────────┐   │
#   │  │  System     │    │  LLM         │    │  ArcadeTool x N   │   │
#   │  │  Prompt     │───▶│  (Claude)    │───▶│  (tools/)         │   │
#   │  │             │    │  via LiteLlm │    │                   │   │
#   │  └─────────────┘    └──────────────┘    └───────────────────┘   │
#   └──────────────────────────────────────────────────────────────────┘
#                                                      │
#                                                      ▼
#                                          ┌─────────────────────┐
#                                          │  Arcade platform    │
#                                          │  tools.execute      │
#                                          │  tools.authorize    │
#                                          └─────────────────────┘
#
# STARTUP ORDER:
#   The tool registry is COMPLETE before the Agent is constructed.  There is
#   no lazy loading and no refresh: if the toolkit changes on Arcade's side,
#   restart the process.
# =============================================================================

import logging
from typing import Optional

from arcadepy import Arcade, AsyncArcade
from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm

from agent.prompt import GITHUB_AGENT_PROMPT
from core.settings import Settings
from tools.arcade_tool import load_arcade_tools


AGENT_NAME = "github_agent"


def create_agent(
    settings: Optional[Settings] = None,
    *,
    catalog_client: Optional[Arcade] = None,
    tool_client: Optional[AsyncArcade] = None,
) -> Agent:
    """Create the GitHub agent with its Arcade tools.

    Fetching the catalog is a blocking network call; any Arcade error
    raised by it propagates and no agent is created.

    Two clients are used: a synchronous one for the one-off catalog fetch
    during startup, and an async one for tool calls, which ADK runs on its
    event loop.  Both read ARCADE_API_KEY from the environment unless
    passed in.
    """
    settings = settings or Settings()
    catalog_client = catalog_client or Arcade()
    tool_client = tool_client or AsyncArcade()

    tools = load_arcade_tools(
        catalog_client,
        tool_client,
        user_id=settings.user_id,
        toolkit=settings.toolkit,
        duplicates=settings.duplicate_tools,
        match_error_messages=settings.match_error_messages,
    )
    if not tools:
        logging.warning("No usable Arcade tools found for toolkit %r", settings.toolkit)

    agent = Agent(
        name=AGENT_NAME,                                # Used in logs and traces
        model=LiteLlm(model=settings.model),            # Claude via LiteLlm
        instruction=GITHUB_AGENT_PROMPT,                # System prompt from prompt.py
        tools=list(tools.values()),                     # The complete registry
    )

    return agent
