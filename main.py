# =============================================================================
# main.py  -  Entry Point for the GitHub Arcade Agent
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads .env (ARCADE_API_KEY, ANTHROPIC_API_KEY, ARCADE_USER_ID, ...)
#   2. Fetches the GitHub toolkit from Arcade and builds the agent
#      (agent/github_agent.py).  This blocks until every tool is adapted.
#   3. Starts an interactive session for ARCADE_USER_ID
#   4. Streams the agent's response, printing tool calls as they happen
#   5. Prints any authorization URL a tool returned, so the user can grant
#      access and ask again
# =============================================================================

import asyncio
import logging
import sys

from dotenv import load_dotenv

# Load environment variables from .env BEFORE creating the agent: arcadepy
# reads ARCADE_API_KEY and LiteLlm reads ANTHROPIC_API_KEY when they start.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.github_agent import create_agent
from core.settings import Settings


APP_NAME = "github_arcade_agent"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [ARCADE] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


async def run_agent():
    """Run the GitHub agent interactively."""
    settings = Settings()

    # =========================================================================
    # Step 1: Create the agent (blocks on the Arcade catalog fetch)
    # =========================================================================
    print("=" * 70)
    print("  GITHUB AGENT")
    print("  Powered by Google ADK + Anthropic Claude + Arcade")
    print("=" * 70)
    print(f"\n🔧 Loading '{settings.toolkit or 'all'}' tools from Arcade...")
    agent = create_agent(settings)

    # =========================================================================
    # Step 2: Runner and session
    # =========================================================================
    # The session's user_id is what ArcadeTool forwards to Arcade, so the
    # authorization URL is issued for the right person.
    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(
        app_name=APP_NAME,
        user_id=settings.user_id,
    )

    print(f"✅ Agent ready with {len(agent.tools)} tools (user: {settings.user_id})\n")
    print("💬 Ask the agent to do something on GitHub!")
    print("   (Type 'quit' to exit)\n")
    print("-" * 70)

    # =========================================================================
    # Step 3: Interactive loop
    # =========================================================================
    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue

        user_message = types.Content(
            role="user",
            parts=[types.Part(text=user_input)],
        )

        print("\n🤖 Agent is thinking...\n")
        print("-" * 70)

        final_response = ""
        authorization_urls: list[str] = []

        async for event in runner.run_async(
            user_id=settings.user_id,
            session_id=session.id,
            new_message=user_message,
        ):
            if not (event.content and event.content.parts):
                continue
            for part in event.content.parts:
                if part.text:
                    final_response = part.text

                if part.function_call:
                    print(f"  🔧 Calling tool: {part.function_call.name}")

                if part.function_response:
                    url = _authorization_url(part.function_response.response)
                    if url:
                        authorization_urls.append(url)

        print("-" * 70)
        if final_response:
            print(f"\n🤖 Agent:\n\n{final_response}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")

        for url in authorization_urls:
            print(f"\n🔑 Authorization required. Visit:\n   {url}")

        print("\n" + "=" * 70)


def _authorization_url(response):
    """Pull the URL out of an authorization-required tool result, if any."""
    if isinstance(response, dict) and response.get("authorization_required"):
        return response.get("url")
    return None


if __name__ == "__main__":
    asyncio.run(run_agent())
