# =============================================================================
# tools/__init__.py
# =============================================================================
# This package is the translation layer between Arcade and Google ADK.
#
#   catalog.py       fetch the raw tool list from Arcade
#   declarations.py  JSON Schema -> the function declaration the LLM sees
#   arcade_tool.py   ArcadeTool (the ADK tool) and the startup pipeline
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT decide which tool to call (that's the agent's job)
#   - They do NOT contain validation or classification rules (core/)
#   - They do NOT retry, cache, or store authorization state
# =============================================================================
