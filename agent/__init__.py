# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent configuration.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer only wires things together.  It:
#     1. Reads the settings (user id, toolkit, model)
#     2. Asks tools/ for the finished Arcade tool registry
#     3. Binds registry, prompt and model into one ADK Agent
#
# It does NOT talk to Arcade itself and contains no schema or error logic;
# that lives in tools/ and core/.
# =============================================================================
