# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the framework-agnostic half of the Arcade adapter:
# record validation, JSON Schema conversion, the registry fold, and
# authorization-error classification.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK or arcadepy.  Every module
#   here depends only on pydantic and the standard library, so it can be
#   tested without credentials or network access.  The ADK and Arcade
#   wiring lives in tools/ and agent/.
# =============================================================================
