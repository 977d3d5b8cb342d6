# =============================================================================
# core/authorization.py  -  "Does this error mean: ask the user first?"
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   When a tool call fails we have to decide between two very different
#   outcomes:
#
#     authorization missing  ->  return a URL the model forwards to the user
#     anything else          ->  re-raise, ADK's error path takes over
#
# HOW WE DECIDE (in order):
#   1. Structured: the error is one of the exception types the platform
#      client uses for "permission denied" (passed in by the caller), our
#      own AuthorizationRequiredError, or any class named
#      PermissionDeniedError.
#   2. Fallback: the message contains "permission denied" or
#      "authorization required".  This is a plain, case-sensitive substring
#      match, so an unrelated error that happens to contain one of these
#      phrases is misread as an authorization problem.  It can be switched
#      off with ARCADE_MATCH_ERROR_MESSAGES=false.
# =============================================================================

from typing import Iterable

from core.errors import AuthorizationRequiredError
from core.models import AUTHORIZATION_MESSAGE, AuthorizationResponse


AUTHORIZATION_ERROR_NAMES = ("PermissionDeniedError",)
AUTHORIZATION_PHRASES = ("permission denied", "authorization required")


def is_authorization_required(
    error: BaseException,
    error_types: Iterable[type] = (),
    match_messages: bool = True,
) -> bool:
    """Classify a failed tool call as an authorization problem or not."""
    structured = (AuthorizationRequiredError, *error_types)
    if isinstance(error, structured):
        return True
    if type(error).__name__ in AUTHORIZATION_ERROR_NAMES:
        return True
    if not match_messages:
        return False
    message = str(error)
    return any(phrase in message for phrase in AUTHORIZATION_PHRASES)


def authorization_response(url: str) -> AuthorizationResponse:
    return AuthorizationResponse(url=url, message=AUTHORIZATION_MESSAGE)
