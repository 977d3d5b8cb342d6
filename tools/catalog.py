# =============================================================================
# tools/catalog.py  -  Tool Catalog Fetcher
# =============================================================================
#
# One job: ask Arcade which tools exist.  We request the OpenAI function
# format because it carries exactly what an ADK tool needs: a name, a
# description, and a JSON Schema for the parameters.
#
# FAILURE MODE:
#   Nothing is caught here.  A bad API key or a network error raises
#   arcadepy's APIError family straight into create_agent(), and startup
#   fails.  There is no retry and no partial catalog.
# =============================================================================

import logging
from typing import Any, Optional

from arcadepy import Arcade


def fetch_tool_catalog(
    client: Arcade,
    toolkit: Optional[str] = None,
    user_id: Optional[str] = None,
) -> list[Any]:
    """Return the raw (unvalidated) tool records for ``toolkit``.

    Iterating the returned page walks every page of the catalog, so large
    toolkits come back complete.
    """
    params: dict[str, Any] = {"format": "openai"}
    if toolkit:
        params["toolkit"] = toolkit
    if user_id:
        params["user_id"] = user_id

    page = client.tools.formatted.list(**params)
    records = list(page)
    logging.info("Fetched %d tool definitions from Arcade (toolkit=%s)", len(records), toolkit or "*")
    return records
