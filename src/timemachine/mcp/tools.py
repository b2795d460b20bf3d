"""History tools for the MCP server."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict

from ..errors import RepositoryError, RequestValidationFailure
from ..history import generate_history, reset_history
from ..validation import validate_history_request

if TYPE_CHECKING:
    from .server import TimeMachineServer

logger = logging.getLogger(__name__)


def generate_history_tool(server: TimeMachineServer, args: Dict[str, Any]) -> str:
    """Synthesize commits for a date range.

    Parameters
    ----------
    server:
        Server holding the driver and synthesizer
    args:
        Tool arguments containing 'startDate', 'endDate' and optional 'intensity'

    Returns
    -------
    JSON string with the generation summary or an error
    """
    try:
        request = validate_history_request(args, server.config.default_intensity)
    except RequestValidationFailure as e:
        return json.dumps({"error": str(e)}, indent=2)

    try:
        result = generate_history(request, server.driver, server.synthesizer)
    except RepositoryError as e:
        logger.error("generate_history tool failed: %s", e)
        return json.dumps({"error": f"Generation failed: {e}"}, indent=2)
    return json.dumps(result.to_dict(), indent=2)


def reset_history_tool(server: TimeMachineServer, args: Dict[str, Any]) -> str:
    """Reset the repository to its root commit."""
    try:
        result = reset_history(server.driver)
    except RepositoryError as e:
        return json.dumps({"error": f"Reset failed: {e}"}, indent=2)
    return json.dumps(result.to_dict(), indent=2)


def register_tools(server: TimeMachineServer) -> None:
    """Register history tools with the MCP server.

    Parameters
    ----------
    server:
        MCP server instance
    """
    server.register_tool(
        name="generate_history",
        description="Synthesize backdated commits across an inclusive date range",
        input_schema={
            "type": "object",
            "properties": {
                "startDate": {"type": "string", "description": "ISO date of the first day"},
                "endDate": {"type": "string", "description": "ISO date of the last day"},
                "intensity": {
                    "type": "number",
                    "description": "Weekday commit probability in [0, 1] (default: 0.5)",
                },
            },
            "required": ["startDate", "endDate"],
        },
        handler=generate_history_tool,
    )

    server.register_tool(
        name="reset_history",
        description="Discard synthesized history by resetting to the root commit",
        input_schema={
            "type": "object",
            "properties": {},
        },
        handler=reset_history_tool,
    )
