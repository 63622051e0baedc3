#!/usr/bin/env python3
"""
Operations assistant MCP server.

Exposes a single `ops_assistant(message="...")` tool that accepts an
operator's natural language request and answers it against a business
snapshot loaded from OPS_INTENT_SNAPSHOT_PATH. Changes made through the
tool live in memory for the lifetime of the server.

Port: 8891 (configurable via OPS_INTENT_MCP_PORT)
Transport: SSE
"""

import os
import sys
import logging
from typing import Optional

from fastmcp import FastMCP

from ops_intent import CommandInterpreter
from ops_intent.config import get_config
from ops_intent.ports import InMemoryStore, load_snapshot

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("fastmcp-ops-intent")

# Configuration
MCP_ENABLED = os.getenv("OPS_INTENT_MCP_ENABLED", "false").lower() == "true"
MCP_PORT = int(os.getenv("OPS_INTENT_MCP_PORT", "8891"))
MCP_HOST = os.getenv("OPS_INTENT_MCP_HOST", "0.0.0.0")

# Create FastMCP server
mcp = FastMCP(name="ops-intent-assistant")

# Built on first use so importing this module never reads the snapshot file
_interpreter: Optional[CommandInterpreter] = None


def get_interpreter() -> CommandInterpreter:
    """Load the snapshot and build the interpreter once."""
    global _interpreter
    if _interpreter is None:
        config = get_config()
        store = InMemoryStore(load_snapshot(config["snapshot_path"]))
        _interpreter = CommandInterpreter(store.snapshot, store, config)
        logger.info(f"Read-only: {config['read_only']}")
    return _interpreter


logger.info("=" * 60)
logger.info("Initializing FastMCP Operations Assistant Server")
logger.info(f"Port: {MCP_PORT}")
logger.info(f"Enabled: {MCP_ENABLED}")
logger.info("=" * 60)


@mcp.tool()
async def ops_assistant(message: str) -> str:
    """
    Ask the operations assistant to look something up or make a change.

    Args:
        message: What you want, in plain English.

    Examples:
        - "what is the projected revenue for this week?"
        - "is Marcus free tomorrow?"
        - "cancel the job for John Doe"
        - "draft a quote for Jane Smith for $500"
        - "create a new job for John Doe starts June 5th at 2pm"
        - "show overdue invoices"

    Returns:
        The assistant's reply. Markdown-style bold and links are preserved.
    """
    logger.info(f"Tool called: ops_assistant(message='{message[:80]}...')")

    interpreter = get_interpreter()
    result = await interpreter.respond(interpreter.config["conversation_id"], message)

    if not result.success and result.suggestions:
        output = result.output + "\n\n**Suggestions:**\n"
        for suggestion in result.suggestions:
            output += f"- {suggestion}\n"
        return output

    return result.output


def main():
    """Main entry point."""
    if not MCP_ENABLED:
        logger.warning("=" * 60)
        logger.warning("Operations Assistant MCP Server is DISABLED")
        logger.warning("To enable: export OPS_INTENT_MCP_ENABLED=true")
        logger.warning("=" * 60)
        sys.exit(0)

    logger.info("=" * 60)
    logger.info("Starting FastMCP Operations Assistant Server")
    logger.info(f"Host: {MCP_HOST}")
    logger.info(f"Port: {MCP_PORT}")
    logger.info("Tool: ops_assistant(message='...')")
    logger.info("=" * 60)

    get_interpreter()

    mcp.run(transport="sse", host=MCP_HOST, port=MCP_PORT)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
