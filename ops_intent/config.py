"""
Environment-driven configuration for the interpreter and its MCP server.
"""

import os
from typing import Any, Dict


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def get_config() -> Dict[str, Any]:
    """Read configuration from the environment on every call."""
    return {
        "read_only": _env_flag("OPS_INTENT_READ_ONLY"),
        "sender_id": os.getenv("OPS_INTENT_SENDER_ID", "ai-bot"),
        "conversation_id": os.getenv("OPS_INTENT_CONVERSATION_ID", "ai-assistant-chat"),
        # Locale used when a new client's address is missing parts
        "fallback_city": os.getenv("OPS_INTENT_FALLBACK_CITY", "Lubbock"),
        "fallback_state": os.getenv("OPS_INTENT_FALLBACK_STATE", "TX"),
        "fallback_zip": os.getenv("OPS_INTENT_FALLBACK_ZIP", "79401"),
        "thinking_delay": float(os.getenv("OPS_INTENT_THINKING_DELAY", "0")),
        "snapshot_path": os.getenv("OPS_INTENT_SNAPSHOT_PATH", ""),
    }
