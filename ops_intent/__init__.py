"""
Natural-language command interpreter for a service-business dashboard.

Turns one operator message into reply lines and zero or more mutation
calls against the host's data, using an ordered set of regex triggers.
No AI models are involved.

Usage:
    from ops_intent import CommandInterpreter, InMemoryStore

    store = InMemoryStore(snapshot)
    interpreter = CommandInterpreter(store.snapshot, store)
    result = await interpreter.process("is Marcus free tomorrow?")
    print(result.output)
"""

import asyncio
from datetime import datetime
from typing import Any, Dict, Optional

from .models import IntentCategory, ParsedIntent, IntentResult
from .classifier import classify
from .config import get_config
from .domain import DomainSnapshot
from .entity_extractor import extract
from .ports import DomainPorts, InMemoryStore, StoreError
from .router import CAPABILITY_MENU, route


class CommandInterpreter:
    """High-level interface bound to one snapshot and one set of ports."""

    def __init__(
        self,
        snapshot: DomainSnapshot,
        ports: DomainPorts,
        config: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Register all handlers and keep the host's data and ports."""
        from .handlers import register_all_handlers
        register_all_handlers()
        self.snapshot = snapshot
        self.ports = ports
        self.config = config if config is not None else get_config()

    async def process(self, text: str, now: Optional[datetime] = None) -> IntentResult:
        """Process natural language input and return the result."""
        delay = self.config.get("thinking_delay", 0)
        if delay:
            await asyncio.sleep(delay)
        return route(text, self.snapshot, self.ports, now=now, config=self.config)

    async def respond(self, conversation_id: str, text: str, now: Optional[datetime] = None) -> IntentResult:
        """Process the message and emit exactly one reply into the conversation."""
        result = await self.process(text, now=now)
        self.ports.emit_reply(conversation_id, result.output, self.config.get("sender_id", "ai-bot"))
        return result

    def classify(self, text: str, now: Optional[datetime] = None) -> ParsedIntent:
        """Classify text without executing (useful for testing)."""
        intent = classify(text)
        params = extract(intent.raw_input, intent.category, now, self.config.get("fallback_city", "Lubbock"))
        intent.parameters = params
        return intent


__all__ = [
    "CommandInterpreter",
    "CAPABILITY_MENU",
    "DomainPorts",
    "DomainSnapshot",
    "InMemoryStore",
    "IntentCategory",
    "IntentResult",
    "ParsedIntent",
    "StoreError",
    "classify",
    "extract",
    "route",
]
