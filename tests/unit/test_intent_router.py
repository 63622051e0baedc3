"""
Tests for the intent router.

Tests handler registration, routing, error handling, read-only mode and
the capability menu fallback. Uses stub handlers unless a test asks for
the real ones.
"""

import pytest

from ops_intent.models import IntentCategory, IntentResult
from ops_intent.router import CAPABILITY_MENU, _handlers, get_handler, register, route


@pytest.fixture(autouse=True)
def clean_handlers():
    """Clear handler registry before each test."""
    _handlers.clear()
    yield
    _handlers.clear()


@pytest.fixture
def mock_handler():
    """Create a simple stub handler."""

    def handler(ctx):
        return [f"mock result: {ctx.params}"]

    return handler


@pytest.fixture
def failing_handler():
    """Create a handler that raises an exception."""

    def handler(ctx):
        raise RuntimeError("backend unavailable")

    return handler


class TestHandlerRegistration:
    """Test handler registration mechanics."""

    def test_register_handler(self, mock_handler):
        register(IntentCategory.SCHEDULE_TODAY, mock_handler)
        assert get_handler(IntentCategory.SCHEDULE_TODAY) is mock_handler

    def test_get_unregistered_handler(self):
        assert get_handler(IntentCategory.SCHEDULE_TODAY) is None

    def test_override_handler(self, mock_handler):
        def other_handler(ctx):
            return ["other"]

        register(IntentCategory.SCHEDULE_TODAY, mock_handler)
        register(IntentCategory.SCHEDULE_TODAY, other_handler)
        assert get_handler(IntentCategory.SCHEDULE_TODAY) is other_handler


class TestRouting:
    """Test the route() function."""

    def test_route_to_handler(self, mock_handler, snapshot, store, now, config):
        register(IntentCategory.SCHEDULE_TODAY, mock_handler)
        result = route("schedule for today", snapshot, store, now, config)
        assert result.success is True
        assert result.category == IntentCategory.SCHEDULE_TODAY
        assert "mock result" in result.output

    def test_route_passes_params(self, snapshot, store, now, config):
        received = {}

        def capturing_handler(ctx):
            received.update(ctx.params)
            assert ctx.now == now
            assert ctx.snapshot is snapshot
            return ["ok"]

        register(IntentCategory.TECHNICIAN_LOCATE, capturing_handler)
        route("where is Maria?", snapshot, store, now, config)
        assert received == {"name": "Maria"}

    def test_route_no_handler(self, snapshot, store, now, config):
        result = route("schedule for today", snapshot, store, now, config)
        assert result.success is False
        assert "No handler" in result.output

    def test_route_handler_error(self, failing_handler, snapshot, store, now, config):
        register(IntentCategory.SCHEDULE_TODAY, failing_handler)
        result = route("schedule for today", snapshot, store, now, config)
        assert result.success is False
        assert "backend unavailable" in result.output
        assert result.error == "backend unavailable"
        assert len(result.suggestions) > 0

    def test_empty_reply_becomes_menu(self, snapshot, store, now, config):
        register(IntentCategory.SCHEDULE_TODAY, lambda ctx: [])
        result = route("schedule for today", snapshot, store, now, config)
        assert result.success is True
        assert result.lines == CAPABILITY_MENU

    def test_output_joins_lines(self, snapshot, store, now, config):
        register(IntentCategory.SCHEDULE_TODAY, lambda ctx: ["one", "two"])
        result = route("schedule for today", snapshot, store, now, config)
        assert result.output == "one\ntwo"


class TestCapabilityMenu:
    """Unrecognized input gets the fixed menu."""

    def test_menu_has_five_examples(self):
        assert CAPABILITY_MENU[0] == "I can help you run your business. Here are some things I can do:"
        assert len([line for line in CAPABILITY_MENU if line.startswith("* ")]) == 5

    @pytest.mark.parametrize("text", ["hello there", "", "what can you do?", "thanks!"])
    def test_unmatched_input_returns_menu(self, handlers, snapshot, store, now, config, text):
        result = route(text, snapshot, store, now, config)
        assert result.success is True
        assert result.category == IntentCategory.CREATE_ASSIGN
        assert result.output == "\n".join(CAPABILITY_MENU)
        assert store.mutations == []


class TestReadOnlyMode:
    """Test read-only mode blocking write operations."""

    def test_write_blocked_in_readonly(self, mock_handler, snapshot, store, now, config):
        config["read_only"] = True
        register(IntentCategory.QUOTE_DRAFT, mock_handler)
        result = route("draft a quote for Jane Smith for $500", snapshot, store, now, config)
        assert result.success is False
        assert "read-only" in result.output.lower()
        assert store.mutations == []

    def test_read_allowed_in_readonly(self, mock_handler, snapshot, store, now, config):
        config["read_only"] = True
        register(IntentCategory.INVOICE_OVERDUE, mock_handler)
        result = route("show overdue invoices", snapshot, store, now, config)
        assert result.success is True

    def test_catch_all_returns_menu_in_readonly(self, handlers, snapshot, store, now, config):
        config["read_only"] = True
        result = route("add client named Alice Walker", snapshot, store, now, config)
        assert result.success is False
        assert result.lines == CAPABILITY_MENU
        assert len(snapshot.clients) == 2

    @pytest.mark.parametrize(
        "text",
        [
            "cancel the job for John Doe",
            "send an invoice for Jane Smith",
        ],
    )
    def test_env_flag(self, mock_handler, snapshot, store, now, monkeypatch, text):
        monkeypatch.setenv("OPS_INTENT_READ_ONLY", "true")
        register(IntentCategory.JOB_CANCEL, mock_handler)
        register(IntentCategory.INVOICE_SEND, mock_handler)
        result = route(text, snapshot, store, now)
        assert result.success is False

    def test_write_allowed_when_not_readonly(self, mock_handler, snapshot, store, now, monkeypatch):
        monkeypatch.setenv("OPS_INTENT_READ_ONLY", "false")
        register(IntentCategory.JOB_CANCEL, mock_handler)
        result = route("cancel the job for John Doe", snapshot, store, now)
        assert result.success is True


class TestIntentResult:
    """Test IntentResult model."""

    def test_success_result(self):
        result = IntentResult(success=True, output="done")
        assert result.success is True
        assert result.error is None
        assert result.suggestions == []
        assert result.lines == []
