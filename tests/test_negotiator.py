"""
Tests for TypeNegotiator — interactive attribute type resolution

Validates:
- Registry hits never prompt
- Selection is 1-based over the value-type catalog
- Bad input consumes one of at most three attempts
- A valid selection is registered (sticky for the session)
"""

from unittest.mock import Mock

import pytest

from wmbrowse.core.errors import NegotiationError
from wmbrowse.core.negotiator import NegotiateStatus, TypeNegotiator
from wmbrowse.core.registry import AttributeTypeRegistry
from wmbrowse.core.values import get_value_type


@pytest.fixture
def registry():
    return AttributeTypeRegistry()


def make_negotiator(registry, answers):
    """Negotiator fed a fixed list of operator answers."""
    ask = Mock(side_effect=list(answers))
    write = Mock()
    return TypeNegotiator(registry, ask=ask, write=write), ask, write


class TestResolve:
    """Tests for TypeNegotiator.resolve()."""

    def test_known_attribute_does_not_prompt(self, registry):
        registry.register("temperature", get_value_type("double"))
        negotiator, ask, write = make_negotiator(registry, [])

        result = negotiator.resolve("temperature")

        assert result.status == NegotiateStatus.KNOWN
        assert result.value_type.name == "double"
        ask.assert_not_called()
        write.assert_not_called()

    def test_valid_selection_is_one_based(self, registry):
        """Choice 2 is the second catalog entry (integer)."""
        negotiator, ask, _ = make_negotiator(registry, ["2"])

        result = negotiator.resolve("count")

        assert result.status == NegotiateStatus.SELECTED
        assert result.value_type.name == "integer"
        assert result.attempts == 1

    def test_selection_registers_type(self, registry):
        negotiator, _, _ = make_negotiator(registry, ["5"])
        negotiator.resolve("location.x")
        assert registry.get("location.x").name == "double"

    def test_second_resolve_is_sticky(self, registry):
        """Once selected, later lookups never prompt again."""
        negotiator, ask, _ = make_negotiator(registry, ["1"])

        negotiator.resolve("label")
        result = negotiator.resolve("label")

        assert result.status == NegotiateStatus.KNOWN
        assert ask.call_count == 1

    def test_invalid_answers_consume_attempts(self, registry):
        """Out-of-range and non-numeric answers each cost one attempt."""
        negotiator, ask, write = make_negotiator(registry, ["0", "abc", "4"])

        result = negotiator.resolve("speed")

        assert result.status == NegotiateStatus.SELECTED
        assert result.value_type.name == "float"
        assert result.attempts == 3
        written = [c.args[0] for c in write.call_args_list]
        assert 'Invalid selection "0" (2 attempt(s) left).' in written
        assert 'Invalid selection "abc" (1 attempt(s) left).' in written

    def test_three_bad_answers_not_recognized(self, registry):
        negotiator, ask, _ = make_negotiator(registry, ["9", "-1", "x"])

        result = negotiator.resolve("speed")

        assert result.status == NegotiateStatus.NOT_RECOGNIZED
        assert not result.resolved
        assert result.attempts == 3
        assert ask.call_count == 3
        assert "speed" not in registry

    def test_end_of_input_stops_prompting(self, registry):
        negotiator, ask, _ = make_negotiator(registry, [None])

        result = negotiator.resolve("speed")

        assert result.status == NegotiateStatus.NOT_RECOGNIZED
        assert ask.call_count == 1

    def test_choices_are_listed(self, registry):
        negotiator, _, write = make_negotiator(registry, ["1"])
        negotiator.resolve("label")

        written = [c.args[0] for c in write.call_args_list]
        assert written[0] == 'Attribute "label" has no registered type. Choose one:'
        assert "  1. string - UTF-16 text" in written
        assert any(line.startswith("  7. bytes") for line in written)

    def test_prompt_shows_range(self, registry):
        negotiator, ask, _ = make_negotiator(registry, ["1"])
        negotiator.resolve("label")
        ask.assert_called_once_with("Type [1-7]: ")

    def test_custom_attempt_budget(self, registry):
        ask = Mock(side_effect=["x"])
        negotiator = TypeNegotiator(registry, ask=ask, write=Mock(), max_attempts=1)
        assert negotiator.resolve("a").attempts == 1


class TestRequire:
    """Tests for TypeNegotiator.require()."""

    def test_returns_value_type(self, registry):
        negotiator, _, _ = make_negotiator(registry, ["6"])
        assert negotiator.require("enabled").name == "boolean"

    def test_raises_when_not_recognized(self, registry):
        negotiator, _, _ = make_negotiator(registry, ["a", "b", "c"])

        with pytest.raises(NegotiationError) as exc:
            negotiator.require("speed")

        assert exc.value.attempts == 3
        assert str(exc.value) == 'Attribute type for "speed" not recognized after 3 attempts.'
