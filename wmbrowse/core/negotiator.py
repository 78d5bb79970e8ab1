"""
Type Negotiator — Resolve an attribute name to its value type

Resolution order:
1. Registry hit (no prompt)
2. Interactive selection from the value-type catalog, bounded attempts

A valid selection is registered so later commands in the same session
never prompt for that attribute again. Non-numeric or out-of-range input
consumes an attempt.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from loguru import logger

from .errors import NegotiationError
from .registry import AttributeTypeRegistry
from .values import ValueType, VALUE_TYPES


DEFAULT_ATTEMPTS = 3


class NegotiateStatus(Enum):
    """Negotiation outcome."""
    KNOWN = "known"
    SELECTED = "selected"
    NOT_RECOGNIZED = "not_recognized"


@dataclass
class NegotiateResult:
    """Result of type negotiation."""
    status: NegotiateStatus
    value_type: Optional[ValueType] = None
    attempts: int = 0

    @property
    def resolved(self) -> bool:
        return self.value_type is not None


class TypeNegotiator:
    """
    Interactive value-type resolution for attribute names.

    I/O is injected: `ask` shows a prompt and returns the operator's line
    (None on end of input), `write` prints one line.
    """

    def __init__(
        self,
        registry: AttributeTypeRegistry,
        ask: Callable[[str], Optional[str]],
        write: Callable[[str], None] = print,
        max_attempts: int = DEFAULT_ATTEMPTS,
        choices: List[ValueType] = None,
    ):
        self.registry = registry
        self.ask = ask
        self.write = write
        self.max_attempts = max_attempts
        self.choices = list(choices) if choices is not None else list(VALUE_TYPES)

    def resolve(self, attribute: str) -> NegotiateResult:
        """Resolve an attribute name, prompting only if it is unregistered."""
        known = self.registry.get(attribute)
        if known is not None:
            return NegotiateResult(NegotiateStatus.KNOWN, known, 0)

        self.write(f"Attribute \"{attribute}\" has no registered type. Choose one:")
        for i, value_type in enumerate(self.choices, 1):
            self.write(f"  {i}. {value_type.name} - {value_type.description}")

        attempts = 0
        while attempts < self.max_attempts:
            attempts += 1
            answer = self.ask(f"Type [1-{len(self.choices)}]: ")
            if answer is None:
                break

            selected = self._select(answer)
            if selected is None:
                remaining = self.max_attempts - attempts
                self.write(f"Invalid selection \"{answer.strip()}\" ({remaining} attempt(s) left).")
                continue

            self.registry.register(attribute, selected)
            logger.info("Registered attribute type {} -> {}", attribute, selected.name)
            return NegotiateResult(NegotiateStatus.SELECTED, selected, attempts)

        logger.warning("Attribute type for {} not recognized after {} attempt(s)", attribute, attempts)
        return NegotiateResult(NegotiateStatus.NOT_RECOGNIZED, None, attempts)

    def require(self, attribute: str) -> ValueType:
        """
        Resolve or abort the calling workflow.

        Raises:
            NegotiationError: If no type was selected
        """
        result = self.resolve(attribute)
        if not result.resolved:
            raise NegotiationError(attribute, result.attempts)
        return result.value_type

    def _select(self, answer: str) -> Optional[ValueType]:
        choice = answer.strip()
        if not choice.isdigit():
            return None
        index = int(choice) - 1
        if 0 <= index < len(self.choices):
            return self.choices[index]
        return None
