"""
Commands — Console command implementations with self-registration

Each command module:
1. Defines XxxCommand class (handler implementation)
2. Exports KEYWORD (a Keyword member) and USAGE
3. Exports handle(cli, args) to dispatch to handler methods

The first token of a line (case-insensitive) selects a Keyword; the
remaining tokens are passed to the module's handle().
"""

import importlib
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from rapidfuzz import fuzz, process

from .base import BaseCommand


class Keyword(Enum):
    """Canonical command keywords. Values are what the operator types."""
    HELP = "help"
    QUIT = "quit"
    SEARCH = "search"
    STATUS = "status"
    HISTORY = "history"
    TOUCH = "touch"
    UPDATE = "update"
    EXPIRE = "expire"
    RM = "rm"
    CP = "cp"


# Extra spellings accepted for a keyword
ALIASES: Dict[str, Keyword] = {
    "exit": Keyword.QUIT,
}

# Command modules that participate in auto-registration
COMMAND_MODULES = [
    # Session
    'help_cmd',
    'quit_cmd',
    # Observation
    'search',
    'status',
    'history',
    # Mutation
    'touch',
    'update',
    'expire',
    'remove',
    'copy_cmd',
]

SUGGESTION_CUTOFF = 70

# Handler registry: keyword -> handle function
_handlers: Dict[Keyword, Callable] = {}


def register_all() -> None:
    """
    Import each module in COMMAND_MODULES and register its handle()
    under the module's KEYWORD.
    """
    global _handlers
    _handlers.clear()

    for module_name in COMMAND_MODULES:
        module = importlib.import_module(f'.{module_name}', __package__)
        keyword = module.KEYWORD
        _handlers[keyword] = module.handle


def resolve_keyword(word: str) -> Optional[Keyword]:
    """Map a typed keyword (any case) to its Keyword, or None."""
    lowered = word.lower()
    if lowered in ALIASES:
        return ALIASES[lowered]
    try:
        return Keyword(lowered)
    except ValueError:
        return None


def suggest_keyword(word: str) -> Optional[str]:
    """Closest known keyword for a mistyped one, if reasonably close."""
    choices = [k.value for k in Keyword] + list(ALIASES.keys())
    match = process.extractOne(word.lower(), choices, scorer=fuzz.ratio, score_cutoff=SUGGESTION_CUTOFF)
    return match[0] if match else None


def dispatch(keyword: Keyword, cli: Any, args: List[str]) -> Any:
    """
    Dispatch a keyword to its registered handler.

    Raises:
        KeyError: If keyword not registered
    """
    if not _handlers:
        register_all()
    if keyword not in _handlers:
        raise KeyError(f"Unknown command: {keyword.value}. Available: {[k.value for k in _handlers]}")

    return _handlers[keyword](cli, args)


__all__ = [
    'BaseCommand', 'Keyword', 'ALIASES', 'register_all', 'resolve_keyword',
    'suggest_keyword', 'dispatch',
]
