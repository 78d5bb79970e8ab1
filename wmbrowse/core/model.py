"""
World Model Data — Identifiers, Attributes and point-in-time snapshots

Attributes are immutable. A new value for the same name is a new,
later-timestamped Attribute, never an overwrite.
"""

import time
from dataclasses import dataclass, field, replace
from typing import Dict, List, Iterator, Optional, Tuple


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Attribute:
    """A typed, timestamped fact about one Identifier."""
    identifier: str
    name: str
    created: int
    data: bytes = b""
    origin: str = ""
    expires: int = 0  # 0 = never

    def retarget(self, identifier: str) -> 'Attribute':
        """Same fact, attached to a different Identifier."""
        return replace(self, identifier=identifier)

    def with_origin(self, origin: str) -> 'Attribute':
        return replace(self, origin=origin)

    def is_expired(self, at: int) -> bool:
        return self.expires != 0 and self.expires <= at

    def validate(self) -> Optional[str]:
        """Validate before sending. Returns error message or None if valid."""
        if not self.identifier:
            return "Attribute has no identifier"
        if not self.name:
            return "Attribute has no name"
        if not self.origin:
            return f"Attribute \"{self.name}\" has no origin"
        return None


@dataclass
class WorldState:
    """
    Mapping from Identifier to its Attributes at one instant.

    Produced by the observation link; never modified by the console.
    """
    entries: Dict[str, List[Attribute]] = field(default_factory=dict)
    timestamp: int = 0

    def add(self, attribute: Attribute) -> None:
        self.entries.setdefault(attribute.identifier, []).append(attribute)

    def identifiers(self) -> List[str]:
        return list(self.entries.keys())

    def attributes(self, identifier: str) -> List[Attribute]:
        return list(self.entries.get(identifier, []))

    def items(self) -> Iterator[Tuple[str, List[Attribute]]]:
        return iter(self.entries.items())

    @property
    def attribute_count(self) -> int:
        return sum(len(attrs) for attrs in self.entries.values())

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, identifier: str) -> bool:
        return identifier in self.entries
