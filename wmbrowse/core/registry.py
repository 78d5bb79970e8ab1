"""
Attribute-Type Registry — Maps attribute names to value types

Owned by one session and passed explicitly to the commands that need it.
Entries live for the session's lifetime once registered, so an attribute
name is negotiated with the operator at most once.

Usage:
    registry = AttributeTypeRegistry()
    registry.register("location.x", get_value_type("double"))

    value_type = registry.get("location.x")
"""

from typing import Dict, Mapping, Optional

from .values import ValueType, get_value_type


class AttributeTypeRegistry:
    """Registry of attribute name → ValueType."""

    def __init__(self):
        """Initialize empty registry."""
        self._types: Dict[str, ValueType] = {}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> 'AttributeTypeRegistry':
        """
        Build a registry from attribute name → value-type name pairs.

        Raises:
            ValueError: If a value-type name is unknown
        """
        registry = cls()
        for attribute, type_name in (mapping or {}).items():
            value_type = get_value_type(type_name)
            if value_type is None:
                raise ValueError(f"Unknown value type '{type_name}' for attribute '{attribute}'")
            registry.register(attribute, value_type)
        return registry

    def register(self, attribute: str, value_type: ValueType) -> None:
        """
        Register (or replace) the value type for an attribute name.

        Raises:
            ValueError: If attribute name is empty
        """
        if not attribute:
            raise ValueError("Attribute name must not be empty")
        self._types[attribute] = value_type

    def get(self, attribute: str) -> Optional[ValueType]:
        return self._types.get(attribute)

    def decode(self, attribute: str, data: bytes) -> Optional[str]:
        """Decode a payload if the attribute's type is known, else None."""
        value_type = self._types.get(attribute)
        if value_type is None:
            return None
        return value_type.decode(data)

    def __contains__(self, attribute: str) -> bool:
        return attribute in self._types

    def __len__(self) -> int:
        return len(self._types)
