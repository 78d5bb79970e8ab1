"""
Formatters — World model data to console lines

Line grammar:
    + <identifier>
     - <attribute> [<origin>] <created> : <value>
    [NO DATA]
    ==========          (between historical snapshots)

Values decode through the session's attribute-type registry when the
attribute name is known; unknown payloads show as hex.

Dependency direction: commands → presentation → core
"""

from datetime import datetime
from typing import Iterable, List, Optional, TYPE_CHECKING

from ..core.values import to_hex
from .symbols import (
    ATTRIBUTE_MARK, IDENTIFIER_MARK, NO_DATA, NO_RESULTS, sanitize_control_chars,
)

if TYPE_CHECKING:
    from ..core.model import Attribute, WorldState
    from ..core.registry import AttributeTypeRegistry


VALUE_DISPLAY_LENGTH = 80


def format_timestamp(epoch_ms: int) -> str:
    """
    Format epoch milliseconds as local time.

    Examples:
        format_timestamp(0)  # "1970-01-01 00:00:00.000" in UTC
    """
    if epoch_ms is None or epoch_ms < 0:
        return "unknown"
    try:
        ts = datetime.fromtimestamp(epoch_ms / 1000.0)
    except (OverflowError, OSError, ValueError):
        return str(epoch_ms)
    return ts.strftime("%Y-%m-%d %H:%M:%S.") + f"{epoch_ms % 1000:03d}"


def truncate(text: str, length: int = VALUE_DISPLAY_LENGTH) -> str:
    if not text or len(text) <= length:
        return text or ""
    if length <= 3:
        return text[:length]
    return text[:length - 3] + "..."


def format_value(attribute: 'Attribute', registry: Optional['AttributeTypeRegistry'] = None) -> str:
    decoded = registry.decode(attribute.name, attribute.data) if registry is not None else None
    if decoded is None:
        decoded = to_hex(attribute.data)
    return truncate(sanitize_control_chars(decoded))


def format_attribute(attribute: 'Attribute', registry: Optional['AttributeTypeRegistry'] = None) -> str:
    """One ` - ` line for an Attribute."""
    line = (
        f"{ATTRIBUTE_MARK}{sanitize_control_chars(attribute.name)} "
        f"[{sanitize_control_chars(attribute.origin)}] "
        f"{format_timestamp(attribute.created)} : {format_value(attribute, registry)}"
    )
    if attribute.expires:
        line += f" (expires {format_timestamp(attribute.expires)})"
    return line


def format_identifier(identifier: str) -> str:
    return f"{IDENTIFIER_MARK}{sanitize_control_chars(identifier)}"


def render_identifiers(identifiers: Iterable[str]) -> List[str]:
    lines = [format_identifier(i) for i in identifiers]
    return lines or [NO_RESULTS]


def render_snapshot(state: Optional['WorldState'], registry: Optional['AttributeTypeRegistry'] = None) -> List[str]:
    """
    Render a snapshot as console lines.

    An absent or empty snapshot renders as a single [NO DATA] line; an
    Identifier without attributes gets its own [NO DATA] line.
    """
    if state is None or state.is_empty:
        return [NO_DATA]

    lines: List[str] = []
    for identifier, attributes in state.items():
        lines.append(format_identifier(identifier))
        if not attributes:
            lines.append(f"   {NO_DATA}")
            continue
        for attribute in attributes:
            lines.append(format_attribute(attribute, registry))
    return lines
