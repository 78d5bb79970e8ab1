"""
Presentation — Console I/O and output formatting
"""

from .console import Console
from .formatters import (
    format_timestamp, format_value, format_attribute, format_identifier,
    render_identifiers, render_snapshot,
)
