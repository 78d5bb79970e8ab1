"""
Core — Data layer for the world model browser

Contains the foundational pieces:
- Model: Attributes and world state snapshots
- Tokenizer: Quote-aware command line splitting
- Values: Attribute value types and their byte encodings
- Registry: Attribute name to value type mapping
- Negotiator: Interactive resolution of unknown attribute types
- Stream: Pull-based range results
- Errors: Command failure taxonomy
"""

from .errors import (
    WorldModelError, UsageError, LinkError, NegotiationError, ValueEncodingError, StreamError,
)
from .model import Attribute, WorldState, now_ms
from .tokenizer import extract_components, split_keyword
from .values import ValueType, VALUE_TYPES, get_value_type, value_type_names, to_hex
from .registry import AttributeTypeRegistry
from .negotiator import TypeNegotiator, NegotiateStatus, NegotiateResult
from .stream import RangeStream, StreamState, DrainResult, drain
