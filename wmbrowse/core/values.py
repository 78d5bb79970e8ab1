"""
Value Types — Catalog of attribute payload encodings

Attribute payloads travel as raw bytes. Each ValueType converts operator
text into bytes (encode) and bytes back into display text (decode),
following the world model's conventional big-endian layouts.
"""

import struct
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .errors import ValueEncodingError


@dataclass(frozen=True)
class ValueType:
    """One registered payload encoding."""
    name: str
    description: str
    _encode: Callable[[str], bytes]
    _decode: Callable[[bytes], str]

    def encode(self, text: str) -> bytes:
        """
        Convert operator text to a payload.

        Raises:
            ValueEncodingError: If the text is not valid for this type
        """
        try:
            return self._encode(text)
        except (ValueError, struct.error, OverflowError) as e:
            raise ValueEncodingError(f"Cannot encode \"{text}\" as {self.name}: {e}") from e

    def decode(self, data: bytes) -> str:
        """Convert a payload to display text, falling back to hex."""
        try:
            return self._decode(data)
        except (ValueError, struct.error, UnicodeDecodeError):
            return to_hex(data)


def to_hex(data: bytes) -> str:
    if not data:
        return "0x"
    return "0x" + data.hex().upper()


def _from_hex(text: str) -> bytes:
    cleaned = text.strip()
    if cleaned.lower().startswith("0x"):
        cleaned = cleaned[2:]
    return bytes.fromhex(cleaned)


def _encode_bool(text: str) -> bytes:
    lowered = text.strip().lower()
    if lowered in ("true", "t", "yes", "y", "1"):
        return b"\x01"
    if lowered in ("false", "f", "no", "n", "0"):
        return b"\x00"
    raise ValueError("expected true/false")


def _decode_bool(data: bytes) -> str:
    if len(data) != 1:
        raise ValueError("boolean payload must be 1 byte")
    return "true" if data[0] else "false"


def _packer(fmt: str, parse: Callable[[str], object]) -> Callable[[str], bytes]:
    return lambda text: struct.pack(fmt, parse(text.strip()))


def _unpacker(fmt: str) -> Callable[[bytes], str]:
    return lambda data: str(struct.unpack(fmt, data)[0])


# Selection order is the order shown to the operator
VALUE_TYPES: List[ValueType] = [
    ValueType("string", "UTF-16 text",
              lambda text: text.encode("utf-16-be"),
              lambda data: data.decode("utf-16-be")),
    ValueType("integer", "32-bit signed integer",
              _packer(">i", int), _unpacker(">i")),
    ValueType("long", "64-bit signed integer",
              _packer(">q", int), _unpacker(">q")),
    ValueType("float", "32-bit floating point",
              _packer(">f", float), _unpacker(">f")),
    ValueType("double", "64-bit floating point",
              _packer(">d", float), _unpacker(">d")),
    ValueType("boolean", "true/false, 1 byte",
              _encode_bool, _decode_bool),
    ValueType("bytes", "raw bytes as hex (e.g. 0x0A1B)",
              _from_hex, to_hex),
]

_BY_NAME: Dict[str, ValueType] = {vt.name: vt for vt in VALUE_TYPES}


def get_value_type(name: str) -> Optional[ValueType]:
    """Look up a value type by (case-insensitive) name."""
    return _BY_NAME.get(name.strip().lower()) if name else None


def value_type_names() -> List[str]:
    return [vt.name for vt in VALUE_TYPES]
