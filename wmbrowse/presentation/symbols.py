"""
Symbols — Output markers and encoding-safe printing

World model content (Identifiers, string payloads, origins) is untrusted:
it is sanitized before display and printed with an ASCII fallback.
"""

import sys


# =============================================================================
# Output Markers
# =============================================================================

IDENTIFIER_MARK = "+ "
ATTRIBUTE_MARK = " - "
NO_DATA = "[NO DATA]"
NO_RESULTS = "[No results found.]"
SNAPSHOT_SEPARATOR = "=========="

# Connection progress: "[Connecting to X." + "." per poll + "OK]" / "FAIL]"
CONNECT_OPEN = "[Connecting to "
CONNECT_TICK = "."
CONNECT_OK = "OK]"
CONNECT_FAIL = "FAIL]"
DISCONNECTED = "--Disconnected--"


# =============================================================================
# Safe Output Utilities
# =============================================================================

UNICODE_TO_ASCII = {
    '→': '->',
    '←': '<-',
    '…': '...',
    '–': '-',
    '—': '--',
    '•': '*',
    '·': '.',
    '×': 'x',
    '±': '+/-',
}


def sanitize_control_chars(text: str) -> str:
    """
    Remove terminal control characters from untrusted text.

    Preserves: tabs (\\t), newlines (\\n), carriage returns (\\r)
    """
    if not text:
        return text
    return ''.join(ch for ch in text if ord(ch) >= 32 or ord(ch) in (9, 10, 13))


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Replaces known Unicode characters with ASCII equivalents, then falls
    back to '?' for anything the stream cannot encode.
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)
