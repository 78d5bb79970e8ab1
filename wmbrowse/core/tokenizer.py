"""
Command Tokenizer — Shell-like splitting of console input

Splits a raw line into whitespace-separated tokens:
- Unquoted runs: "alpha beta" → [alpha, beta]
- Double quotes: 'a "b c" d' → [a, b c, d]
- Single quotes: "a 'b c'" → [a, b c]

Quotes are stripped and no escape processing is done. An unterminated
quote is kept as a literal character of the token it starts, so
malformed input never raises.
"""

import re
from typing import List


_TOKEN_PATTERN = re.compile(
    r'"([^"]*)"'          # double-quoted span
    r"|'([^']*)'"         # single-quoted span
    r"|([^\s\"']+)"       # unquoted run
    r"|([\"'][^\s\"']*)"  # unterminated quote, taken literally
)


def extract_components(line: str) -> List[str]:
    """
    Tokenize a console line.

    Args:
        line: Raw input, may be empty or all whitespace

    Returns:
        Ordered list of tokens (empty list for blank input)

    Examples:
        >>> extract_components('search "sensor 1" tag')
        ['search', 'sensor 1', 'tag']
        >>> extract_components("   ")
        []
        >>> extract_components('rm "broken')
        ['rm', '"broken']
    """
    if not line or not line.strip():
        return []

    tokens = []
    for match in _TOKEN_PATTERN.finditer(line):
        double, single, bare, dangling = match.groups()
        if double is not None:
            tokens.append(double)
        elif single is not None:
            tokens.append(single)
        elif bare is not None:
            tokens.append(bare)
        else:
            tokens.append(dangling)
    return tokens


def split_keyword(line: str) -> tuple:
    """
    Split a line into (keyword, arguments).

    Keyword is lowercased for case-insensitive dispatch. Returns
    ("", []) for blank input.
    """
    tokens = extract_components(line)
    if not tokens:
        return "", []
    return tokens[0].lower(), tokens[1:]
