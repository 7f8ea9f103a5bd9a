"""Rune classification and token ordering helpers."""

from __future__ import annotations
from typing import Iterable, List

LF = "\n"
CR = "\r"

# str.isspace() also accepts the ASCII information separators,
# which are not Unicode White_Space.
_NOT_WHITE_SPACE = frozenset("\x1c\x1d\x1e\x1f")


def is_space(rune: str) -> bool:
    """True for Unicode White_Space code points (LF included)."""
    return rune.isspace() and rune not in _NOT_WHITE_SPACE


def simple_lower(rune: str) -> str:
    """Simple (one code point to one code point) lowercase mapping of a rune.

    str.lower() applies the full mapping. The only code point it expands is
    U+0130, whose simple mapping is the leading "i".
    """
    lowered = rune.lower()
    return lowered if len(lowered) == 1 else lowered[0]


def lower_key(token: str) -> str:
    # per rune, so context rules such as final sigma never apply
    return "".join(simple_lower(rune) for rune in token)


def sort_tokens_i(tokens: Iterable[str]) -> List[str]:
    """Stable case-insensitive sort.

    Each token's key is computed once and compared by code point.
    Tokens with equal keys keep their original relative order.
    """
    return sorted(tokens, key=lower_key)
