"""Text normalization for food name matching."""

import re

_FULLWIDTH_OFFSET = 0xFEE0
_FULLWIDTH_ALNUM = re.compile(r"[０-９Ａ-Ｚａ-ｚ]")
_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[、。！？，．,.!?]")


def fold_fullwidth(text: str) -> str:
    """Map full-width digits and Latin letters to half-width."""
    return _FULLWIDTH_ALNUM.sub(
        lambda match: chr(ord(match.group()) - _FULLWIDTH_OFFSET), text
    )


def normalize_text(text: str | None) -> str:
    """Canonicalize a food name for comparison."""
    if not text:
        return ""
    compact = _WHITESPACE.sub("", text.lower())
    return _PUNCTUATION.sub("", fold_fullwidth(compact))
