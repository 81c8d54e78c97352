"""
Text normalization shared by the variant generator and the similarity scorer.
"""

import re
from typing import List

_TAG_PATTERN = re.compile(r"<[^>]*>")

# Tokens this short are mostly articles and prepositions
MIN_TOKEN_LENGTH = 3


def strip_html(raw: str) -> str:
    """Remove angle-bracket tags and trim surrounding whitespace.

    Nested or malformed markup is not understood; every ``<...>`` span is
    simply dropped.
    """
    if not raw:
        return ""
    return _TAG_PATTERN.sub("", raw).strip()


def normalize(raw: str) -> List[str]:
    """Turn free text (possibly HTML) into lower-cased similarity tokens.

    Tags are stripped, the text is lower-cased and split on whitespace, and
    tokens shorter than ``MIN_TOKEN_LENGTH`` are discarded. Punctuation stays
    attached to its word.

    Args:
        raw: Text to normalize; empty or ``None``-ish input is allowed

    Returns:
        List of tokens in input order (empty for empty input)
    """
    if not raw:
        return []
    return [
        token
        for token in strip_html(raw).lower().split()
        if len(token) >= MIN_TOKEN_LENGTH
    ]
