import re

_REDACTIONS = (
    # Email addresses
    (re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[EMAIL]"),
    # IPv4 addresses
    (re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b"), "[IP]"),
    # Card numbers, grouped or not
    (re.compile(r"\b\d{4}[- ]?\d{4}[- ]?\d{4}[- ]?\d{4}\b"), "[CARD]"),
    # Phone numbers in various formats
    (
        re.compile(r"(?<!\w)(?:\+\d{1,3}[-. ]?)?\(?\d{3}\)?[-. ]?\d{3}[-. ]?\d{4}\b"),
        "[PHONE]",
    ),
    # Alphanumeric strings that look like API keys or passwords
    (re.compile(r"\b[a-zA-Z0-9_-]{32,}\b"), "[KEY]"),
    # Long numeric sequences that might be IDs
    (re.compile(r"\b\d{6,}\b"), "[NUMBER]"),
)


def redact_pii(text: str) -> str:
    """
    Redact potential Personally Identifiable Information (PII) from text.

    Chat utterances are free text typed by demo users, so they go through this
    before reaching any log line. Redacts:
    - Email addresses
    - IP addresses
    - Card numbers
    - Phone numbers
    - API keys and passwords
    - Long numeric sequences
    """
    if not text:
        return text
    for pattern, placeholder in _REDACTIONS:
        text = pattern.sub(placeholder, text)
    return text
