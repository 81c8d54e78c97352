"""
Rule catalog for the paraphrase-based variant generator.

Each rule is a pure function ``(text, kind, html, rng) -> Optional[RuleOutput]``
that returns ``None`` when it leaves the text unchanged. All
randomness is drawn from the ``random.Random`` passed in, so a seeded instance
reproduces a variant set exactly. The lookup tables are module-level read-only
mappings built once at import time.

HTML handling: a rule rewrites the plain text and then substitutes the first
verbatim occurrence of its input text inside the HTML. When the input text
cannot be found in the HTML, the HTML output is the plain-text output.
"""

import random
import re
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Callable, Iterable, Literal, Mapping, Optional, Pattern, Tuple

VariantKind = Literal["question", "answer"]


@dataclass(frozen=True)
class RuleOutput:
    text: str
    html: str
    confidence: float


ParaphraseRule = Callable[
    [str, VariantKind, Optional[str], random.Random], Optional[RuleOutput]
]


# ============================================
# Lookup tables
# ============================================

SYNONYMS: Mapping[str, str] = MappingProxyType(
    {
        # Common words
        "how": "in what way",
        "what": "which",
        "why": "for what reason",
        "when": "at what time",
        "where": "in which location",
        "can": "is it possible to",
        "will": "shall",
        "would": "could",
        "should": "ought to",
        "help": "assist",
        "show": "display",
        "explain": "describe",
        "tell": "inform",
        "find": "locate",
        "get": "obtain",
        "make": "create",
        "use": "utilize",
        "need": "require",
        "want": "desire",
        # Technical terms
        "process": "procedure",
        "method": "approach",
        "system": "platform",
        "feature": "functionality",
        "option": "choice",
        "setting": "configuration",
        "data": "information",
        "user": "person",
        "admin": "administrator",
        "manage": "handle",
    }
)

FORMAL_TO_INFORMAL: Mapping[str, str] = MappingProxyType(
    {
        "utilize": "use",
        "commence": "start",
        "terminate": "end",
        "facilitate": "help",
        "endeavor": "try",
        "accomplish": "do",
        "subsequently": "then",
        "prior to": "before",
        "in order to": "to",
    }
)

INFORMAL_TO_FORMAL: Mapping[str, str] = MappingProxyType(
    {informal: formal for formal, informal in FORMAL_TO_INFORMAL.items()}
)

CONTRACTIONS: Mapping[str, str] = MappingProxyType(
    {
        "can't": "cannot",
        "won't": "will not",
        "don't": "do not",
        "doesn't": "does not",
        "isn't": "is not",
        "aren't": "are not",
        "wasn't": "was not",
        "weren't": "were not",
        "haven't": "have not",
        "hasn't": "has not",
        "shouldn't": "should not",
        "wouldn't": "would not",
        "couldn't": "could not",
    }
)

EXPANSIONS: Mapping[str, str] = MappingProxyType(
    {expanded: contracted for contracted, expanded in CONTRACTIONS.items()}
)

PERSPECTIVE_SWAPS: Mapping[str, str] = MappingProxyType(
    {
        "I": "you",
        "me": "you",
        "my": "your",
        "mine": "yours",
        "you": "one",
        "your": "one's",
        "yours": "one's",
    }
)

QUESTION_OPENERS: Tuple[Tuple[str, str], ...] = (
    ("how do i", "What is the process to"),
    ("what is", "Could you explain what"),
    ("can i", "Is it possible for me to"),
    ("where", "In what location"),
)

ACTIVE_TO_PASSIVE: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"\bI (can|will|should) (\w+)", re.IGNORECASE), r"The \2 process can be"),
    (
        re.compile(r"\bYou (can|will|should) (\w+)", re.IGNORECASE),
        r"The \2 action can be performed",
    ),
    (re.compile(r"\bThe system (\w+s)\b", re.IGNORECASE), r"It is \1 by the system"),
)

QUESTION_STARTERS: Tuple[str, ...] = (
    "Could you please explain",
    "I would like to know",
    "Can you help me understand",
    "I need information about",
    "Please tell me",
)

EMPHASIS_WORDS: Tuple[str, ...] = (
    "particularly",
    "specifically",
    "especially",
    "exactly",
    "precisely",
)

CONTEXT_PHRASES: Tuple[str, ...] = (
    "In this system,",
    "For this application,",
    "When using this platform,",
    "In the context of this demo,",
)

INTERROGATIVES = frozenset({"how", "what", "when", "where", "why"})

_INTERROGATIVE_OPENING = re.compile(
    r"^(how|what|when|where|why|can|could|would|should)", re.IGNORECASE
)
_EMPHASIS_TARGET = re.compile(r"\b(how|what)\b", re.IGNORECASE)

# Per-entry substitution probabilities
SYNONYM_PROBABILITY = 0.3
PERSPECTIVE_PROBABILITY = 0.3
PASSIVE_PROBABILITY = 0.4
CONTEXT_PROBABILITY = 0.5


# ============================================
# Helpers
# ============================================


def carry_html(html: Optional[str], old_text: str, new_text: str) -> str:
    """Mirror a plain-text rewrite into its HTML counterpart.

    Replaces the first verbatim occurrence of ``old_text`` in ``html`` with
    ``new_text``. Falls back to ``new_text`` when there is no HTML or the old
    text does not appear in it verbatim.
    """
    if html is None or not old_text or old_text not in html:
        return new_text
    return html.replace(old_text, new_text, 1)


@lru_cache(maxsize=256)
def _word_pattern(words: Tuple[str, ...]) -> Pattern[str]:
    # Longest first so multi-word phrases win over their parts
    ordered = sorted(words, key=len, reverse=True)
    alternation = "|".join(re.escape(word) for word in ordered)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


def substitute_words(text: str, table: Mapping[str, str], words: Iterable[str]) -> str:
    """Replace whole-word occurrences of ``words`` using ``table`` in one pass.

    Matching is case-insensitive. A replacement never feeds another one. A match
    at the very start of the text keeps its leading capital.
    """
    selected = tuple(words)
    if not selected:
        return text
    lookup = {word.lower(): table[word] for word in selected}

    def _replace(match: "re.Match[str]") -> str:
        replacement = lookup[match.group(0).lower()]
        if match.start() == 0 and match.group(0)[:1].isupper():
            return replacement[:1].upper() + replacement[1:]
        return replacement

    return _word_pattern(selected).sub(_replace, text)


def _output(
    text: str, result: str, html: Optional[str], confidence: float
) -> Optional[RuleOutput]:
    # A rule that changed nothing yields no variant
    if result == text:
        return None
    return RuleOutput(text=result, html=carry_html(html, text, result), confidence=confidence)


# ============================================
# Rules
# ============================================


def synonym_replacement(
    text: str, kind: VariantKind, html: Optional[str], rng: random.Random
) -> Optional[RuleOutput]:
    chosen = [word for word in SYNONYMS if rng.random() < SYNONYM_PROBABILITY]
    return _output(text, substitute_words(text, SYNONYMS, chosen), html, 0.9)


def sentence_restructuring(
    text: str, kind: VariantKind, html: Optional[str], rng: random.Random
) -> Optional[RuleOutput]:
    """Rewrite a known question opener, or swap the first two answer sentences."""
    result = text
    if kind == "question":
        lowered = text.lower()
        for opener, replacement in QUESTION_OPENERS:
            if lowered.startswith(opener):
                result = replacement + text[len(opener) :]
                break
    else:
        sentences = text.split(". ")
        if len(sentences) >= 2:
            sentences[0], sentences[1] = sentences[1], sentences[0]
            result = ". ".join(sentences)
    return _output(text, result, html, 0.8)


def formal_informal(
    text: str, kind: VariantKind, html: Optional[str], rng: random.Random
) -> Optional[RuleOutput]:
    table = FORMAL_TO_INFORMAL if rng.random() < 0.5 else INFORMAL_TO_FORMAL
    return _output(text, substitute_words(text, table, table), html, 0.85)


def active_passive(
    text: str, kind: VariantKind, html: Optional[str], rng: random.Random
) -> Optional[RuleOutput]:
    result = text
    for pattern, replacement in ACTIVE_TO_PASSIVE:
        if rng.random() < PASSIVE_PROBABILITY:
            result = pattern.sub(replacement, result)
    return _output(text, result, html, 0.7)


def question_style(
    text: str, kind: VariantKind, html: Optional[str], rng: random.Random
) -> Optional[RuleOutput]:
    """Prefix a request-style starter to questions without an interrogative opener."""
    result = text
    if kind == "question" and not _INTERROGATIVE_OPENING.match(text):
        result = f"{rng.choice(QUESTION_STARTERS)} {text.lower()}"
    return _output(text, result, html, 0.8)


def expand_contract(
    text: str, kind: VariantKind, html: Optional[str], rng: random.Random
) -> Optional[RuleOutput]:
    table = CONTRACTIONS if rng.random() < 0.5 else EXPANSIONS
    return _output(text, substitute_words(text, table, table), html, 0.9)


def order_change(
    text: str, kind: VariantKind, html: Optional[str], rng: random.Random
) -> Optional[RuleOutput]:
    """Move a leading interrogative of a longer question to the third position."""
    result = text
    if kind == "question":
        words = text.split(" ")
        if len(words) > 3 and words[0].lower() in INTERROGATIVES:
            question_word = words.pop(0)
            words.insert(2, question_word.lower())
            joined = " ".join(words)
            result = joined[:1].upper() + joined[1:]
    return _output(text, result, html, 0.6)


def emphasis_shift(
    text: str, kind: VariantKind, html: Optional[str], rng: random.Random
) -> Optional[RuleOutput]:
    emphasis = rng.choice(EMPHASIS_WORDS)
    result = text
    if kind == "question":
        result = _EMPHASIS_TARGET.sub(lambda m: f"{m.group(0)} {emphasis}", text)
    return _output(text, result, html, 0.7)


def perspective_change(
    text: str, kind: VariantKind, html: Optional[str], rng: random.Random
) -> Optional[RuleOutput]:
    chosen = [word for word in PERSPECTIVE_SWAPS if rng.random() < PERSPECTIVE_PROBABILITY]
    return _output(text, substitute_words(text, PERSPECTIVE_SWAPS, chosen), html, 0.6)


def contextual_variation(
    text: str, kind: VariantKind, html: Optional[str], rng: random.Random
) -> Optional[RuleOutput]:
    result = text
    if kind == "question" and rng.random() < CONTEXT_PROBABILITY:
        result = f"{rng.choice(CONTEXT_PHRASES)} {text.lower()}"
    return _output(text, result, html, 0.8)


# Ordered: generation order is catalog order
PARAPHRASE_RULES: Mapping[str, ParaphraseRule] = MappingProxyType(
    {
        "synonym_replacement": synonym_replacement,
        "sentence_restructuring": sentence_restructuring,
        "formal_informal": formal_informal,
        "active_passive": active_passive,
        "question_style": question_style,
        "expand_contract": expand_contract,
        "order_change": order_change,
        "emphasis_shift": emphasis_shift,
        "perspective_change": perspective_change,
        "contextual_variation": contextual_variation,
    }
)

CREATIVE_COMBINATIONS: Tuple[Tuple[str, str], ...] = (
    ("synonym_replacement", "formal_informal"),
    ("sentence_restructuring", "expand_contract"),
    ("question_style", "emphasis_shift"),
    ("contextual_variation", "synonym_replacement"),
)
