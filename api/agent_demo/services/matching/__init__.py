"""
Deterministic text matching: variant generation and answer retrieval.
"""

from agent_demo.services.matching.answer_matcher import (
    ERROR_TEXT,
    NO_MATCH_TEXT,
    AnswerMatcher,
    MatchResult,
)
from agent_demo.services.matching.similarity import score
from agent_demo.services.matching.text_normalizer import normalize, strip_html
from agent_demo.services.matching.variant_generator import (
    Variant,
    apply_technique,
    generate_variants,
)

__all__ = [
    "AnswerMatcher",
    "ERROR_TEXT",
    "MatchResult",
    "NO_MATCH_TEXT",
    "Variant",
    "apply_technique",
    "generate_variants",
    "normalize",
    "score",
    "strip_html",
]
