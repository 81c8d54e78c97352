"""
Paraphrase-based variant generator.

Expands one question or answer into a bounded, de-duplicated list of alternate
phrasings. The generator is best-effort: a failure anywhere inside it is logged
and yields an empty list so that saving content never depends on it.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Set

from agent_demo.metrics.matching_metrics import (
    variant_generation_failures_total,
    variants_generated_total,
)
from agent_demo.services.matching.paraphrase_rules import (
    CREATIVE_COMBINATIONS,
    PARAPHRASE_RULES,
    RuleOutput,
    VariantKind,
)
from agent_demo.services.matching.text_normalizer import strip_html

logger = logging.getLogger(__name__)

MAX_VARIANTS = 12
COMBINED_CONFIDENCE = 0.7


@dataclass(frozen=True)
class Variant:
    """One generated phrasing with the technique that produced it."""

    text: str
    html: str
    technique: str
    confidence: float


def apply_technique(
    technique: str,
    text: str,
    kind: VariantKind,
    html: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Optional[RuleOutput]:
    """Run a single named rule.

    Raises:
        KeyError: If the technique is not in the rule catalog
    """
    rule = PARAPHRASE_RULES[technique]
    return rule(text, kind, html, rng or random.Random())


def _combine(
    first: str,
    second: str,
    text: str,
    kind: VariantKind,
    html: Optional[str],
    rng: random.Random,
) -> Optional[RuleOutput]:
    step = apply_technique(first, text, kind, html, rng)
    mid_text = step.text if step else text
    mid_html = step.html if step else html
    final = apply_technique(second, mid_text, kind, mid_html, rng)
    if final is None:
        return step
    return final


def generate_variants(
    source_text: str,
    kind: VariantKind = "question",
    source_html: Optional[str] = None,
    rng: Optional[random.Random] = None,
    max_variants: int = MAX_VARIANTS,
) -> List[Variant]:
    """Generate alternate phrasings of a question or answer.

    Every catalog rule runs once over the tag-stripped source, then each
    creative pair runs in sequence. Outputs equal to the source (verbatim or
    stripped) are dropped, duplicates keep their first occurrence, and the
    result is capped at ``max_variants``.

    Args:
        source_text: Question text or answer plain text
        kind: "question" or "answer"; several rules only touch questions
        source_html: Optional rich-text form of the source
        rng: Random source; a fresh unseeded instance when omitted
        max_variants: Upper bound on returned variants

    Returns:
        Variants in generation order, or an empty list on any internal failure
    """
    try:
        rng = rng or random.Random()
        plain = strip_html(source_text)
        if not plain:
            return []

        seen: Set[str] = {source_text, plain}
        variants: List[Variant] = []

        def _accept(output: Optional[RuleOutput], technique: str, confidence: float) -> None:
            if output is None or len(variants) >= max_variants:
                return
            text = output.text.strip()
            if not text or text in seen:
                return
            seen.add(text)
            variants.append(
                Variant(
                    text=text,
                    html=output.html,
                    technique=technique,
                    confidence=confidence,
                )
            )

        for technique, rule in PARAPHRASE_RULES.items():
            output = rule(plain, kind, source_html, rng)
            _accept(output, technique, output.confidence if output else 0.0)

        for first, second in CREATIVE_COMBINATIONS:
            output = _combine(first, second, plain, kind, source_html, rng)
            _accept(output, f"combined_{first}_{second}", COMBINED_CONFIDENCE)

        variants_generated_total.labels(kind=kind).inc(len(variants))
        logger.debug(f"Generated {len(variants)} {kind} variants")
        return variants
    except Exception as e:
        variant_generation_failures_total.labels(kind=kind).inc()
        logger.error(f"Variant generation failed for {kind}: {e}", exc_info=True)
        return []
