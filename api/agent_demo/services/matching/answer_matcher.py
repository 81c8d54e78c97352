"""
Answer matcher: picks the stored answer whose question best matches a user
utterance.

The matcher sits on the chat hot path and never raises. Anything unexpected
turns into the fixed "technical difficulties" reply so that a chat turn always
produces an agent message.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import List, Optional, Protocol

from agent_demo.metrics.matching_metrics import (
    chat_fallbacks_total,
    chat_messages_total,
    match_duration_seconds,
)
from agent_demo.models.catalog import AnswerVariant, QuestionDetail
from agent_demo.services.matching.similarity import score
from agent_demo.utils.logging import redact_pii

logger = logging.getLogger(__name__)

NO_MATCH_TEXT = (
    "I'm sorry, I don't have information about that topic. "
    "Could you please rephrase your question or ask about something else?"
)
ERROR_TEXT = "I'm experiencing technical difficulties. Please try again later."
DEFAULT_THRESHOLD = 0.3


class CandidateSource(Protocol):
    def list_match_candidates(self, agent_id: str) -> List[QuestionDetail]: ...


@dataclass
class MatchCandidate:
    """One scorable text and the question it belongs to."""

    question: QuestionDetail
    text: str
    is_variant: bool


@dataclass(frozen=True)
class MatchResult:
    text: str
    html: Optional[str]
    score: float
    question_id: Optional[str] = None
    answer_id: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.question_id is None


def _fallback(text: str) -> MatchResult:
    return MatchResult(text=text, html=text, score=0.0)


def _eligible(question: QuestionDetail) -> bool:
    return question.status == "Final" and question.answer.status == "Final"


def build_candidates(questions: List[QuestionDetail]) -> List[MatchCandidate]:
    """Flatten eligible questions into scorable candidates.

    Each question contributes its own text first, then its approved variants in
    stored order. Draft material and unapproved variants are skipped.
    """
    candidates: List[MatchCandidate] = []
    for question in questions:
        if not _eligible(question):
            continue
        candidates.append(MatchCandidate(question, question.text, is_variant=False))
        candidates.extend(
            MatchCandidate(question, variant.variant_text, is_variant=True)
            for variant in question.variants
            if variant.is_approved
        )
    return candidates


class AnswerMatcher:
    """Scores a user utterance against an agent's published questions."""

    def __init__(
        self,
        candidate_source: CandidateSource,
        threshold: float = DEFAULT_THRESHOLD,
        rng: Optional[random.Random] = None,
    ):
        self.candidate_source = candidate_source
        self.threshold = threshold
        self.rng = rng or random.Random()

    def _resolve_answer(self, best: MatchCandidate, best_score: float) -> MatchResult:
        answer = best.question.answer
        approved: List[AnswerVariant] = [v for v in answer.variants if v.is_approved]
        if best.is_variant and approved:
            chosen = self.rng.choice(approved)
            return MatchResult(
                text=chosen.variant_text,
                html=chosen.variant_html or chosen.variant_text,
                score=best_score,
                question_id=best.question.id,
                answer_id=answer.id,
            )
        return MatchResult(
            text=answer.text,
            html=answer.html or answer.text,
            score=best_score,
            question_id=best.question.id,
            answer_id=answer.id,
        )

    def match(self, agent_id: str, utterance: str) -> MatchResult:
        """Find the answer for ``utterance`` among ``agent_id``'s content.

        Ties keep the first candidate seen. The best score must be strictly
        greater than the threshold; otherwise the no-match fallback is returned
        with null ids.
        """
        chat_messages_total.inc()
        started = time.perf_counter()
        try:
            candidates = build_candidates(
                self.candidate_source.list_match_candidates(agent_id)
            )

            best: Optional[MatchCandidate] = None
            best_score = 0.0
            for candidate in candidates:
                candidate_score = score(utterance, candidate.text)
                if candidate_score > best_score:
                    best, best_score = candidate, candidate_score

            if best is None or best_score <= self.threshold:
                logger.info(
                    f"No match for agent {agent_id} (best score {best_score:.2f}): "
                    f"{redact_pii(utterance)}"
                )
                chat_fallbacks_total.labels(reason="no_match").inc()
                return _fallback(NO_MATCH_TEXT)

            logger.debug(
                f"Matched question {best.question.id} for agent {agent_id} "
                f"with score {best_score:.2f}"
            )
            return self._resolve_answer(best, best_score)
        except Exception as e:
            logger.error(f"Answer matching failed for agent {agent_id}: {e}", exc_info=True)
            chat_fallbacks_total.labels(reason="error").inc()
            return _fallback(ERROR_TEXT)
        finally:
            match_duration_seconds.observe(time.perf_counter() - started)
