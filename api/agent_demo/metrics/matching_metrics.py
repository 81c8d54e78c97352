"""Prometheus metrics for variant generation and answer matching.

Provides observability into:
- Variants produced per content kind
- Generation runs that failed and fell back to an empty set
- Chat messages answered, and how often the fallback answer was served
- Time spent scoring one utterance against an agent's candidates
"""

from prometheus_client import Counter, Histogram

# ============================================
# Variant generation
# ============================================

variants_generated_total = Counter(
    "agent_demo_variants_generated_total",
    "Variants produced by the paraphrase generator",
    ["kind"],  # question, answer
)

variant_generation_failures_total = Counter(
    "agent_demo_variant_generation_failures_total",
    "Generator runs that raised and returned no variants",
    ["kind"],
)

# ============================================
# Answer matching
# ============================================

chat_messages_total = Counter(
    "agent_demo_chat_messages_total",
    "User chat messages answered by the matcher",
)

chat_fallbacks_total = Counter(
    "agent_demo_chat_fallbacks_total",
    "Chat replies served from a fixed fallback",
    ["reason"],  # no_match, error
)

match_duration_seconds = Histogram(
    "agent_demo_match_duration_seconds",
    "Time spent matching one utterance against an agent's candidates",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)
