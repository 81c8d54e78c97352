"""Prometheus metrics definitions for the Agent Demo API.

- matching_metrics: variant generation and answer matching counters

Usage:
    from agent_demo.metrics.matching_metrics import chat_messages_total
"""

from agent_demo.metrics import matching_metrics

__all__ = ["matching_metrics"]
