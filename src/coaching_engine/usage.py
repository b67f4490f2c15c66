"""
Token usage accounting and the per-user daily cost cap.
"""

from __future__ import annotations

from typing import Optional

from .models import UsageLogEntry


INPUT_COST_PER_MILLION = 3.0
OUTPUT_COST_PER_MILLION = 15.0
MAX_DAILY_COST_USD = 5.0


def calculate_cost(
    tokens_in: int,
    tokens_out: int,
    input_cost_per_million: float = INPUT_COST_PER_MILLION,
    output_cost_per_million: float = OUTPUT_COST_PER_MILLION,
) -> float:
    """
    >>> round(calculate_cost(3000, 700), 4)
    0.0195
    """
    return (tokens_in / 1_000_000) * input_cost_per_million + (tokens_out / 1_000_000) * output_cost_per_million


def create_usage_log_entry(
    user_id: str,
    model: str,
    tokens_in: int,
    tokens_out: int,
    latency_ms: int,
    session_id: Optional[str] = None,
    input_cost_per_million: float = INPUT_COST_PER_MILLION,
    output_cost_per_million: float = OUTPUT_COST_PER_MILLION,
) -> UsageLogEntry:
    return UsageLogEntry(
        user_id=user_id,
        session_id=session_id,
        model=model,
        tokens_in=tokens_in,
        tokens_out=tokens_out,
        cost_usd=calculate_cost(tokens_in, tokens_out, input_cost_per_million, output_cost_per_million),
        latency_ms=latency_ms,
    )


def is_over_daily_limit(total_daily_cost: float, limit: float = MAX_DAILY_COST_USD) -> bool:
    return total_daily_cost >= limit
