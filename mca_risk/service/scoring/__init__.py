"""
Composite Prospect Scoring for MCA outreach
"""

from .components import (
    calculate_composite_score,
    calculate_confidence,
    calculate_health_score,
    calculate_intent_score,
    calculate_position_score,
    get_grade,
)
from .scorer import CompositeScorer, recommend, summarize_filings, validate_signals
from .settings import ScoringConfig

__all__ = [
    # Settings
    "ScoringConfig",
    # Components
    "calculate_intent_score",
    "calculate_health_score",
    "calculate_position_score",
    "calculate_composite_score",
    "calculate_confidence",
    "get_grade",
    # Scorer
    "CompositeScorer",
    "recommend",
    "summarize_filings",
    "validate_signals",
]
