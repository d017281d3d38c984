"""
Risk and confidence scores attached to a qualification.

Both are informational: the tier alone decides funding.
"""

import math
from typing import Sequence

from mca_risk.domain.entities import (
    QualificationReason,
    ReasonResult,
    TrendDirection,
    UnderwritingFeatures,
)


FAIL_POINTS = 25
WARNING_POINTS = 10


def calculate_risk_score(
    reasons: Sequence[QualificationReason],
    features: UnderwritingFeatures,
) -> int:
    """
    Additive risk score (0-100, higher is riskier).

    Points:
        +25 per failed factor, +10 per warning
        +3 per NSF event
        +0.5 per percentage point of negative days
        +5 per existing position
        +10 for declining revenue, +5 for volatile revenue

    Args:
        reasons: Evaluated qualification factors
        features: The feature snapshot the reasons were evaluated on

    Returns:
        Risk score clamped to 0-100
    """
    score = 0.0
    for reason in reasons:
        if reason.result == ReasonResult.FAIL:
            score += FAIL_POINTS
        elif reason.result == ReasonResult.WARNING:
            score += WARNING_POINTS

    score += max(0, features.nsf_count) * 3
    score += max(0.0, features.negative_days_percentage) * 0.5
    score += max(0, features.estimated_position_count) * 5

    if features.revenue_trend.direction == TrendDirection.DECREASING:
        score += 10
    elif features.revenue_trend.direction == TrendDirection.VOLATILE:
        score += 5

    return max(0, min(100, math.floor(score + 0.5)))


def calculate_confidence(features: UnderwritingFeatures) -> int:
    """
    Confidence (0-100) in the data behind a qualification.

    More transactions, a longer window and steadier deposits all raise it.
    """
    confidence = 50

    if features.total_transactions_analyzed >= 500:
        confidence += 20
    elif features.total_transactions_analyzed >= 200:
        confidence += 15
    elif features.total_transactions_analyzed >= 100:
        confidence += 10

    if features.total_days_analyzed >= 180:
        confidence += 15
    elif features.total_days_analyzed >= 90:
        confidence += 10
    elif features.total_days_analyzed >= 30:
        confidence += 5

    if features.deposit_consistency_score >= 75:
        confidence += 10
    elif features.deposit_consistency_score >= 50:
        confidence += 5

    return min(100, confidence)
