"""
Sub-score calculation for MCA prospect scoring.

This module turns filing history and business signals into 0-100
scores and blends them into the composite used for outreach ranking:

- Intent: how likely the business is to seek financing now
- Health: business viability and stability
- Position: room left in the merchant's financing stack
"""

import math
from typing import Optional

from mca_risk.domain.entities import (
    CompositeScoreInput,
    FilingTrend,
    Grade,
    HealthScoreInput,
    IntentScoreInput,
    PositionScoreInput,
    SentimentTrend,
)

from .settings import ScoringConfig


def _clamp_score(value: float) -> int:
    # Half-up rounding, so 82.5 scores 83
    return min(100, max(0, math.floor(value + 0.5)))


def score_filing_recency(days_since_last_filing: int) -> float:
    """
    Recency component of intent (10-100).

    Recent filings signal active financing interest; the score decays
    in linear segments and never drops below 10.
    """
    days = max(0, days_since_last_filing)
    if days <= 30:
        return 100.0
    elif days <= 90:
        return 90 - (days - 30) * 0.3
    elif days <= 365:
        return 72 - (days - 90) * 0.1
    elif days <= 1095:
        # Up to three years
        return 44.5 - (days - 365) * 0.02
    else:
        return max(10.0, 30 - (days - 1095) * 0.01)


def score_filing_volume(total_filings: int) -> float:
    """Volume component of intent. One to three filings score best."""
    if total_filings == 0:
        # Never financed: neutral
        return 50.0
    elif total_filings <= 3:
        return 70.0 + total_filings * 5
    elif total_filings <= 6:
        return 80.0 - (total_filings - 3) * 5
    else:
        return max(30.0, 65 - total_filings * 3)


def score_filing_pattern(inputs: IntentScoreInput) -> float:
    """Pattern component of intent. Paid-off (terminated) filings are best, active ones worst."""
    if inputs.total_filings == 0:
        return 50.0
    total = inputs.total_filings
    return (
        50
        + inputs.terminated_filings / total * 30
        + inputs.lapsed_filings / total * 10
        - inputs.active_filings / total * 20
    )


def calculate_intent_score(
    inputs: IntentScoreInput,
    config: Optional[ScoringConfig] = None,
) -> int:
    """
    Calculate the intent score (0-100).

    Weighted blend of recency, volume and pattern, plus +10 when
    filings are increasing and -5 when they are decreasing.

    Args:
        inputs: Summarised UCC filing history
        config: Scoring config (uses defaults if not provided)

    Returns:
        Intent score from 0-100
    """
    if config is None:
        config = ScoringConfig()

    trend_adjustment = 0
    if inputs.recent_filings_trend == FilingTrend.INCREASING:
        trend_adjustment = 10
    elif inputs.recent_filings_trend == FilingTrend.DECREASING:
        trend_adjustment = -5

    weighted = (
        score_filing_recency(inputs.days_since_last_filing) * config.intent_recency_weight
        + score_filing_volume(inputs.total_filings) * config.intent_volume_weight
        + score_filing_pattern(inputs) * config.intent_pattern_weight
        + trend_adjustment
    )
    return _clamp_score(weighted)


def calculate_health_score(
    inputs: HealthScoreInput,
    config: Optional[ScoringConfig] = None,
) -> int:
    """
    Calculate the health score (0-100).

    Args:
        inputs: Business health indicators
        config: Scoring config (uses defaults if not provided)

    Returns:
        Health score from 0-100
    """
    if config is None:
        config = ScoringConfig()
    score = config.health_base_score

    if inputs.review_count > 0:
        # Rating bonus runs -20..+20, trusted in proportion to review volume
        rating_bonus = (inputs.avg_rating - 3) * 10
        review_confidence = min(1.0, inputs.review_count / 50)
        score += rating_bonus * review_confidence * config.health_review_weight

    if inputs.sentiment_trend == SentimentTrend.IMPROVING:
        score += 5
    elif inputs.sentiment_trend == SentimentTrend.DECLINING:
        score -= 10

    score -= inputs.violation_count * config.health_violation_penalty

    if inputs.years_in_business >= 5:
        score += 10
    elif inputs.years_in_business >= 2:
        score += 5
    elif inputs.years_in_business < 1:
        score -= 10

    if inputs.has_website:
        score += 5
    score += inputs.social_presence * 0.05

    return _clamp_score(score)


def payment_burden_penalty(monthly_payments: float, revenue: float) -> int:
    """Penalty for existing payments as a share of revenue."""
    if revenue <= 0 or monthly_payments <= 0:
        return 0
    burden = monthly_payments / revenue
    if burden > 0.25:
        return 30
    elif burden > 0.15:
        return 15
    elif burden > 0.10:
        return 5
    return 0


def calculate_position_score(
    inputs: PositionScoreInput,
    config: Optional[ScoringConfig] = None,
) -> int:
    """
    Calculate the position score (0-100).

    Starts at 100 and deducts for active UCC filings (capped), known
    MCA positions and payment burden.
    """
    if config is None:
        config = ScoringConfig()

    ucc_penalty = min(
        inputs.active_ucc_count * config.position_per_filing_penalty,
        config.position_max_penalty,
    )
    score = 100 - ucc_penalty
    score -= max(0, inputs.known_mca_positions) * 10
    score -= payment_burden_penalty(inputs.estimated_monthly_payments, inputs.estimated_revenue)

    return _clamp_score(score)


def calculate_composite_score(
    inputs: CompositeScoreInput,
    config: Optional[ScoringConfig] = None,
) -> int:
    """
    Blend the three sub-scores and apply industry and state modifiers.

    A missing (or zero) modifier leaves the blend unchanged.
    """
    if config is None:
        config = ScoringConfig()

    composite = (
        inputs.intent_score * config.composite_intent_weight
        + inputs.health_score * config.composite_health_weight
        + inputs.position_score * config.composite_position_weight
    )
    if inputs.industry_risk_modifier:
        composite *= inputs.industry_risk_modifier
    if inputs.state_modifier:
        composite *= inputs.state_modifier

    return _clamp_score(composite)


def get_grade(score: float) -> Grade:
    """Letter grade: A 80+, B 65+, C 50+, D 35+, otherwise F."""
    if score >= 80:
        return Grade.A
    if score >= 65:
        return Grade.B
    if score >= 50:
        return Grade.C
    if score >= 35:
        return Grade.D
    return Grade.F


def calculate_confidence(
    has_reviews: bool,
    has_ucc_history: bool,
    has_revenue_estimate: bool,
    has_years_in_business: bool,
) -> int:
    """Confidence (0-100) from which signals were actually available."""
    confidence = 50
    if has_reviews:
        confidence += 15
    if has_ucc_history:
        confidence += 20
    if has_revenue_estimate:
        confidence += 10
    if has_years_in_business:
        confidence += 5
    return min(100, confidence)
