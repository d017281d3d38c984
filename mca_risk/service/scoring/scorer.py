"""Composite prospect scorer: ProspectSignals to ScoringResult."""

from datetime import date
from typing import List, Optional, Sequence

import structlog

from mca_risk.core.metrics import record_prospect_score, record_scoring_failure
from mca_risk.domain.entities import (
    CompositeScoreInput,
    FactorImpact,
    FilingTrend,
    HealthScoreInput,
    IntentScoreInput,
    PositionScoreInput,
    ProspectScoreOutcome,
    ProspectSignals,
    Recommendation,
    ScoreFactor,
    ScoringResult,
    SentimentTrend,
    UccFiling,
    UccFilingStatus,
)
from mca_risk.domain.exceptions import InvalidScoringInputException, UnderwritingException

from .components import (
    calculate_composite_score,
    calculate_confidence,
    calculate_health_score,
    calculate_intent_score,
    calculate_position_score,
    get_grade,
)
from .settings import ScoringConfig

logger = structlog.get_logger(__name__)

# Days since last filing when a prospect has no filings
NO_FILING_DAYS = 9999
RECENT_FILING_DAYS = 365

NEUTRAL_RATING = 3.0
VIOLATION_FACTOR_WEIGHT = 0.1


def summarize_filings(filings: Sequence[UccFiling], as_of: date) -> IntentScoreInput:
    """
    Summarise UCC filings for intent scoring.

    Filings from the last 365 days are recent. The trend is increasing
    when recent filings outnumber older ones and decreasing when they
    are fewer than half the older ones.
    """
    if not filings:
        return IntentScoreInput(
            days_since_last_filing=NO_FILING_DAYS,
            total_filings=0,
            active_filings=0,
            lapsed_filings=0,
            terminated_filings=0,
        )

    ages = [max(0, (as_of - f.filing_date).days) for f in filings]
    recent = sum(1 for age in ages if age <= RECENT_FILING_DAYS)
    older = len(filings) - recent

    trend = FilingTrend.STABLE
    if recent > older:
        trend = FilingTrend.INCREASING
    elif recent < older / 2:
        trend = FilingTrend.DECREASING

    return IntentScoreInput(
        days_since_last_filing=min(ages),
        total_filings=len(filings),
        active_filings=sum(1 for f in filings if f.status == UccFilingStatus.ACTIVE),
        lapsed_filings=sum(1 for f in filings if f.status == UccFilingStatus.LAPSED),
        terminated_filings=sum(1 for f in filings if f.status == UccFilingStatus.TERMINATED),
        recent_filings_trend=trend,
    )


def recommend(composite_score: int, confidence: int) -> Recommendation:
    """Outreach priority for a composite score."""
    if composite_score >= 75 and confidence >= 60:
        return Recommendation.HIGH_PRIORITY
    elif composite_score >= 55:
        return Recommendation.MODERATE_PRIORITY
    elif composite_score >= 40:
        return Recommendation.LOW_PRIORITY
    return Recommendation.PASS


def validate_signals(signals: ProspectSignals) -> None:
    """
    Reject signals that cannot be scored.

    Raises:
        InvalidScoringInputException: If any signal is out of range
    """
    errors = []
    if not signals.prospect_id:
        errors.append("prospect_id is required")
    if signals.known_mca_positions < 0:
        errors.append("known_mca_positions cannot be negative")
    if signals.estimated_monthly_payments < 0:
        errors.append("estimated_monthly_payments cannot be negative")
    if signals.estimated_revenue is not None and signals.estimated_revenue < 0:
        errors.append("estimated_revenue cannot be negative")
    if signals.years_in_business is not None and signals.years_in_business < 0:
        errors.append("years_in_business cannot be negative")
    if signals.social_presence is not None and not 0 <= signals.social_presence <= 100:
        errors.append("social_presence must be between 0 and 100")

    health = signals.health
    if health is not None:
        if health.review_count < 0:
            errors.append("review_count cannot be negative")
        if health.violation_count < 0:
            errors.append("violation_count cannot be negative")
        if health.avg_sentiment is not None and not 0 <= health.avg_sentiment <= 1:
            errors.append("avg_sentiment must be between 0 and 1")

    if errors:
        raise InvalidScoringInputException("; ".join(errors), prospect_id=signals.prospect_id)


class CompositeScorer:
    """
    Scores prospects for outbound prioritisation.

    Separate from qualification: a high composite score means a good
    outreach target, not an approved advance.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self._config = config if config is not None else ScoringConfig()

    @property
    def config(self) -> ScoringConfig:
        return self._config

    def score_prospect(
        self,
        signals: ProspectSignals,
        as_of: Optional[date] = None,
    ) -> ScoringResult:
        """
        Score a single prospect.

        Args:
            signals: Everything known about the prospect
            as_of: Reference date for filing recency (defaults to today)

        Returns:
            ScoringResult with sub-scores, grade and recommendation

        Raises:
            InvalidScoringInputException: If the signals are out of range
        """
        validate_signals(signals)
        config = self._config
        as_of = as_of or date.today()

        intent_input = summarize_filings(signals.ucc_filings, as_of)
        health = signals.health
        avg_sentiment = health.avg_sentiment if health else None

        health_input = HealthScoreInput(
            review_count=health.review_count if health else 0,
            avg_rating=avg_sentiment * 5 if avg_sentiment is not None else NEUTRAL_RATING,
            sentiment_trend=health.sentiment_trend if health else SentimentTrend.STABLE,
            violation_count=health.violation_count if health else 0,
            years_in_business=(
                signals.years_in_business
                if signals.years_in_business is not None
                else config.default_years_in_business
            ),
            has_website=(
                signals.has_website
                if signals.has_website is not None
                else config.default_has_website
            ),
            social_presence=(
                signals.social_presence
                if signals.social_presence is not None
                else config.default_social_presence
            ),
        )
        position_input = PositionScoreInput(
            active_ucc_count=intent_input.active_filings,
            known_mca_positions=signals.known_mca_positions,
            estimated_monthly_payments=signals.estimated_monthly_payments,
            estimated_revenue=signals.estimated_revenue or 0.0,
        )

        intent_score = calculate_intent_score(intent_input, config)
        health_score = calculate_health_score(health_input, config)
        position_score = calculate_position_score(position_input, config)
        composite_score = calculate_composite_score(
            CompositeScoreInput(
                intent_score=intent_score,
                health_score=health_score,
                position_score=position_score,
                industry_risk_modifier=config.industry_modifier(signals.industry),
                state_modifier=config.state_modifier(signals.state),
            ),
            config,
        )

        confidence = calculate_confidence(
            has_reviews=health_input.review_count > 0,
            has_ucc_history=intent_input.total_filings > 0,
            has_revenue_estimate=bool(signals.estimated_revenue),
            has_years_in_business=signals.years_in_business is not None,
        )
        grade = get_grade(composite_score)

        result = ScoringResult(
            intent_score=intent_score,
            health_score=health_score,
            position_score=position_score,
            composite_score=composite_score,
            grade=grade,
            confidence=confidence,
            factors=self._build_factors(intent_input, signals),
            recommendation=recommend(composite_score, confidence),
        )

        record_prospect_score(grade.value)
        logger.info(
            "prospect_scored",
            prospect_id=signals.prospect_id,
            composite_score=composite_score,
            grade=grade.value,
            recommendation=result.recommendation.value,
        )
        return result

    def score_prospects(
        self,
        signals_list: Sequence[ProspectSignals],
        as_of: Optional[date] = None,
    ) -> List[ProspectScoreOutcome]:
        """
        Score a batch of prospects independently.

        A prospect that fails is reported in its own outcome; the rest
        of the batch is still scored. Outcomes keep input order.
        """
        outcomes: List[ProspectScoreOutcome] = []
        for signals in signals_list:
            try:
                result = self.score_prospect(signals, as_of=as_of)
            except UnderwritingException as e:
                logger.warning(
                    "prospect_scoring_failed",
                    prospect_id=signals.prospect_id,
                    error_code=e.code,
                    error=e.message,
                )
                record_scoring_failure(e.code)
                outcomes.append(
                    ProspectScoreOutcome(
                        prospect_id=signals.prospect_id,
                        error=e.message,
                        error_code=e.code,
                    )
                )
            except Exception as e:
                logger.exception(
                    "prospect_scoring_failed",
                    prospect_id=getattr(signals, "prospect_id", None),
                    error_type=type(e).__name__,
                )
                record_scoring_failure(type(e).__name__)
                outcomes.append(
                    ProspectScoreOutcome(
                        prospect_id=getattr(signals, "prospect_id", ""),
                        error=str(e),
                        error_code="SCORING_ERROR",
                    )
                )
            else:
                outcomes.append(ProspectScoreOutcome(prospect_id=signals.prospect_id, result=result))

        logger.info(
            "prospect_batch_scored",
            total=len(outcomes),
            failed=sum(1 for o in outcomes if not o.succeeded),
        )
        return outcomes

    def _build_factors(
        self,
        intent_input: IntentScoreInput,
        signals: ProspectSignals,
    ) -> List[ScoreFactor]:
        config = self._config
        days = intent_input.days_since_last_filing
        total = intent_input.total_filings
        active = intent_input.active_filings

        if days < 365:
            recency_impact = FactorImpact.POSITIVE
        elif days > 1095:
            recency_impact = FactorImpact.NEGATIVE
        else:
            recency_impact = FactorImpact.NEUTRAL

        if 0 < total < 5:
            history_impact = FactorImpact.POSITIVE
        elif total > 6:
            history_impact = FactorImpact.NEGATIVE
        else:
            history_impact = FactorImpact.NEUTRAL

        if active == 0:
            active_impact = FactorImpact.POSITIVE
        elif active > 3:
            active_impact = FactorImpact.NEGATIVE
        else:
            active_impact = FactorImpact.NEUTRAL

        factors = [
            ScoreFactor("UCC Recency", days, recency_impact, config.intent_recency_weight),
            ScoreFactor("Filing History", total, history_impact, config.intent_volume_weight),
            ScoreFactor("Active Positions", active, active_impact, config.composite_position_weight),
        ]

        health = signals.health
        if health is not None:
            if health.avg_sentiment is not None:
                if health.avg_sentiment > 0.6:
                    sentiment_impact = FactorImpact.POSITIVE
                elif health.avg_sentiment < 0.4:
                    sentiment_impact = FactorImpact.NEGATIVE
                else:
                    sentiment_impact = FactorImpact.NEUTRAL
                factors.append(
                    ScoreFactor(
                        "Review Sentiment",
                        health.avg_sentiment,
                        sentiment_impact,
                        config.health_review_weight,
                    )
                )
            if health.violation_count > 0:
                factors.append(
                    ScoreFactor(
                        "Violations",
                        health.violation_count,
                        FactorImpact.NEGATIVE,
                        VIOLATION_FACTOR_WEIGHT,
                    )
                )

        return factors
