"""Prometheus metrics for the MCA risk core.

Metrics are organized into two categories:

Business Metrics (for Underwriting/Sales):
- mca_qualification_total: Qualifications by tier
- mca_qualified_amount_dollars: Maximum funding amount offered
- mca_prospect_score_total: Prospect scores by grade

Technical Metrics (for Engineering/SRE):
- mca_qualification_latency_seconds: Qualification evaluation latency
- mca_bank_fetch_latency_seconds: Bank data provider latency
- mca_bank_fetch_failures_total: Bank data provider failures
- mca_prospect_lookup_failures_total: Optional prospect lookups that failed
- mca_scoring_failures_total: Prospects that failed inside a batch
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram


# =============================================================================
# Business Metrics
# =============================================================================

qualification_total = Counter(
    "mca_qualification_total",
    "Total number of qualification decisions",
    ["tier"],  # A, B, C, D, Decline
)

qualified_amount = Histogram(
    "mca_qualified_amount_dollars",
    "Maximum funding amount offered to qualified merchants",
    buckets=[5000, 10000, 25000, 50000, 75000, 150000, 250000, 500000],
)

prospect_score_total = Counter(
    "mca_prospect_score_total",
    "Total number of prospect scores by grade",
    ["grade"],  # A, B, C, D, F
)


# =============================================================================
# Technical Metrics
# =============================================================================

qualification_latency = Histogram(
    "mca_qualification_latency_seconds",
    "Qualification evaluation latency in seconds",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0],
)

bank_fetch_latency = Histogram(
    "mca_bank_fetch_latency_seconds",
    "Bank data provider latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

bank_fetch_failures = Counter(
    "mca_bank_fetch_failures_total",
    "Total number of bank data provider failures",
    ["error_type"],
)

prospect_lookup_failures = Counter(
    "mca_prospect_lookup_failures_total",
    "Optional prospect lookups that failed and were defaulted",
)

scoring_failures = Counter(
    "mca_scoring_failures_total",
    "Prospects that failed to score inside a batch",
    ["error_type"],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_qualification(tier: str, max_amount: float) -> None:
    """Record a qualification outcome."""
    qualification_total.labels(tier=tier).inc()
    if max_amount > 0:
        qualified_amount.observe(max_amount)


def record_prospect_score(grade: str) -> None:
    """Record a prospect score."""
    prospect_score_total.labels(grade=grade).inc()


def record_scoring_failure(error_type: str) -> None:
    """Record a prospect that failed to score."""
    scoring_failures.labels(error_type=error_type).inc()


def record_prospect_lookup_failure() -> None:
    """Record an optional prospect lookup that was defaulted."""
    prospect_lookup_failures.inc()


def record_bank_fetch_failure(error_type: str) -> None:
    """Record a bank data provider failure."""
    bank_fetch_failures.labels(error_type=error_type).inc()


@contextmanager
def track_qualification_latency() -> Generator[None, None, None]:
    """Context manager to track qualification latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        qualification_latency.observe(time.perf_counter() - start)


@contextmanager
def track_bank_fetch_latency() -> Generator[None, None, None]:
    """Context manager to track bank data provider latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        bank_fetch_latency.observe(time.perf_counter() - start)
