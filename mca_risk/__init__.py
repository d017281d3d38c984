"""
MCA Risk - Underwriting & Prospect Scoring Core

Turns raw bank-transaction feeds into funding qualifications (tier,
amount, rate) and heterogeneous prospect signals into priority scores.
"""

__version__ = "0.1.0"
