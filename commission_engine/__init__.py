"""
Commission distribution engine.

Distributes plan-purchase commissions up a purchaser's referral ancestry and
records the resulting ledger entries as one all-or-nothing unit of work.
"""

__version__ = "1.0.0"
