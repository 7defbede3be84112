"""
Commission distribution package.

Rate lookup, ancestry resolution, ledger writes, platform remainder
accounting, the distribution engine and read-side statistics.
"""

from commission_engine.services.commission.ancestry_resolver import (
    AncestorRef,
    AncestryResolver,
)
from commission_engine.services.commission.backfill import (
    BackfillEntry,
    MissingCommissionProcessor,
)
from commission_engine.services.commission.distribution_engine import (
    CommissionDetail,
    CommissionDistributionEngine,
    DistributionResult,
    SkippedAncestor,
    SkipReason,
)
from commission_engine.services.commission.ledger_writer import LedgerWriter
from commission_engine.services.commission.platform_accountant import (
    PlatformRemainderAccountant,
    purchase_reference,
)
from commission_engine.services.commission.rate_table import RateTable
from commission_engine.services.commission.statistics import (
    CommissionStatisticsReader,
    CommissionStats,
    LevelEarnings,
    WalletReconciliation,
)

__all__ = [
    "AncestorRef",
    "AncestryResolver",
    "BackfillEntry",
    "CommissionDetail",
    "CommissionDistributionEngine",
    "CommissionStatisticsReader",
    "CommissionStats",
    "DistributionResult",
    "LedgerWriter",
    "LevelEarnings",
    "MissingCommissionProcessor",
    "PlatformRemainderAccountant",
    "RateTable",
    "SkipReason",
    "SkippedAncestor",
    "WalletReconciliation",
    "purchase_reference",
]
