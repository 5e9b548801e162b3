"""
Transaction classification and counterparty aggregation.

Modules: transaction_classifier (classify), address_ledger (AddressLedger, fold),
programs (well-known program ids), report (printing and JSON dump).
"""

from wallet_analyzer.analytics.address_ledger import AddressLedger, fold
from wallet_analyzer.analytics.models import (
    AddressCounts,
    ClassificationResult,
    RelatedAddress,
    TransactionReport,
)
from wallet_analyzer.analytics.transaction_classifier import classify

__all__ = [
    "AddressCounts",
    "AddressLedger",
    "ClassificationResult",
    "RelatedAddress",
    "TransactionReport",
    "classify",
    "fold",
]
