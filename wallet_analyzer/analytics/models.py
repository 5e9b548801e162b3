"""
Data models for transaction classification and counterparty tallies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wallet_analyzer.core.exceptions import InvalidDirectionError

TX_TYPE_TRANSFER = "transfer"
TX_TYPE_TOKEN_TRANSFER = "token_transfer"
TX_TYPE_SWAP = "swap"
TX_TYPE_UNKNOWN = "unknown"

DIRECTION_SENT = "sent"
DIRECTION_RECEIVED = "received"
DIRECTIONS = frozenset({DIRECTION_SENT, DIRECTION_RECEIVED})


def validate_direction(direction: Any) -> str:
    """Return direction unchanged if it is 'sent' or 'received'; raise InvalidDirectionError otherwise."""
    if not isinstance(direction, str) or direction not in DIRECTIONS:
        raise InvalidDirectionError(
            f"direction must be one of {sorted(DIRECTIONS)}, got {direction!r}"
        )
    return direction


@dataclass(frozen=True)
class RelatedAddress:
    """Counterparty of the queried wallet in one transaction."""

    address: str
    """Base58 address on the other side of the transfer."""
    direction: str
    """'sent' if the queried wallet paid this address, 'received' if it was paid by it."""

    def __post_init__(self) -> None:
        validate_direction(self.direction)

    def to_dict(self) -> dict[str, str]:
        return {"address": self.address, "direction": self.direction}


@dataclass
class ClassificationResult:
    """
    Outcome of classifying one transaction.

    Only native transfers carry related addresses; token transfers and swaps
    are labeled but never feed the ledger.
    """

    tx_type: str = TX_TYPE_UNKNOWN
    related_addresses: list[RelatedAddress] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.tx_type,
            "related_addresses": [r.to_dict() for r in self.related_addresses],
            "details": dict(self.details),
        }


@dataclass
class AddressCounts:
    """Running tally of transfers with one counterparty."""

    sent_count: int = 0
    """Times the queried wallet sent SOL to this address."""
    received_count: int = 0
    """Times the queried wallet received SOL from this address."""

    @property
    def total(self) -> int:
        return self.sent_count + self.received_count

    def to_dict(self) -> dict[str, int]:
        return {
            "sent_count": self.sent_count,
            "received_count": self.received_count,
        }


@dataclass(frozen=True)
class TransactionReport:
    """One processed transaction as shown in the per-line report."""

    index: int
    """1-based position in the fetched signature list."""
    signature: str
    result: ClassificationResult
