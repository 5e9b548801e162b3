"""
Counterparty ledger: folds classifier output into per-address sent/received counts.

The ledger is a running tally owned by the caller for one analysis run.
Addresses keep first-seen order so the printed summary is deterministic.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from wallet_analyzer.analytics.models import (
    DIRECTION_SENT,
    AddressCounts,
    RelatedAddress,
    validate_direction,
)


class AddressLedger:
    """Mapping of counterparty address -> AddressCounts, in first-seen order."""

    def __init__(self) -> None:
        self._entries: dict[str, AddressCounts] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, address: object) -> bool:
        return address in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def items(self) -> Iterator[tuple[str, AddressCounts]]:
        return iter(self._entries.items())

    def counts(self, address: str) -> AddressCounts:
        """Return a copy of the counts for address; zeroed if never seen."""
        entry = self._entries.get(address)
        if entry is None:
            return AddressCounts()
        return AddressCounts(entry.sent_count, entry.received_count)

    def record(self, address: str, direction: str) -> None:
        """Increment sent or received count for address; ValueError on an empty address."""
        _validate_address(address)
        validate_direction(direction)
        entry = self._entries.setdefault(address, AddressCounts())
        if direction == DIRECTION_SENT:
            entry.sent_count += 1
        else:
            entry.received_count += 1

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {address: counts.to_dict() for address, counts in self._entries.items()}


def _validate_address(address: Any) -> str:
    if not isinstance(address, str) or not address:
        raise ValueError(f"related address must be a non-empty string, got {address!r}")
    return address


def _normalize(item: Any) -> tuple[str, str]:
    """Return (address, direction) from a RelatedAddress or an {address, direction} mapping."""
    if isinstance(item, RelatedAddress):
        address, direction = item.address, item.direction
    elif isinstance(item, Mapping):
        address, direction = item.get("address"), item.get("direction")
    else:
        raise TypeError(f"related address must be RelatedAddress or mapping, got {type(item).__name__}")
    return _validate_address(address), validate_direction(direction)


def fold(
    ledger: AddressLedger,
    related_addresses: Iterable[RelatedAddress | Mapping[str, Any]],
) -> AddressLedger:
    """
    Add each {address, direction} pair to the ledger and return it.

    Not idempotent: folding the same pairs again increments the counts again.
    The whole batch is validated first, so a bad direction (InvalidDirectionError)
    leaves the ledger untouched.
    """
    pairs = [_normalize(item) for item in related_addresses]
    for address, direction in pairs:
        ledger.record(address, direction)
    return ledger
