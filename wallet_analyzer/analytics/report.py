"""
Human-readable report lines and the optional JSON transaction dump.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from wallet_analyzer.analytics.address_ledger import AddressLedger
from wallet_analyzer.analytics.models import TX_TYPE_TRANSFER, TransactionReport
from wallet_analyzer.wallet_logging import get_logger

logger = get_logger(__name__)

SEPARATOR = "=" * 50
TX_SEPARATOR = "-" * 50


def format_transaction(report: TransactionReport, wallet: str) -> str:
    """One report block: type and signature, then related addresses and SOL amount when present."""
    result = report.result
    lines = [f"Transaction {report.index}: {result.tx_type} ({report.signature})"]
    if result.related_addresses:
        related = ", ".join(f"{r.address} ({r.direction})" for r in result.related_addresses)
        lines.append(f"  Related addresses: {related}")
    amount = result.details.get("amount")
    if result.tx_type == TX_TYPE_TRANSFER and amount:
        side = "Sent" if result.details.get("source") == wallet else "Received"
        lines.append(f"  Amount: {amount} SOL ({side})")
    return "\n".join(lines)


def format_summary(ledger: AddressLedger) -> str:
    """Summary of related addresses in first-seen order."""
    if not len(ledger):
        return "\nNo related addresses found in these transactions."
    lines = ["\nSummary of related addresses:", SEPARATOR]
    for address, counts in ledger.items():
        parts = []
        if counts.sent_count > 0:
            parts.append(f"Sent: {counts.sent_count}")
        if counts.received_count > 0:
            parts.append(f"Received: {counts.received_count}")
        lines.append(f"- {address} ({', '.join(parts)})")
    return "\n".join(lines)


def build_log_file_name(wallet: str, now: datetime | None = None) -> str:
    """tx_logs_<first 8 chars of wallet>_<UTC YYYY-MM-DDTHH-MM-SS>.json"""
    now = now or datetime.now(timezone.utc)
    stamp = now.strftime("%Y-%m-%dT%H-%M-%S")
    return f"tx_logs_{wallet[:8]}_{stamp}.json"


def write_transactions_to_file(
    path: Path,
    transactions: list[dict[str, Any]],
    wallet: str,
    now: datetime | None = None,
) -> Path:
    """Dump the raw parsed transactions with wallet and timestamp header; return the path written."""
    now = now or datetime.now(timezone.utc)
    payload = {
        "wallet": wallet,
        "timestamp": now.isoformat(),
        "transactionCount": len(transactions),
        "transactions": transactions,
    }
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("tx_log_written", path=str(path), transaction_count=len(transactions))
    return path
