"""
Find related wallets: classify a wallet's recent transactions and tally SOL counterparties.

Fetches the last N signatures for the wallet, fetches each transaction
(jsonParsed), classifies it, and prints one block per transaction followed by
a summary of counterparties with sent/received counts. Failed fetches are
reported and skipped; there is no retry.

Usage:
  get-related-wallets <wallet_address> [limit] [--log]
  py -m wallet_analyzer <wallet_address> 50 --log --rpc-url https://...
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from wallet_analyzer.analytics.address_ledger import AddressLedger, fold
from wallet_analyzer.analytics.models import TransactionReport
from wallet_analyzer.analytics.report import (
    SEPARATOR,
    TX_SEPARATOR,
    build_log_file_name,
    format_summary,
    format_transaction,
    write_transactions_to_file,
)
from wallet_analyzer.analytics.transaction_classifier import classify
from wallet_analyzer.config.env import (
    get_request_delay_sec,
    get_request_timeout_sec,
    get_solana_rpc_url,
    get_tx_log_dir,
    load_analyzer_env,
    print_analyzer_startup,
)
from wallet_analyzer.core.exceptions import InvalidAddressError, RpcError
from wallet_analyzer.rpc.client import MAX_SIGNATURES_LIMIT, SolanaRpcClient
from wallet_analyzer.rpc.models import SignatureInfo
from wallet_analyzer.utils.wallet_utils import parse_wallet
from wallet_analyzer.wallet_logging import bind_wallet, get_logger

logger = get_logger(__name__)

DEFAULT_TX_LIMIT = 10


@dataclass
class AnalysisRun:
    """Everything one pass over a wallet's signatures produced."""

    wallet: str
    signature_count: int = 0
    reports: list[TransactionReport] = field(default_factory=list)
    ledger: AddressLedger = field(default_factory=AddressLedger)
    transactions: list[dict[str, Any]] = field(default_factory=list)
    """Raw parsed transactions; only filled when collecting for --log."""
    skipped: int = 0
    failed_on_chain: int = 0
    """Classified transactions whose signature carries an on-chain error."""


def analyze_signatures(
    client: SolanaRpcClient,
    wallet: str,
    signatures: list[SignatureInfo],
    *,
    request_delay_sec: float = 0.1,
    collect_transactions: bool = False,
    emit: Callable[[str], None] = print,
) -> AnalysisRun:
    """
    Fetch, classify and fold each signature's transaction in order.

    A transaction that fails to fetch or is not found is reported through emit
    and skipped. Sleeps request_delay_sec between fetches, not after the last.
    """
    log = bind_wallet(wallet)
    run = AnalysisRun(wallet=wallet, signature_count=len(signatures))
    total = run.signature_count

    for i, sig_info in enumerate(signatures):
        index = i + 1
        signature = sig_info.signature
        try:
            transaction = client.get_parsed_transaction(signature)
        except RpcError as e:
            log.warning("tx_fetch_failed", signature=signature, index=index, error=str(e))
            emit(f"Error fetching transaction {index} ({signature}): {e}")
            run.skipped += 1
            transaction = None
        else:
            if transaction is None:
                log.info("tx_not_found", signature=signature, index=index)
                emit(f"Transaction {index} of {total} ({signature}): Not found or failed to parse")
                run.skipped += 1

        if transaction is not None:
            if collect_transactions:
                run.transactions.append(transaction)
            if sig_info.failed:
                run.failed_on_chain += 1
            result = classify(transaction, wallet)
            fold(run.ledger, result.related_addresses)
            report = TransactionReport(index=index, signature=signature, result=result)
            run.reports.append(report)
            log.debug(
                "transaction_classified",
                signature=signature,
                tx_type=result.tx_type,
                related_count=len(result.related_addresses),
                failed_on_chain=sig_info.failed,
            )
            emit(format_transaction(report, wallet))
            emit(TX_SEPARATOR)

        # Pace requests to stay under public RPC rate limits
        if index < total and request_delay_sec > 0:
            time.sleep(request_delay_sec)

    log.info(
        "analysis_done",
        signatures=run.signature_count,
        classified=len(run.reports),
        skipped=run.skipped,
        failed_on_chain=run.failed_on_chain,
        related_addresses=len(run.ledger),
        transfers_tallied=sum(counts.total for _, counts in run.ledger.items()),
    )
    return run


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="get-related-wallets",
        description="Classify a Solana wallet's recent transactions and summarize SOL counterparties",
    )
    ap.add_argument("wallet_address", help="Solana wallet address to analyze")
    ap.add_argument(
        "limit",
        nargs="?",
        type=int,
        default=DEFAULT_TX_LIMIT,
        help=f"Number of transactions to fetch (default: {DEFAULT_TX_LIMIT}, max: {MAX_SIGNATURES_LIMIT})",
    )
    ap.add_argument("--log", action="store_true", help="Write fetched transaction data to a JSON file")
    ap.add_argument("--rpc-url", default=None, help="Solana RPC URL (default: from SOLANA_RPC_URL / API keys in .env)")
    ap.add_argument("--output-dir", type=Path, default=None, help="Directory for --log output (default: TX_LOG_DIR or .)")
    return ap


def main(argv: list[str] | None = None) -> int:
    load_analyzer_env()
    args = _build_parser().parse_args(argv)

    if args.limit <= 0:
        print("Error: Transaction limit must be a positive number", file=sys.stderr)
        return 1
    limit = min(args.limit, MAX_SIGNATURES_LIMIT)
    if args.limit > MAX_SIGNATURES_LIMIT:
        print(f"Notice: Transaction limit capped to {MAX_SIGNATURES_LIMIT} (you requested {args.limit})")

    try:
        wallet = parse_wallet(args.wallet_address)
    except InvalidAddressError as e:
        print(f"Invalid wallet address: {e}", file=sys.stderr)
        return 1

    try:
        request_timeout_sec = get_request_timeout_sec()
        request_delay_sec = get_request_delay_sec()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    rpc_url = get_solana_rpc_url(args.rpc_url)
    print_analyzer_startup("get_related_wallets", rpc_url)
    logger.info("analysis_started", wallet=wallet, limit=limit, rpc_url=rpc_url, log_enabled=args.log)

    print(f"\nAnalyzing transactions for address: {wallet}")
    print(f"Transaction limit: {limit}")
    if args.log:
        print("Logging: Enabled")
    print(SEPARATOR)

    with SolanaRpcClient(rpc_url, request_timeout_sec=request_timeout_sec) as client:
        try:
            signatures = client.get_signatures_for_address(wallet, limit=limit)
        except RpcError as e:
            logger.error("signatures_fetch_failed", wallet=wallet, error=str(e))
            print(f"Error fetching transaction signatures: {e}", file=sys.stderr)
            return 1
        print(f"Found {len(signatures)} transactions\n")

        if not signatures:
            print("No transactions found for this address.")
            return 0

        run = analyze_signatures(
            client,
            wallet,
            signatures,
            request_delay_sec=request_delay_sec,
            collect_transactions=args.log,
        )

    if args.log and run.transactions:
        out_dir = args.output_dir or get_tx_log_dir()
        try:
            path = write_transactions_to_file(out_dir / build_log_file_name(wallet), run.transactions, wallet)
        except OSError as e:
            logger.error("tx_log_write_failed", wallet=wallet, output_dir=str(out_dir), error=str(e))
            print(f"Error writing transaction data: {e}", file=sys.stderr)
        else:
            print(f"\nTransaction data written to: {path}")

    print(format_summary(run.ledger))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
