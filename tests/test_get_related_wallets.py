"""
Tests for the get_related_wallets CLI: fetch loop, ledger folding, output and --log dump.

The RPC client is replaced by an in-memory fake keyed by signature, so no
network access happens.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from wallet_analyzer.analytics.programs import JUPITER_PROGRAM_ID, SYSTEM_PROGRAM_ID
from wallet_analyzer.core.exceptions import RpcError
from wallet_analyzer.rpc.models import SignatureInfo
from wallet_analyzer.tools.get_related_wallets import analyze_signatures, main

WALLET_A = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
WALLET_B = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
WALLET_C = "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T"


def _sig(signature: str, slot: int = 100) -> SignatureInfo:
    return SignatureInfo(
        signature=signature,
        slot=slot,
        err=None,
        block_time=1700000000,
        memo=None,
        confirmation_status="finalized",
    )


def _transfer_tx(source: str, destination: str, lamports: int) -> dict:
    return {
        "transaction": {
            "message": {
                "instructions": [
                    {
                        "program": "system",
                        "programId": SYSTEM_PROGRAM_ID,
                        "parsed": {
                            "type": "transfer",
                            "info": {"source": source, "destination": destination, "lamports": lamports},
                        },
                    }
                ]
            }
        },
        "meta": {"preTokenBalances": [], "postTokenBalances": []},
    }


def _swap_tx() -> dict:
    return {
        "transaction": {"message": {"instructions": [{"programId": JUPITER_PROGRAM_ID, "data": ""}]}},
        "meta": {"logMessages": []},
    }


class _FakeClient:
    """Stands in for SolanaRpcClient; transactions maps signature -> tx dict, None, or an exception."""

    def __init__(self, signatures=None, transactions=None, signatures_error=None):
        self.signatures = signatures or []
        self.transactions = transactions or {}
        self.signatures_error = signatures_error
        self.signature_calls: list[tuple[str, int]] = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def get_signatures_for_address(self, address, limit=10):
        self.signature_calls.append((address, limit))
        if self.signatures_error is not None:
            raise self.signatures_error
        return self.signatures

    def get_parsed_transaction(self, signature):
        value = self.transactions.get(signature)
        if isinstance(value, Exception):
            raise value
        return value


def _three_tx_client() -> _FakeClient:
    return _FakeClient(
        signatures=[_sig("sig1"), _sig("sig2"), _sig("sig3")],
        transactions={
            "sig1": _transfer_tx(WALLET_A, WALLET_B, 5_000_000_000),
            "sig2": _transfer_tx(WALLET_C, WALLET_A, 2_000_000_000),
            "sig3": _swap_tx(),
        },
    )


def test_end_to_end_ledger_and_types():
    """Send 5 SOL to B, receive 2 SOL from C, one swap -> B sent 1, C received 1."""
    client = _three_tx_client()
    lines: list[str] = []
    run = analyze_signatures(client, WALLET_A, client.signatures, request_delay_sec=0, emit=lines.append)

    assert [r.result.tx_type for r in run.reports] == ["transfer", "transfer", "swap"]
    assert run.ledger.to_dict() == {
        WALLET_B: {"sent_count": 1, "received_count": 0},
        WALLET_C: {"sent_count": 0, "received_count": 1},
    }
    assert run.skipped == 0
    assert run.transactions == []
    assert "Transaction 1: transfer (sig1)" in lines[0]
    assert "Amount: 5.0 SOL (Sent)" in lines[0]
    assert "Amount: 2.0 SOL (Received)" in lines[2]


def test_failed_and_missing_transactions_are_skipped():
    """RpcError and not-found transactions are reported and skipped; the loop continues."""
    client = _FakeClient(
        signatures=[_sig("bad"), _sig("gone"), _sig("ok")],
        transactions={
            "bad": RpcError("boom", method="getTransaction"),
            "gone": None,
            "ok": _transfer_tx(WALLET_A, WALLET_B, 1_000_000_000),
        },
    )
    lines: list[str] = []
    run = analyze_signatures(client, WALLET_A, client.signatures, request_delay_sec=0, emit=lines.append)

    assert run.skipped == 2
    assert [r.index for r in run.reports] == [3]
    assert run.ledger.counts(WALLET_B).sent_count == 1
    assert lines[0].startswith("Error fetching transaction 1 (bad)")
    assert lines[1] == "Transaction 2 of 3 (gone): Not found or failed to parse"


def test_on_chain_failures_are_classified_and_counted():
    """A signature with an on-chain error is still classified; the run counts it separately."""
    failed = SignatureInfo(
        signature="failed",
        slot=101,
        err={"InstructionError": [0, "Custom"]},
        block_time=1700000001,
        memo=None,
        confirmation_status="finalized",
    )
    client = _FakeClient(
        signatures=[failed, _sig("ok")],
        transactions={
            "failed": _swap_tx(),
            "ok": _transfer_tx(WALLET_A, WALLET_B, 1_000_000_000),
        },
    )
    run = analyze_signatures(client, WALLET_A, client.signatures, request_delay_sec=0, emit=lambda _: None)

    assert run.signature_count == 2
    assert run.failed_on_chain == 1
    assert [r.result.tx_type for r in run.reports] == ["swap", "transfer"]
    assert run.ledger.counts(WALLET_B).total == 1


def test_sleeps_between_fetches_but_not_after_last():
    """Pacing sleep runs len(signatures) - 1 times."""
    client = _three_tx_client()
    with patch("wallet_analyzer.tools.get_related_wallets.time.sleep") as mock_sleep:
        analyze_signatures(client, WALLET_A, client.signatures, request_delay_sec=0.1, emit=lambda _: None)
    assert mock_sleep.call_count == 2
    mock_sleep.assert_called_with(0.1)


def test_collect_transactions_keeps_raw_payloads():
    """collect_transactions=True keeps every fetched transaction for the dump."""
    client = _three_tx_client()
    run = analyze_signatures(
        client, WALLET_A, client.signatures, request_delay_sec=0, collect_transactions=True, emit=lambda _: None
    )
    assert len(run.transactions) == 3


# --- main() ---


@pytest.fixture
def cli_env(clean_env):
    clean_env.setenv("REQUEST_DELAY_SEC", "0")
    return clean_env


def _run_main(fake: _FakeClient, argv: list[str]) -> int:
    with patch("wallet_analyzer.tools.get_related_wallets.SolanaRpcClient", return_value=fake):
        return main(argv)


def test_main_prints_report_and_summary(cli_env, capsys):
    """Full run prints each transaction and the related address summary."""
    fake = _three_tx_client()
    code = _run_main(fake, [WALLET_A, "3", "--rpc-url", "https://rpc.test"])
    out = capsys.readouterr().out

    assert code == 0
    assert fake.signature_calls == [(WALLET_A, 3)]
    assert fake.closed is True
    assert f"Analyzing transactions for address: {WALLET_A}" in out
    assert "Found 3 transactions" in out
    assert "Transaction 3: swap (sig3)" in out
    assert f"- {WALLET_B} (Sent: 1)" in out
    assert f"- {WALLET_C} (Received: 1)" in out


def test_main_default_limit(cli_env):
    """Without a limit argument, 10 signatures are requested."""
    fake = _FakeClient()
    assert _run_main(fake, [WALLET_A, "--rpc-url", "https://rpc.test"]) == 0
    assert fake.signature_calls == [(WALLET_A, 10)]


def test_main_caps_limit(cli_env, capsys):
    """Limit above 1000 is capped with a notice."""
    fake = _FakeClient()
    _run_main(fake, [WALLET_A, "5000", "--rpc-url", "https://rpc.test"])
    out = capsys.readouterr().out
    assert "Notice: Transaction limit capped to 1000 (you requested 5000)" in out
    assert fake.signature_calls == [(WALLET_A, 1000)]


def test_main_rejects_non_positive_limit(cli_env):
    """Zero or negative limit -> exit code 1, no RPC call."""
    fake = _FakeClient()
    assert _run_main(fake, [WALLET_A, "0"]) == 1
    assert fake.signature_calls == []


def test_main_rejects_invalid_wallet(cli_env, capsys):
    """Non-pubkey address -> exit code 1."""
    fake = _FakeClient()
    assert _run_main(fake, ["not-a-wallet"]) == 1
    assert "Invalid wallet address" in capsys.readouterr().err
    assert fake.signature_calls == []


@pytest.mark.parametrize("name", ["REQUEST_DELAY_SEC", "REQUEST_TIMEOUT_SEC"])
def test_main_rejects_bad_pacing_env_before_any_rpc(cli_env, capsys, name):
    """Unparseable pacing settings -> exit code 1 before signatures are listed."""
    cli_env.setenv(name, "abc")
    fake = _FakeClient(signatures=[_sig("sig1")])
    assert _run_main(fake, [WALLET_A, "--rpc-url", "https://rpc.test"]) == 1

    captured = capsys.readouterr()
    assert fake.signature_calls == []
    assert f"Error: {name} must be a number" in captured.err
    assert "Found" not in captured.out


def test_main_signature_fetch_error(cli_env, capsys):
    """Failure to list signatures -> exit code 1."""
    fake = _FakeClient(signatures_error=RpcError("down", method="getSignaturesForAddress"))
    assert _run_main(fake, [WALLET_A, "--rpc-url", "https://rpc.test"]) == 1
    assert "Error fetching transaction signatures" in capsys.readouterr().err


def test_main_no_signatures(cli_env, capsys):
    """Wallet with no history exits cleanly."""
    assert _run_main(_FakeClient(), [WALLET_A, "--rpc-url", "https://rpc.test"]) == 0
    assert "No transactions found for this address." in capsys.readouterr().out


def test_main_log_writes_dump(cli_env, tmp_path, capsys):
    """--log writes tx_logs_<wallet prefix>_<stamp>.json with all fetched transactions."""
    fake = _three_tx_client()
    code = _run_main(fake, [WALLET_A, "--log", "--rpc-url", "https://rpc.test", "--output-dir", str(tmp_path)])
    assert code == 0

    files = list(tmp_path.glob(f"tx_logs_{WALLET_A[:8]}_*.json"))
    assert len(files) == 1
    data = json.loads(files[0].read_text(encoding="utf-8"))
    assert data["wallet"] == WALLET_A
    assert data["transactionCount"] == 3
    assert len(data["transactions"]) == 3
    out = capsys.readouterr().out
    assert "Logging: Enabled" in out
    assert "Transaction data written to:" in out


def test_main_log_uses_tx_log_dir(cli_env, tmp_path):
    """Without --output-dir, TX_LOG_DIR decides where the dump goes."""
    cli_env.setenv("TX_LOG_DIR", str(tmp_path / "dumps"))
    _run_main(_three_tx_client(), [WALLET_A, "--log", "--rpc-url", "https://rpc.test"])
    assert len(list((tmp_path / "dumps").glob("tx_logs_*.json"))) == 1


def test_main_log_write_failure_still_prints_summary(cli_env, tmp_path, capsys):
    """An unwritable --output-dir is reported on stderr; the summary still prints and the run succeeds."""
    blocker = tmp_path / "file.txt"
    blocker.write_text("not a directory", encoding="utf-8")
    code = _run_main(
        _three_tx_client(),
        [WALLET_A, "--log", "--rpc-url", "https://rpc.test", "--output-dir", str(blocker / "sub")],
    )
    captured = capsys.readouterr()

    assert code == 0
    assert "Error writing transaction data" in captured.err
    assert "Transaction data written to:" not in captured.out
    assert f"- {WALLET_B} (Sent: 1)" in captured.out
