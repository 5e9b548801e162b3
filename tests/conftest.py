"""
Pytest fixtures for wallet analyzer tests. Keeps RPC config env vars out of the way.
"""

from __future__ import annotations

import pytest

RPC_ENV_VARS = (
    "SOLANA_RPC_URL",
    "ALCHEMY_API_KEY",
    "HELIUS_API_KEY",
    "REQUEST_DELAY_SEC",
    "REQUEST_TIMEOUT_SEC",
    "TX_LOG_DIR",
)


@pytest.fixture
def clean_env(monkeypatch):
    """
    Unset RPC-related env vars and stub .env loading so tests see only what they set.
    """
    for name in RPC_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("wallet_analyzer.config.env.load_dotenv", lambda *a, **kw: False)
    return monkeypatch
