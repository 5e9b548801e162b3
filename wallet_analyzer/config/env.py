"""
Environment variable loading for the wallet analyzer.

- SOLANA_RPC_URL: RPC endpoint (takes precedence over API keys)
- ALCHEMY_API_KEY: Alchemy key, used for the mainnet Alchemy endpoint
- HELIUS_API_KEY: Helius key, used when no Alchemy key is set
- REQUEST_DELAY_SEC: pause between getTransaction calls (default 0.1)
- REQUEST_TIMEOUT_SEC: HTTP timeout per RPC request (default 30)
- TX_LOG_DIR: directory for --log dumps (default: current directory)
- Loads .env from project root and the current directory when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from wallet_analyzer.wallet_logging.logger import mask_rpc_url

# Project root: config is wallet_analyzer/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
ALCHEMY_MAINNET_URL_TEMPLATE = "https://solana-mainnet.g.alchemy.com/v2/{key}"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"

DEFAULT_REQUEST_DELAY_SEC = 0.1
DEFAULT_REQUEST_TIMEOUT_SEC = 30.0


def load_analyzer_env() -> None:
    """Load .env from project root, then from the working directory. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)
    load_dotenv()


def get_solana_rpc_url(override: str | None = None) -> str:
    """
    Resolve Solana RPC URL.
    Order: override > SOLANA_RPC_URL > ALCHEMY_API_KEY > HELIUS_API_KEY > public mainnet.
    """
    if override and override.strip():
        return override.strip()
    load_analyzer_env()
    url = (os.getenv("SOLANA_RPC_URL") or "").strip()
    if url:
        return url
    key = (os.getenv("ALCHEMY_API_KEY") or "").strip()
    if key:
        return ALCHEMY_MAINNET_URL_TEMPLATE.format(key=key)
    key = (os.getenv("HELIUS_API_KEY") or "").strip()
    if key:
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return MAINNET_RPC_URL


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def get_request_delay_sec() -> float:
    """Seconds to sleep between transaction fetches."""
    load_analyzer_env()
    return _float_env("REQUEST_DELAY_SEC", DEFAULT_REQUEST_DELAY_SEC)


def get_request_timeout_sec() -> float:
    load_analyzer_env()
    return _float_env("REQUEST_TIMEOUT_SEC", DEFAULT_REQUEST_TIMEOUT_SEC)


def get_tx_log_dir() -> Path:
    """Directory where --log writes transaction dumps."""
    load_analyzer_env()
    return Path((os.getenv("TX_LOG_DIR") or "").strip() or ".")


def print_analyzer_startup(script_name: str, rpc: str) -> None:
    """Print the masked RPC endpoint at script start."""
    print(f"[wallet_analyzer] {script_name} | rpc={mask_rpc_url(rpc)}")
