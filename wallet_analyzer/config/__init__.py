"""
Configuration for the wallet analyzer.

Loads settings from environment variables and an optional .env file.
"""

from wallet_analyzer.config.env import (  # noqa: F401
    get_request_delay_sec,
    get_request_timeout_sec,
    get_solana_rpc_url,
    get_tx_log_dir,
    load_analyzer_env,
)

__all__ = [
    "get_request_delay_sec",
    "get_request_timeout_sec",
    "get_solana_rpc_url",
    "get_tx_log_dir",
    "load_analyzer_env",
]
