"""
Structured logging for the wallet analyzer.

JSON logs with timestamp, event_type and per-call fields.
"""

from wallet_analyzer.wallet_logging.logger import bind_wallet, get_logger, mask_rpc_url

__all__ = ["bind_wallet", "get_logger", "mask_rpc_url"]
