from wallet_analyzer.core.exceptions import (
    InvalidAddressError,
    InvalidDirectionError,
    RpcError,
    WalletAnalyzerError,
)

__all__ = [
    "InvalidAddressError",
    "InvalidDirectionError",
    "RpcError",
    "WalletAnalyzerError",
]
