"""
Application-level exceptions.

RpcError covers every failure talking to the Solana node; the CLI catches it
per transaction and moves on. The ValueError subclasses flag bad caller input.
"""

from __future__ import annotations


class WalletAnalyzerError(Exception):
    """Base class for wallet analyzer errors."""


class RpcError(WalletAnalyzerError):
    """Transport, HTTP, or JSON-RPC level failure."""

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        method: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.method = method


class InvalidDirectionError(WalletAnalyzerError, ValueError):
    """Direction tag is neither 'sent' nor 'received'."""


class InvalidAddressError(WalletAnalyzerError, ValueError):
    """String is not a base58-encoded 32-byte Solana public key."""
