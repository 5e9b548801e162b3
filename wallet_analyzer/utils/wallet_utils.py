"""Wallet validation utilities."""

from solders.pubkey import Pubkey

from wallet_analyzer.core.exceptions import InvalidAddressError


def parse_wallet(w: str) -> str:
    """Return the canonical base58 form of w; raise InvalidAddressError if it is not a Pubkey."""
    try:
        return str(Pubkey.from_string(w.strip()))
    except Exception as e:
        raise InvalidAddressError(f"Invalid wallet address {w!r}: {e}") from e

