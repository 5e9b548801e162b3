"""
Tests for wallet address validation (utils.wallet_utils).
"""

from __future__ import annotations

import pytest

from wallet_analyzer.core.exceptions import InvalidAddressError
from wallet_analyzer.utils.wallet_utils import parse_wallet

VALID_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"


def test_parse_wallet_strips_whitespace():
    """parse_wallet returns the canonical base58 string."""
    assert parse_wallet(f" {VALID_WALLET}\n") == VALID_WALLET


@pytest.mark.parametrize("value", ["", "abc", "0OIl" * 11])
def test_parse_wallet_invalid(value):
    """Invalid addresses raise InvalidAddressError (a ValueError)."""
    with pytest.raises(InvalidAddressError):
        parse_wallet(value)
    with pytest.raises(ValueError):
        parse_wallet(value)
