"""
Well-known Solana program ids used as classification signals.

Program ids are opaque base58 strings compared by equality. The swap
allowlist is a plain frozenset; extend it (or pass another set to
classify()) without touching the classifier rules.
"""

from __future__ import annotations

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
COMPUTE_BUDGET_PROGRAM_ID = "ComputeBudget111111111111111111111111111111"

# jsonParsed "program" label for the SPL Token program
SPL_TOKEN_PROGRAM_LABEL = "spl-token"

# Parsed instruction types
SYSTEM_TRANSFER_TYPE = "transfer"
SYSTEM_ADVANCE_NONCE_TYPE = "advanceNonce"
TOKEN_TRANSFER_TYPES = frozenset({"transfer", "transferChecked"})

# Known DEX / swap program ids (mainnet)
JUPITER_PROGRAM_ID = "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4"
RAYDIUM_SWAP_PROGRAM_ID = "SwaPpA9LAaLfeLi3a68M4DjnLqgtticKg6CnyNwgAC8"
ORCA_PROGRAM_ID = "9W959DqEETiGZocYWCQPaJ6sBmUzgfxXfqGeTEdp3aQP"
RAYDIUM_CPMM_PROGRAM_ID = "CPMMoo8L3F4NbTegBCKVNunggL7H1ZpdTHKxQB5qKP1C"
PUMP_FUN_PROGRAM_ID = "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P"

SWAP_PROGRAM_IDS = frozenset({
    JUPITER_PROGRAM_ID,
    RAYDIUM_SWAP_PROGRAM_ID,
    ORCA_PROGRAM_ID,
    RAYDIUM_CPMM_PROGRAM_ID,
    PUMP_FUN_PROGRAM_ID,
})

# Log text fragments that suggest a trade (matched case-insensitively)
SWAP_LOG_KEYWORDS = ("swap", "exchange", "trade", "buy", "sell")

LAMPORTS_PER_SOL = 1_000_000_000


def lamports_to_sol(lamports: int | float) -> float:
    """Convert lamports to SOL (1 SOL = 1_000_000_000 lamports)."""
    return lamports / LAMPORTS_PER_SOL
