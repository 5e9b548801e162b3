"""
Solana wallet analyzer: find the wallets a Solana address trades SOL with.

Fetches recent transactions for one address over JSON-RPC, classifies each
one heuristically (transfer, token_transfer, swap, unknown) and tallies the
counterparties of native SOL transfers by direction.
"""

__version__ = "0.1.0"
