"""
Solana RPC fetch layer.

Lists recent signatures for an address and fetches each transaction in
jsonParsed form for the classifier.
"""

from wallet_analyzer.rpc.client import MAX_SIGNATURES_LIMIT, SolanaRpcClient
from wallet_analyzer.rpc.models import SignatureInfo

__all__ = [
    "MAX_SIGNATURES_LIMIT",
    "SignatureInfo",
    "SolanaRpcClient",
]
