"""
Solana JSON-RPC client: signature listing and parsed transaction fetch.

Thin synchronous wrapper over httpx. Every failure (transport, HTTP status,
JSON-RPC error object, missing result) surfaces as RpcError; the caller decides
whether to skip or abort. No retries happen here.
"""

from __future__ import annotations

from typing import Any

import httpx

from wallet_analyzer.core.exceptions import RpcError
from wallet_analyzer.rpc.models import SignatureInfo
from wallet_analyzer.wallet_logging import get_logger

logger = get_logger(__name__)

MAX_SIGNATURES_LIMIT = 1000

# JSON-RPC request id counter
_request_id = 0


def _next_id() -> int:
    global _request_id
    _request_id += 1
    return _request_id


def _build_rpc_body(method: str, params: list[Any]) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": _next_id(),
        "method": method,
        "params": params,
    }


class SolanaRpcClient:
    """
    Blocking Solana RPC client for one endpoint.

    Use as a context manager so the underlying connection pool is closed:

        with SolanaRpcClient(url) as client:
            sigs = client.get_signatures_for_address(wallet, limit=10)
            tx = client.get_parsed_transaction(sigs[0].signature)
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        request_timeout_sec: float = 30.0,
        commitment: str = "confirmed",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Args:
            rpc_url: Solana RPC HTTP endpoint (e.g. https://api.mainnet-beta.solana.com).
            request_timeout_sec: HTTP timeout for each RPC request.
            commitment: Commitment level sent with every request.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        self._rpc_url = rpc_url.strip()
        self._commitment = commitment
        self._client = httpx.Client(
            timeout=httpx.Timeout(request_timeout_sec),
            transport=transport,
        )

    def __enter__(self) -> "SolanaRpcClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _call(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call and return its result; raise RpcError on any failure."""
        body = _build_rpc_body(method, params)
        try:
            resp = self._client.post(self._rpc_url, json=body)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise RpcError(
                f"Solana RPC HTTP {e.response.status_code} for {method}",
                code=e.response.status_code,
                method=method,
            ) from e
        except httpx.HTTPError as e:
            raise RpcError(f"Solana RPC transport error for {method}: {e}", method=method) from e
        except ValueError as e:
            raise RpcError(f"Solana RPC returned invalid JSON for {method}", method=method) from e

        if not isinstance(data, dict):
            raise RpcError(f"Solana RPC returned unexpected payload for {method}", method=method)
        if "error" in data:
            err = data["error"]
            if isinstance(err, dict):
                raise RpcError(
                    f"Solana RPC error: {err.get('message', err)} (code={err.get('code')})",
                    code=err.get("code"),
                    method=method,
                )
            raise RpcError(f"Solana RPC error: {err}", method=method)
        if "result" not in data:
            raise RpcError("Solana RPC returned no result", method=method)
        return data["result"]

    def get_signatures_for_address(self, address: str, limit: int = 10) -> list[SignatureInfo]:
        """Return up to `limit` most recent signatures for address (newest first)."""
        if not (1 <= limit <= MAX_SIGNATURES_LIMIT):
            raise ValueError(f"limit must be between 1 and {MAX_SIGNATURES_LIMIT}")
        raw = self._call(
            "getSignaturesForAddress",
            [str(address), {"limit": limit, "commitment": self._commitment}],
        )
        items = raw if isinstance(raw, list) else []
        infos: list[SignatureInfo] = []
        for item in items:
            if not isinstance(item, dict) or "signature" not in item:
                continue
            try:
                infos.append(SignatureInfo.from_rpc_item(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug("rpc_signature_item_skipped", error=str(e))
        logger.debug("rpc_signatures_fetched", address=str(address), count=len(infos))
        return infos

    def get_parsed_transaction(self, signature: str) -> dict[str, Any] | None:
        """Fetch one transaction with jsonParsed encoding; None if the node does not have it."""
        result = self._call(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "jsonParsed",
                    "maxSupportedTransactionVersion": 0,
                    "commitment": self._commitment,
                },
            ],
        )
        if result is None or not isinstance(result, dict):
            return None
        return result
