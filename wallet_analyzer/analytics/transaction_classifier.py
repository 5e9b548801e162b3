"""
Heuristic transaction classification for a queried Solana wallet.

Takes a getTransaction result (encoding=jsonParsed) and labels it transfer,
token_transfer, swap or unknown. Rules run in a fixed order and the first one
that matches wins; cheap, specific signals (a literal System Program transfer)
come before noisy ones (log text). Never raises: malformed or partial payloads
classify as unknown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from wallet_analyzer.analytics.models import (
    DIRECTION_RECEIVED,
    DIRECTION_SENT,
    TX_TYPE_SWAP,
    TX_TYPE_TOKEN_TRANSFER,
    TX_TYPE_TRANSFER,
    ClassificationResult,
    RelatedAddress,
)
from wallet_analyzer.analytics.programs import (
    COMPUTE_BUDGET_PROGRAM_ID,
    SPL_TOKEN_PROGRAM_LABEL,
    SWAP_LOG_KEYWORDS,
    SWAP_PROGRAM_IDS,
    SYSTEM_ADVANCE_NONCE_TYPE,
    SYSTEM_PROGRAM_ID,
    SYSTEM_TRANSFER_TYPE,
    TOKEN_PROGRAM_ID,
    TOKEN_TRANSFER_TYPES,
    lamports_to_sol,
)
from wallet_analyzer.wallet_logging import get_logger

logger = get_logger(__name__)

# Native transfers may be bundled with a few compute-budget / nonce instructions
MAX_BUNDLED_TRANSFER_INSTRUCTIONS = 4


def _as_list(value: Any) -> list[Any] | None:
    return value if isinstance(value, list) else None


def _as_dict(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


@dataclass(frozen=True)
class TransactionView:
    """
    Read-only view over the parts of a jsonParsed transaction the rules need.

    Optional containers stay None when the payload omits them, so "missing"
    and "present but empty" remain distinguishable.
    """

    instructions: list[dict[str, Any]]
    """Top-level instructions that are dicts; other entries are skipped."""
    instruction_count: int
    """Length of the raw instruction list, malformed entries included."""
    inner_instructions: list[dict[str, Any]] | None
    log_messages: list[Any] | None
    pre_token_balances: list[Any] | None
    post_token_balances: list[Any] | None

    @property
    def has_token_balance_changes(self) -> bool:
        return bool(self.pre_token_balances) or bool(self.post_token_balances)

    @classmethod
    def from_transaction(cls, transaction: Any) -> "TransactionView | None":
        """Build a view; None when the transaction or its message is missing."""
        raw = _as_dict(transaction)
        if raw is None:
            return None
        tx_obj = _as_dict(raw.get("transaction"))
        if tx_obj is None:
            return None
        message = _as_dict(tx_obj.get("message"))
        if message is None:
            return None

        raw_instructions = _as_list(message.get("instructions")) or []
        instructions = [ix for ix in raw_instructions if isinstance(ix, dict)]
        meta = _as_dict(raw.get("meta"))
        if meta is None:
            return cls(instructions, len(raw_instructions), None, None, None, None)

        inner_groups = _as_list(meta.get("innerInstructions"))
        inner: list[dict[str, Any]] | None = None
        if inner_groups is not None:
            inner = []
            for group in inner_groups:
                group_dict = _as_dict(group) or {}
                inner.extend(
                    ix for ix in (_as_list(group_dict.get("instructions")) or []) if isinstance(ix, dict)
                )
        return cls(
            instructions=instructions,
            instruction_count=len(raw_instructions),
            inner_instructions=inner,
            log_messages=_as_list(meta.get("logMessages")),
            pre_token_balances=_as_list(meta.get("preTokenBalances")),
            post_token_balances=_as_list(meta.get("postTokenBalances")),
        )


def _program_id(ix: dict[str, Any]) -> str | None:
    pid = ix.get("programId")
    return str(pid) if pid is not None else None


def _parsed(ix: dict[str, Any]) -> dict[str, Any]:
    # Some programs (e.g. Memo) parse to a bare string rather than {type, info}
    return _as_dict(ix.get("parsed")) or {}


def _parsed_type(ix: dict[str, Any]) -> str | None:
    return _parsed(ix).get("type")


def _is_system_transfer(ix: dict[str, Any]) -> bool:
    return _program_id(ix) == SYSTEM_PROGRAM_ID and _parsed_type(ix) == SYSTEM_TRANSFER_TYPE


def _is_token_transfer(ix: dict[str, Any]) -> bool:
    return _program_id(ix) == TOKEN_PROGRAM_ID and _parsed_type(ix) in TOKEN_TRANSFER_TYPES


def _invokes_swap_program(ix: dict[str, Any], swap_programs: frozenset[str]) -> bool:
    return _program_id(ix) in swap_programs


def _is_transfer_envelope(view: TransactionView) -> bool:
    """True for a lone instruction, or a short list padded with compute-budget / nonce instructions."""
    # Counts the raw list so malformed entries cannot shrink a bundle to one instruction
    if view.instruction_count == 1:
        return True
    if view.instruction_count > MAX_BUNDLED_TRANSFER_INSTRUCTIONS:
        return False
    return any(
        _program_id(ix) == COMPUTE_BUDGET_PROGRAM_ID
        or (_program_id(ix) == SYSTEM_PROGRAM_ID and _parsed_type(ix) == SYSTEM_ADVANCE_NONCE_TYPE)
        for ix in view.instructions
    )


def _native_transfer_rule(
    view: TransactionView,
    source_address: str,
    swap_programs: frozenset[str],
) -> ClassificationResult | None:
    if not _is_transfer_envelope(view):
        return None
    transfer_ix = next((ix for ix in view.instructions if _is_system_transfer(ix)), None)
    if transfer_ix is None or view.has_token_balance_changes:
        return None

    info = _as_dict(_parsed(transfer_ix).get("info")) or {}
    source = info.get("source")
    destination = info.get("destination")
    lamports = info.get("lamports")
    amount = None
    if isinstance(lamports, (int, float)) and not isinstance(lamports, bool):
        amount = lamports_to_sol(lamports)

    related: list[RelatedAddress] = []
    if isinstance(source, str) and isinstance(destination, str) and source and destination and source != destination:
        if source == source_address:
            related.append(RelatedAddress(address=destination, direction=DIRECTION_SENT))
        elif destination == source_address:
            related.append(RelatedAddress(address=source, direction=DIRECTION_RECEIVED))

    return ClassificationResult(
        tx_type=TX_TYPE_TRANSFER,
        related_addresses=related,
        details={"source": source, "destination": destination, "amount": amount},
    )


def _token_program_rule(
    view: TransactionView,
    source_address: str,
    swap_programs: frozenset[str],
) -> ClassificationResult | None:
    if not any(_is_token_transfer(ix) for ix in view.instructions):
        return None
    # Token movement alongside a DEX program is a swap leg, not a plain transfer
    if any(_invokes_swap_program(ix, swap_programs) for ix in view.instructions):
        return ClassificationResult(tx_type=TX_TYPE_SWAP)
    return ClassificationResult(tx_type=TX_TYPE_TOKEN_TRANSFER)


def _swap_program_rule(
    view: TransactionView,
    source_address: str,
    swap_programs: frozenset[str],
) -> ClassificationResult | None:
    if any(_invokes_swap_program(ix, swap_programs) for ix in view.instructions):
        return ClassificationResult(tx_type=TX_TYPE_SWAP)
    return None


def _log_keyword_rule(
    view: TransactionView,
    source_address: str,
    swap_programs: frozenset[str],
) -> ClassificationResult | None:
    if not view.log_messages:
        return None
    text = " ".join(str(line) for line in view.log_messages).lower()
    if any(keyword in text for keyword in SWAP_LOG_KEYWORDS):
        return ClassificationResult(tx_type=TX_TYPE_SWAP)
    return None


def _inner_instruction_rule(
    view: TransactionView,
    source_address: str,
    swap_programs: frozenset[str],
) -> ClassificationResult | None:
    if not view.inner_instructions:
        return None
    for ix in view.inner_instructions:
        if _is_token_transfer(ix) and ix.get("program") == SPL_TOKEN_PROGRAM_LABEL:
            return ClassificationResult(tx_type=TX_TYPE_SWAP)
        if _invokes_swap_program(ix, swap_programs):
            return ClassificationResult(tx_type=TX_TYPE_SWAP)
    return None


Rule = Callable[[TransactionView, str, frozenset], "ClassificationResult | None"]

# Order matters: first rule returning a result wins
CLASSIFICATION_RULES: tuple[tuple[str, Rule], ...] = (
    ("native_transfer", _native_transfer_rule),
    ("token_program", _token_program_rule),
    ("swap_program", _swap_program_rule),
    ("log_keywords", _log_keyword_rule),
    ("inner_instructions", _inner_instruction_rule),
)


def classify(
    transaction: Any,
    source_address: Any,
    *,
    swap_programs: Iterable[str] = SWAP_PROGRAM_IDS,
) -> ClassificationResult:
    """
    Classify one jsonParsed transaction relative to the queried wallet.

    Args:
        transaction: getTransaction result dict; may be None, partial, or malformed.
        source_address: The queried wallet; compared by its string form.
        swap_programs: Program ids that mark a DEX / swap interaction.

    Returns:
        ClassificationResult. Only 'transfer' results carry a related address,
        and at most one (the counterparty, never the queried wallet).
    """
    view = TransactionView.from_transaction(transaction)
    if view is None:
        logger.debug("classify_missing_message")
        return ClassificationResult()

    source = str(source_address) if source_address is not None else ""
    programs = swap_programs if isinstance(swap_programs, frozenset) else frozenset(swap_programs)
    for rule_name, rule in CLASSIFICATION_RULES:
        result = rule(view, source, programs)
        if result is not None:
            logger.debug("classify_rule_matched", rule=rule_name, tx_type=result.tx_type)
            return result
    return ClassificationResult()
