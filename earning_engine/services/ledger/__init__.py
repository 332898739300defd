"""Atomic payout ledger."""

from earning_engine.services.ledger.ledger_writer import (
    LedgerWriter,
    PayoutResult,
)


__all__ = ["LedgerWriter", "PayoutResult"]
