"""
Pulse Ledger: append-only accounting and reputation ledger

This module provides:
- Owner-gated credit/debit entries with a running signed balance per account
- Permissionless transaction recording with volume tiers
- Per-identity pulse scores and reputation derived from activity
- Content-derived transaction identifiers
- Audit-friendly, immutable history
"""

from .config import LedgerSettings, ScoringPolicy, load_settings
from .log import configure_logging, get_logger
from .errors import (
    LedgerError,
    UnauthorizedError,
    InvalidArgumentError,
    ConflictError,
    NotFoundError,
    TransferFailedError,
)
from .models import (
    EntryKind,
    Category,
    Entry,
    Transaction,
    PulseScore,
    SystemStats,
)
from .service import LedgerEngine

__all__ = [
    "LedgerSettings",
    "ScoringPolicy",
    "load_settings",
    "configure_logging",
    "get_logger",
    "LedgerError",
    "UnauthorizedError",
    "InvalidArgumentError",
    "ConflictError",
    "NotFoundError",
    "TransferFailedError",
    "EntryKind",
    "Category",
    "Entry",
    "Transaction",
    "PulseScore",
    "SystemStats",
    "LedgerEngine",
]
