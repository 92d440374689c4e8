"""Database models."""

from trade_journal.models.trade import Trade
from trade_journal.models.import_job import ImportJob, ImportStatus

__all__ = [
    "Trade",
    "ImportJob",
    "ImportStatus",
]
