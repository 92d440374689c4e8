"""Existence checks of natural trade keys against the store."""

import logging

from trade_journal.stores.trade_store import TradeStore

logger = logging.getLogger(__name__)


def chunked(items: list, size: int):
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    for i in range(0, len(items), size):
        yield items[i:i + size]


class DeduplicationChecker:
    """Finds which candidate trade ids an owner already has.

    The store caps how many keys one existence query may carry, so the
    candidates are split into chunks of that size, one query per chunk.
    """

    def __init__(self, store: TradeStore, batch_size: int | None = None):
        self.store = store
        self.batch_size = min(batch_size or store.max_batch_size, store.max_batch_size)

    def find_existing(self, owner_id: str, trade_ids: list[str]) -> list[str]:
        """Return the subsequence of ``trade_ids`` already stored, in input order."""
        existing: list[str] = []
        queries = 0
        for chunk in chunked(trade_ids, self.batch_size):
            found = set(self.store.find_existing(owner_id, chunk))
            queries += 1
            existing.extend(t for t in chunk if t in found)

        logger.debug(
            f"Dedup for owner {owner_id}: {len(existing)}/{len(trade_ids)} exist ({queries} queries)"
        )
        return existing
