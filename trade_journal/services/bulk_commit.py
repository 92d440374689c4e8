"""Atomic persistence of already-deduplicated trades."""

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from trade_journal.models.trade import Trade
from trade_journal.schemas.csv_import import BulkCreateError, BulkCreateResult
from trade_journal.stores.trade_store import TradeStore

logger = logging.getLogger(__name__)


class BulkCommitter:
    """Builds trade records and writes them as one unit.

    A record that cannot be built is reported by index and left out; the
    rest are still written together. Callers keep each unit within the
    store's per-write ceiling.
    """

    def __init__(self, store: TradeStore):
        self.store = store

    def commit(
        self,
        owner_id: str,
        records: list[dict[str, Any]],
        import_batch: str | None = None,
    ) -> BulkCreateResult:
        now = datetime.now(timezone.utc)
        trades: list[Trade] = []
        errors: list[BulkCreateError] = []

        for index, fields in enumerate(records):
            try:
                trade = Trade.model_validate({
                    **fields,
                    "owner_id": owner_id,
                    "import_batch": import_batch,
                    "created_at": now,
                    "updated_at": now,
                })
            except (ValidationError, ValueError, TypeError) as e:
                logger.warning(f"Skipping record {index} of batch {import_batch}: {e}")
                errors.append(BulkCreateError(index=index, error=str(e)))
                continue
            trades.append(trade)

        self.store.write_batch(trades)

        logger.info(f"Bulk created {len(trades)} trades for owner {owner_id}")
        return BulkCreateResult(created=len(trades), errors=errors)
