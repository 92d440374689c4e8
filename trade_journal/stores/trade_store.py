"""Trade record store: key lookups, capped existence queries, atomic batch writes."""

import logging
from datetime import datetime
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from trade_journal.errors import PersistenceError
from trade_journal.models.trade import Trade
from trade_journal.schemas.trade import TradeFilters

logger = logging.getLogger(__name__)


class TradeStore(Protocol):
    max_batch_size: int

    def get(self, owner_id: str, record_id: str) -> Trade | None: ...

    def find_existing(self, owner_id: str, trade_ids: list[str]) -> list[str]:
        """Natural keys among ``trade_ids`` already stored for the owner.

        Callers must not pass more than ``max_batch_size`` keys.
        """
        ...

    def write_batch(self, trades: list[Trade]) -> None:
        """Persist all records or none of them."""
        ...

    def list_trades(self, owner_id: str, filters: TradeFilters) -> list[Trade]: ...

    def trades_between(
        self, owner_id: str, start: datetime | None = None, end: datetime | None = None
    ) -> list[Trade]: ...


class SqlTradeStore:
    """TradeStore backed by a SQLModel session."""

    def __init__(self, session: Session, max_batch_size: int = 10):
        self.session = session
        self.max_batch_size = max_batch_size

    def get(self, owner_id: str, record_id: str) -> Trade | None:
        trade = self.session.get(Trade, record_id)
        if trade is None or trade.owner_id != owner_id:
            return None
        return trade

    def find_existing(self, owner_id: str, trade_ids: list[str]) -> list[str]:
        if len(trade_ids) > self.max_batch_size:
            raise ValueError(
                f"Existence query takes at most {self.max_batch_size} keys, got {len(trade_ids)}"
            )
        if not trade_ids:
            return []
        try:
            rows = self.session.exec(
                select(Trade.trade_id)
                .where(Trade.owner_id == owner_id)
                .where(Trade.trade_id.in_(trade_ids))
            ).all()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Failed to check existing trades: {e}") from e
        return list(rows)

    def write_batch(self, trades: list[Trade]) -> None:
        if not trades:
            return
        try:
            self.session.add_all(trades)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Batch write of {len(trades)} trades rolled back: {e}")
            raise PersistenceError(f"Failed to write trades: {e}") from e

    def list_trades(self, owner_id: str, filters: TradeFilters) -> list[Trade]:
        stmt = select(Trade).where(Trade.owner_id == owner_id)
        if filters.start is not None:
            stmt = stmt.where(Trade.entry_time >= filters.start)
        if filters.end is not None:
            stmt = stmt.where(Trade.entry_time <= filters.end)
        if filters.result is not None:
            stmt = stmt.where(Trade.result == filters.result)
        if filters.asset is not None:
            stmt = stmt.where(Trade.asset == filters.asset)
        if filters.strategy is not None:
            stmt = stmt.where(Trade.strategy == filters.strategy)
        stmt = stmt.order_by(Trade.entry_time.desc()).offset(filters.offset).limit(filters.limit)
        return list(self.session.exec(stmt).all())

    def trades_between(
        self, owner_id: str, start: datetime | None = None, end: datetime | None = None
    ) -> list[Trade]:
        stmt = select(Trade).where(Trade.owner_id == owner_id)
        if start is not None:
            stmt = stmt.where(Trade.entry_time >= start)
        if end is not None:
            stmt = stmt.where(Trade.entry_time <= end)
        return list(self.session.exec(stmt.order_by(Trade.entry_time)).all())
