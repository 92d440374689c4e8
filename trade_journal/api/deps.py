"""Shared API dependencies."""

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session

from trade_journal.config import settings
from trade_journal.database import get_session
from trade_journal.errors import ErrorCode
from trade_journal.services.import_service import ImportService
from trade_journal.stores.job_store import SqlImportJobStore
from trade_journal.stores.trade_store import SqlTradeStore


def get_current_owner(x_owner_id: str | None = Header(default=None)) -> str:
    """Account id asserted by the identity gateway in front of this service."""
    if not x_owner_id or not x_owner_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Authentication required", "code": ErrorCode.AUTH_REQUIRED.value},
        )
    return x_owner_id.strip()


def get_trade_store(session: Session = Depends(get_session)) -> SqlTradeStore:
    return SqlTradeStore(session, max_batch_size=settings.dedup_batch_size)


def get_import_service(
    session: Session = Depends(get_session),
    trade_store: SqlTradeStore = Depends(get_trade_store),
) -> ImportService:
    return ImportService(
        trade_store=trade_store,
        job_store=SqlImportJobStore(session),
        dedup_batch_size=settings.dedup_batch_size,
        max_commit_records=settings.max_commit_records,
        csv_format=settings.csv_format,
    )
