"""Import job store."""

import logging
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from trade_journal.errors import PersistenceError
from trade_journal.models.import_job import ImportJob, check_update

logger = logging.getLogger(__name__)


class ImportJobStore(Protocol):
    def create(self, job: ImportJob) -> ImportJob: ...

    def update(self, import_id: str, fields: dict[str, Any]) -> ImportJob: ...

    def get(self, import_id: str) -> ImportJob | None: ...

    def list_for_owner(self, owner_id: str, limit: int = 50) -> list[ImportJob]: ...


class SqlImportJobStore:
    def __init__(self, session: Session):
        self.session = session

    def create(self, job: ImportJob) -> ImportJob:
        try:
            self.session.add(job)
            self.session.commit()
            self.session.refresh(job)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Failed to create import record: {e}") from e
        return job

    def update(self, import_id: str, fields: dict[str, Any]) -> ImportJob:
        try:
            job = self.session.get(ImportJob, import_id)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Failed to load import record: {e}") from e
        if job is None:
            raise KeyError(f"Import {import_id} not found")
        check_update(job, fields)

        for key, value in fields.items():
            setattr(job, key, value)
        try:
            self.session.add(job)
            self.session.commit()
            self.session.refresh(job)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Failed to update import record: {e}") from e
        return job

    def get(self, import_id: str) -> ImportJob | None:
        return self.session.get(ImportJob, import_id)

    def list_for_owner(self, owner_id: str, limit: int = 50) -> list[ImportJob]:
        stmt = (
            select(ImportJob)
            .where(ImportJob.owner_id == owner_id)
            .order_by(ImportJob.created_at.desc())
            .limit(limit)
        )
        return list(self.session.exec(stmt).all())
