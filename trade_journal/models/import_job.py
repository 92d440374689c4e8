"""ImportJob model: lifecycle and metrics of one CSV upload."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON

from trade_journal.errors import InvalidTransitionError


class ImportStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = {ImportStatus.COMPLETED.value, ImportStatus.FAILED.value}


class ImportJob(SQLModel, table=True):
    __tablename__ = "import_job"

    import_id: str = Field(primary_key=True)
    owner_id: str = Field(index=True)
    file_name: str
    total_rows: int = 0
    imported_rows: int = 0
    duplicate_rows: int = 0
    # [{"row": int, "field": str | None, "error": str, "code": str}, ...]
    errors: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    status: str = Field(default=ImportStatus.PROCESSING.value, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    completed_at: datetime | None = None
    # {"file_size": int, "processing_time": int (ms), "csv_format": str}
    import_metadata: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))


def check_update(job: ImportJob, fields: dict[str, Any]):
    """Reject updates to finished jobs and counters that would move backwards."""
    if job.status in TERMINAL_STATUSES:
        raise InvalidTransitionError(
            f"Import {job.import_id} is already {job.status}; start a new import to retry"
        )
    for counter in ("total_rows", "imported_rows", "duplicate_rows"):
        if counter in fields and fields[counter] < getattr(job, counter):
            raise ValueError(f"{counter} cannot decrease ({getattr(job, counter)} -> {fields[counter]})")
