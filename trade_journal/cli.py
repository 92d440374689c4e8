"""CLI tool for operator tasks.

Usage:
    python -m trade_journal.cli import-csv <owner_id> <file.csv>
    python -m trade_journal.cli stats <owner_id> [daily|weekly|monthly|yearly]
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

from sqlmodel import Session

from trade_journal.config import settings
from trade_journal.database import engine, create_db_and_tables
from trade_journal.services.import_service import ImportService
from trade_journal.services.trade_stats import compute_stats, period_start
from trade_journal.stores.job_store import SqlImportJobStore
from trade_journal.stores.trade_store import SqlTradeStore
from trade_journal.utils.constants import DEFAULT_PERIOD, PERIOD_DAYS
from trade_journal.utils.logging import setup_logging


def import_csv(owner_id: str, path: str) -> int:
    """Import one export file and print the job summary."""
    file = Path(path)
    if not file.is_file():
        print(f"File not found: {path}")
        return 1

    with Session(engine) as session:
        service = ImportService(
            trade_store=SqlTradeStore(session, max_batch_size=settings.dedup_batch_size),
            job_store=SqlImportJobStore(session),
            dedup_batch_size=settings.dedup_batch_size,
            max_commit_records=settings.max_commit_records,
            csv_format=settings.csv_format,
        )
        result = service.process_upload(owner_id, file.read_bytes(), file.name)

    print(f"Import {result.import_id}: {result.status}")
    print(f"  parsed:     {result.total_rows}")
    print(f"  imported:   {result.imported_rows}")
    print(f"  duplicates: {result.duplicate_rows}")
    for err in result.errors:
        field = f" [{err.field}]" if err.field else ""
        print(f"  row {err.row}{field}: {err.error} ({err.code})")
    return 0 if result.status == "completed" else 2


def show_stats(owner_id: str, period: str) -> int:
    if period not in PERIOD_DAYS:
        print(f"Unknown period: {period}. Use one of: {', '.join(PERIOD_DAYS)}")
        return 1

    now = datetime.now(timezone.utc)
    with Session(engine) as session:
        trades = SqlTradeStore(session).trades_between(owner_id, start=period_start(period, now), end=now)
        stats = compute_stats(owner_id, trades, period)

    for key, value in stats.model_dump().items():
        print(f"{key:>14}: {value}")
    return 0


def main():
    if len(sys.argv) < 3:
        print("Usage: python -m trade_journal.cli <command> <owner_id> [args]")
        print("Commands: import-csv <file>, stats [period]")
        sys.exit(1)

    setup_logging()
    create_db_and_tables()

    command, owner_id = sys.argv[1], sys.argv[2]
    if command == "import-csv":
        if len(sys.argv) < 4:
            print("Usage: python -m trade_journal.cli import-csv <owner_id> <file.csv>")
            sys.exit(1)
        sys.exit(import_csv(owner_id, sys.argv[3]))
    elif command == "stats":
        period = sys.argv[3] if len(sys.argv) > 3 else DEFAULT_PERIOD
        sys.exit(show_stats(owner_id, period))
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
