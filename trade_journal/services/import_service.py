"""CSV import orchestration.

Coordinates one upload end to end:
header check → row parsing → dedup → conversion → batched commit,
while keeping the ImportJob record current so the outcome can always be
queried, including after a failure.
"""

import logging
import time
import uuid
from datetime import datetime, timezone

from trade_journal.errors import CsvSchemaError, ErrorCode, RowParseError, TradeJournalError
from trade_journal.models.import_job import ImportJob, ImportStatus
from trade_journal.schemas.csv_import import (
    CsvValidationReport,
    HeaderValidationResult,
    ImportErrorEntry,
    ImportResult,
)
from trade_journal.services import csv_parser
from trade_journal.services.bulk_commit import BulkCommitter
from trade_journal.services.csv_headers import validate_headers
from trade_journal.services.deduplication import DeduplicationChecker, chunked
from trade_journal.services.trade_converter import to_trade_fields
from trade_journal.stores.job_store import ImportJobStore
from trade_journal.stores.trade_store import TradeStore

logger = logging.getLogger(__name__)


def new_import_id() -> str:
    return uuid.uuid4().hex


def validate_import_request(
    file_name: str | None,
    file_size: int | None,
    max_bytes: int,
) -> list[tuple[ErrorCode, str]]:
    """Problems with an upload before it is read. Empty list means acceptable."""
    problems = []
    if not file_name:
        problems.append((ErrorCode.MISSING_REQUIRED_FIELD, "File name is required"))
    elif not file_name.lower().endswith(".csv"):
        problems.append((ErrorCode.INVALID_FILE_TYPE, "Only CSV files are allowed"))
    if not file_size or file_size <= 0:
        problems.append((ErrorCode.VALIDATION_ERROR, "File size must be greater than 0"))
    elif file_size > max_bytes:
        problems.append((ErrorCode.FILE_TOO_LARGE, f"File size must be at most {max_bytes} bytes"))
    return problems


class ImportService:
    """Owns the lifecycle of ImportJob records."""

    def __init__(
        self,
        trade_store: TradeStore,
        job_store: ImportJobStore,
        dedup_batch_size: int = 10,
        max_commit_records: int = 1000,
        csv_format: str = "Ebinex",
    ):
        self.trade_store = trade_store
        self.job_store = job_store
        self.dedup = DeduplicationChecker(trade_store, dedup_batch_size)
        self.committer = BulkCommitter(trade_store)
        self.max_commit_records = max_commit_records
        self.csv_format = csv_format

    # ------------------------------------------------------------------
    # Read-only checks
    # ------------------------------------------------------------------

    def validate_headers(self, headers: list[str]) -> HeaderValidationResult:
        return validate_headers(headers)

    def validate_csv(self, content: str) -> CsvValidationReport:
        """Dry-run a file: header check plus a parse of every row. No writes."""
        try:
            headers, rows = csv_parser.read_header(content)
        except CsvSchemaError as e:
            return CsvValidationReport(is_valid=False, errors=[str(e)])

        validation = validate_headers(headers)
        errors: list[str] = []
        warnings: list[str] = []
        if not validation.is_valid:
            errors.append(f"Invalid CSV format: {', '.join(validation.missing_headers)}")
            errors.extend(validation.suggestions)
        if validation.extra_headers:
            warnings.append(f"Extra headers found: {', '.join(validation.extra_headers)}")

        valid_rows = 0
        if validation.is_valid:
            for line_number, values in rows:
                try:
                    csv_parser.parse_row(values, headers, line_number)
                    valid_rows += 1
                except RowParseError as e:
                    errors.append(f"Row {line_number}: {e}")

        return CsvValidationReport(
            is_valid=not errors,
            total_rows=valid_rows,
            errors=errors,
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Upload processing
    # ------------------------------------------------------------------

    def process_upload(self, owner_id: str, file_bytes: bytes, file_name: str) -> ImportResult:
        """Import one broker CSV for an owner.

        The job is created in ``processing`` before anything is parsed. Any
        exception escaping the pipeline is caught here once and turns the job
        ``failed``; the errors gathered before it are kept.
        """
        started = time.perf_counter()
        import_id = new_import_id()
        metadata = {"file_size": len(file_bytes), "processing_time": 0, "csv_format": self.csv_format}

        self.job_store.create(ImportJob(
            import_id=import_id,
            owner_id=owner_id,
            file_name=file_name,
            status=ImportStatus.PROCESSING.value,
            import_metadata=metadata,
        ))
        logger.info(f"[import {import_id}] Started {file_name} for owner {owner_id} ({len(file_bytes)} bytes)")

        errors: list[dict] = []
        total_rows = imported_rows = duplicate_rows = 0
        try:
            outcome = csv_parser.parse_csv(self._decode(file_bytes))
            errors.extend(e.as_dict() for e in outcome.errors)
            total_rows = len(outcome.trades)
            self.job_store.update(import_id, {"total_rows": total_rows, "errors": list(errors)})

            new_trades, duplicate_rows = self._split_duplicates(owner_id, outcome.trades)

            imported_at = datetime.now(timezone.utc)
            records = [to_trade_fields(t, self.csv_format, imported_at) for t in new_trades]

            offset = 0
            for unit in chunked(records, self.max_commit_records):
                result = self.committer.commit(owner_id, unit, import_batch=import_id)
                imported_rows += result.created
                for err in result.errors:
                    errors.append({
                        "row": new_trades[offset + err.index].row,
                        "field": None,
                        "error": err.error,
                        "code": ErrorCode.IMPORT_ERROR.value,
                    })
                offset += len(unit)

            elapsed_ms = self._elapsed_ms(started)
            self.job_store.update(import_id, {
                "imported_rows": imported_rows,
                "duplicate_rows": duplicate_rows,
                "errors": list(errors),
                "status": ImportStatus.COMPLETED.value,
                "completed_at": datetime.now(timezone.utc),
                "import_metadata": {**metadata, "processing_time": elapsed_ms},
            })
            logger.info(
                f"[import {import_id}] Completed: {imported_rows} imported, "
                f"{duplicate_rows} duplicates, {len(outcome.errors)} rows skipped"
            )
            status = ImportStatus.COMPLETED.value

        except Exception as e:
            logger.error(f"[import {import_id}] Failed: {e}", exc_info=True)
            code = e.code.value if isinstance(e, TradeJournalError) else ErrorCode.IMPORT_FAILED.value
            errors.append({"row": 0, "field": None, "error": str(e), "code": code})
            elapsed_ms = self._elapsed_ms(started)
            self.job_store.update(import_id, {
                "imported_rows": imported_rows,
                "duplicate_rows": duplicate_rows,
                "errors": list(errors),
                "status": ImportStatus.FAILED.value,
                "completed_at": datetime.now(timezone.utc),
                "import_metadata": {**metadata, "processing_time": elapsed_ms},
            })
            status = ImportStatus.FAILED.value

        return ImportResult(
            import_id=import_id,
            status=status,
            total_rows=total_rows,
            imported_rows=imported_rows,
            duplicate_rows=duplicate_rows,
            errors=[ImportErrorEntry(**e) for e in errors],
            processing_time_ms=elapsed_ms,
        )

    def process_multiple(self, owner_id: str, files: list[tuple[str, bytes]]) -> list[ImportResult]:
        """One import job per file; a failing file does not stop the others."""
        results = []
        for file_name, file_bytes in files:
            try:
                results.append(self.process_upload(owner_id, file_bytes, file_name))
            except Exception as e:
                # Job could not even be recorded (store unreachable at creation)
                logger.error(f"Failed to process file {file_name}: {e}")
                results.append(ImportResult(
                    import_id=new_import_id(),
                    status=ImportStatus.FAILED.value,
                    errors=[ImportErrorEntry(row=0, error=str(e), code=ErrorCode.IMPORT_FAILED.value)],
                ))
        return results

    def _split_duplicates(self, owner_id: str, parsed: list[csv_parser.ParsedTrade]):
        """Drop trades already stored and repeats of a trade id within the file."""
        seen: set[str] = set()
        candidates = []
        repeats = 0
        for trade in parsed:
            if trade.trade_id in seen:
                repeats += 1
                continue
            seen.add(trade.trade_id)
            candidates.append(trade)

        existing = set(self.dedup.find_existing(owner_id, [t.trade_id for t in candidates]))
        new_trades = [t for t in candidates if t.trade_id not in existing]
        return new_trades, repeats + (len(candidates) - len(new_trades))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_import_status(self, import_id: str) -> ImportJob | None:
        return self.job_store.get(import_id)

    def get_import_history(self, owner_id: str, limit: int = 50) -> list[ImportJob]:
        return self.job_store.list_for_owner(owner_id, limit)

    @staticmethod
    def _decode(file_bytes: bytes) -> str:
        try:
            return file_bytes.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CsvSchemaError(f"File is not valid UTF-8 text: {e}", code=ErrorCode.CSV_PARSE_ERROR) from e

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.perf_counter() - started) * 1000)
