"""CSV import API: validation, upload, status and history."""

import csv
import io
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from trade_journal.api.deps import get_current_owner, get_import_service
from trade_journal.config import settings
from trade_journal.errors import ErrorCode
from trade_journal.schemas.csv_import import (
    CsvValidationReport,
    HeaderValidationResult,
    ImportJobRead,
    ImportResult,
    ValidateCsvRequest,
    ValidateHeadersRequest,
)
from trade_journal.services.import_service import ImportService, validate_import_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/import", tags=["import"])

MAX_SAMPLE_ROWS = 5


@router.post("/validate-headers", response_model=HeaderValidationResult)
def validate_headers(
    body: ValidateHeadersRequest,
    owner_id: str = Depends(get_current_owner),
    service: ImportService = Depends(get_import_service),
):
    return service.validate_headers(body.headers)


@router.post("/validate-csv", response_model=CsvValidationReport)
def validate_csv(
    body: ValidateCsvRequest,
    owner_id: str = Depends(get_current_owner),
    service: ImportService = Depends(get_import_service),
):
    """Check headers and up to five sample rows before uploading."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(body.headers)
    writer.writerows(body.sample_rows[:MAX_SAMPLE_ROWS])
    return service.validate_csv(buf.getvalue())


@router.post("/upload", response_model=ImportResult)
def upload_csv(
    file: UploadFile = File(...),
    owner_id: str = Depends(get_current_owner),
    service: ImportService = Depends(get_import_service),
):
    content = file.file.read()
    problems = validate_import_request(file.filename, len(content), settings.max_upload_bytes)
    if problems:
        code, _ = problems[0]
        logger.warning(f"Rejected upload {file.filename!r}: {[msg for _, msg in problems]}")
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Validation failed",
                "code": code.value,
                "details": {"errors": [msg for _, msg in problems]},
            },
        )

    return service.process_upload(owner_id, content, file.filename)


@router.get("/status/{import_id}", response_model=ImportJobRead)
def import_status(
    import_id: str,
    owner_id: str = Depends(get_current_owner),
    service: ImportService = Depends(get_import_service),
):
    job = service.get_import_status(import_id)
    if job is None:
        raise HTTPException(
            status_code=404,
            detail={"error": "Import record not found", "code": ErrorCode.IMPORT_NOT_FOUND.value},
        )
    if job.owner_id != owner_id:
        raise HTTPException(
            status_code=403,
            detail={"error": "Access denied", "code": ErrorCode.INSUFFICIENT_PERMISSIONS.value},
        )
    return ImportJobRead.model_validate(job)


@router.get("/history", response_model=list[ImportJobRead])
def import_history(
    limit: int = settings.history_limit,
    owner_id: str = Depends(get_current_owner),
    service: ImportService = Depends(get_import_service),
):
    limit = max(1, min(limit, 200))
    return [ImportJobRead.model_validate(j) for j in service.get_import_history(owner_id, limit)]
