"""Pydantic schemas for the CSV import API and pipeline results."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator


class HeaderValidationResult(BaseModel):
    is_valid: bool
    expected_headers: list[str]
    missing_headers: list[str] = []
    extra_headers: list[str] = []
    suggestions: list[str] = []


class CsvValidationReport(BaseModel):
    """Dry-run outcome of a full file check (headers plus every row)."""

    is_valid: bool
    total_rows: int = 0
    errors: list[str] = []
    warnings: list[str] = []


class ImportErrorEntry(BaseModel):
    row: int
    field: str | None = None
    error: str
    code: str


class BulkCreateError(BaseModel):
    index: int
    error: str


class BulkCreateResult(BaseModel):
    created: int = 0
    errors: list[BulkCreateError] = []


class ImportResult(BaseModel):
    import_id: str
    status: str
    total_rows: int = 0
    imported_rows: int = 0
    duplicate_rows: int = 0
    errors: list[ImportErrorEntry] = []
    processing_time_ms: int = 0


class ImportJobRead(BaseModel):
    import_id: str
    owner_id: str
    file_name: str
    total_rows: int
    imported_rows: int
    duplicate_rows: int
    errors: list[ImportErrorEntry]
    status: str
    created_at: datetime
    completed_at: datetime | None = None
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("import_metadata", "metadata"),
    )

    model_config = {"from_attributes": True}


class ValidateHeadersRequest(BaseModel):
    headers: list[str]


class ValidateCsvRequest(BaseModel):
    headers: list[str]
    sample_rows: list[list[str]] = Field(default_factory=list)

    @field_validator("headers")
    @classmethod
    def _require_headers(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("must not be empty")
        return value
