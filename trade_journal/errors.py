"""Error codes and exceptions shared by the import pipeline and API."""

from enum import Enum


class ErrorCode(str, Enum):
    AUTH_REQUIRED = "AUTH_REQUIRED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"

    TRADE_NOT_FOUND = "TRADE_NOT_FOUND"
    IMPORT_NOT_FOUND = "IMPORT_NOT_FOUND"

    CSV_PARSE_ERROR = "CSV_PARSE_ERROR"
    CSV_VALIDATION_ERROR = "CSV_VALIDATION_ERROR"
    ROW_PARSE_ERROR = "ROW_PARSE_ERROR"
    COLUMN_COUNT_MISMATCH = "COLUMN_COUNT_MISMATCH"
    IMPORT_ERROR = "IMPORT_ERROR"
    IMPORT_FAILED = "IMPORT_FAILED"
    BULK_OPERATION_FAILED = "BULK_OPERATION_FAILED"


class TradeJournalError(Exception):
    code = ErrorCode.IMPORT_FAILED

    def __init__(self, message: str, code: ErrorCode | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class CsvSchemaError(TradeJournalError):
    """The file as a whole cannot be imported (bad or missing header, no rows)."""

    code = ErrorCode.CSV_VALIDATION_ERROR


class RowParseError(TradeJournalError):
    """One field of one row is malformed. Never escapes the row parser."""

    code = ErrorCode.ROW_PARSE_ERROR

    def __init__(self, field: str | None, message: str, code: ErrorCode | None = None):
        super().__init__(message, code)
        self.field = field


class PersistenceError(TradeJournalError):
    code = ErrorCode.BULK_OPERATION_FAILED


class InvalidTransitionError(TradeJournalError):
    """An update tried to move an import job out of a terminal state."""
