"""Row-level parsing of Ebinex trade history exports.

Turns raw CSV text into typed ``ParsedTrade`` records. A malformed row is
reported as a ``RowError`` value and skipped; it never aborts the rows that
follow it. Only a missing or invalid header row is fatal.
"""

import csv
import io
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

import pandas as pd

from trade_journal.errors import CsvSchemaError, ErrorCode, RowParseError
from trade_journal.services.csv_headers import normalize_headers, validate_headers
from trade_journal.utils.constants import DIRECTIONS, STATUSES

logger = logging.getLogger(__name__)

# Currency markers and thousands separators found in exported money columns
_MONEY_NOISE = re.compile(r"R\$|US\$|\$|€|,|\s")


@dataclass(frozen=True)
class ParsedTrade:
    """One broker row, fully typed. ``row`` is the physical line number."""

    row: int
    trade_id: str
    entry_time: datetime
    asset: str
    timeframe: str
    direction: str  # "call" or "put"
    candle_time: str
    entry_price: float
    exit_price: float
    amount: float
    refunded: float
    executed: float
    status: str  # "WIN" or "LOSE"
    profit: float


@dataclass(frozen=True)
class RowError:
    row: int
    error: str
    field: str | None = None
    code: str = ErrorCode.ROW_PARSE_ERROR.value

    def as_dict(self) -> dict:
        return {"row": self.row, "field": self.field, "error": self.error, "code": self.code}


@dataclass
class ParseOutcome:
    headers: list[str]
    trades: list[ParsedTrade] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------

def parse_string(value: str | None, field_name: str) -> str:
    if value is None or not value.strip():
        raise RowParseError(field_name, f"{field_name} is required")
    return value.strip()


def parse_date(value: str | None, field_name: str) -> datetime:
    """Parse a broker timestamp (day-first or ISO). Naive values are UTC."""
    text = parse_string(value, field_name)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        # Broker locale writes DD/MM/YYYY
        try:
            ts = pd.to_datetime(text, dayfirst=True)
        except (ValueError, OverflowError, TypeError):
            raise RowParseError(field_name, f"{field_name} must be a valid date: {text}")
        if pd.isna(ts):
            raise RowParseError(field_name, f"{field_name} must be a valid date: {text}")
        parsed = ts.to_pydatetime()

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_direction(value: str | None, field_name: str) -> str:
    text = parse_string(value, field_name).upper()
    if text not in DIRECTIONS:
        raise RowParseError(field_name, f"{field_name} must be 'BULL' or 'BEAR', got: {text}")
    return DIRECTIONS[text]


def _to_number(text: str, field_name: str, message: str) -> float:
    cleaned = _MONEY_NOISE.sub("", text)
    try:
        number = float(cleaned)
    except ValueError:
        raise RowParseError(field_name, f"{message}: {text}")
    if not math.isfinite(number):
        raise RowParseError(field_name, f"{message}: {text}")
    return number


def parse_price(value: str | None, field_name: str) -> float:
    text = parse_string(value, field_name)
    message = f"{field_name} must be a positive number"
    price = _to_number(text, field_name, message)
    if price <= 0:
        raise RowParseError(field_name, f"{message}: {text}")
    return price


def parse_amount(value: str | None, field_name: str) -> float:
    text = parse_string(value, field_name)
    message = f"{field_name} must be a non-negative number"
    amount = _to_number(text, field_name, message)
    if amount < 0:
        raise RowParseError(field_name, f"{message}: {text}")
    return amount


def parse_profit(value: str | None, field_name: str) -> float:
    """Signed decimal; losses are exported as negatives."""
    text = parse_string(value, field_name)
    return _to_number(text, field_name, f"{field_name} must be a number")


def parse_status(value: str | None, field_name: str) -> str:
    text = parse_string(value, field_name).upper()
    if text not in STATUSES:
        raise RowParseError(field_name, f"{field_name} must be 'WIN' or 'LOSE', got: {text}")
    return text


# ---------------------------------------------------------------------------
# Rows and documents
# ---------------------------------------------------------------------------

def parse_row(values: list[str], headers: list[str], row: int) -> ParsedTrade:
    """Parse one split row against the header order.

    Raises RowParseError naming the first offending field.
    """
    if len(values) != len(headers):
        raise RowParseError(
            None,
            f"Row has {len(values)} columns, expected {len(headers)}",
            code=ErrorCode.COLUMN_COUNT_MISMATCH,
        )
    cells = {name: value.strip() for name, value in zip(headers, values)}

    return ParsedTrade(
        row=row,
        trade_id=parse_string(cells.get("ID"), "ID"),
        entry_time=parse_date(cells.get("Data"), "Data"),
        asset=parse_string(cells.get("Ativo"), "Ativo"),
        timeframe=parse_string(cells.get("Tempo"), "Tempo"),
        direction=parse_direction(cells.get("Previsão"), "Previsão"),
        candle_time=parse_string(cells.get("Vela"), "Vela"),
        entry_price=parse_price(cells.get("P. ABRT"), "P. ABRT"),
        exit_price=parse_price(cells.get("P. FECH"), "P. FECH"),
        amount=parse_amount(cells.get("Valor"), "Valor"),
        refunded=parse_amount(cells.get("Estornado"), "Estornado"),
        executed=parse_amount(cells.get("Executado"), "Executado"),
        status=parse_status(cells.get("Status"), "Status"),
        profit=parse_profit(cells.get("Resultado"), "Resultado"),
    )


def parse_line(line: str, headers: list[str], row: int) -> ParsedTrade:
    """Split a single raw delimited line and parse it."""
    values = next(csv.reader([line]), [])
    return parse_row(values, headers, row)


def _data_rows(content: str):
    """Yield (line_number, values) for every non-blank data row."""
    reader = csv.reader(io.StringIO(content))
    for values in reader:
        if not any(v.strip() for v in values):
            continue
        yield reader.line_num, values


def read_header(content: str) -> tuple[list[str], list[tuple[int, list[str]]]]:
    """Split a document into its header row and data rows."""
    rows = list(_data_rows(content))
    if len(rows) < 2:
        raise CsvSchemaError("CSV file is empty or has no data rows")
    _, raw_headers = rows[0]
    return normalize_headers(raw_headers), rows[1:]


def parse_csv(content: str) -> ParseOutcome:
    """Parse a whole export. Raises CsvSchemaError on a bad header."""
    headers, rows = read_header(content)
    validation = validate_headers(headers)
    if not validation.is_valid:
        detail = f"Invalid CSV format: missing {', '.join(validation.missing_headers)}"
        if validation.extra_headers:
            detail += f"; unexpected {', '.join(validation.extra_headers)}"
        raise CsvSchemaError(detail)

    outcome = ParseOutcome(headers=headers)
    for line_number, values in rows:
        try:
            outcome.trades.append(parse_row(values, headers, line_number))
        except RowParseError as e:
            logger.warning(f"Skipping row {line_number} ({e.field or 'row'}): {e}")
            outcome.errors.append(
                RowError(row=line_number, field=e.field, error=str(e), code=e.code.value)
            )

    logger.info(
        f"Parsed {len(outcome.trades)} trades from CSV ({len(outcome.errors)} rows skipped)"
    )
    return outcome
