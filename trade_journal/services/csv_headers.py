"""Header check for broker CSV exports.

Pure functions, no I/O.
"""

from trade_journal.schemas.csv_import import HeaderValidationResult
from trade_journal.utils.constants import EXPECTED_HEADERS, HEADER_VARIATIONS


def normalize_headers(raw: list[str]) -> list[str]:
    """Trim whitespace and a leading BOM from header cells."""
    return [h.strip().lstrip("\ufeff").strip() for h in raw]


def validate_headers(
    headers: list[str],
    expected: list[str] = EXPECTED_HEADERS,
) -> HeaderValidationResult:
    """Compare a header row against the canonical column set.

    Column order does not matter. Extra columns are reported but do not make
    the header invalid; every missing column does, and gets a suggestion
    line listing the spellings it is known to appear under.
    """
    received = normalize_headers(headers)
    present = set(received)
    known = set(expected)

    missing = [h for h in expected if h not in present]
    extra = [h for h in received if h not in known]

    suggestions = []
    for name in missing:
        variations = HEADER_VARIATIONS.get(name, [])
        suggestions.append(f'Expected "{name}", found variations: {", ".join(variations)}')

    return HeaderValidationResult(
        is_valid=not missing,
        expected_headers=list(expected),
        missing_headers=missing,
        extra_headers=extra,
        suggestions=suggestions,
    )
