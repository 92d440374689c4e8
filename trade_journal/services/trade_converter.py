"""Map parsed broker rows onto the canonical trade shape."""

from datetime import datetime, timezone
from typing import Any

from trade_journal.services.csv_parser import ParsedTrade


def compute_payout(profit: float, amount: float) -> float:
    """Payout percentage. A zero stake yields 0 rather than inf/NaN."""
    if amount == 0:
        return 0.0
    return profit / amount * 100


def result_from_status(status: str) -> str:
    # The broker has no tie outcome; "tie" is only reachable through manual entry.
    return "win" if status == "WIN" else "loss"


def to_trade_fields(
    parsed: ParsedTrade,
    platform: str,
    imported_at: datetime | None = None,
) -> dict[str, Any]:
    """Canonical trade fields for one row, without owner or import linkage."""
    return {
        "trade_id": parsed.trade_id,
        "asset": parsed.asset,
        "direction": parsed.direction,
        "amount": parsed.amount,
        "entry_price": parsed.entry_price,
        "exit_price": parsed.exit_price,
        "entry_time": parsed.entry_time,
        # Exports carry a single timestamp; imported trades are exempt from exit > entry.
        "exit_time": parsed.entry_time,
        "timeframe": parsed.timeframe,
        "candle_time": parsed.candle_time,
        "refunded": parsed.refunded,
        "executed": parsed.executed,
        "status": parsed.status,
        "result": result_from_status(parsed.status),
        "profit": parsed.profit,
        "payout": compute_payout(parsed.profit, parsed.amount),
        "platform": platform,
        "imported_at": imported_at or datetime.now(timezone.utc),
    }
