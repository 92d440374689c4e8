"""Shared fixtures: in-memory store fakes, SQLite engine, CSV builders."""

import csv
import io
from datetime import datetime, timezone

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

import trade_journal.models  # noqa: F401  (registers tables)
from trade_journal.errors import PersistenceError
from trade_journal.models.import_job import ImportJob, check_update
from trade_journal.models.trade import Trade
from trade_journal.services.import_service import ImportService
from trade_journal.utils.constants import EXPECTED_HEADERS


# ---------------------------------------------------------------------------
# In-memory store fakes
# ---------------------------------------------------------------------------

class FakeTradeStore:
    """Trade store that records every query and write it receives."""

    def __init__(self, max_batch_size: int = 10):
        self.max_batch_size = max_batch_size
        self.trades: list[Trade] = []
        self.existence_queries: list[list[str]] = []
        self.writes: list[int] = []
        self.fail_writes = False
        self.fail_queries = False

    def get(self, owner_id, record_id):
        for t in self.trades:
            if t.id == record_id and t.owner_id == owner_id:
                return t
        return None

    def find_existing(self, owner_id, trade_ids):
        if self.fail_queries:
            raise PersistenceError("existence query failed")
        if len(trade_ids) > self.max_batch_size:
            raise ValueError(f"query of {len(trade_ids)} keys exceeds {self.max_batch_size}")
        self.existence_queries.append(list(trade_ids))
        stored = {t.trade_id for t in self.trades if t.owner_id == owner_id}
        return [k for k in trade_ids if k in stored]

    def write_batch(self, trades):
        if self.fail_writes:
            raise PersistenceError("store unreachable")
        self.writes.append(len(trades))
        self.trades.extend(trades)

    def list_trades(self, owner_id, filters):
        rows = [t for t in self.trades if t.owner_id == owner_id]
        rows.sort(key=lambda t: t.entry_time, reverse=True)
        return rows[filters.offset:filters.offset + filters.limit]

    def trades_between(self, owner_id, start=None, end=None):
        rows = [t for t in self.trades if t.owner_id == owner_id]
        if start is not None:
            rows = [t for t in rows if t.entry_time >= start]
        if end is not None:
            rows = [t for t in rows if t.entry_time <= end]
        return sorted(rows, key=lambda t: t.entry_time)


class FakeJobStore:
    def __init__(self):
        self.jobs: dict[str, ImportJob] = {}
        self.updates: list[dict] = []

    def create(self, job):
        self.jobs[job.import_id] = job
        return job

    def update(self, import_id, fields):
        job = self.jobs[import_id]
        check_update(job, fields)
        self.updates.append(dict(fields))
        for key, value in fields.items():
            setattr(job, key, value)
        return job

    def get(self, import_id):
        return self.jobs.get(import_id)

    def list_for_owner(self, owner_id, limit=50):
        jobs = [j for j in self.jobs.values() if j.owner_id == owner_id]
        jobs.sort(key=lambda j: j.created_at, reverse=True)
        return jobs[:limit]


@pytest.fixture
def trade_store():
    return FakeTradeStore()


@pytest.fixture
def job_store():
    return FakeJobStore()


@pytest.fixture
def import_service(trade_store, job_store):
    return ImportService(trade_store=trade_store, job_store=job_store)


# ---------------------------------------------------------------------------
# SQLite
# ---------------------------------------------------------------------------

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


# ---------------------------------------------------------------------------
# CSV builders
# ---------------------------------------------------------------------------

def make_row(
    trade_id: str,
    *,
    date: str = "15/01/2024 10:30:00",
    asset: str = "EURUSD",
    timeframe: str = "1M",
    direction: str = "BULL",
    candle: str = "10:30",
    entry_price: str = "1.0850",
    exit_price: str = "1.0860",
    amount: str = "$10.00",
    refunded: str = "0",
    executed: str = "$10.00",
    status: str = "WIN",
    profit: str = "$8.50",
) -> list[str]:
    return [
        trade_id, date, asset, timeframe, direction, candle, entry_price,
        exit_price, amount, refunded, executed, status, profit,
    ]


def build_csv(rows: list[list[str]], headers: list[str] | None = None) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(headers if headers is not None else EXPECTED_HEADERS)
    writer.writerows(rows)
    return buf.getvalue().encode("utf-8")


@pytest.fixture
def row():
    return make_row


@pytest.fixture
def csv_bytes():
    return build_csv


def trade_record(owner_id: str = "alice", trade_id: str = "T1", **overrides) -> Trade:
    fields = {
        "owner_id": owner_id,
        "trade_id": trade_id,
        "asset": "EURUSD",
        "direction": "call",
        "amount": 10.0,
        "entry_price": 1.085,
        "exit_price": 1.086,
        "entry_time": datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        "exit_time": datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        "timeframe": "1M",
        "candle_time": "10:30",
        "status": "WIN",
        "result": "win",
        "profit": 8.5,
        "payout": 85.0,
        "platform": "Ebinex",
    }
    fields.update(overrides)
    return Trade.model_validate(fields)


@pytest.fixture
def make_trade():
    return trade_record
