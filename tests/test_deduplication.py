"""Tests for chunked existence checks."""

import pytest

from trade_journal.services.deduplication import DeduplicationChecker, chunked


def _seed(store, make_trade, owner_id, trade_ids):
    store.trades.extend(make_trade(owner_id=owner_id, trade_id=t) for t in trade_ids)


def test_twelve_keys_take_two_queries(trade_store, make_trade):
    keys = [f"T{i}" for i in range(12)]
    _seed(trade_store, make_trade, "alice", ["T3", "T10", "T11"])

    existing = DeduplicationChecker(trade_store).find_existing("alice", keys)

    assert [len(q) for q in trade_store.existence_queries] == [10, 2]
    assert existing == ["T3", "T10", "T11"]


@pytest.mark.parametrize("batch_size", [1, 3, 5, 7, 10])
def test_result_independent_of_partition(trade_store, make_trade, batch_size):
    keys = [f"T{i}" for i in range(23)]
    stored = ["T0", "T4", "T9", "T10", "T19", "T22"]
    _seed(trade_store, make_trade, "alice", stored)

    existing = DeduplicationChecker(trade_store, batch_size).find_existing("alice", keys)

    assert existing == stored
    assert len(trade_store.existence_queries) == -(-len(keys) // batch_size)


def test_batch_size_never_exceeds_store_limit(trade_store):
    checker = DeduplicationChecker(trade_store, batch_size=50)
    checker.find_existing("alice", [f"T{i}" for i in range(25)])
    assert max(len(q) for q in trade_store.existence_queries) == trade_store.max_batch_size


def test_other_owners_records_are_invisible(trade_store, make_trade):
    _seed(trade_store, make_trade, "bob", ["T1", "T2"])
    assert DeduplicationChecker(trade_store).find_existing("alice", ["T1", "T2"]) == []


def test_no_keys_no_queries(trade_store):
    assert DeduplicationChecker(trade_store).find_existing("alice", []) == []
    assert trade_store.existence_queries == []


def test_chunked_rejects_zero():
    with pytest.raises(ValueError):
        list(chunked([1, 2], 0))
