"""Tests for relay/cache.py — TTL token store and sweeper."""

import threading

from relay.cache import TokenStore, TokenSweeper

from conftest import FakeClock


def make_store(ttl=60, maxsize=100):
    clock = FakeClock()
    return TokenStore(ttl_seconds=ttl, maxsize=maxsize, clock=clock), clock


def test_get_after_put_returns_value():
    store, _ = make_store()
    store.put("abc", {"product_id": 1})
    assert store.get("abc") == {"product_id": 1}


def test_unknown_key_is_none():
    store, _ = make_store()
    assert store.get("nope") is None
    assert "nope" not in store


def test_token_fresh_just_before_ttl():
    store, clock = make_store(ttl=60)
    store.put("tok", "value")
    clock.advance(60 - 0.001)
    assert store.get("tok") == "value"


def test_token_expired_just_after_ttl_without_sweep():
    store, clock = make_store(ttl=60)
    store.put("tok", "value")
    clock.advance(60 + 0.001)
    assert store.get("tok") is None


def test_token_expired_exactly_at_ttl():
    store, clock = make_store(ttl=60)
    store.put("tok", "value")
    clock.advance(60)
    assert store.get("tok") is None


def test_put_overwrites_and_restarts_clock():
    store, clock = make_store(ttl=60)
    store.put("tok", "old")
    clock.advance(50)
    store.put("tok", "new")
    clock.advance(30)
    assert store.get("tok") == "new"


def test_sweep_removes_only_expired():
    store, clock = make_store(ttl=60)
    store.put("old", 1)
    clock.advance(45)
    store.put("young", 2)
    clock.advance(20)
    assert store.sweep() == 1
    assert len(store) == 1
    assert store.get("young") == 2


def test_sweep_is_idempotent():
    store, clock = make_store(ttl=60)
    for i in range(5):
        store.put(f"k{i}", i)
    clock.advance(30)
    store.put("fresh", "x")
    clock.advance(40)
    assert store.sweep() == 5
    snapshot = len(store), store.get("fresh")
    assert store.sweep() == 0
    assert (len(store), store.get("fresh")) == snapshot


def test_mint_returns_unique_hex_tokens():
    store, _ = make_store(maxsize=1000)
    tokens = {store.mint(i) for i in range(200)}
    assert len(tokens) == 200
    for token in tokens:
        assert len(token) == 10
        int(token, 16)


def test_mint_value_is_retrievable():
    store, _ = make_store()
    token = store.mint({"product_id": 42})
    assert store.get(token) == {"product_id": 42}


def test_maxsize_evicts_oldest_first():
    store, clock = make_store(ttl=600, maxsize=3)
    for key in ("a", "b", "c"):
        store.put(key, key)
        clock.advance(1)
    store.put("d", "d")
    assert store.get("a") is None
    assert [store.get(k) for k in ("b", "c", "d")] == ["b", "c", "d"]


def test_maxsize_prefers_dropping_expired():
    store, clock = make_store(ttl=10, maxsize=2)
    store.put("stale", 1)
    clock.advance(5)
    store.put("live", 2)
    clock.advance(6)
    store.put("new", 3)
    assert store.get("live") == 2
    assert store.get("new") == 3


def test_concurrent_puts_and_gets():
    store, _ = make_store(ttl=600, maxsize=10000)
    errors = []

    def worker(n):
        try:
            for i in range(200):
                key = f"{n}-{i}"
                store.put(key, i)
                assert store.get(key) == i
                store.sweep()
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []
    assert len(store) == 8 * 200


def test_sweeper_thread_runs_sweep():
    swept = threading.Event()

    class RecordingStore:
        def sweep(self):
            swept.set()
            return 0

    sweeper = TokenSweeper(RecordingStore(), interval_sec=0.01)
    sweeper.start()
    try:
        assert swept.wait(timeout=2.0)
    finally:
        sweeper.stop()


def test_sweeper_survives_failing_sweep():
    calls = []

    class FlakyStore:
        def sweep(self):
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            return 0

    sweeper = TokenSweeper(FlakyStore(), interval_sec=0.01)
    sweeper.start()
    try:
        for _ in range(200):
            if len(calls) >= 2:
                break
            threading.Event().wait(0.01)
    finally:
        sweeper.stop()
    assert len(calls) >= 2
