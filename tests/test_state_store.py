"""Tests for the in-memory transaction store."""
import asyncio
import threading
from unittest.mock import Mock

import pytest

from pkce_broker.exceptions.auth_exceptions import StateStoreException
from pkce_broker.utils.crypto import derive_challenge, make_pkce_pair
from pkce_broker.utils.state_store import sweep_expired


def _put(store, state="s" * 32):
    verifier, _ = make_pkce_pair()
    return store.put(
        state,
        verifier=verifier,
        client_id="abc",
        redirect_uri="https://app/cb",
        scopes="files.metadata.read",
    )


def test_put_then_consume_returns_record(store):
    record = _put(store, "state-1")
    assert "state-1" in store
    consumed = store.consume("state-1")
    assert consumed == record
    assert consumed.challenge == derive_challenge(consumed.verifier)
    assert "state-1" not in store


def test_consume_is_at_most_once(store):
    _put(store, "state-1")
    assert store.consume("state-1") is not None
    assert store.consume("state-1") is None


def test_unknown_state_returns_none(store):
    assert store.consume("never-issued") is None


def test_expired_record_is_absent_and_removed(store, clock):
    _put(store, "state-1")
    clock.advance(601)
    assert store.consume("state-1") is None
    assert len(store) == 0


def test_record_just_before_expiry_is_valid(store, clock):
    _put(store, "state-1")
    clock.advance(599)
    assert store.consume("state-1") is not None


def test_duplicate_state_is_refused(store):
    _put(store, "state-1")
    with pytest.raises(StateStoreException):
        _put(store, "state-1")


def test_consumed_state_cannot_be_reinserted(store, clock):
    _put(store, "state-1")
    store.consume("state-1")
    with pytest.raises(StateStoreException):
        _put(store, "state-1")
    clock.advance(601)
    store.cleanup_expired()
    _put(store, "state-1")


def test_cleanup_expired_removes_only_expired(store, clock):
    _put(store, "old")
    clock.advance(400)
    _put(store, "new")
    clock.advance(300)
    assert store.cleanup_expired() == 1
    assert "old" not in store
    assert "new" in store


def test_challenge_cannot_be_set(store):
    record = _put(store, "state-1")
    with pytest.raises((AttributeError, ValueError)):
        record.challenge = "forged"


def test_concurrent_consumers_have_one_winner(store):
    _put(store, "contested")
    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(store.consume("contested"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len([r for r in results if r is not None]) == 1


@pytest.mark.anyio
async def test_sweeper_evicts_expired_records(store, clock):
    _put(store, "old")
    clock.advance(700)
    _put(store, "new")

    task = asyncio.create_task(sweep_expired(store, 0.01))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert "old" not in store
    assert "new" in store


@pytest.mark.anyio
async def test_sweeper_survives_cleanup_errors():
    failing_store = Mock()
    failing_store.cleanup_expired.side_effect = [RuntimeError("boom")] + [0] * 100

    task = asyncio.create_task(sweep_expired(failing_store, 0.01))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert failing_store.cleanup_expired.call_count >= 2
