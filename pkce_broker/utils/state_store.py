"""
State storage for the OAuth2 PKCE flow.
"""
import asyncio
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from ..models.auth import PendingAuthorization
from ..exceptions.auth_exceptions import StateStoreException
from ..middleware.logging_config import LoggerMixin, get_logger, state_prefix


class TransactionStore(ABC):
    """Abstract base class for pending authorization storage."""

    @abstractmethod
    def put(
        self,
        state: str,
        *,
        verifier: str,
        client_id: str,
        redirect_uri: str,
        scopes: str
    ) -> PendingAuthorization:
        """Create and store a record under a fresh state key."""

    @abstractmethod
    def consume(self, state: str) -> Optional[PendingAuthorization]:
        """Retrieve and remove a record. Expired or unknown states return None."""

    @abstractmethod
    def cleanup_expired(self) -> int:
        """Remove expired records. Returns count of removed records."""


class InMemoryTransactionStore(TransactionStore, LoggerMixin):
    """In-memory store with per-entry TTL and lock-guarded check-and-remove.

    Consumed keys are remembered until their original expiry so a state
    value cannot be reinserted while a replay of it could still arrive.
    """

    def __init__(self, ttl_seconds: float = 600, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._pending: Dict[str, PendingAuthorization] = {}
        self._consumed: Dict[str, float] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def __contains__(self, state: str) -> bool:
        with self._lock:
            return state in self._pending

    def put(
        self,
        state: str,
        *,
        verifier: str,
        client_id: str,
        redirect_uri: str,
        scopes: str
    ) -> PendingAuthorization:
        now = self._clock()
        record = PendingAuthorization(
            verifier=verifier,
            client_id=client_id,
            redirect_uri=redirect_uri,
            scopes=scopes,
            created_at=now,
            expires_at=now + self.ttl_seconds,
        )
        with self._lock:
            if state in self._pending or self._consumed.get(state, 0) > now:
                self.logger.error(f"Refusing to reuse state: {state_prefix(state)}")
                raise StateStoreException("State already issued")
            self._pending[state] = record
        self.logger.debug(f"Stored pending authorization for state: {state_prefix(state)}")
        return record

    def consume(self, state: str) -> Optional[PendingAuthorization]:
        now = self._clock()
        with self._lock:
            record = self._pending.pop(state, None)
            if record is not None:
                self._consumed[state] = record.expires_at

        if record is None:
            self.logger.warning(f"State not found: {state_prefix(state)}")
            return None
        if record.expired(now):
            self.logger.warning(f"Retrieved expired state: {state_prefix(state)}")
            return None

        self.logger.debug(f"Consumed pending authorization for state: {state_prefix(state)}")
        return record

    def cleanup_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired_states = [s for s, r in self._pending.items() if r.expired(now)]
            for state in expired_states:
                del self._pending[state]
            for state in [s for s, until in self._consumed.items() if until <= now]:
                del self._consumed[state]

        if expired_states:
            self.logger.info(f"Cleaned up {len(expired_states)} expired state records")
        return len(expired_states)


async def sweep_expired(store: TransactionStore, interval_seconds: float) -> None:
    """Periodically evict expired records until cancelled."""
    logger = get_logger("state_sweeper")
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            store.cleanup_expired()
        except Exception:
            logger.exception("State sweep failed")
