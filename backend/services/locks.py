# backend/services/locks.py
import logging
import threading
from contextlib import contextmanager

from services.errors import Internal

logger = logging.getLogger(__name__)


class UserLockRegistry:
    """One lock per user id so that checkouts of the same user run one at a time.

    An entry lives only while some thread holds or waits for it.
    """

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout
        self._guard = threading.Lock()
        # user id -> [lock, number of holders and waiters]
        self._locks = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _checkout_entry(self, user_id: int) -> threading.Lock:
        with self._guard:
            entry = self._locks.get(user_id)
            if entry is None:
                entry = self._locks[user_id] = [threading.Lock(), 0]
            entry[1] += 1
            return entry[0]

    def _return_entry(self, user_id: int) -> None:
        with self._guard:
            entry = self._locks[user_id]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[user_id]

    @contextmanager
    def hold(self, user_id: int):
        lock = self._checkout_entry(user_id)
        try:
            if not lock.acquire(timeout=self.timeout):
                logger.warning("Checkout lock for user %s not acquired within %.1fs", user_id, self.timeout)
                raise Internal("Another checkout is in progress")
            try:
                yield
            finally:
                lock.release()
        finally:
            self._return_entry(user_id)
