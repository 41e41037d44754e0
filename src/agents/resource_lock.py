"""Kaynak kilidi - aynı kullanıcı/hafta için eşzamanlı plan üretimini serileştirir.

"Mevcut plan var mı -> sil -> ekle" adımları tek bir mantıksal işlem olarak
çalışmalıdır; aynı anahtar için ikinci çağrı ilki bitene kadar bekler.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class LockTimeoutError(Exception):
    """Kilit zaman aşımı içinde alınamadı."""
    pass


class ResourceLock:
    """Anahtar bazlı süreç içi kilit."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._lock_owners: dict[str, str] = {}
        self._waiters: dict[str, int] = {}
        self._master_lock = threading.Lock()

    def acquire(self, resource_key: str, owner: str, timeout: float = 10.0) -> bool:
        """Bir kaynak için kilit alır."""
        with self._master_lock:
            lock = self._locks.setdefault(resource_key, threading.Lock())
            self._waiters[resource_key] = self._waiters.get(resource_key, 0) + 1

        acquired = lock.acquire(timeout=timeout)
        with self._master_lock:
            self._waiters[resource_key] -= 1
            if acquired:
                self._lock_owners[resource_key] = owner
            else:
                self._discard_if_idle(resource_key)

        if acquired:
            logger.debug("Kilit alındı: %s -> %s", owner, resource_key)
        else:
            logger.warning("Kilit alınamadı: %s -> %s (timeout)", owner, resource_key)
        return acquired

    def release(self, resource_key: str, owner: str) -> bool:
        """Bir kaynak kilidini serbest bırakır.

        Bekleyen yoksa anahtar haritadan silinir.
        """
        with self._master_lock:
            if resource_key not in self._locks:
                return False

            current = self._lock_owners.get(resource_key)
            if current != owner:
                logger.warning("Kilit sahibi uyuşmazlığı: %s != %s", owner, current)
                return False

            del self._lock_owners[resource_key]
            self._locks[resource_key].release()
            self._discard_if_idle(resource_key)
            return True

    def _discard_if_idle(self, resource_key: str) -> None:
        # _master_lock tutulurken çağrılır
        if self._waiters.get(resource_key, 0) > 0:
            return
        lock = self._locks.get(resource_key)
        if lock is not None and not lock.locked():
            del self._locks[resource_key]
            self._waiters.pop(resource_key, None)

    def is_locked(self, resource_key: str) -> bool:
        lock = self._locks.get(resource_key)
        return lock is not None and lock.locked()

    @contextmanager
    def hold(self, resource_key: str, owner: str, timeout: float = 10.0) -> Iterator[None]:
        if not self.acquire(resource_key, owner, timeout):
            raise LockTimeoutError(f"Kaynak meşgul: {resource_key}")
        try:
            yield
        finally:
            self.release(resource_key, owner)
