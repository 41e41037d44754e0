"""Resource Lock unit testleri."""

import pytest

from src.agents.resource_lock import LockTimeoutError, ResourceLock


class TestResourceLock:
    """Aynı kullanıcı/hafta için eşzamanlı erişim kontrolü."""

    def test_acquire_and_release(self):
        lock = ResourceLock()
        assert lock.acquire("beat-plan:U1:2024-06-17", "AgentA") is True
        assert lock.is_locked("beat-plan:U1:2024-06-17") is True
        assert lock.release("beat-plan:U1:2024-06-17", "AgentA") is True
        assert lock.is_locked("beat-plan:U1:2024-06-17") is False

    def test_wrong_owner_cannot_release(self):
        lock = ResourceLock()
        lock.acquire("beat-plan:U1:2024-06-17", "AgentA")
        assert lock.release("beat-plan:U1:2024-06-17", "AgentB") is False
        assert lock.is_locked("beat-plan:U1:2024-06-17") is True

    def test_hold_releases_on_error(self):
        lock = ResourceLock()
        with pytest.raises(RuntimeError):
            with lock.hold("key", "AgentA"):
                raise RuntimeError("boom")
        assert lock.is_locked("key") is False

    def test_hold_times_out_when_busy(self):
        lock = ResourceLock()
        lock.acquire("key", "AgentA")
        with pytest.raises(LockTimeoutError):
            with lock.hold("key", "AgentB", timeout=0.01):
                pass

    def test_released_keys_do_not_accumulate(self):
        lock = ResourceLock()
        for week in ("2024-06-17", "2024-06-24", "2024-07-01"):
            with lock.hold(f"beat-plan:U1:{week}", "AgentA"):
                pass
        assert lock._locks == {}

    def test_key_kept_while_waiter_pending(self):
        lock = ResourceLock()
        lock.acquire("key", "AgentA")
        lock._waiters["key"] = 1
        lock.release("key", "AgentA")
        assert "key" in lock._locks

    def test_timed_out_waiter_leaves_holder_intact(self):
        lock = ResourceLock()
        lock.acquire("key", "AgentA")
        assert lock.acquire("key", "AgentB", timeout=0.01) is False
        assert lock.is_locked("key") is True
        assert lock.release("key", "AgentA") is True
        assert lock._locks == {}
