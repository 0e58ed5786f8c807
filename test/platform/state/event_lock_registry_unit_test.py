"""
Unit tests for EventLockRegistry

Test Focus:
1. Same key: holders run one at a time
2. Different keys: no waiting
3. Timeout surfaces as ConcurrencyConflictError
4. Idle keys are dropped
"""

import anyio
import pytest

from src.platform.exception.exceptions import ConcurrencyConflictError
from src.platform.state.event_lock_registry import EventLockRegistry


@pytest.mark.unit
class TestEventLockRegistry:
    async def test_same_key_is_serialized(self) -> None:
        # Given: a registry and two tasks competing for event 1
        registry = EventLockRegistry(timeout_seconds=1.0)
        inside = 0
        max_inside = 0

        async def critical_section() -> None:
            nonlocal inside, max_inside
            async with registry.hold(1):
                inside += 1
                max_inside = max(max_inside, inside)
                await anyio.sleep(0.01)
                inside -= 1

        # When
        async with anyio.create_task_group() as tg:
            for _ in range(5):
                tg.start_soon(critical_section)

        # Then: never more than one holder at a time
        assert max_inside == 1

    async def test_different_keys_do_not_wait(self) -> None:
        registry = EventLockRegistry(timeout_seconds=0.05)

        async with registry.hold(1):
            async with registry.hold(2):
                assert registry.is_locked(1)
                assert registry.is_locked(2)

    async def test_venue_and_event_keys_are_distinct(self) -> None:
        registry = EventLockRegistry(timeout_seconds=0.05)

        async with registry.hold(('venue', 1)):
            async with registry.hold(1):
                assert registry.is_locked(('venue', 1))

    async def test_timeout_raises_concurrency_conflict(self) -> None:
        # Given: event 1 is held
        registry = EventLockRegistry(timeout_seconds=0.05)

        async with registry.hold(1):
            # When/Then: a second holder gives up after the timeout
            with pytest.raises(ConcurrencyConflictError) as exc_info:
                async with registry.hold(1):
                    pass

        assert exc_info.value.status_code == 503
        # The first holder still releases normally
        assert not registry.is_locked(1)

    async def test_idle_keys_are_dropped(self) -> None:
        registry = EventLockRegistry()

        async with registry.hold(7):
            pass

        assert registry._locks == {}
        assert registry._waiters == {}

    async def test_lock_released_when_body_raises(self) -> None:
        registry = EventLockRegistry(timeout_seconds=0.05)

        with pytest.raises(RuntimeError):
            async with registry.hold(1):
                raise RuntimeError('boom')

        async with registry.hold(1):
            assert registry.is_locked(1)
