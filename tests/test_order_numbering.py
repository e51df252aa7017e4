"""
Order numbers: format, per-day sequences, capacity and concurrency.
"""

import asyncio
from datetime import date, datetime, timedelta, timezone

import pytest

from archmarket.db import MemoryDocumentStore
from archmarket.modules.orders import OrderNumberAllocator, format_order_number
from archmarket.modules.orders.faults import DailyCapacityExceededFault
from archmarket.modules.orders.numbering import MAX_DAILY_SEQUENCE, counter_name

from conftest import FakeClock


class TestFormat:

    def test_layout(self):
        assert format_order_number(date(2025, 1, 15), 7) == "ORD250115007"
        assert format_order_number(date(2031, 12, 3), 999) == "ORD311203999"

    @pytest.mark.parametrize("sequence", [0, MAX_DAILY_SEQUENCE + 1])
    def test_out_of_range_sequence(self, sequence):
        with pytest.raises(DailyCapacityExceededFault):
            format_order_number(date(2025, 1, 15), sequence)


class TestAllocator:

    @pytest.mark.asyncio
    async def test_sequence_starts_at_one_and_increments(self):
        allocator = OrderNumberAllocator(MemoryDocumentStore(), FakeClock())
        assert await allocator.allocate() == "ORD250115001"
        assert await allocator.allocate() == "ORD250115002"

    @pytest.mark.asyncio
    async def test_sequence_resets_each_day(self):
        clock = FakeClock()
        allocator = OrderNumberAllocator(MemoryDocumentStore(), clock)
        await allocator.allocate()
        await allocator.allocate()
        clock.advance(days=1)
        assert await allocator.allocate() == "ORD250116001"

    @pytest.mark.asyncio
    async def test_uses_local_calendar_day(self):
        # 23:30 UTC on the 15th is already the 16th at UTC+2
        clock = FakeClock(datetime(2025, 1, 15, 23, 30, tzinfo=timezone.utc).astimezone(
            timezone(timedelta(hours=2))
        ))
        allocator = OrderNumberAllocator(MemoryDocumentStore(), clock)
        assert await allocator.allocate() == "ORD250116001"

    @pytest.mark.asyncio
    async def test_capacity_exhausted(self):
        store = MemoryDocumentStore()
        clock = FakeClock()
        allocator = OrderNumberAllocator(store, clock)
        for _ in range(MAX_DAILY_SEQUENCE):
            await store.next_sequence(counter_name(clock().date()))

        with pytest.raises(DailyCapacityExceededFault) as exc_info:
            await allocator.allocate()
        assert exc_info.value.metadata["sequence"] == MAX_DAILY_SEQUENCE + 1

    @pytest.mark.asyncio
    async def test_concurrent_allocations_are_unique(self):
        allocator = OrderNumberAllocator(MemoryDocumentStore(), FakeClock())
        numbers = await asyncio.gather(*(allocator.allocate() for _ in range(100)))
        assert len(set(numbers)) == 100
        assert sorted(numbers)[0] == "ORD250115001"
        assert sorted(numbers)[-1] == "ORD250115100"
