"""
Order numbers: ``ORD`` + ``YYMMDD`` + 3-digit daily sequence.

The sequence comes from an atomic per-day counter in the store, so two
concurrent checkouts can never draw the same number.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional

from archmarket.db import DocumentStore

from .faults import DailyCapacityExceededFault

logger = logging.getLogger("archmarket.orders")

MAX_DAILY_SEQUENCE = 999


def local_now() -> datetime:
    """Timezone-aware current time in the server's local zone."""
    return datetime.now().astimezone()


def format_order_number(day: date, sequence: int) -> str:
    """
    >>> format_order_number(date(2025, 1, 15), 7)
    'ORD250115007'
    """
    if not 1 <= sequence <= MAX_DAILY_SEQUENCE:
        raise DailyCapacityExceededFault(day.isoformat(), sequence)
    return f"ORD{day:%y%m%d}{sequence:03d}"


def counter_name(day: date) -> str:
    return f"orders:{day:%Y%m%d}"


class OrderNumberAllocator:
    """Draws order numbers for the current local calendar day."""

    def __init__(self, store: DocumentStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or local_now

    async def allocate(self) -> str:
        day = self.clock().date()
        sequence = await self.store.next_sequence(counter_name(day))
        if sequence > MAX_DAILY_SEQUENCE:
            logger.error(f"Daily order capacity exhausted for {day.isoformat()} (sequence {sequence})")
        return format_order_number(day, sequence)
