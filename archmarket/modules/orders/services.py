"""
Orders module services (business logic).

``OrderService`` owns checkout and the admin transitions. Every mutation
is a single ``store.update`` whose mutate callback runs
``apply_transition``; a rejected command raises inside the callback and
nothing is written.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from archmarket.db import DocumentStore, Query

from ..designs.models import DESIGNS, DesignStatus
from .faults import DesignUnavailableFault, OrderDesignNotFoundFault, OrderNotFoundFault
from .lifecycle import (
    AddTrackingUpdate,
    OrderEvent,
    ProcessRefund,
    UpdateStatus,
    apply_transition,
    compute_totals,
)
from .models import ORDERS, Address, Order, OrderItem, OrderStatus
from .numbering import OrderNumberAllocator, local_now

logger = logging.getLogger("archmarket.orders")


class OrderService:
    """
    Order lifecycle operations over an injected document store.

    Args:
        store: Entity store
        tax_rate: Fraction applied to the subtotal (``Decimal("0.085")``)
        clock: Returns the current local, timezone-aware time
        allocator: Order number source (defaults to the store's daily counter)
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        tax_rate: Decimal,
        clock: Optional[Callable[[], datetime]] = None,
        allocator: Optional[OrderNumberAllocator] = None,
    ):
        self.store = store
        self.tax_rate = tax_rate
        self.clock = clock or local_now
        self.allocator = allocator or OrderNumberAllocator(store, self.clock)

    # ── Checkout ─────────────────────────────────────────────────────────

    async def _price_items(self, items: List[Dict[str, Any]]) -> List[OrderItem]:
        priced = []
        for item in items:
            design = await self.store.get(DESIGNS, item["design"])
            if design is None:
                raise OrderDesignNotFoundFault(item["design"])
            if design.get("status") != DesignStatus.PUBLISHED.value:
                raise DesignUnavailableFault(design.get("title", item["design"]), item["design"])
            priced.append(OrderItem(
                design=design["id"],
                quantity=item["quantity"],
                price=Decimal(str(design["price"])),
                license=item["license"],
            ))
        return priced

    async def place_order(self, customer_id: str, data: Dict[str, Any]) -> Order:
        """
        Create an order from validated checkout data.

        ``data`` carries ``items`` (``design``, ``quantity``, ``license``),
        ``paymentMethod``, ``billingAddress`` and optionally
        ``shippingAddress`` and ``notes``.
        """
        items = await self._price_items(data["items"])
        totals = compute_totals(items, self.tax_rate)
        billing = Address.from_document(data["billingAddress"])
        shipping = Address.from_document(data.get("shippingAddress")) or billing

        order = Order(
            order_number=await self.allocator.allocate(),
            customer=customer_id,
            items=tuple(items),
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            payment_method=data["paymentMethod"],
            billing_address=billing,
            shipping_address=shipping,
            notes=data.get("notes"),
        )
        stored = Order.from_document(await self.store.insert(ORDERS, order.to_document()))
        logger.info(
            f"Order {stored.order_number} created for {customer_id}: "
            f"{len(items)} item(s), total {stored.total}"
        )
        return stored

    # ── Queries ──────────────────────────────────────────────────────────

    async def _page(self, where: Dict[str, Any], offset: int, limit: int) -> Tuple[List[Order], int]:
        query = Query(where=where, offset=offset, limit=limit)
        docs = await self.store.find(ORDERS, query)
        total = await self.store.count(ORDERS, Query(where=where))
        return [Order.from_document(d) for d in docs], total

    async def list_for_customer(
        self,
        customer_id: str,
        *,
        status: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Order], int]:
        where: Dict[str, Any] = {"customer": customer_id}
        if status:
            where["status"] = status
        return await self._page(where, offset, limit)

    async def list_all(
        self,
        *,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Order], int]:
        where: Dict[str, Any] = {}
        if status:
            where["status"] = status
        if payment_status:
            where["paymentStatus"] = payment_status
        return await self._page(where, offset, limit)

    async def get_order(self, order_id: str) -> Order:
        doc = await self.store.get(ORDERS, order_id)
        if doc is None:
            raise OrderNotFoundFault(order_id)
        return Order.from_document(doc)

    async def line_designs(self, orders: Iterable[Order]) -> Dict[str, Dict[str, Any]]:
        """Catalogue documents referenced by the lines of *orders*, keyed by id."""
        found: Dict[str, Dict[str, Any]] = {}
        missing = set()
        for order in orders:
            for item in order.items:
                if item.design in found or item.design in missing:
                    continue
                design = await self.store.get(DESIGNS, item.design)
                if design is None:
                    missing.add(item.design)
                else:
                    found[item.design] = design
        return found

    # ── Transitions ──────────────────────────────────────────────────────

    async def _transition(self, order_id: str, command: Any) -> Order:
        events: List[OrderEvent] = []

        def mutate(doc: Dict[str, Any]) -> Dict[str, Any]:
            updated, event = apply_transition(Order.from_document(doc), command, now=self.clock())
            events.append(event)
            return updated.to_document()

        stored = await self.store.update(ORDERS, order_id, mutate)
        if stored is None:
            raise OrderNotFoundFault(order_id)

        event = events[-1]
        logger.info(f"Order {event.order_number} {event.kind}: {event.data}")
        return Order.from_document(stored)

    async def update_status(
        self,
        order_id: str,
        status: str,
        payment_status: Optional[str] = None,
    ) -> Order:
        return await self._transition(order_id, UpdateStatus(status, payment_status))

    async def add_tracking_update(
        self,
        order_id: str,
        status: str,
        location: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Order:
        return await self._transition(order_id, AddTrackingUpdate(status, location, description))

    async def process_refund(
        self,
        order_id: str,
        amount: Decimal,
        reason: str,
        processed_by: str,
    ) -> Order:
        return await self._transition(order_id, ProcessRefund(amount, reason, processed_by))

    # ── Reporting ────────────────────────────────────────────────────────

    async def stats_summary(self) -> Dict[str, Any]:
        """Order counts and revenue overall, for today and for this month."""
        now = self.clock()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start_of_month = start_of_day.replace(day=1)

        summary = {
            "totalOrders": 0,
            "totalRevenue": Decimal("0"),
            "todayOrders": 0,
            "todayRevenue": Decimal("0"),
            "monthOrders": 0,
            "monthRevenue": Decimal("0"),
        }
        by_status: Dict[str, int] = {}

        for doc in await self.store.find(ORDERS, Query(order_by="createdAt", descending=False)):
            total = Decimal(str(doc["total"]))
            created = datetime.fromisoformat(doc["createdAt"])
            summary["totalOrders"] += 1
            summary["totalRevenue"] += total
            if created >= start_of_month:
                summary["monthOrders"] += 1
                summary["monthRevenue"] += total
            if created >= start_of_day:
                summary["todayOrders"] += 1
                summary["todayRevenue"] += total
            status = doc.get("status", OrderStatus.PENDING.value)
            by_status[status] = by_status.get(status, 0) + 1

        summary["statusDistribution"] = [
            {"_id": status, "count": count} for status, count in sorted(by_status.items())
        ]
        return summary

