"""
Order lifecycle engine.

Pure functions over ``Order`` values: pricing and the three admin
transitions. Nothing here touches the store; ``OrderService`` loads the
order, calls ``apply_transition`` and persists the result in one write.

Status changes are deliberately unconstrained: any ``OrderStatus`` may
follow any other (``completed -> pending`` is accepted). Refunds always
move the order to ``refunded`` on both axes, whatever the amount.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .faults import InvalidOrderStateFault, InvalidRefundFault, RefundExceedsTotalFault
from .models import Order, OrderStatus, PaymentStatus, Refund, TrackingUpdate

CENT = Decimal("0.01")


# ============================================================================
# Pricing
# ============================================================================

@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def compute_totals(lines: Iterable[Any], tax_rate: Decimal) -> Totals:
    """
    Price a cart.

    ``lines`` are objects with ``price`` and ``quantity``. Tax is rounded
    half-up to cents; the total is the exact sum of subtotal and tax.
    """
    subtotal = sum((line.price * line.quantity for line in lines), Decimal("0"))
    tax = (subtotal * tax_rate).quantize(CENT, rounding=ROUND_HALF_UP)
    return Totals(subtotal=subtotal, tax=tax, total=subtotal + tax)


# ============================================================================
# Commands & events
# ============================================================================

@dataclass(frozen=True)
class UpdateStatus:
    status: str
    payment_status: Optional[str] = None


@dataclass(frozen=True)
class AddTrackingUpdate:
    status: str
    location: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ProcessRefund:
    amount: Decimal
    reason: str
    processed_by: str


@dataclass(frozen=True)
class OrderEvent:
    kind: str
    order_number: str
    at: datetime
    data: Dict[str, Any] = field(default_factory=dict)


# ============================================================================
# Transitions
# ============================================================================

def _update_status(order: Order, command: UpdateStatus, now: datetime) -> Tuple[Order, OrderEvent]:
    if command.status not in OrderStatus.values:
        raise InvalidOrderStateFault(f"Invalid status '{command.status}'")
    if command.payment_status is not None and command.payment_status not in PaymentStatus.values:
        raise InvalidOrderStateFault(f"Invalid payment status '{command.payment_status}'")

    payment_status = command.payment_status or order.payment_status
    updated = replace(order, status=command.status, payment_status=payment_status)
    return updated, OrderEvent(
        kind="status_updated",
        order_number=order.order_number,
        at=now,
        data={
            "from": {"status": order.status, "paymentStatus": order.payment_status},
            "to": {"status": updated.status, "paymentStatus": updated.payment_status},
        },
    )


def _add_tracking_update(order: Order, command: AddTrackingUpdate, now: datetime) -> Tuple[Order, OrderEvent]:
    status = (command.status or "").strip()
    if not status:
        raise InvalidOrderStateFault("Tracking status is required")

    entry = TrackingUpdate(
        status=status,
        timestamp=now,
        location=command.location,
        description=command.description,
    )
    tracking = replace(order.tracking, status=status, updates=order.tracking.updates + (entry,))
    return replace(order, tracking=tracking), OrderEvent(
        kind="tracking_updated",
        order_number=order.order_number,
        at=now,
        data={"status": status, "updates": len(tracking.updates)},
    )


def _process_refund(order: Order, command: ProcessRefund, now: datetime) -> Tuple[Order, OrderEvent]:
    if command.amount <= 0:
        raise InvalidRefundFault("Refund amount must be a positive number")
    if not (command.reason or "").strip():
        raise InvalidRefundFault("Refund reason is required")
    if command.amount > order.total:
        raise RefundExceedsTotalFault(metadata={"amount": str(command.amount), "total": str(order.total)})

    refund = Refund(
        amount=command.amount,
        reason=command.reason.strip(),
        processed_at=now,
        processed_by=command.processed_by,
    )
    updated = replace(
        order,
        refund=refund,
        status=OrderStatus.REFUNDED.value,
        payment_status=PaymentStatus.REFUNDED.value,
    )
    return updated, OrderEvent(
        kind="refund_processed",
        order_number=order.order_number,
        at=now,
        data={"amount": str(command.amount), "processedBy": command.processed_by},
    )


_TRANSITIONS: Dict[type, Callable[[Order, Any, datetime], Tuple[Order, OrderEvent]]] = {
    UpdateStatus: _update_status,
    AddTrackingUpdate: _add_tracking_update,
    ProcessRefund: _process_refund,
}


def apply_transition(order: Order, command: Any, *, now: datetime) -> Tuple[Order, OrderEvent]:
    """
    Apply one admin command to an order.

    Returns the new order and the event describing the change; the input
    order is left untouched. Raises before producing anything when the
    command is not acceptable.
    """
    handler = _TRANSITIONS.get(type(command))
    if handler is None:
        raise TypeError(f"Unsupported order command: {type(command).__name__}")
    return handler(order, command, now)
