"""
Orders module - checkout and the order lifecycle.

Components:
- Controllers: OrdersController (``/orders``)
- Services: OrderService
- Lifecycle: compute_totals, apply_transition and its commands
- Numbering: OrderNumberAllocator, format_order_number
"""

from .controllers import OrdersController
from .faults import (
    DailyCapacityExceededFault,
    DesignUnavailableFault,
    OrderDesignNotFoundFault,
    OrderNotFoundFault,
    RefundExceedsTotalFault,
)
from .lifecycle import AddTrackingUpdate, ProcessRefund, UpdateStatus, apply_transition, compute_totals
from .models import ORDERS, Order, OrderStatus, PaymentMethod, PaymentStatus
from .numbering import OrderNumberAllocator, format_order_number
from .services import OrderService

__all__ = [
    "OrdersController",
    "OrderService",
    "OrderNotFoundFault",
    "OrderDesignNotFoundFault",
    "DesignUnavailableFault",
    "RefundExceedsTotalFault",
    "DailyCapacityExceededFault",
    "compute_totals",
    "apply_transition",
    "UpdateStatus",
    "AddTrackingUpdate",
    "ProcessRefund",
    "ORDERS",
    "Order",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "OrderNumberAllocator",
    "format_order_number",
]
