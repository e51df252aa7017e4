"""
Order Faults - errors raised by the order lifecycle engine.
"""

from archmarket.faults import (
    CapacityFault,
    FaultDomain,
    InvalidArgumentFault,
    NotFoundFault,
    UnavailableFault,
)

ORDERS_DOMAIN = FaultDomain("orders", "Order lifecycle faults")


class OrderNotFoundFault(NotFoundFault):
    domain = ORDERS_DOMAIN
    code = "ORDER_NOT_FOUND"

    def __init__(self, order_id: str):
        super().__init__("Order not found", metadata={"order_id": order_id})


class OrderDesignNotFoundFault(NotFoundFault):
    domain = ORDERS_DOMAIN
    code = "ORDER_DESIGN_NOT_FOUND"

    def __init__(self, design_id: str):
        super().__init__(
            f"Design with ID {design_id} not found",
            metadata={"design_id": design_id},
        )


class DesignUnavailableFault(UnavailableFault):
    domain = ORDERS_DOMAIN
    code = "DESIGN_UNAVAILABLE"

    def __init__(self, title: str, design_id: str):
        super().__init__(
            f"Design {title} is not available for purchase",
            metadata={"design_id": design_id},
        )


class RefundExceedsTotalFault(InvalidArgumentFault):
    domain = ORDERS_DOMAIN
    code = "REFUND_EXCEEDS_TOTAL"
    default_message = "Refund amount cannot exceed order total"


class InvalidRefundFault(InvalidArgumentFault):
    domain = ORDERS_DOMAIN
    code = "INVALID_REFUND"


class InvalidOrderStateFault(InvalidArgumentFault):
    domain = ORDERS_DOMAIN
    code = "INVALID_ORDER_STATE"


class DailyCapacityExceededFault(CapacityFault):
    """More orders than the 3-digit daily sequence can number."""

    domain = ORDERS_DOMAIN
    code = "DAILY_CAPACITY_EXCEEDED"

    def __init__(self, day: str, sequence: int):
        super().__init__(
            "Daily order capacity exceeded, please retry tomorrow",
            metadata={"day": day, "sequence": sequence},
        )
