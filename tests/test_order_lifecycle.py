"""
Order lifecycle engine: pricing and the admin transitions.

Pure functions only; nothing here touches a store.
"""

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from archmarket.modules.orders import (
    AddTrackingUpdate,
    ProcessRefund,
    UpdateStatus,
    apply_transition,
    compute_totals,
)
from archmarket.modules.orders.faults import (
    InvalidOrderStateFault,
    InvalidRefundFault,
    RefundExceedsTotalFault,
)
from archmarket.modules.orders.models import Address, Order, OrderItem

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_order(**overrides) -> Order:
    items = (OrderItem(design="d1", quantity=2, price=Decimal("100.00")),)
    totals = compute_totals(items, Decimal("0.085"))
    order = Order(
        id="o1",
        order_number="ORD250115001",
        customer="customer-1",
        items=items,
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        payment_method="stripe",
        billing_address=Address(name="Ada", email="ada@example.com"),
        shipping_address=Address(name="Ada", email="ada@example.com"),
    )
    return replace(order, **overrides)


# ═══════════════════════════════════════════════════════════════════════════
# Pricing
# ═══════════════════════════════════════════════════════════════════════════

class TestComputeTotals:

    def test_subtotal_tax_total(self):
        lines = [
            OrderItem(design="a", quantity=2, price=Decimal("100.00")),
            OrderItem(design="b", quantity=1, price=Decimal("49.99")),
        ]
        totals = compute_totals(lines, Decimal("0.085"))
        assert totals.subtotal == Decimal("249.99")
        assert totals.tax == Decimal("21.25")
        assert totals.total == Decimal("271.24")

    def test_tax_rounds_half_up(self):
        lines = [OrderItem(design="a", quantity=1, price=Decimal("1.00"))]
        totals = compute_totals(lines, Decimal("0.005"))
        assert totals.tax == Decimal("0.01")

    def test_total_is_exact_sum(self):
        lines = [OrderItem(design="a", quantity=3, price=Decimal("19.99"))]
        totals = compute_totals(lines, Decimal("0.085"))
        assert totals.total == totals.subtotal + totals.tax
        assert totals.tax == Decimal("5.10")

    def test_empty_cart(self):
        totals = compute_totals([], Decimal("0.085"))
        assert totals.subtotal == Decimal("0")
        assert totals.total == Decimal("0")


# ═══════════════════════════════════════════════════════════════════════════
# Status updates
# ═══════════════════════════════════════════════════════════════════════════

class TestUpdateStatus:

    def test_sets_status_and_payment_status(self):
        order = make_order()
        updated, event = apply_transition(order, UpdateStatus("processing", "paid"), now=NOW)
        assert updated.status == "processing"
        assert updated.payment_status == "paid"
        assert event.kind == "status_updated"
        assert event.data["from"] == {"status": "pending", "paymentStatus": "pending"}

    def test_payment_status_kept_when_omitted(self):
        order = make_order(payment_status="paid")
        updated, _ = apply_transition(order, UpdateStatus("completed"), now=NOW)
        assert updated.payment_status == "paid"

    def test_any_status_may_follow_any_other(self):
        order = make_order(status="completed")
        updated, _ = apply_transition(order, UpdateStatus("pending"), now=NOW)
        assert updated.status == "pending"

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidOrderStateFault):
            apply_transition(make_order(), UpdateStatus("shipped"), now=NOW)

    def test_unknown_payment_status_rejected(self):
        with pytest.raises(InvalidOrderStateFault):
            apply_transition(make_order(), UpdateStatus("pending", "settled"), now=NOW)

    def test_input_order_untouched(self):
        order = make_order()
        apply_transition(order, UpdateStatus("cancelled"), now=NOW)
        assert order.status == "pending"


# ═══════════════════════════════════════════════════════════════════════════
# Tracking
# ═══════════════════════════════════════════════════════════════════════════

class TestTracking:

    def test_appends_update_and_mirrors_status(self):
        order = make_order()
        first, _ = apply_transition(order, AddTrackingUpdate("packed", location="Lisbon"), now=NOW)
        second, event = apply_transition(first, AddTrackingUpdate("shipped"), now=NOW)

        assert [u.status for u in second.tracking.updates] == ["packed", "shipped"]
        assert second.tracking.status == "shipped"
        assert second.tracking.updates[0].location == "Lisbon"
        assert second.tracking.updates[1].timestamp == NOW
        assert event.data["updates"] == 2

    def test_blank_status_rejected(self):
        with pytest.raises(InvalidOrderStateFault):
            apply_transition(make_order(), AddTrackingUpdate("   "), now=NOW)


# ═══════════════════════════════════════════════════════════════════════════
# Refunds
# ═══════════════════════════════════════════════════════════════════════════

class TestRefund:

    def test_partial_refund_marks_order_refunded(self):
        order = make_order(status="completed", payment_status="paid")
        updated, event = apply_transition(
            order, ProcessRefund(Decimal("50.00"), "Damaged files", "admin-1"), now=NOW
        )
        assert updated.status == "refunded"
        assert updated.payment_status == "refunded"
        assert updated.refund.amount == Decimal("50.00")
        assert updated.refund.processed_by == "admin-1"
        assert updated.refund.processed_at == NOW
        assert event.kind == "refund_processed"

    def test_full_refund_allowed(self):
        order = make_order()
        updated, _ = apply_transition(order, ProcessRefund(order.total, "Changed mind", "admin-1"), now=NOW)
        assert updated.refund.amount == order.total

    def test_refund_above_total_rejected(self):
        order = make_order()
        with pytest.raises(RefundExceedsTotalFault) as exc_info:
            apply_transition(
                order, ProcessRefund(order.total + Decimal("0.01"), "Too much", "admin-1"), now=NOW
            )
        assert exc_info.value.message == "Refund amount cannot exceed order total"
        assert order.refund is None
        assert order.status == "pending"

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
    def test_non_positive_amount_rejected(self, amount):
        with pytest.raises(InvalidRefundFault):
            apply_transition(make_order(), ProcessRefund(amount, "Nope", "admin-1"), now=NOW)

    def test_blank_reason_rejected(self):
        with pytest.raises(InvalidRefundFault):
            apply_transition(make_order(), ProcessRefund(Decimal("1"), "  ", "admin-1"), now=NOW)


class TestApplyTransition:

    def test_unsupported_command(self):
        with pytest.raises(TypeError):
            apply_transition(make_order(), object(), now=NOW)

    def test_document_round_trip_keeps_money_exact(self):
        order = make_order()
        restored = Order.from_document(order.to_document())
        assert restored.total == Decimal("217.00")
        assert restored.tax == Decimal("17.00")
        assert restored.items == order.items
