"""
Orders module serializers.

Input serializers mirror the checkout and admin payloads; ``OrderSerializer``
renders stored order documents (money as JSON numbers), with each line
carrying a summary of the design it refers to.
"""

from typing import Any, Dict, Mapping

from archmarket.serializers import (
    CharField,
    ChoiceField,
    DateTimeField,
    DecimalField,
    EmailField,
    FloatField,
    IntegerField,
    JSONField,
    ListField,
    Serializer,
)

from .models import LicenseKind, OrderStatus, PaymentMethod, PaymentStatus


# ── Input ────────────────────────────────────────────────────────────────

class OrderItemInputSerializer(Serializer):
    design = CharField(
        max_length=64,
        error_messages={"required": "Invalid design ID", "invalid": "Invalid design ID"},
    )
    quantity = IntegerField(
        min_value=1,
        error_messages={"required": "Quantity must be at least 1", "invalid": "Quantity must be at least 1"},
    )
    license = ChoiceField(
        LicenseKind.values,
        error_messages={"required": "Invalid license type", "invalid": "Invalid license type"},
    )


class AddressSerializer(Serializer):
    name = CharField(max_length=200, required=False)
    email = EmailField(max_length=254, required=False)
    phone = CharField(max_length=50, required=False, allow_blank=True)
    street = CharField(max_length=200, required=False, allow_blank=True)
    city = CharField(max_length=100, required=False, allow_blank=True)
    state = CharField(max_length=100, required=False, allow_blank=True)
    zipCode = CharField(max_length=20, required=False, allow_blank=True)
    country = CharField(max_length=100, required=False, allow_blank=True)


class BillingAddressSerializer(AddressSerializer):
    name = CharField(
        max_length=200,
        error_messages={"required": "Billing name is required", "invalid": "Billing name is required"},
    )
    email = EmailField(
        max_length=254,
        error_messages={"required": "Valid billing email is required", "invalid": "Valid billing email is required"},
    )


class OrderCreateSerializer(Serializer):
    """
    Checkout payload::

        {
            "items": [{"design": "...", "quantity": 1, "license": "personal"}],
            "paymentMethod": "stripe",
            "billingAddress": {"name": "Ada", "email": "ada@example.com"},
            "shippingAddress": {...},
            "notes": "..."
        }
    """

    items = ListField(
        child=OrderItemInputSerializer(),
        min_length=1,
        error_messages={"required": "At least one item is required", "invalid": "At least one item is required"},
    )
    paymentMethod = ChoiceField(
        PaymentMethod.values,
        error_messages={"required": "Invalid payment method", "invalid": "Invalid payment method"},
    )
    billingAddress = BillingAddressSerializer(
        error_messages={"required": "Billing address is required", "invalid": "Billing address is required"},
    )
    shippingAddress = AddressSerializer(required=False, allow_null=True)
    notes = CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)


class OrderStatusUpdateSerializer(Serializer):
    status = ChoiceField(
        OrderStatus.values,
        error_messages={"required": "Invalid status", "invalid": "Invalid status"},
    )
    paymentStatus = ChoiceField(
        PaymentStatus.values,
        required=False,
        error_messages={"invalid": "Invalid payment status"},
    )


class TrackingUpdateSerializer(Serializer):
    status = CharField(
        max_length=100,
        error_messages={"required": "Tracking status is required", "invalid": "Tracking status is required"},
    )
    location = CharField(max_length=200, required=False, allow_blank=True)
    description = CharField(max_length=500, required=False, allow_blank=True)


class RefundSerializer(Serializer):
    amount = DecimalField(
        min_value=0,
        min_exclusive=True,
        error_messages={
            "required": "Refund amount must be a positive number",
            "invalid": "Refund amount must be a positive number",
        },
    )
    reason = CharField(
        max_length=500,
        error_messages={"required": "Refund reason is required", "invalid": "Refund reason is required"},
    )


# ── Output ───────────────────────────────────────────────────────────────

class OrderLineSerializer(Serializer):
    design = CharField()
    quantity = IntegerField()
    price = DecimalField()
    license = CharField()


class TrackingSerializer(Serializer):
    number = CharField()
    carrier = CharField()
    status = CharField()
    updates = ListField(child=JSONField())


class RefundOutputSerializer(Serializer):
    amount = DecimalField()
    reason = CharField()
    processedAt = DateTimeField()
    processedBy = CharField()


class OrderSerializer(Serializer):
    id = CharField()
    orderNumber = CharField()
    customer = CharField()
    items = ListField(child=OrderLineSerializer())
    subtotal = DecimalField()
    tax = DecimalField()
    total = DecimalField()
    currency = CharField()
    status = CharField()
    paymentStatus = CharField()
    paymentMethod = CharField()
    billingAddress = JSONField()
    shippingAddress = JSONField()
    notes = CharField()
    tracking = TrackingSerializer()
    refund = RefundOutputSerializer()
    createdAt = DateTimeField()
    updatedAt = DateTimeField()


class LineDesignSerializer(Serializer):
    id = CharField()
    title = CharField()
    images = ListField(child=JSONField())
    price = FloatField()


class LineDesignDetailSerializer(LineDesignSerializer):
    model3d = JSONField()


def render_order(order, designs: Mapping[str, Dict[str, Any]], *, detail: bool = False) -> dict:
    """
    Order aggregate -> JSON-ready dict.

    ``designs`` maps design ids to catalogue documents. Each line's
    ``design`` becomes ``{id, title, images, price}`` (plus ``model3d``
    when *detail* is set); the line's own ``price`` stays the snapshot
    taken at checkout. A design that has since been deleted renders as
    ``{"id": ...}``.
    """
    data = OrderSerializer(instance=order.to_document()).data
    summary = LineDesignDetailSerializer() if detail else LineDesignSerializer()
    for line in data["items"]:
        design = designs.get(line["design"])
        line["design"] = {"id": line["design"]} if design is None else summary.to_representation(design)
    return data
