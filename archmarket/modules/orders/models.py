"""
Order domain model.

Orders are immutable dataclasses; every change goes through
``lifecycle.apply_transition`` and produces a new ``Order``. Money is
``Decimal`` here and a string in stored documents, so no float rounding
ever reaches a persisted total.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from ..shared.enums import TextChoices

ORDERS = "orders"


class OrderStatus(TextChoices):
    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"
    REFUNDED = "refunded", "Refunded"


class PaymentStatus(TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


class PaymentMethod(TextChoices):
    STRIPE = "stripe", "Stripe"
    PAYPAL = "paypal", "PayPal"
    BANK_TRANSFER = "bank-transfer", "Bank transfer"
    CRYPTO = "crypto", "Crypto"


class LicenseKind(TextChoices):
    PERSONAL = "personal", "Personal"
    COMMERCIAL = "commercial", "Commercial"
    EXCLUSIVE = "exclusive", "Exclusive"


def _money(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _when(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class Address:
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def from_document(cls, data: Optional[Dict[str, Any]]) -> Optional[Address]:
        if data is None:
            return None
        return cls(
            name=data.get("name"),
            email=data.get("email"),
            phone=data.get("phone"),
            street=data.get("street"),
            city=data.get("city"),
            state=data.get("state"),
            zip_code=data.get("zipCode"),
            country=data.get("country"),
        )

    def to_document(self) -> Dict[str, Any]:
        return _compact({
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "country": self.country,
        })


@dataclass(frozen=True)
class OrderItem:
    """One purchased design; ``price`` is the catalogue price at checkout."""

    design: str
    quantity: int
    price: Decimal
    license: str = LicenseKind.PERSONAL.value

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> OrderItem:
        return cls(
            design=data["design"],
            quantity=int(data.get("quantity", 1)),
            price=_money(data["price"]),
            license=data.get("license", LicenseKind.PERSONAL.value),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "design": self.design,
            "quantity": self.quantity,
            "price": str(self.price),
            "license": self.license,
        }


@dataclass(frozen=True)
class TrackingUpdate:
    status: str
    timestamp: datetime
    location: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> TrackingUpdate:
        return cls(
            status=data["status"],
            timestamp=_when(data["timestamp"]),
            location=data.get("location"),
            description=data.get("description"),
        )

    def to_document(self) -> Dict[str, Any]:
        return _compact({
            "status": self.status,
            "location": self.location,
            "timestamp": _iso(self.timestamp),
            "description": self.description,
        })


@dataclass(frozen=True)
class Tracking:
    """Shipment tracking; ``status`` mirrors the newest update."""

    number: Optional[str] = None
    carrier: Optional[str] = None
    status: Optional[str] = None
    updates: Tuple[TrackingUpdate, ...] = ()

    @classmethod
    def from_document(cls, data: Optional[Dict[str, Any]]) -> Tracking:
        data = data or {}
        return cls(
            number=data.get("number"),
            carrier=data.get("carrier"),
            status=data.get("status"),
            updates=tuple(TrackingUpdate.from_document(u) for u in data.get("updates", ())),
        )

    def to_document(self) -> Dict[str, Any]:
        doc = _compact({"number": self.number, "carrier": self.carrier, "status": self.status})
        doc["updates"] = [u.to_document() for u in self.updates]
        return doc


@dataclass(frozen=True)
class Refund:
    amount: Decimal
    reason: str
    processed_at: datetime
    processed_by: str

    @classmethod
    def from_document(cls, data: Optional[Dict[str, Any]]) -> Optional[Refund]:
        if not data:
            return None
        return cls(
            amount=_money(data["amount"]),
            reason=data["reason"],
            processed_at=_when(data["processedAt"]),
            processed_by=data["processedBy"],
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "amount": str(self.amount),
            "reason": self.reason,
            "processedAt": _iso(self.processed_at),
            "processedBy": self.processed_by,
        }


@dataclass(frozen=True)
class Order:
    """
    Order aggregate.

    ``order_number`` is assigned once at creation and ``total`` always
    equals ``subtotal + tax``.
    """

    order_number: str
    customer: str
    items: Tuple[OrderItem, ...]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_method: str
    billing_address: Address
    shipping_address: Address
    status: str = OrderStatus.PENDING.value
    payment_status: str = PaymentStatus.PENDING.value
    currency: str = "USD"
    notes: Optional[str] = None
    tracking: Tracking = field(default_factory=Tracking)
    refund: Optional[Refund] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> Order:
        billing = Address.from_document(doc.get("billingAddress")) or Address()
        return cls(
            id=doc.get("id"),
            order_number=doc["orderNumber"],
            customer=doc["customer"],
            items=tuple(OrderItem.from_document(i) for i in doc.get("items", ())),
            subtotal=_money(doc["subtotal"]),
            tax=_money(doc["tax"]),
            total=_money(doc["total"]),
            currency=doc.get("currency", "USD"),
            status=doc.get("status", OrderStatus.PENDING.value),
            payment_status=doc.get("paymentStatus", PaymentStatus.PENDING.value),
            payment_method=doc["paymentMethod"],
            billing_address=billing,
            shipping_address=Address.from_document(doc.get("shippingAddress")) or billing,
            notes=doc.get("notes"),
            tracking=Tracking.from_document(doc.get("tracking")),
            refund=Refund.from_document(doc.get("refund")),
            created_at=_when(doc.get("createdAt")),
            updated_at=_when(doc.get("updatedAt")),
        )

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "orderNumber": self.order_number,
            "customer": self.customer,
            "items": [i.to_document() for i in self.items],
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "total": str(self.total),
            "currency": self.currency,
            "status": self.status,
            "paymentStatus": self.payment_status,
            "paymentMethod": self.payment_method,
            "billingAddress": self.billing_address.to_document(),
            "shippingAddress": self.shipping_address.to_document(),
            "tracking": self.tracking.to_document(),
        }
        if self.notes is not None:
            doc["notes"] = self.notes
        if self.refund is not None:
            doc["refund"] = self.refund.to_document()
        if self.id is not None:
            doc["id"] = self.id
        if self.created_at is not None:
            doc["createdAt"] = _iso(self.created_at)
        if self.updated_at is not None:
            doc["updatedAt"] = _iso(self.updated_at)
        return doc
