"""
Serializers: field coercion, nested errors, partial updates and rendering.
"""

from decimal import Decimal

import pytest

from archmarket.faults import ValidationFault
from archmarket.modules.custom_requests.serializers import BudgetSerializer, TimelineSerializer
from archmarket.modules.orders.serializers import OrderCreateSerializer, RefundSerializer
from archmarket.modules.reviews.serializers import ReviewCreateSerializer, ReviewUpdateSerializer
from archmarket.serializers import (
    BooleanField,
    CharField,
    ChoiceField,
    DecimalField,
    EmailField,
    IntegerField,
    ListField,
    Serializer,
)


class AddressInput(Serializer):
    street = CharField(max_length=20)
    zipCode = CharField(required=False)


class PersonInput(Serializer):
    name = CharField(min_length=2)
    email = EmailField(required=False)
    age = IntegerField(min_value=0, required=False)
    active = BooleanField(default=True)
    role = ChoiceField(["admin", "customer"], default="customer")
    address = AddressInput(required=False)
    tags = ListField(child=CharField(max_length=5), required=False)


def errors_of(serializer_class, data, **kwargs):
    s = serializer_class(data=data, **kwargs)
    assert not s.is_valid()
    return s.errors


# ═══════════════════════════════════════════════════════════════════════════
# Input
# ═══════════════════════════════════════════════════════════════════════════

class TestValidation:

    def test_valid_input_with_defaults(self):
        s = PersonInput(data={"name": "  Ada ", "email": "ADA@Example.com", "extra": 1})
        assert s.is_valid()
        assert s.validated_data == {
            "name": "Ada",
            "email": "ada@example.com",
            "active": True,
            "role": "customer",
        }

    def test_required_and_coercion_errors(self):
        errors = errors_of(PersonInput, {"age": "old", "role": "owner"})
        assert errors["name"] == ["This field is required."]
        assert errors["age"] == ["A valid integer is required."]
        assert "Invalid choice 'owner'" in errors["role"][0]

    def test_null_rejected_unless_allowed(self):
        assert errors_of(PersonInput, {"name": None}) == {"name": ["This field may not be null."]}

    def test_nested_errors(self):
        errors = errors_of(PersonInput, {"name": "Ada", "address": {"street": "x" * 30}})
        assert list(errors["address"]) == ["street"]

    def test_list_errors_are_indexed(self):
        errors = errors_of(PersonInput, {"name": "Ada", "tags": ["ok", "toolong"]})
        assert list(errors["tags"]) == ["1"]

    def test_partial_skips_missing(self):
        s = PersonInput(data={"age": 3}, partial=True)
        assert s.is_valid()
        assert s.validated_data == {"age": 3}

    def test_raise_fault(self):
        with pytest.raises(ValidationFault) as exc_info:
            PersonInput(data={}).is_valid(raise_fault=True)
        assert exc_info.value.flat_errors() == [{"field": "name", "message": "This field is required."}]

    def test_non_mapping_input(self):
        assert errors_of(PersonInput, ["not", "a", "dict"]) == {"__all__": ["Expected a dictionary of items."]}

    def test_validated_data_requires_is_valid(self):
        with pytest.raises(RuntimeError):
            PersonInput(data={}).validated_data


class TestFieldRules:

    def test_decimal_exclusive_minimum(self):
        field = DecimalField(min_value=0, min_exclusive=True)
        assert field.run_validation("0.10") == Decimal("0.10")
        with pytest.raises(ValueError):
            field.run_validation(0)

    def test_decimal_keeps_float_digits(self):
        assert DecimalField().run_validation(0.1) == Decimal("0.1")

    def test_integer_rejects_bool_and_fraction(self):
        field = IntegerField()
        with pytest.raises(ValueError):
            field.run_validation(True)
        with pytest.raises(ValueError):
            field.run_validation(1.5)
        assert field.run_validation(2.0) == 2

    def test_boolean_strings(self):
        field = BooleanField()
        assert field.run_validation("true") is True
        assert field.run_validation("0") is False
        with pytest.raises(ValueError):
            field.run_validation("maybe")


# ═══════════════════════════════════════════════════════════════════════════
# Domain serializers
# ═══════════════════════════════════════════════════════════════════════════

class TestDomainSerializers:

    def test_order_custom_messages(self):
        errors = errors_of(OrderCreateSerializer, {"items": "nope"})
        assert errors["items"] == ["At least one item is required"]
        assert errors["paymentMethod"] == ["Invalid payment method"]
        assert errors["billingAddress"] == ["Billing address is required"]

    def test_order_shipping_address_optional(self):
        s = OrderCreateSerializer(data={
            "items": [{"design": "d1", "quantity": "2", "license": "commercial"}],
            "paymentMethod": "paypal",
            "billingAddress": {"name": "Ada", "email": "ada@example.com"},
            "shippingAddress": None,
        })
        assert s.is_valid(), s.errors
        assert s.validated_data["items"] == [{"design": "d1", "quantity": 2, "license": "commercial"}]
        assert s.validated_data["shippingAddress"] is None

    def test_refund_amount_is_decimal(self):
        s = RefundSerializer(data={"amount": "12.34", "reason": "Broken"})
        assert s.is_valid()
        assert s.validated_data["amount"] == Decimal("12.34")

    def test_review_rating_bounds(self):
        errors = errors_of(ReviewCreateSerializer, {
            "type": "overall", "rating": 6, "title": "Great", "comment": "Lovely work",
        })
        assert errors == {"rating": ["Rating must be between 1 and 5"]}

    def test_review_update_partial(self):
        s = ReviewUpdateSerializer(data={"comment": "Changed my mind"}, partial=True)
        assert s.is_valid()
        assert s.validated_data == {"comment": "Changed my mind"}

    def test_budget_cross_field_rule(self):
        errors = errors_of(BudgetSerializer, {"min": 500, "max": 100})
        assert errors == {"max": ["Maximum budget must not be below the minimum"]}

    def test_timeline_dates_stored_as_iso(self):
        s = TimelineSerializer(data={"startDate": "2025-03-01T00:00:00Z"})
        assert s.is_valid()
        assert s.validated_data == {"startDate": "2025-03-01T00:00:00+00:00", "urgency": "medium"}


# ═══════════════════════════════════════════════════════════════════════════
# Output
# ═══════════════════════════════════════════════════════════════════════════

class PersonOutput(Serializer):
    name = CharField()
    score = DecimalField()
    city = CharField(source="address.city")
    tags = ListField(child=CharField())


class TestRendering:

    def test_render_document(self):
        data = PersonOutput(instance={
            "name": "Ada",
            "score": "9.50",
            "address": {"city": "London"},
            "tags": ["a"],
        }).data
        assert data == {"name": "Ada", "score": 9.5, "city": "London", "tags": ["a"]}

    def test_missing_values_render_as_none(self):
        assert PersonOutput(instance={"name": "Ada"}).data["score"] is None

    def test_many(self):
        data = PersonOutput.many(instance=[{"name": "A"}, {"name": "B"}]).data
        assert [d["name"] for d in data] == ["A", "B"]
