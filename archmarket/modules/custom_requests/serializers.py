"""
Custom requests module serializers.
"""

from archmarket.faults import ValidationFault
from archmarket.serializers import (
    BooleanField,
    CharField,
    ChoiceField,
    DateTimeField,
    FloatField,
    JSONField,
    ListField,
    Serializer,
)

from ..designs.models import DesignStyle
from .models import Priority, ProjectType, RequestCategory, RequestStatus


class BudgetSerializer(Serializer):
    min = FloatField(
        min_value=0,
        error_messages={"required": "Minimum budget is required", "invalid": "Minimum budget must be a positive number"},
    )
    max = FloatField(
        min_value=0,
        error_messages={"required": "Maximum budget is required", "invalid": "Maximum budget must be a positive number"},
    )
    currency = CharField(max_length=3, required=False)

    def validate(self, attrs):
        if attrs["min"] > attrs["max"]:
            raise ValidationFault({"max": ["Maximum budget must not be below the minimum"]})
        return attrs


class TimelineSerializer(Serializer):
    startDate = DateTimeField(required=False)
    endDate = DateTimeField(required=False)
    urgency = ChoiceField(Priority.values, default=Priority.MEDIUM.value)

    def to_internal_value(self, data):
        attrs = super().to_internal_value(data)
        for key in ("startDate", "endDate"):
            if key in attrs:
                attrs[key] = attrs[key].isoformat()
        return attrs


class RequestSpecificationsSerializer(Serializer):
    style = ChoiceField(DesignStyle.values, required=False)
    materials = ListField(child=CharField(max_length=100), required=False)
    colors = ListField(child=CharField(max_length=100), required=False)
    features = ListField(child=CharField(max_length=200), required=False)
    requirements = ListField(child=CharField(max_length=500), required=False)


class ReferenceSerializer(Serializer):
    title = CharField(max_length=200, required=False, allow_blank=True)
    url = CharField(max_length=2000)
    description = CharField(max_length=500, required=False, allow_blank=True)


class CustomRequestCreateSerializer(Serializer):
    title = CharField(min_length=5, max_length=200)
    description = CharField(min_length=10, max_length=2000)
    category = ChoiceField(
        RequestCategory.values,
        error_messages={"required": "Invalid category", "invalid": "Invalid category"},
    )
    projectType = ChoiceField(
        ProjectType.values,
        error_messages={"required": "Invalid project type", "invalid": "Invalid project type"},
    )
    budget = BudgetSerializer()
    timeline = TimelineSerializer(required=False)
    specifications = RequestSpecificationsSerializer(required=False)
    references = ListField(child=ReferenceSerializer(), required=False)
    priority = ChoiceField(Priority.values, required=False)
    tags = ListField(child=CharField(max_length=50), required=False)
    notes = CharField(max_length=2000, required=False, allow_blank=True)


class CustomRequestUpdateSerializer(CustomRequestCreateSerializer):
    """Editable fields for owners and admins; used with ``partial=True``."""


class StatusSerializer(Serializer):
    status = ChoiceField(
        RequestStatus.values,
        error_messages={"required": "Invalid status", "invalid": "Invalid status"},
    )


class CommunicationSerializer(Serializer):
    message = CharField(
        max_length=5000,
        error_messages={"required": "Message is required", "invalid": "Message is required"},
    )
    isInternal = BooleanField(default=False)


class CustomRequestSerializer(Serializer):
    id = CharField()
    client = CharField()
    title = CharField()
    description = CharField()
    category = CharField()
    projectType = CharField()
    budget = JSONField()
    timeline = JSONField()
    specifications = JSONField()
    references = JSONField()
    status = CharField()
    priority = CharField()
    tags = ListField(child=CharField())
    notes = CharField()
    communications = JSONField()
    createdAt = DateTimeField()
    updatedAt = DateTimeField()


def render_request(document: dict, *, communications: list) -> dict:
    data = CustomRequestSerializer(instance=document).data
    data["communications"] = communications
    return data
