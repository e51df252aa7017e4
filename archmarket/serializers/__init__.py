"""
Serializers - declarative input validation and output rendering.

Errors are collected per field and raised together as a
``ValidationFault``, which the fault engine renders as
``{"errors": [{"field": ..., "message": ...}]}``.
"""

from .base import ListSerializer, Serializer, SerializerMeta
from .fields import (
    BooleanField,
    CharField,
    ChoiceField,
    DateTimeField,
    DecimalField,
    EmailField,
    FloatField,
    IntegerField,
    JSONField,
    ListField,
    SerializerField,
    empty,
)

__all__ = [
    "Serializer",
    "SerializerMeta",
    "ListSerializer",
    "SerializerField",
    "empty",
    "BooleanField",
    "CharField",
    "ChoiceField",
    "DateTimeField",
    "DecimalField",
    "EmailField",
    "FloatField",
    "IntegerField",
    "JSONField",
    "ListField",
]
