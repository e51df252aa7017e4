"""
Choice enums shared by every module.

Usage:
    class Status(TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"

    Status.values            # ["draft", "published"]
    ChoiceField(Status.values)
"""

from __future__ import annotations

from enum import Enum, EnumMeta
from typing import Any, List, Tuple


class _ChoicesMeta(EnumMeta):
    """Adds .choices / .values / .labels to Enum classes."""

    @property
    def choices(cls) -> List[Tuple[Any, str]]:
        return [(m.value, m.label) for m in cls]

    @property
    def values(cls) -> List[Any]:
        return [m.value for m in cls]

    @property
    def labels(cls) -> List[str]:
        return [m.label for m in cls]


class TextChoices(str, Enum, metaclass=_ChoicesMeta):
    """
    String-valued choices enum.

    Members are ``NAME = "value", "Label"`` or ``NAME = "value"`` (label
    derived from the name).
    """

    def __new__(cls, value: str, label: str | None = None):
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj._label = label
        return obj

    def __init__(self, value: str, label: str | None = None):
        self._label = label if label is not None else self.name.replace("_", " ").title()

    @property
    def label(self) -> str:
        return self._label

    def __str__(self) -> str:
        return str(self.value)
