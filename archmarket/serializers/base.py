"""
Serializer Core - Serializer and ListSerializer.

- ``Serializer``: Declarative field-based serializer with full validation
- ``ListSerializer``: Handles serialization of collections

Usage::

    class ReviewInputSerializer(Serializer):
        rating = IntegerField(min_value=1, max_value=5)
        title = CharField(max_length=100)
        comment = CharField(max_length=1000)

    # Deserialize (input validation)
    s = ReviewInputSerializer(data=payload)
    s.is_valid(raise_fault=True)
    attrs = s.validated_data

    # Serialize (output rendering)
    output = OrderSerializer(instance=order).data
"""

from __future__ import annotations

import copy
from typing import Any, ClassVar, Dict, Mapping, Sequence

from ..faults import ValidationFault
from .fields import SerializerField, empty


class SerializerMeta(type):
    """
    Metaclass for Serializer classes.

    Collects declared ``SerializerField`` instances from the class body
    and parent classes into ``_declared_fields``.
    """

    def __new__(mcs, name: str, bases: tuple, namespace: dict, **kwargs: Any):
        declared: list[tuple[str, SerializerField]] = []
        for key, value in list(namespace.items()):
            if isinstance(value, SerializerField):
                declared.append((key, value))
                namespace.pop(key)

        declared.sort(key=lambda pair: pair[1]._order)

        parent_fields: dict[str, SerializerField] = {}
        for base in reversed(bases):
            if hasattr(base, "_declared_fields"):
                parent_fields.update(base._declared_fields)

        all_fields = dict(parent_fields)
        for field_name, field_obj in declared:
            all_fields[field_name] = field_obj
        namespace["_declared_fields"] = all_fields

        return super().__new__(mcs, name, bases, namespace, **kwargs)


class Serializer(SerializerField, metaclass=SerializerMeta):
    """
    Base serializer with declarative field-based validation.

    Modes:
        - **Serialization** (output): Pass ``instance=obj``, read ``.data``
        - **Deserialization** (input): Pass ``data=dict``, call ``.is_valid()``,
          then read ``.validated_data``

    Options:
        - ``partial=True``: Allow partial updates (missing fields OK)
        - ``context=dict``: Extra context (e.g. identity) available to hooks

    Keys not declared on the serializer are dropped from ``validated_data``.
    """

    _declared_fields: ClassVar[Dict[str, SerializerField]]

    def __init__(
        self,
        instance: Any = None,
        data: Any = empty,
        *,
        partial: bool = False,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)

        self.instance = instance
        self.initial_data = data
        self.partial = partial
        self.context = context or {}
        self._validated_data: Any = empty
        self._errors: Dict[str, Any] = {}
        self._data: Any = None

        self.fields: Dict[str, SerializerField] = {}
        for name, declared in self._declared_fields.items():
            field = copy.copy(declared)
            field.error_messages = dict(declared.error_messages)
            field.bind(name, self)
            self.fields[name] = field

    @classmethod
    async def from_request_async(
        cls,
        request: Any,
        *,
        partial: bool = False,
        context: dict[str, Any] | None = None,
    ) -> "Serializer":
        """
        Build a serializer from the JSON body of *request*.

        Usage::

            @POST("/")
            async def create(self, ctx):
                s = await ReviewInputSerializer.from_request_async(ctx.request)
                s.is_valid(raise_fault=True)

        Malformed bodies raise ``InvalidJSON`` before validation runs.
        """
        data = await request.json()
        return cls(data=data, partial=partial, context=context)

    @classmethod
    def many(cls, instance: Any = None, **kwargs: Any) -> "ListSerializer":
        """
        Shortcut for creating a ListSerializer wrapping this serializer.

        Usage::

            output = OrderSerializer.many(instance=orders).data
        """
        return ListSerializer(child=cls(), instance=instance, **kwargs)

    # ── Serialization (output) ───────────────────────────────────────────

    @property
    def data(self) -> Any:
        if self._data is not None:
            return self._data
        if self.instance is not None:
            self._data = self.to_representation(self.instance)
        elif self._validated_data is not empty:
            self._data = self._validated_data
        else:
            self._data = {}
        return self._data

    def to_representation(self, instance: Any) -> dict:
        rendered: dict[str, Any] = {}
        for name, field in self.fields.items():
            value = field.get_attribute(instance)
            rendered[name] = None if value is None else field.to_representation(value)
        return rendered

    # ── Deserialization (input) ──────────────────────────────────────────

    def is_valid(self, *, raise_fault: bool = False) -> bool:
        """
        Validate the input data.

        After calling, ``.validated_data`` or ``.errors`` are populated.

        Args:
            raise_fault: If True, raise ``ValidationFault`` on errors.
        """
        if self.initial_data is empty:
            raise RuntimeError("Cannot call is_valid() without passing `data=` to the serializer.")

        self._errors = {}
        try:
            self._validated_data = self.run_validation(self.initial_data)
        except ValidationFault as exc:
            self._errors = exc.errors
            self._validated_data = empty
        except ValueError as exc:
            self._errors = {"__all__": [str(exc)]}
            self._validated_data = empty

        if self._errors and raise_fault:
            raise ValidationFault(self._errors)
        return not self._errors

    @property
    def validated_data(self) -> Dict[str, Any]:
        if self._validated_data is empty:
            raise RuntimeError("You must call `.is_valid()` before accessing `.validated_data`.")
        return self._validated_data

    @property
    def errors(self) -> Dict[str, Any]:
        return self._errors

    def to_internal_value(self, data: Any) -> Dict[str, Any]:
        """
        Validate every declared field and collect all failures.

        Also runs when this serializer is nested inside another one.
        """
        if not isinstance(data, Mapping):
            raise ValueError("Expected a dictionary of items.")

        result: Dict[str, Any] = {}
        errors: Dict[str, Any] = {}

        for field_name, field in self.fields.items():
            raw = data.get(field_name, empty)

            if raw is empty:
                if self.partial:
                    continue
                if field.required:
                    errors[field_name] = [field.error_messages["required"]]
                    continue
                raw = field.get_default()
                if raw is empty:
                    continue

            if raw is None:
                if not field.allow_null:
                    errors[field_name] = [field.error_messages["null"]]
                    continue
                result[field_name] = None
                continue

            try:
                result[field_name] = field.run_validation(raw)
            except ValidationFault as exc:
                errors[field_name] = exc.errors
            except (ValueError, TypeError) as exc:
                message = field.error_messages["invalid"] if field.custom_invalid else str(exc)
                errors[field_name] = [message]

        if errors:
            raise ValidationFault(errors)
        return result

    def run_validation(self, data: Any) -> Dict[str, Any]:
        """Fields first, then the object-level ``validate`` hook."""
        value = self.to_internal_value(data)
        try:
            return self.validate(value)
        except (ValueError, TypeError) as exc:
            raise ValidationFault({"__all__": [str(exc)]})

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Object-level validation hook.

        Override to add cross-field validation; raise ``ValueError`` or a
        field-keyed ``ValidationFault``.
        """
        return attrs

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(fields={list(self.fields)})>"


class ListSerializer(SerializerField):
    """
    Handles serialization of lists of objects.

    Wraps a child ``Serializer`` and applies it to each item.
    """

    def __init__(self, *, child: Serializer, instance: Any = None, **kwargs: Any):
        self.child = child
        super().__init__(**kwargs)
        self.instance = instance
        self._data: Any = None

    @property
    def data(self) -> list:
        if self._data is None:
            self._data = self.to_representation(self.instance or [])
        return self._data

    def to_representation(self, instances: Sequence) -> list:
        return [self.child.to_representation(item) for item in instances]
