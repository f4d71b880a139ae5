"""OData ``$filter`` expressions.

Leaf filters compare one property with one literal; a SearchFilterCollection
joins two or more filters with ``and``/``or``. Every filter compiles to a
``$filter=...`` query string, recomputed on each read::

    unread = IsEqualTo(MessageSchema.IsRead, False)
    recent = IsGreaterThan(MessageSchema.ReceivedDateTime, datetime(2024, 1, 1))
    (unread & recent).query
    # '$filter=IsRead eq false and ReceivedDateTime gt 2024-01-01T00:00:00'
"""

from __future__ import annotations

import datetime as _dt
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Tuple

from .errors import InvalidArgumentError
from .schema import PropertyDefinition, ValueKind
from .values import Recipient

FILTER_PREFIX = "$filter="

_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Kinds whose string literals are emitted as-is (numbers, booleans, dates).
_UNQUOTED_KINDS = frozenset({ValueKind.NUMBER, ValueKind.BOOLEAN, ValueKind.DATETIME})


class FilterOperator(str, Enum):
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"
    AND = "and"
    OR = "or"

    @property
    def is_boolean(self) -> bool:
        return self in (FilterOperator.AND, FilterOperator.OR)


def _quote(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def _format_datetime(value: _dt.date) -> str:
    if not isinstance(value, _dt.datetime):
        value = _dt.datetime.combine(value, _dt.time())
    if value.tzinfo is not None:
        value = value.astimezone(_dt.timezone.utc).replace(tzinfo=None)
    return value.strftime(_DATETIME_FORMAT)


def format_value(prop: PropertyDefinition, value: Any) -> str:
    """Render a literal for the right-hand side of a comparison.

    Quoting follows the property's declared kind, not the literal's type:
    a string compared with a Boolean or DateTime property stays unquoted.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (_dt.datetime, _dt.date)):
        return _format_datetime(value)
    if isinstance(value, Recipient):
        value = value.address or value.name or ""
    if isinstance(value, str) and prop.value_kind in _UNQUOTED_KINDS:
        return value
    return _quote(str(value))


class SearchFilter(ABC):
    """Base of all filter expressions."""

    filter_operator: FilterOperator

    @abstractmethod
    def render(self) -> str:
        """Compiled expression without the ``$filter=`` prefix."""

    @property
    def query(self) -> str:
        return FILTER_PREFIX + self.render()

    def _combine(self, operator: FilterOperator, other: "SearchFilter") -> "SearchFilterCollection":
        if isinstance(self, SearchFilterCollection) and self.filter_operator is operator:
            return SearchFilterCollection(operator, *self.children, other)
        return SearchFilterCollection(operator, self, other)

    def __and__(self, other: "SearchFilter") -> "SearchFilterCollection":
        return self._combine(FilterOperator.AND, other)

    def __or__(self, other: "SearchFilter") -> "SearchFilterCollection":
        return self._combine(FilterOperator.OR, other)

    def __str__(self) -> str:
        return self.query


class PropertyFilter(SearchFilter):
    """Comparison of one property with one literal."""

    filter_operator: ClassVar[FilterOperator]

    def __init__(self, property_definition: PropertyDefinition, value: Any) -> None:
        if property_definition is None:
            raise InvalidArgumentError("'property_definition' cannot be None.")
        if not isinstance(property_definition, PropertyDefinition):
            raise InvalidArgumentError(
                f"Expected a PropertyDefinition, got {type(property_definition).__name__}."
            )
        if property_definition.is_relational and property_definition.is_collection:
            raise InvalidArgumentError(
                f"Filtering on recipient collection '{property_definition.name}' is not supported."
            )
        if property_definition.value_kind is ValueKind.OBJECT_COLLECTION:
            raise InvalidArgumentError(
                f"Filtering on object collection '{property_definition.name}' is not supported."
            )
        self._property = property_definition
        self._value = value

    @property
    def property_definition(self) -> PropertyDefinition:
        return self._property

    @property
    def value(self) -> Any:
        return self._value

    def _path(self) -> str:
        name = self._property.name
        if self.filter_operator is FilterOperator.EQ and self._property.is_relational:
            literal = format_value(self._property, self._value)
            leaf = "Address" if "@" in literal else "Name"
            return f"{name}/EmailAddress/{leaf}"
        return name

    def render(self) -> str:
        return (
            f"{self._path()} {self.filter_operator.value} "
            f"{format_value(self._property, self._value)}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._property.name!r}, {self._value!r})"


class IsEqualTo(PropertyFilter):
    filter_operator = FilterOperator.EQ


class NotEqualTo(PropertyFilter):
    filter_operator = FilterOperator.NE


class IsGreaterThan(PropertyFilter):
    filter_operator = FilterOperator.GT


class IsGreaterThanOrEqualTo(PropertyFilter):
    filter_operator = FilterOperator.GE


class IsLessThan(PropertyFilter):
    filter_operator = FilterOperator.LT


class IsLessThanOrEqualTo(PropertyFilter):
    filter_operator = FilterOperator.LE


class SearchFilterCollection(SearchFilter):
    """Two or more filters joined with ``and`` or ``or``, in the given order.

    Nested collections are parenthesised.
    """

    MIN_CHILDREN = 2

    def __init__(self, filter_operator: FilterOperator, *children: SearchFilter) -> None:
        try:
            operator = FilterOperator(filter_operator)
        except ValueError as exc:
            raise InvalidArgumentError(f"Unknown filter operator '{filter_operator}'.") from exc
        if not operator.is_boolean:
            raise InvalidArgumentError(
                f"Filter collections combine with 'and' or 'or', not '{operator.value}'."
            )
        if len(children) == 1 and isinstance(children[0], (list, tuple)):
            children = tuple(children[0])
        if len(children) < self.MIN_CHILDREN:
            raise InvalidArgumentError(
                f"A filter collection needs at least {self.MIN_CHILDREN} filters, got {len(children)}."
            )
        for child in children:
            if not isinstance(child, SearchFilter):
                raise InvalidArgumentError(
                    f"Filter collection children must be filters, got {type(child).__name__}."
                )
        self.filter_operator = operator
        self._children: Tuple[SearchFilter, ...] = tuple(children)

    @property
    def children(self) -> Tuple[SearchFilter, ...]:
        return self._children

    def render(self) -> str:
        parts = []
        for child in self._children:
            text = child.render()
            if isinstance(child, SearchFilterCollection):
                text = f"({text})"
            parts.append(text)
        return f" {self.filter_operator.value} ".join(parts)

    def __repr__(self) -> str:
        return f"SearchFilterCollection({self.filter_operator.value!r}, {list(self._children)!r})"
