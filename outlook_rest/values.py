"""Typed property values and their Graph JSON form.

Each ``ValueKind`` accepts a fixed set of Python types; the property bag
checks writes against it. ``to_wire``/``from_wire`` convert between those
types and the JSON the service sends and receives.

ObjectCollection elements are property bags of the element schema. Each
keeps its own change tracking; the whole list is sent when the owning
property is written.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .errors import InvalidArgumentError
from .schema import PropertyDefinition, ValueKind


@dataclass(frozen=True)
class Recipient:
    """An email participant (``emailAddress`` in Graph)."""

    address: Optional[str] = None
    name: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        email: Dict[str, Any] = {}
        if self.name is not None:
            email["name"] = self.name
        if self.address is not None:
            email["address"] = self.address
        return {"emailAddress": email}

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> "Recipient":
        email = (data or {}).get("emailAddress") or {}
        return cls(address=email.get("address"), name=email.get("name"))


@dataclass(frozen=True)
class ItemBody:
    """Message or event body."""

    content: str = ""
    content_type: str = "text"  # text|html

    def to_wire(self) -> Dict[str, Any]:
        return {"contentType": self.content_type, "content": self.content}

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> "ItemBody":
        data = data or {}
        return cls(content=data.get("content") or "", content_type=data.get("contentType") or "text")


_ACCEPTS: Dict[ValueKind, Tuple[type, ...]] = {
    ValueKind.STRING: (str,),
    ValueKind.NUMBER: (int, float),
    ValueKind.BOOLEAN: (bool,),
    ValueKind.DATETIME: (_dt.datetime, _dt.date, str, dict),
    ValueKind.BODY: (ItemBody,),
    ValueKind.RECIPIENT: (Recipient,),
    ValueKind.RECIPIENT_COLLECTION: (list, tuple),
    ValueKind.STRING_COLLECTION: (list, tuple),
    ValueKind.OBJECT_COLLECTION: (list, tuple),
    ValueKind.COMPLEX: (dict, list),
}

_MEMBER_TYPES: Dict[ValueKind, type] = {
    ValueKind.RECIPIENT_COLLECTION: Recipient,
    ValueKind.STRING_COLLECTION: str,
}


def _is_element(prop: PropertyDefinition, value: Any) -> bool:
    from .property_bag import PropertyBag

    return isinstance(value, PropertyBag) and value.type_name == prop.element_type


def check_value(prop: PropertyDefinition, value: Any) -> None:
    """Raise InvalidArgumentError unless ``value`` fits the property's kind.

    ``None`` always fits: it clears the property on the server.
    """
    if value is None:
        return
    kind = prop.value_kind
    ok = isinstance(value, _ACCEPTS[kind])
    # bool is an int subclass; keep the two kinds apart
    if kind is ValueKind.NUMBER and isinstance(value, bool):
        ok = False
    if ok and kind in _MEMBER_TYPES:
        ok = all(isinstance(v, _MEMBER_TYPES[kind]) for v in value)
    if ok and kind is ValueKind.OBJECT_COLLECTION:
        ok = all(_is_element(prop, v) for v in value)
    if not ok:
        raise InvalidArgumentError(
            f"Property '{prop.name}' expects {kind.value}, got {type(value).__name__}."
        )


def to_wire(prop: PropertyDefinition, value: Any) -> Any:
    if value is None:
        return None
    kind = prop.value_kind
    if kind is ValueKind.DATETIME and isinstance(value, (_dt.datetime, _dt.date)):
        return value.isoformat()
    if kind in (ValueKind.BODY, ValueKind.RECIPIENT):
        return value.to_wire()
    if kind is ValueKind.RECIPIENT_COLLECTION:
        return [r.to_wire() for r in value]
    if kind is ValueKind.STRING_COLLECTION:
        return list(value)
    if kind is ValueKind.OBJECT_COLLECTION:
        return [bag.to_wire() for bag in value]
    return value


def _parse_datetime(raw: str) -> Any:
    text = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return _dt.datetime.fromisoformat(text)
    except ValueError:
        # 7-digit fractions and other Graph variants stay as text
        return raw


def from_wire(prop: PropertyDefinition, raw: Any) -> Any:
    if raw is None:
        return None
    kind = prop.value_kind
    if kind is ValueKind.BODY and isinstance(raw, dict):
        return ItemBody.from_wire(raw)
    if kind is ValueKind.RECIPIENT and isinstance(raw, dict):
        return Recipient.from_wire(raw)
    if kind is ValueKind.RECIPIENT_COLLECTION and isinstance(raw, list):
        return [Recipient.from_wire(r) for r in raw]
    if kind is ValueKind.DATETIME and isinstance(raw, str):
        return _parse_datetime(raw)
    if kind is ValueKind.OBJECT_COLLECTION and isinstance(raw, list):
        from .catalog import REGISTRY
        from .property_bag import PropertyBag

        schema = REGISTRY.get(prop.element_type)
        return [PropertyBag.from_wire(schema, item) for item in raw]
    return raw
