"""Schema-bound, change-tracking value store backing one entity.

The bag keeps the property values of one entity plus the dirty set: the
properties written since the bag was built, marked new, or reset. Writes
always dirty the property, even when the value is unchanged. Successful
create/update/rebind operations replace the whole bag; delete clears it.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .catalog import REGISTRY
from .errors import InvalidArgumentError
from .schema import ObjectSchema, PropertyDefinition, PropertyKey, SchemaRegistry
from .values import check_value, from_wire, to_wire


class PropertyBag:
    """Property values of one entity with their dirty set.

    Invariants:
        - every dirty property has a stored value (possibly ``None``);
        - the dirty set iterates in first-write order;
        - the bag is either new (never persisted) or bound, never both.
    """

    def __init__(self, schema: ObjectSchema) -> None:
        if schema is None:
            raise InvalidArgumentError("A property bag requires a schema.")
        self._schema = schema
        self._values: Dict[PropertyDefinition, Any] = {}
        # dict as an insertion-ordered set
        self._dirty: Dict[PropertyDefinition, None] = {}
        self._is_new = False

    @classmethod
    def for_type(cls, type_name: str, registry: Optional[SchemaRegistry] = None) -> "PropertyBag":
        """Build an empty bag for a registered type; SchemaNotFoundError otherwise."""
        return cls((registry or REGISTRY).get(type_name))

    @classmethod
    def from_wire(cls, schema: ObjectSchema, payload: Mapping[str, Any]) -> "PropertyBag":
        """Build a bound, clean bag from a Graph JSON object.

        Members the schema does not know (``@odata.etag`` and friends) are
        ignored.
        """
        bag = cls(schema)
        for key, raw in (payload or {}).items():
            prop = schema.from_wire_name(key)
            if prop is not None:
                bag._values[prop] = from_wire(prop, raw)
        return bag

    # -------------------- State --------------------
    @property
    def schema(self) -> ObjectSchema:
        return self._schema

    @property
    def type_name(self) -> str:
        return self._schema.type_name

    @property
    def is_new(self) -> bool:
        return self._is_new

    @property
    def is_dirty(self) -> bool:
        return bool(self._dirty)

    def mark_as_new(self) -> None:
        """Flag the bag as not yet persisted and forget prior writes.

        Only the entity create path calls this, once, right after building
        the bag.
        """
        self._is_new = True
        self._dirty.clear()

    # -------------------- Values --------------------
    def get(self, key: PropertyKey) -> Any:
        """Return the stored value, or None when absent."""
        return self._values.get(self._schema.resolve(key))

    def set(self, key: PropertyKey, value: Any) -> None:
        prop = self._schema.resolve(key)
        check_value(prop, value)
        self._values[prop] = value
        self._dirty[prop] = None

    def has(self, key: PropertyKey) -> bool:
        return self._schema.resolve(key) in self._values

    def __getitem__(self, key: PropertyKey) -> Any:
        return self.get(key)

    def __setitem__(self, key: PropertyKey, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (PropertyDefinition, str)) or key not in self._schema:
            return False
        return self.has(key)

    def __len__(self) -> int:
        return len(self._values)

    # -------------------- Change tracking --------------------
    def changed_properties(self) -> List[PropertyDefinition]:
        return list(self._dirty)

    def changed_property_names(self) -> List[str]:
        return [p.name for p in self._dirty]

    def reset_change_tracking(self) -> None:
        """Forget the dirty set but keep the values."""
        self._dirty.clear()

    def clear(self) -> None:
        """Drop all values and the dirty set. The bag stays usable."""
        self._values.clear()
        self._dirty.clear()

    def changes_to_wire(self) -> Dict[str, Any]:
        """JSON body holding only the dirty properties, in dirty order."""
        return {p.wire_name: to_wire(p, self._values.get(p)) for p in self._dirty}

    def to_wire(self) -> Dict[str, Any]:
        """JSON object of every stored value, in schema order."""
        return {p.wire_name: to_wire(p, self._values[p]) for p in self._schema if p in self._values}

    def __repr__(self) -> str:
        state = "new" if self._is_new else "bound"
        return (
            f"PropertyBag({self.type_name!r}, {state}, "
            f"values={len(self._values)}, dirty={self.changed_property_names()})"
        )


# -------------------- Extended properties --------------------

def single_value_extended_property(property_id: str, value: Optional[str]) -> PropertyBag:
    """Build a ``SingleValueLegacyExtendedProperty`` record.

    ``property_id`` is the MAPI name, e.g. ``"String {guid} Name Color"``.
    """
    bag = PropertyBag.for_type("SingleValueLegacyExtendedProperty")
    bag.set("Id", property_id)
    bag.set("Value", value)
    return bag


def multi_value_extended_property(property_id: str, values: List[str]) -> PropertyBag:
    bag = PropertyBag.for_type("MultiValueLegacyExtendedProperty")
    bag.set("Id", property_id)
    bag.set("Value", list(values))
    return bag
