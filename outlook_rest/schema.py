"""Schema types: property definitions, object schemas and the registry.

A schema is the ordered, immutable set of property definitions of one entity
type. Schemas are shared read-only by every instance of that type; the
registry maps a type identifier to its schema and is frozen once populated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .errors import InvalidArgumentError, SchemaNotFoundError, UnknownPropertyError


class ValueKind(str, Enum):
    """Declared value type of a property."""
    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    DATETIME = "DateTime"
    BODY = "Body"
    RECIPIENT = "Recipient"
    RECIPIENT_COLLECTION = "RecipientCollection"
    STRING_COLLECTION = "StringCollection"
    OBJECT_COLLECTION = "ObjectCollection"
    COMPLEX = "Complex"


RELATIONAL_KINDS = frozenset({ValueKind.RECIPIENT, ValueKind.RECIPIENT_COLLECTION})
COLLECTION_KINDS = frozenset(
    {ValueKind.RECIPIENT_COLLECTION, ValueKind.STRING_COLLECTION, ValueKind.OBJECT_COLLECTION}
)


@dataclass(frozen=True)
class PropertyDefinition:
    """One named, typed property of an entity schema.

    ``element_type`` names the schema of the elements of an ObjectCollection
    property; each element is a property bag of that schema.
    """

    name: str
    value_kind: ValueKind = ValueKind.STRING
    is_relational: bool = False
    element_type: Optional[str] = None

    @property
    def wire_name(self) -> str:
        """JSON member name used by Graph (lowerCamel)."""
        return self.name[:1].lower() + self.name[1:]

    @property
    def is_collection(self) -> bool:
        return self.value_kind in COLLECTION_KINDS

    def __str__(self) -> str:
        return self.name


PropertyKey = Union[PropertyDefinition, str]


class ObjectSchema:
    """Ordered set of property definitions for one entity type.

    Definitions are reachable by name as attributes, so ``schema.IsRead`` is
    the ``IsRead`` definition.
    """

    def __init__(self, type_name: str, properties: Iterable[PropertyDefinition]) -> None:
        if not type_name:
            raise InvalidArgumentError("Schema type name cannot be empty.")
        ordered: List[PropertyDefinition] = []
        by_name: Dict[str, PropertyDefinition] = {}
        for prop in properties:
            if prop.name in by_name:
                raise InvalidArgumentError(
                    f"Duplicate property '{prop.name}' in schema '{type_name}'."
                )
            by_name[prop.name] = prop
            ordered.append(prop)
        self._type_name = type_name
        self._properties: Tuple[PropertyDefinition, ...] = tuple(ordered)
        self._by_name = by_name
        self._by_wire = {p.wire_name.lower(): p for p in ordered}

    @property
    def type_name(self) -> str:
        return self._type_name

    @property
    def properties(self) -> Tuple[PropertyDefinition, ...]:
        return self._properties

    def __iter__(self) -> Iterator[PropertyDefinition]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, PropertyDefinition):
            return self._by_name.get(key.name) == key
        if isinstance(key, str):
            return key in self._by_name
        return False

    def __getattr__(self, name: str) -> PropertyDefinition:
        # Only reached for names that are not regular attributes.
        if name.startswith("_"):
            raise AttributeError(name)
        prop = self.__dict__.get("_by_name", {}).get(name)
        if prop is None:
            raise AttributeError(f"'{self._type_name}' schema has no property '{name}'")
        return prop

    def find(self, name: str) -> Optional[PropertyDefinition]:
        return self._by_name.get(name)

    def resolve(self, key: PropertyKey) -> PropertyDefinition:
        """Return the schema's definition for ``key`` or raise UnknownPropertyError."""
        name = key.name if isinstance(key, PropertyDefinition) else key
        if key not in self:
            raise UnknownPropertyError(str(name), self._type_name)
        return self._by_name[name]

    def from_wire_name(self, wire_name: str) -> Optional[PropertyDefinition]:
        """Case-insensitive lookup by JSON member name; None for unknown members."""
        return self._by_wire.get((wire_name or "").lower())

    def __repr__(self) -> str:
        return f"ObjectSchema({self._type_name!r}, {len(self._properties)} properties)"


class SchemaRegistry:
    """Type identifier -> ObjectSchema, populated once then frozen."""

    def __init__(self) -> None:
        self._schemas: Dict[str, ObjectSchema] = {}
        self._frozen = False

    def register(self, schema: ObjectSchema) -> ObjectSchema:
        if self._frozen:
            raise InvalidArgumentError(
                f"Cannot register '{schema.type_name}': schema registry is frozen."
            )
        if schema.type_name in self._schemas:
            raise InvalidArgumentError(f"Schema '{schema.type_name}' is already registered.")
        self._schemas[schema.type_name] = schema
        return schema

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, type_name: str) -> ObjectSchema:
        schema = self._schemas.get(type_name)
        if schema is None:
            raise SchemaNotFoundError(str(type_name))
        return schema

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._schemas

    def types(self) -> List[str]:
        return list(self._schemas)
