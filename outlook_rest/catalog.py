"""Static entity catalog: schemas and per-kind capability descriptors.

The catalog is read once from ``schemas.yaml`` when the package is imported;
the resulting registry is frozen and only ever read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigError, SchemaNotFoundError
from .ids import IdKind
from .schema import RELATIONAL_KINDS, ObjectSchema, PropertyDefinition, SchemaRegistry, ValueKind

CATALOG_PATH = Path(__file__).with_name("schemas.yaml")


@dataclass(frozen=True)
class EntityKind:
    """What an entity type can do, attached as data rather than subclassing.

    ``first_class_properties`` lists what a default listing of the type
    returns. It is descriptor data for callers; requests never derive a
    ``$select`` from it.

    A kind without ``id_kind`` (Post) is read-only: entities are only ever
    materialised from server payloads. A ``directory`` kind (User, Group)
    is addressed from the Graph root rather than below a mailbox, and its
    entities name a mailbox under ``mailbox_segment``.
    """

    type_name: str
    id_kind: Optional[IdKind] = None
    collection_path: Optional[str] = None
    create_path: Optional[str] = None
    root_create_path: Optional[str] = None
    first_class_properties: Tuple[str, ...] = ()
    required_on_save: Tuple[str, ...] = ()
    directory: bool = False
    mailbox_segment: Optional[str] = None

    @property
    def addressable(self) -> bool:
        return self.id_kind is not None and self.collection_path is not None

    @property
    def creatable(self) -> bool:
        return self.addressable and (self.create_path is not None or self.root_create_path is not None)

    @property
    def requires_parent(self) -> bool:
        return self.create_path is not None and self.root_create_path is None

    def creation_path(self, parent_id: Optional[str]) -> str:
        """Collection to POST a new entity to, relative to the mailbox."""
        if parent_id and self.create_path:
            return self.create_path.format(parent=parent_id)
        return self.root_create_path or ""


def _require_yaml():
    try:
        import yaml  # type: ignore

        return yaml
    except Exception as exc:  # pragma: no cover - runtime guard
        raise RuntimeError("PyYAML not installed. Run: pip install pyyaml") from exc


def _definition(name: str, raw: Any) -> PropertyDefinition:
    # Either "Kind" or {kind: ObjectCollection, element: TypeName}
    element = None
    if isinstance(raw, dict):
        kind_name, element = raw.get("kind"), raw.get("element")
    else:
        kind_name = raw
    try:
        kind = ValueKind(kind_name)
    except ValueError as exc:
        raise ConfigError(f"Unknown value kind '{kind_name}' for property '{name}'.") from exc
    if (kind is ValueKind.OBJECT_COLLECTION) != bool(element):
        raise ConfigError(
            f"Property '{name}': an element type goes with ObjectCollection and only with it."
        )
    return PropertyDefinition(
        name=name,
        value_kind=kind,
        is_relational=kind in RELATIONAL_KINDS,
        element_type=element,
    )


def load_catalog(path: Path = CATALOG_PATH) -> Tuple[SchemaRegistry, Dict[str, EntityKind]]:
    """Parse a catalog file into a frozen registry and a kind table.

    Entries flagged ``value_type`` get a schema but no entity kind.
    """
    yaml = _require_yaml()
    data: Dict[str, Any] = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    registry = SchemaRegistry()
    kinds: Dict[str, EntityKind] = {}
    for type_name, entry in data.items():
        props = [_definition(n, k) for n, k in (entry.get("properties") or {}).items()]
        registry.register(ObjectSchema(type_name, props))
        if entry.get("value_type"):
            continue
        id_kind = entry.get("id_kind")
        kinds[type_name] = EntityKind(
            type_name=type_name,
            id_kind=IdKind(id_kind) if id_kind else None,
            collection_path=entry.get("collection_path"),
            create_path=entry.get("create_path"),
            root_create_path=entry.get("root_create_path"),
            first_class_properties=tuple(entry.get("first_class") or ()),
            required_on_save=tuple(entry.get("required_on_save") or ()),
            directory=bool(entry.get("directory")),
            mailbox_segment=entry.get("mailbox_segment"),
        )
    for type_name in registry.types():
        for prop in registry.get(type_name):
            if prop.element_type and prop.element_type not in registry:
                raise ConfigError(
                    f"Property '{type_name}.{prop.name}' uses unknown element type '{prop.element_type}'."
                )
    registry.freeze()
    return registry, kinds


REGISTRY, KINDS = load_catalog()


def kind_of(type_name: str) -> EntityKind:
    kind = KINDS.get(type_name)
    if kind is None:
        raise SchemaNotFoundError(str(type_name))
    return kind


MessageSchema = REGISTRY.get("Message")
MailFolderSchema = REGISTRY.get("MailFolder")
MessageRuleSchema = REGISTRY.get("MessageRule")
EventSchema = REGISTRY.get("Event")
CalendarSchema = REGISTRY.get("Calendar")
ContactSchema = REGISTRY.get("Contact")
InferenceClassificationOverrideSchema = REGISTRY.get("InferenceClassificationOverride")
TaskSchema = REGISTRY.get("Task")
PostSchema = REGISTRY.get("Post")
UserSchema = REGISTRY.get("User")
GroupSchema = REGISTRY.get("Group")
SingleValueLegacyExtendedPropertySchema = REGISTRY.get("SingleValueLegacyExtendedProperty")
MultiValueLegacyExtendedPropertySchema = REGISTRY.get("MultiValueLegacyExtendedProperty")
