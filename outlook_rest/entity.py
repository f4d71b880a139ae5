"""Entities and their lifecycle.

An entity is one property bag plus a lifecycle state::

    NEW --save()--> BOUND --update()--> BOUND
                    BOUND --delete()--> CLEARED

The entity only checks that an operation is legal and swaps or clears its
bag afterwards; the service does the network work. Checks run before any
request, and a failed check leaves the bag and state untouched.

Each mutation is one blocking call. Async callers run it in a worker, e.g.
``await asyncio.to_thread(message.save, WellKnownFolderName.DRAFTS)``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Union

from .catalog import REGISTRY, EntityKind, kind_of
from .errors import (
    InvalidArgumentError,
    InvalidLifecycleError,
    NoChangesError,
    require,
    require_non_empty,
)
from .ids import EntityId, FolderId, MailboxId, WellKnownFolderName, make_id
from .property_bag import PropertyBag
from .schema import ObjectSchema, PropertyDefinition, PropertyKey

if TYPE_CHECKING:
    from .service import OutlookService

LOG = logging.getLogger(__name__)

ParentFolder = Union[FolderId, WellKnownFolderName, None]


class EntityState(str, Enum):
    NEW = "new"
    BOUND = "bound"
    CLEARED = "cleared"


class Entity:
    """A mailbox object (message, folder, rule, event, ...) backed by a PropertyBag.

    ``Entity(type_name)`` builds an empty bound entity, the shape the service
    fills from server data. Callers creating a new object use
    ``Entity.create(type_name, service)``.
    """

    def __init__(
        self,
        type_name: str,
        service: Optional["OutlookService"] = None,
        mailbox_id: Optional[MailboxId] = None,
    ) -> None:
        # Both lookups raise SchemaNotFoundError for unknown types.
        self._kind: EntityKind = kind_of(type_name)
        self._bag = PropertyBag(REGISTRY.get(type_name))
        self._cleared = False
        self.service = service
        self.mailbox_id = mailbox_id

    @classmethod
    def create(
        cls,
        type_name: str,
        service: Optional["OutlookService"] = None,
        mailbox_id: Optional[MailboxId] = None,
        **values: Any,
    ) -> "Entity":
        """Build a new, unsaved entity; keyword arguments become dirty properties."""
        entity = cls(type_name, service=service, mailbox_id=mailbox_id)
        entity._bag.mark_as_new()
        for name, value in values.items():
            entity.set(name, value)
        return entity

    @classmethod
    def from_wire(
        cls,
        type_name: str,
        payload: Mapping[str, Any],
        service: Optional["OutlookService"] = None,
        mailbox_id: Optional[MailboxId] = None,
    ) -> "Entity":
        """Materialise a bound entity from a Graph JSON object."""
        entity = cls(type_name, service=service, mailbox_id=mailbox_id)
        entity._bag = PropertyBag.from_wire(entity.schema, payload)
        return entity

    @classmethod
    def bind(cls, service: "OutlookService", type_name: str, entity_id: Union[EntityId, str]) -> "Entity":
        """Fetch an existing entity from the server."""
        require(service, "service")
        require(entity_id, "entity_id")
        return service.get(type_name, entity_id)

    # -------------------- Introspection --------------------
    @property
    def type_name(self) -> str:
        return self._kind.type_name

    @property
    def kind(self) -> EntityKind:
        return self._kind

    @property
    def schema(self) -> ObjectSchema:
        return self._bag.schema

    @property
    def property_bag(self) -> PropertyBag:
        return self._bag

    @property
    def state(self) -> EntityState:
        if self._bag.is_new:
            return EntityState.NEW
        if self._cleared:
            return EntityState.CLEARED
        return EntityState.BOUND

    @property
    def is_new(self) -> bool:
        return self._bag.is_new

    @property
    def id(self) -> Optional[str]:
        return self._bag.get("Id")

    @property
    def entity_id(self) -> Optional[EntityId]:
        """Concrete server id, or None while new or when the id is unknown."""
        if self.is_new or not self.id or not self._kind.addressable:
            return None
        return make_id(self._kind.id_kind, self.id, self.mailbox_id or MailboxId.me())

    def as_mailbox(self) -> MailboxId:
        """Mailbox named by a User or Group entity, for addressing its items."""
        segment = self._kind.mailbox_segment
        if segment is None:
            raise InvalidArgumentError(f"{self.type_name} does not name a mailbox.")
        require_non_empty(self.id, "Id")
        return MailboxId(self.id, segment)

    # -------------------- Properties --------------------
    def get(self, key: PropertyKey) -> Any:
        return self._bag.get(key)

    def set(self, key: PropertyKey, value: Any) -> None:
        if self._cleared:
            raise InvalidLifecycleError(f"Cannot modify deleted {self.type_name}.")
        self._bag.set(key, value)

    def __getitem__(self, key: PropertyKey) -> Any:
        return self.get(key)

    def __setitem__(self, key: PropertyKey, value: Any) -> None:
        self.set(key, value)

    def changed_property_names(self) -> List[str]:
        return self._bag.changed_property_names()

    def changed_properties(self) -> List[PropertyDefinition]:
        return self._bag.changed_properties()

    def reset_change_tracking(self) -> None:
        self._bag.reset_change_tracking()

    # -------------------- Lifecycle --------------------
    def _require_service(self) -> "OutlookService":
        if self.service is None:
            raise InvalidArgumentError(
                "'service' cannot be None.",
                "Attach a service to the entity before saving, updating or deleting it.",
            )
        return self.service

    def _require_addressable(self, operation: str) -> None:
        if not self._kind.addressable:
            raise InvalidArgumentError(
                f"Cannot call '{operation}' on {self.type_name}: the type is read-only.",
                "Entities of this type are only materialised from server responses.",
            )

    def _adopt(self, other: "Entity") -> None:
        if other is None or other.type_name != self.type_name:
            raise InvalidArgumentError(
                f"Service returned {getattr(other, 'type_name', None)!r} for a {self.type_name}."
            )
        self._bag = other._bag
        self.mailbox_id = other.mailbox_id or self.mailbox_id

    def save(self, parent_folder_id: ParentFolder = None) -> None:
        """Create the entity on the server (NEW -> BOUND)."""
        if self.state is not EntityState.NEW:
            raise InvalidLifecycleError(f"Cannot call 'save' on existing {self.type_name}.")
        if not self._kind.creatable:
            self._require_addressable("save")
            raise InvalidArgumentError(f"{self.type_name} entities cannot be created through this API.")
        service = self._require_service()
        for name in self._kind.required_on_save:
            require_non_empty(self._bag.get(name), name)
        if isinstance(parent_folder_id, WellKnownFolderName):
            parent_folder_id = FolderId.well_known(parent_folder_id, self.mailbox_id)
        if self._kind.requires_parent:
            require(parent_folder_id, "parent_folder_id")

        created = service.create(self, parent_folder_id)
        self._adopt(created)
        LOG.debug("created %s %s", self.type_name, self.id)

    def update(self) -> None:
        """Send the changed properties (BOUND -> BOUND)."""
        if self.state is not EntityState.BOUND:
            raise InvalidLifecycleError(
                f"Cannot update {self.state.value} {self.type_name}.",
                "Sync the entity from the server and try again.",
            )
        if not self._bag.is_dirty:
            raise NoChangesError()
        self._require_addressable("update")
        service = self._require_service()

        updated = service.update(self)
        # The server already holds the change. A body-less response keeps the
        # local values as the source of truth.
        self._bag.reset_change_tracking()
        if updated is not None:
            self._adopt(updated)
        LOG.debug("updated %s %s", self.type_name, self.id)

    def delete(self) -> None:
        """Delete the entity on the server (BOUND -> CLEARED)."""
        if self.state is not EntityState.BOUND:
            raise InvalidLifecycleError(
                f"Cannot delete {self.state.value} {self.type_name}.",
                "Sync the entity from the server and try again.",
            )
        self._require_addressable("delete")
        service = self._require_service()
        require_non_empty(self.id, "Id")

        entity_id = self.entity_id
        service.delete(self)
        self._bag.clear()
        self._cleared = True
        LOG.debug("deleted %s %s", self.type_name, entity_id)

    def __repr__(self) -> str:
        return f"Entity({self.type_name!r}, {self.state.value}, id={self.id!r})"
