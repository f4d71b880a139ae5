"""Graph transport for entities.

Maps entity create/get/update/delete/find onto Graph URLs. Request bodies are
the entity's changed properties only; responses become new bound entities
whose bags the caller swaps in.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from .catalog import EntityKind, kind_of
from .client import OutlookClientBase, _requests
from .config import ServiceSettings, resolve_settings
from .constants import DEFAULT_PAGE_SIZE
from .entity import Entity
from .errors import InvalidArgumentError, require
from .filters import SearchFilter
from .ids import EntityId, FolderId, MailboxId, make_id

LOG = logging.getLogger(__name__)


class OutlookService:
    """Entity-level operations over an authenticated OutlookClientBase."""

    def __init__(self, client: OutlookClientBase) -> None:
        require(client, "client")
        self.client = client

    @classmethod
    def from_settings(cls, settings: Optional[ServiceSettings] = None, authenticate: bool = True) -> "OutlookService":
        """Build a service from resolved settings (see config.resolve_settings)."""
        settings = settings or resolve_settings()
        client = OutlookClientBase(
            client_id=settings.client_id,
            tenant=settings.tenant,
            token_path=settings.token_path,
        )
        if authenticate:
            client.authenticate()
        return cls(client)

    # -------------------- URLs --------------------
    def _url(self, mailbox: Optional[MailboxId], path: str) -> str:
        return f"{self.client.GRAPH}/{(mailbox or MailboxId.me()).path}/{path}"

    def _collection_url(self, kind: EntityKind, mailbox: Optional[MailboxId], path: str) -> str:
        if kind.directory:
            return f"{self.client.GRAPH}/{path}"
        return self._url(mailbox, path)

    def _entity_url(self, kind: EntityKind, entity_id: EntityId) -> str:
        return self._collection_url(kind, entity_id.mailbox, f"{kind.collection_path}/{entity_id.id}")

    def _materialise(self, type_name: str, data: Dict[str, Any], mailbox: Optional[MailboxId]) -> Entity:
        if kind_of(type_name).directory:
            mailbox = None
        return Entity.from_wire(type_name, data or {}, service=self, mailbox_id=mailbox)

    @staticmethod
    def _require_addressable(kind: EntityKind) -> None:
        if not kind.addressable:
            raise InvalidArgumentError(f"{kind.type_name} entities cannot be fetched or listed directly.")

    # -------------------- Entity operations --------------------
    def get(self, type_name: str, entity_id: Union[EntityId, str]) -> Entity:
        kind = kind_of(type_name)
        self._require_addressable(kind)
        if isinstance(entity_id, str):
            entity_id = make_id(kind.id_kind, entity_id)
        r = _requests().get(self._entity_url(kind, entity_id), headers=self.client._headers())
        r.raise_for_status()
        return self._materialise(type_name, r.json(), entity_id.mailbox)

    def create(self, entity: Entity, parent_folder_id: Optional[FolderId] = None) -> Entity:
        if parent_folder_id is not None:
            mailbox = parent_folder_id.mailbox
            path = entity.kind.creation_path(parent_folder_id.id)
        else:
            mailbox = entity.mailbox_id
            path = entity.kind.creation_path(None)
        body = entity.property_bag.changes_to_wire()
        r = _requests().post(self._url(mailbox, path), headers=self.client._headers(), json=body)
        r.raise_for_status()
        LOG.info("created %s with %d properties", entity.type_name, len(body))
        return self._materialise(entity.type_name, r.json(), mailbox)

    def update(self, entity: Entity) -> Optional[Entity]:
        """PATCH the dirty properties.

        Returns the server's copy, or None when the response has no body and
        the local values stand.
        """
        entity_id = entity.entity_id
        require(entity_id, "entity_id")
        body = entity.property_bag.changes_to_wire()
        r = _requests().patch(
            self._entity_url(entity.kind, entity_id),
            headers=self.client._headers(),
            json=body,
        )
        r.raise_for_status()
        LOG.info("updated %s %s: %s", entity.type_name, entity_id, ", ".join(body))
        if not r.text:
            return None
        return self._materialise(entity.type_name, r.json(), entity_id.mailbox)

    def delete(self, entity: Entity) -> None:
        entity_id = entity.entity_id
        require(entity_id, "entity_id")
        r = _requests().delete(self._entity_url(entity.kind, entity_id), headers=self.client._headers())
        r.raise_for_status()
        LOG.info("deleted %s %s", entity.type_name, entity_id)

    def find(
        self,
        type_name: str,
        parent_folder_id: Optional[FolderId] = None,
        search_filter: Optional[SearchFilter] = None,
        top: int = DEFAULT_PAGE_SIZE,
        pages: Optional[int] = None,
        mailbox: Optional[MailboxId] = None,
    ) -> List[Entity]:
        """List entities, optionally under a parent folder and narrowed by a filter.

        ``mailbox`` selects another user's or a group's mailbox when no parent
        folder is given. Query options go through ``params`` so literals are
        URL-encoded. Follows ``@odata.nextLink`` for at most ``pages`` pages
        (all when None); the next link already carries the query.
        """
        kind = kind_of(type_name)
        self._require_addressable(kind)
        if parent_folder_id is not None:
            mailbox = parent_folder_id.mailbox
            path = kind.creation_path(parent_folder_id.id)
        else:
            path = kind.collection_path
        params: Optional[Dict[str, Any]] = {"$top": int(top)}
        if search_filter is not None:
            params["$filter"] = search_filter.render()
        url: Optional[str] = self._collection_url(kind, mailbox, path)

        out: List[Entity] = []
        fetched = 0
        while url and (pages is None or fetched < max(1, int(pages))):
            r = _requests().get(url, headers=self.client._headers(), params=params)
            r.raise_for_status()
            data = r.json() or {}
            for item in data.get("value", []) or []:
                out.append(self._materialise(type_name, item, mailbox))
            url = data.get("@odata.nextLink")
            params = None
            fetched += 1
        return out
