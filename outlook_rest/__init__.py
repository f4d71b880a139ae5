"""Typed object model for the Outlook mailbox/calendar REST API (Microsoft Graph).

This package provides:
- catalog.py / schema.py: entity schemas and the frozen schema registry
- property_bag.py: change-tracking value store behind every entity
- entity.py: entity lifecycle (save/update/delete gating and bag swaps)
- filters.py: OData $filter expressions
- client.py / service.py: MSAL auth and Graph transport

Usage:
    from outlook_rest import Entity, IsEqualTo, MessageSchema, OutlookService, WellKnownFolderName

    service = OutlookService.from_settings()
    draft = Entity.create("Message", service, Subject="Hello")
    draft.save(WellKnownFolderName.DRAFTS)
    unread = service.find("Message", search_filter=IsEqualTo(MessageSchema.IsRead, False))
"""

from .catalog import (
    KINDS,
    REGISTRY,
    CalendarSchema,
    ContactSchema,
    EntityKind,
    EventSchema,
    GroupSchema,
    InferenceClassificationOverrideSchema,
    MailFolderSchema,
    MessageRuleSchema,
    MessageSchema,
    MultiValueLegacyExtendedPropertySchema,
    PostSchema,
    SingleValueLegacyExtendedPropertySchema,
    TaskSchema,
    UserSchema,
    kind_of,
)
from .config import ServiceSettings, resolve_settings
from .entity import Entity, EntityState
from .errors import (
    ConfigError,
    InvalidArgumentError,
    InvalidLifecycleError,
    NoChangesError,
    OutlookRestError,
    SchemaNotFoundError,
    UnknownPropertyError,
)
from .filters import (
    FilterOperator,
    IsEqualTo,
    IsGreaterThan,
    IsGreaterThanOrEqualTo,
    IsLessThan,
    IsLessThanOrEqualTo,
    NotEqualTo,
    SearchFilter,
    SearchFilterCollection,
)
from .ids import (
    CalendarFolderId,
    ContactId,
    DirectoryObjectId,
    EventId,
    FolderId,
    GroupId,
    IdKind,
    InferenceClassificationOverrideId,
    ItemId,
    MailboxId,
    MessageId,
    MessageRuleId,
    TaskId,
    UserId,
    WellKnownFolderName,
)
from .property_bag import PropertyBag, multi_value_extended_property, single_value_extended_property
from .schema import ObjectSchema, PropertyDefinition, SchemaRegistry, ValueKind
from .service import OutlookService
from .values import ItemBody, Recipient

__all__ = [
    # Schemas
    "KINDS",
    "REGISTRY",
    "EntityKind",
    "ObjectSchema",
    "PropertyDefinition",
    "SchemaRegistry",
    "ValueKind",
    "kind_of",
    "MessageSchema",
    "MailFolderSchema",
    "MessageRuleSchema",
    "EventSchema",
    "CalendarSchema",
    "ContactSchema",
    "InferenceClassificationOverrideSchema",
    "TaskSchema",
    "PostSchema",
    "UserSchema",
    "GroupSchema",
    "SingleValueLegacyExtendedPropertySchema",
    "MultiValueLegacyExtendedPropertySchema",
    # Entities and values
    "Entity",
    "EntityState",
    "PropertyBag",
    "single_value_extended_property",
    "multi_value_extended_property",
    "ItemBody",
    "Recipient",
    # Identifiers
    "MailboxId",
    "FolderId",
    "CalendarFolderId",
    "ItemId",
    "MessageId",
    "EventId",
    "ContactId",
    "MessageRuleId",
    "InferenceClassificationOverrideId",
    "TaskId",
    "DirectoryObjectId",
    "UserId",
    "GroupId",
    "IdKind",
    "WellKnownFolderName",
    # Filters
    "FilterOperator",
    "SearchFilter",
    "SearchFilterCollection",
    "IsEqualTo",
    "NotEqualTo",
    "IsGreaterThan",
    "IsGreaterThanOrEqualTo",
    "IsLessThan",
    "IsLessThanOrEqualTo",
    # Transport and config
    "OutlookService",
    "ServiceSettings",
    "resolve_settings",
    # Errors
    "OutlookRestError",
    "SchemaNotFoundError",
    "UnknownPropertyError",
    "InvalidLifecycleError",
    "NoChangesError",
    "InvalidArgumentError",
    "ConfigError",
]
