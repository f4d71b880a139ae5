"""Mailbox, folder and item identifiers.

Concrete id types are built through ``ID_FACTORIES``, a table keyed by the
entity's ``IdKind`` tag. Each entry takes ``(id, mailbox)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional

from .errors import require_non_empty

_ME = "me"
_USERS = "users"
_GROUPS = "groups"


@dataclass(frozen=True)
class MailboxId:
    """A mailbox: the signed-in user (``me``), a user id / UPN, or a group id."""

    id: str
    segment: str = _USERS

    @classmethod
    def me(cls) -> "MailboxId":
        return cls(_ME)

    @classmethod
    def group(cls, group_id: str) -> "MailboxId":
        return cls(group_id, _GROUPS)

    @property
    def is_me(self) -> bool:
        return self.id == _ME and self.segment == _USERS

    @property
    def path(self) -> str:
        """URL segment addressing this mailbox."""
        return _ME if self.is_me else f"{self.segment}/{self.id}"


class WellKnownFolderName(str, Enum):
    """Folder names Graph accepts in place of a folder id."""
    INBOX = "inbox"
    DRAFTS = "drafts"
    SENT_ITEMS = "sentitems"
    DELETED_ITEMS = "deleteditems"
    ARCHIVE = "archive"
    JUNK_EMAIL = "junkemail"
    OUTBOX = "outbox"
    MSG_FOLDER_ROOT = "msgfolderroot"


@dataclass(frozen=True)
class EntityId:
    """Server identity of an entity inside a mailbox."""

    id: str
    mailbox: MailboxId = field(default_factory=MailboxId.me)

    def __post_init__(self) -> None:
        require_non_empty(self.id, "id")

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class FolderId(EntityId):
    @classmethod
    def well_known(
        cls, name: WellKnownFolderName, mailbox: Optional[MailboxId] = None
    ) -> "FolderId":
        return cls(WellKnownFolderName(name).value, mailbox or MailboxId.me())


@dataclass(frozen=True)
class CalendarFolderId(FolderId):
    pass


@dataclass(frozen=True)
class ItemId(EntityId):
    pass


@dataclass(frozen=True)
class MessageId(ItemId):
    pass


@dataclass(frozen=True)
class EventId(ItemId):
    pass


@dataclass(frozen=True)
class ContactId(ItemId):
    pass


@dataclass(frozen=True)
class MessageRuleId(ItemId):
    pass


@dataclass(frozen=True)
class TaskId(ItemId):
    pass


@dataclass(frozen=True)
class InferenceClassificationOverrideId(ItemId):
    pass


@dataclass(frozen=True)
class DirectoryObjectId(EntityId):
    """Id of a directory object (user or group); the mailbox is not part of its URL."""


@dataclass(frozen=True)
class UserId(DirectoryObjectId):
    pass


@dataclass(frozen=True)
class GroupId(DirectoryObjectId):
    pass


class IdKind(str, Enum):
    """Tag selecting the concrete id type of an entity kind."""
    FOLDER = "folder"
    CALENDAR_FOLDER = "calendar_folder"
    MESSAGE = "message"
    EVENT = "event"
    CONTACT = "contact"
    MESSAGE_RULE = "message_rule"
    INFERENCE_OVERRIDE = "inference_override"
    TASK = "task"
    USER = "user"
    GROUP = "group"


ID_FACTORIES: Dict[IdKind, Callable[[str, MailboxId], EntityId]] = {
    IdKind.FOLDER: FolderId,
    IdKind.CALENDAR_FOLDER: CalendarFolderId,
    IdKind.MESSAGE: MessageId,
    IdKind.EVENT: EventId,
    IdKind.CONTACT: ContactId,
    IdKind.MESSAGE_RULE: MessageRuleId,
    IdKind.INFERENCE_OVERRIDE: InferenceClassificationOverrideId,
    IdKind.TASK: TaskId,
    IdKind.USER: UserId,
    IdKind.GROUP: GroupId,
}


def make_id(kind: IdKind, id_: str, mailbox: Optional[MailboxId] = None) -> EntityId:
    """Build the concrete id for ``kind``; mailbox defaults to ``me``."""
    return ID_FACTORIES[IdKind(kind)](id_, mailbox or MailboxId.me())
