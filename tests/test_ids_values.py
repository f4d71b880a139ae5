"""Tests for outlook_rest/ids.py and outlook_rest/values.py."""

from __future__ import annotations

import datetime as dt
import unittest

from outlook_rest.catalog import ContactSchema, EventSchema, MailFolderSchema, MessageSchema
from outlook_rest.errors import InvalidArgumentError
from outlook_rest.ids import (
    ID_FACTORIES,
    CalendarFolderId,
    EventId,
    FolderId,
    GroupId,
    IdKind,
    MailboxId,
    MessageId,
    TaskId,
    UserId,
    WellKnownFolderName,
    make_id,
)
from outlook_rest.property_bag import PropertyBag, multi_value_extended_property, single_value_extended_property
from outlook_rest.values import ItemBody, Recipient, check_value, from_wire, to_wire


class TestMailboxId(unittest.TestCase):

    def test_me(self):
        self.assertTrue(MailboxId.me().is_me)
        self.assertEqual(MailboxId.me().path, "me")

    def test_user(self):
        self.assertEqual(MailboxId("ann@example.com").path, "users/ann@example.com")


class TestIds(unittest.TestCase):

    def test_well_known_folder(self):
        folder = FolderId.well_known(WellKnownFolderName.SENT_ITEMS)
        self.assertEqual(folder.id, "sentitems")
        self.assertEqual(folder.mailbox, MailboxId.me())

    def test_empty_id_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            MessageId("")

    def test_factory_dispatch(self):
        self.assertIsInstance(make_id(IdKind.MESSAGE, "m1"), MessageId)
        self.assertIsInstance(make_id(IdKind.EVENT, "e1"), EventId)
        self.assertIsInstance(make_id(IdKind.CALENDAR_FOLDER, "c1"), CalendarFolderId)
        self.assertEqual(make_id("message", "m1"), MessageId("m1"))

    def test_factory_keeps_mailbox(self):
        mailbox = MailboxId("ann@example.com")
        self.assertEqual(make_id(IdKind.MESSAGE, "m1", mailbox).mailbox, mailbox)

    def test_every_kind_has_factory(self):
        self.assertEqual(set(ID_FACTORIES), set(IdKind))

    def test_types_distinguish_ids(self):
        self.assertNotEqual(MessageId("x"), EventId("x"))


class TestCheckValue(unittest.TestCase):

    def test_none_always_fits(self):
        for prop in MessageSchema:
            check_value(prop, None)

    def test_bool_is_not_a_number(self):
        with self.assertRaises(InvalidArgumentError):
            check_value(MailFolderSchema.TotalItemCount, True)
        check_value(MailFolderSchema.TotalItemCount, 3)

    def test_string_collection_members(self):
        check_value(MessageSchema.Categories, ["Work", "Home"])
        with self.assertRaises(InvalidArgumentError):
            check_value(MessageSchema.Categories, ["Work", 1])

    def test_recipient_collection_members(self):
        check_value(MessageSchema.ToRecipients, [Recipient("a@example.com")])
        with self.assertRaises(InvalidArgumentError):
            check_value(MessageSchema.ToRecipients, ["a@example.com"])

    def test_datetime_accepts_several_shapes(self):
        check_value(ContactSchema.Birthday, dt.date(1990, 1, 1))
        check_value(MessageSchema.ReceivedDateTime, "2019-02-01T12:00:00Z")
        with self.assertRaises(InvalidArgumentError):
            check_value(MessageSchema.ReceivedDateTime, 1549022400)

    def test_body_requires_item_body(self):
        with self.assertRaises(InvalidArgumentError):
            check_value(MessageSchema.Body, "plain")


class TestWireConversion(unittest.TestCase):

    def test_recipient(self):
        r = Recipient(address="a@example.com", name="A")
        wire = to_wire(MessageSchema.From, r)
        self.assertEqual(wire, {"emailAddress": {"name": "A", "address": "a@example.com"}})
        self.assertEqual(from_wire(MessageSchema.From, wire), r)

    def test_body(self):
        body = ItemBody("<b>x</b>", "html")
        self.assertEqual(to_wire(EventSchema.Body, body), {"contentType": "html", "content": "<b>x</b>"})

    def test_datetime_out(self):
        self.assertEqual(
            to_wire(MessageSchema.SentDateTime, dt.datetime(2019, 2, 1, 12, 0)),
            "2019-02-01T12:00:00",
        )

    def test_datetime_in(self):
        value = from_wire(MessageSchema.ReceivedDateTime, "2019-02-01T12:00:00Z")
        self.assertEqual(value, dt.datetime(2019, 2, 1, 12, 0, tzinfo=dt.timezone.utc))

    def test_unparseable_datetime_stays_text(self):
        self.assertEqual(from_wire(MessageSchema.ReceivedDateTime, "soon"), "soon")

    def test_complex_passes_through(self):
        start = {"dateTime": "2019-02-01T12:00:00", "timeZone": "UTC"}
        self.assertEqual(from_wire(EventSchema.Start, start), start)
        self.assertEqual(to_wire(EventSchema.Start, start), start)

    def test_none(self):
        self.assertIsNone(to_wire(MessageSchema.From, None))
        self.assertIsNone(from_wire(MessageSchema.From, None))


class TestDirectoryIds(unittest.TestCase):

    def test_group_mailbox(self):
        group = MailboxId.group("g1")
        self.assertEqual(group.path, "groups/g1")
        self.assertFalse(group.is_me)
        self.assertNotEqual(group, MailboxId("g1"))

    def test_task_and_directory_factories(self):
        self.assertIsInstance(make_id(IdKind.TASK, "t1"), TaskId)
        self.assertIsInstance(make_id(IdKind.USER, "u1"), UserId)
        self.assertIsInstance(make_id(IdKind.GROUP, "g1"), GroupId)


class TestObjectCollectionValues(unittest.TestCase):

    def setUp(self):
        self.prop = MessageSchema.SingleValueExtendedProperties

    def test_accepts_bags_of_element_type(self):
        check_value(self.prop, [single_value_extended_property("String {guid} Name Color", "blue")])

    def test_rejects_other_elements(self):
        with self.assertRaises(InvalidArgumentError):
            check_value(self.prop, [{"id": "String {guid} Name Color", "value": "blue"}])
        with self.assertRaises(InvalidArgumentError):
            check_value(self.prop, [multi_value_extended_property("StringArray {guid} Name Tags", ["a"])])

    def test_to_wire_sends_whole_elements(self):
        bag = single_value_extended_property("String {guid} Name Color", "blue")
        bag.reset_change_tracking()
        self.assertEqual(
            to_wire(self.prop, [bag]),
            [{"id": "String {guid} Name Color", "value": "blue"}],
        )

    def test_from_wire_builds_clean_bags(self):
        raw = [{"id": "StringArray {guid} Name Tags", "value": ["a", "b"]}]
        (bag,) = from_wire(MessageSchema.MultiValueExtendedProperties, raw)
        self.assertIsInstance(bag, PropertyBag)
        self.assertEqual(bag.type_name, "MultiValueLegacyExtendedProperty")
        self.assertEqual(bag["Value"], ["a", "b"])
        self.assertEqual(bag.changed_property_names(), [])


if __name__ == "__main__":
    unittest.main()
