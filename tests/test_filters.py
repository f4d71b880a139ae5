"""Tests for outlook_rest/filters.py $filter compilation."""

from __future__ import annotations

import datetime as dt
import unittest

from outlook_rest.catalog import EventSchema, MailFolderSchema, MessageSchema
from outlook_rest.errors import InvalidArgumentError
from outlook_rest.filters import (
    FilterOperator,
    IsEqualTo,
    IsGreaterThan,
    IsGreaterThanOrEqualTo,
    IsLessThan,
    IsLessThanOrEqualTo,
    NotEqualTo,
    SearchFilterCollection,
)
from outlook_rest.values import Recipient


class TestComparisonFilters(unittest.TestCase):
    """One test per comparison operator."""

    def test_is_equal_to(self):
        f = IsEqualTo(MessageSchema.IsRead, "True")
        self.assertEqual(f.filter_operator, FilterOperator.EQ)
        self.assertEqual(f.query, "$filter=IsRead eq True")

    def test_not_equal_to(self):
        f = NotEqualTo(MessageSchema.Body, "test body")
        self.assertEqual(f.filter_operator, FilterOperator.NE)
        self.assertEqual(f.query, "$filter=Body ne 'test body'")

    def test_is_greater_than(self):
        f = IsGreaterThan(MessageSchema.CreatedDateTime, "2019-02-19")
        self.assertEqual(f.filter_operator, FilterOperator.GT)
        self.assertEqual(f.query, "$filter=CreatedDateTime gt 2019-02-19")

    def test_is_greater_than_or_equal_to(self):
        f = IsGreaterThanOrEqualTo(MessageSchema.CreatedDateTime, "20-02-19")
        self.assertEqual(f.filter_operator, FilterOperator.GE)
        self.assertEqual(f.query, "$filter=CreatedDateTime ge 20-02-19")

    def test_is_less_than(self):
        f = IsLessThan(MessageSchema.ReceivedDateTime, "19-02-2019")
        self.assertEqual(f.filter_operator, FilterOperator.LT)
        self.assertEqual(f.query, "$filter=ReceivedDateTime lt 19-02-2019")

    def test_is_less_than_or_equal_to_number_unquoted(self):
        f = IsLessThanOrEqualTo(MailFolderSchema.TotalItemCount, 5)
        self.assertEqual(f.filter_operator, FilterOperator.LE)
        self.assertEqual(f.query, "$filter=TotalItemCount le 5")

    def test_query_is_stable(self):
        f = NotEqualTo(MessageSchema.Subject, "weekly")
        self.assertEqual(f.query, f.query)
        self.assertEqual(str(f), "$filter=Subject ne 'weekly'")

    def test_render_has_no_prefix(self):
        self.assertEqual(IsEqualTo(MessageSchema.Subject, "x").render(), "Subject eq 'x'")


class TestValueFormatting(unittest.TestCase):
    """Literal rendering follows the property's declared kind."""

    def test_python_bool(self):
        self.assertEqual(IsEqualTo(MessageSchema.IsRead, False).query, "$filter=IsRead eq false")

    def test_float(self):
        f = IsGreaterThan(MailFolderSchema.UnreadItemCount, 2.5)
        self.assertEqual(f.query, "$filter=UnreadItemCount gt 2.5")

    def test_numeric_string_on_number_property_unquoted(self):
        f = IsEqualTo(MailFolderSchema.TotalItemCount, "5")
        self.assertEqual(f.query, "$filter=TotalItemCount eq 5")

    def test_number_on_string_property_quoted(self):
        self.assertEqual(IsEqualTo(MessageSchema.Subject, 5).query, "$filter=Subject eq '5'")

    def test_naive_datetime(self):
        f = IsGreaterThan(MessageSchema.CreatedDateTime, dt.datetime(2019, 2, 1, 12, 0, 0))
        self.assertEqual(f.query, "$filter=CreatedDateTime gt 2019-02-01T12:00:00")

    def test_aware_datetime_converted_to_utc(self):
        plus_one = dt.timezone(dt.timedelta(hours=1))
        f = IsLessThan(MessageSchema.ReceivedDateTime, dt.datetime(2019, 2, 1, 13, 30, tzinfo=plus_one))
        self.assertEqual(f.query, "$filter=ReceivedDateTime lt 2019-02-01T12:30:00")

    def test_date_renders_midnight(self):
        f = IsGreaterThanOrEqualTo(MessageSchema.SentDateTime, dt.date(2019, 2, 1))
        self.assertEqual(f.query, "$filter=SentDateTime ge 2019-02-01T00:00:00")

    def test_single_quote_escaped(self):
        f = IsEqualTo(MessageSchema.Subject, "O'Brien")
        self.assertEqual(f.query, "$filter=Subject eq 'O''Brien'")

    def test_none_is_null(self):
        self.assertEqual(IsEqualTo(MessageSchema.Subject, None).query, "$filter=Subject eq null")

    def test_none_property_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            IsEqualTo(None, "x")

    def test_property_name_string_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            IsEqualTo("Subject", "x")


class TestRecipientFilter(unittest.TestCase):
    """Relational (recipient) properties compile to nested paths on equality."""

    def test_address_path_when_value_has_at(self):
        f = IsEqualTo(MessageSchema.From, "a@b.com")
        self.assertEqual(f.query, "$filter=From/EmailAddress/Address eq 'a@b.com'")

    def test_name_path_otherwise(self):
        f = IsEqualTo(MessageSchema.From, "A B")
        self.assertEqual(f.query, "$filter=From/EmailAddress/Name eq 'A B'")

    def test_recipient_value_uses_address(self):
        f = IsEqualTo(MessageSchema.Sender, Recipient(address="a@b.com", name="A"))
        self.assertEqual(f.query, "$filter=Sender/EmailAddress/Address eq 'a@b.com'")

    def test_recipient_value_without_address_uses_name(self):
        f = IsEqualTo(EventSchema.Organizer, Recipient(name="A B"))
        self.assertEqual(f.query, "$filter=Organizer/EmailAddress/Name eq 'A B'")

    def test_other_operators_keep_plain_name(self):
        f = NotEqualTo(MessageSchema.From, "a@b.com")
        self.assertEqual(f.query, "$filter=From ne 'a@b.com'")

    def test_recipient_collection_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            IsEqualTo(MessageSchema.ToRecipients, "A B")

    def test_object_collection_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            IsEqualTo(MessageSchema.SingleValueExtendedProperties, "blue")


class TestSearchFilterCollection(unittest.TestCase):
    """Tests for and/or combination."""

    def setUp(self):
        self.less_than_or_equal_to = IsLessThanOrEqualTo(MailFolderSchema.TotalItemCount, 5)
        self.greater_than = IsGreaterThan(
            MessageSchema.CreatedDateTime, dt.datetime(2019, 2, 1, 12, 0, 0)
        )
        self.not_equal_to = NotEqualTo(MessageSchema.Body, "test body")
        self.children = (self.less_than_or_equal_to, self.greater_than, self.not_equal_to)

    def test_and(self):
        coll = SearchFilterCollection(FilterOperator.AND, *self.children)
        self.assertEqual(coll.filter_operator, FilterOperator.AND)
        self.assertEqual(
            coll.query,
            "$filter=TotalItemCount le 5 and CreatedDateTime gt 2019-02-01T12:00:00 and Body ne 'test body'",
        )

    def test_or(self):
        coll = SearchFilterCollection(FilterOperator.OR, *self.children)
        self.assertEqual(coll.filter_operator, FilterOperator.OR)
        self.assertEqual(
            coll.query,
            "$filter=TotalItemCount le 5 or CreatedDateTime gt 2019-02-01T12:00:00 or Body ne 'test body'",
        )

    def test_children_order_preserved(self):
        coll = SearchFilterCollection(FilterOperator.AND, *self.children)
        self.assertEqual(coll.children, self.children)

    def test_accepts_list(self):
        coll = SearchFilterCollection(FilterOperator.OR, list(self.children))
        self.assertEqual(len(coll.children), 3)

    def test_accepts_operator_string(self):
        coll = SearchFilterCollection("and", self.less_than_or_equal_to, self.not_equal_to)
        self.assertIs(coll.filter_operator, FilterOperator.AND)

    def test_comparison_operator_without_children_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            SearchFilterCollection(FilterOperator.GE)

    def test_comparison_operator_with_children_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            SearchFilterCollection(FilterOperator.EQ, *self.children)

    def test_unknown_operator_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            SearchFilterCollection("xor", *self.children)

    def test_single_child_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            SearchFilterCollection(FilterOperator.AND, self.not_equal_to)

    def test_no_children_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            SearchFilterCollection(FilterOperator.OR)

    def test_non_filter_child_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            SearchFilterCollection(FilterOperator.AND, self.not_equal_to, "Subject eq 'x'")

    def test_nested_collection_parenthesised(self):
        inner = SearchFilterCollection(FilterOperator.AND, self.less_than_or_equal_to, self.not_equal_to)
        outer = SearchFilterCollection(FilterOperator.OR, self.greater_than, inner)
        self.assertEqual(
            outer.query,
            "$filter=CreatedDateTime gt 2019-02-01T12:00:00 or (TotalItemCount le 5 and Body ne 'test body')",
        )

    def test_ampersand_builds_and_collection(self):
        coll = self.less_than_or_equal_to & self.not_equal_to
        self.assertIsInstance(coll, SearchFilterCollection)
        self.assertEqual(coll.query, "$filter=TotalItemCount le 5 and Body ne 'test body'")

    def test_chained_ampersand_stays_flat(self):
        coll = self.less_than_or_equal_to & self.greater_than & self.not_equal_to
        self.assertEqual(len(coll.children), 3)

    def test_pipe_builds_or_collection(self):
        coll = self.less_than_or_equal_to | self.not_equal_to
        self.assertIs(coll.filter_operator, FilterOperator.OR)

    def test_mixed_operators_nest(self):
        coll = (self.less_than_or_equal_to & self.greater_than) | self.not_equal_to
        self.assertEqual(
            coll.query,
            "$filter=(TotalItemCount le 5 and CreatedDateTime gt 2019-02-01T12:00:00) or Body ne 'test body'",
        )


if __name__ == "__main__":
    unittest.main()
