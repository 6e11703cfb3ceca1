"""Tests for catalog cursors."""

import base64
from datetime import UTC, datetime

import pytest

from atelier.catalogue.browsing.cursor import StaleCursorError, decode_cursor, encode_cursor, sort_key
from atelier.catalogue.catalog_item import CatalogItem


def _published_item(published_at):
    item = CatalogItem.create(category="print", translations={"en": {"title": "Etching"}}, price=9000)
    item.publish(published_at=published_at)
    return item


class TestSortKey:
    def test_orders_by_publication_then_creation(self):
        older = _published_item(datetime(2024, 1, 1, tzinfo=UTC))
        newer = _published_item(datetime(2024, 6, 1, tzinfo=UTC))
        assert sort_key(newer) > sort_key(older)

    def test_naive_dates_are_treated_as_utc(self):
        item = _published_item(datetime(2024, 1, 1))
        assert sort_key(item)[0].tzinfo is not None

    def test_drafts_sort_last(self):
        draft = CatalogItem.create(category="print", translations={"en": {"title": "Draft"}}, price=100)
        published = _published_item(datetime(2000, 1, 1, tzinfo=UTC))
        assert sort_key(draft) < sort_key(published)


class TestCursorRoundTrip:
    def test_cursor_decodes_to_the_items_sort_key(self):
        item = _published_item(datetime(2024, 1, 1, tzinfo=UTC))
        token = encode_cursor(item, "abc")
        assert decode_cursor(token, "abc") == sort_key(item)

    def test_cursor_is_url_safe(self):
        token = encode_cursor(_published_item(datetime(2024, 1, 1, tzinfo=UTC)), "abc")
        assert "+" not in token and "/" not in token


class TestStaleCursor:
    def test_cursor_for_other_filters_rejected(self):
        token = encode_cursor(_published_item(datetime(2024, 1, 1, tzinfo=UTC)), "abc")
        with pytest.raises(StaleCursorError) as exc:
            decode_cursor(token, "def")
        assert "cursor" in exc.value.messages

    def test_garbage_rejected(self):
        with pytest.raises(StaleCursorError):
            decode_cursor("not-a-cursor", "abc")

    def test_wrong_shape_rejected(self):
        token = base64.urlsafe_b64encode(b'{"f": "abc"}').decode("ascii")
        with pytest.raises(StaleCursorError):
            decode_cursor(token, "abc")
