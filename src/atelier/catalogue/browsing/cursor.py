"""Opaque continuation cursors for catalog pages.

A cursor encodes the sort key of the last item returned plus the fingerprint
of the filter set it was minted for. Keyset continuation keeps pages disjoint
even when items are published or removed between requests.
"""

import base64
import binascii
import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError

# Drafts have no publication date; they sort after everything published
_NEVER = datetime.min.replace(tzinfo=UTC)


class StaleCursorError(ValidationError):
    """The cursor is malformed or belongs to a different filter set."""

    def __init__(self, reason):
        super().__init__({"cursor": [reason]})


def _aware(value):
    if value is None:
        return _NEVER
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def sort_key(item):
    """Descending browse order: published_at, then created_at, then id as tiebreaker."""
    return (_aware(item.published_at), _aware(item.created_at), str(item.id))


def encode_cursor(item, fingerprint):
    published_at, created_at, item_id = sort_key(item)
    payload = {
        "f": fingerprint,
        "k": [published_at.isoformat(), created_at.isoformat(), item_id],
    }
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(token, fingerprint):
    """Return the sort key encoded in ``token``, checking it was minted for ``fingerprint``."""
    try:
        payload = json.loads(base64.urlsafe_b64decode(token.encode("ascii")))
        published_at, created_at, item_id = payload["k"]
        key = (datetime.fromisoformat(published_at), datetime.fromisoformat(created_at), item_id)
        minted_for = payload["f"]
    except (binascii.Error, ValueError, KeyError, TypeError, UnicodeError):
        raise StaleCursorError("Malformed cursor") from None

    if minted_for != fingerprint:
        raise StaleCursorError("Cursor does not belong to this filter set")
    return key
