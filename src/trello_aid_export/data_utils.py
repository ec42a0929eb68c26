"""Parsing helpers for card descriptions, ids and action dates."""

import binascii
import logging
from datetime import datetime, timezone, tzinfo
from typing import Dict, Optional

from .exceptions import DescriptionParseError, IdentifierDecodeError

log = logging.getLogger(__name__)

DISPLAY_DATE_FORMAT = "%d %b %y %H:%M"

# Description keys mapped to the card attribute they fill
DESCRIPTION_FIELDS = {
    "Name": "name",
    "Email": "email",
    "Institution": "institution",
    "Location": "location",
    "Description": "reason",
}


def format_display_date(moment: datetime) -> str:
    """Format a datetime the way every date column of the export shows it."""
    return moment.strftime(DISPLAY_DATE_FORMAT)


def parse_description(description: str) -> Dict[str, str]:
    """Parse ``Key: Value`` lines of a card description.

    Only the keys in ``DESCRIPTION_FIELDS`` are kept, under their attribute
    name. A repeated key keeps its last value. Blank lines are skipped.

    Args:
        description: Free-text card description

    Returns:
        Dictionary mapping card attribute names to stripped values

    Raises:
        DescriptionParseError: If a non-blank line has no colon

    """
    fields = {}

    for line_number, line in enumerate(description.split("\n"), 1):
        if not line.strip():
            continue

        key, separator, value = line.partition(":")
        if not separator:
            raise DescriptionParseError(
                f"line {line_number} is not a 'Key: Value' pair: {line!r}"
            )

        attribute = DESCRIPTION_FIELDS.get(key)
        if attribute is None:
            log.debug("Ignoring description key %r", key)
            continue

        fields[attribute] = value.strip()

    return fields


def decode_card_timestamp(card_id: str) -> int:
    """Decode the Unix creation timestamp embedded in a Trello id.

    Trello ids are Mongo ObjectIds: the first 8 hex characters are a
    big-endian 32-bit count of seconds since the epoch.

    Raises:
        IdentifierDecodeError: If the id does not start with 8 hex characters

    """
    hex_timestamp = card_id[:8]
    if len(hex_timestamp) != 8:
        raise IdentifierDecodeError(f"card id {card_id!r} is too short")

    try:
        return int.from_bytes(binascii.unhexlify(hex_timestamp), "big")
    except ValueError as e:
        raise IdentifierDecodeError(
            f"card id {card_id!r} does not start with a hex timestamp"
        ) from e


def decode_request_date(card_id: str, tz: Optional[tzinfo] = None) -> str:
    """Return the card creation time as a display date.

    Args:
        card_id: Trello card id
        tz: Timezone to render in, defaults to local time

    """
    timestamp = decode_card_timestamp(card_id)
    return format_display_date(datetime.fromtimestamp(timestamp, tz))


def parse_action_date(value: str) -> datetime:
    """Parse an RFC 3339 action date such as ``2020-03-27T00:42:11.123Z``.

    The offset in the string is kept; no conversion to local time happens.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment
