"""Data models for completed aid request cards."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .data_utils import (
    decode_request_date,
    format_display_date,
    parse_action_date,
    parse_description,
)
from .exceptions import AmountPaidError, DescriptionParseError, MissingAmountPaidError

if TYPE_CHECKING:
    from .api_utils import TrelloClient

log = logging.getLogger(__name__)

CSV_HEADER = [
    "Name",
    "Email",
    "Institution",
    "Location",
    "Amount Paid",
    "Reason",
    "Fund Transfer Date",
    "Request Date",
]


@dataclass
class CustomFieldItem:
    """A custom field value set on a card."""

    id: str
    value: Dict[str, str]
    custom_field_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CustomFieldItem":
        return cls(
            id=data.get("id", ""),
            value=data.get("value") or {},
            custom_field_id=data.get("idCustomField"),
        )

    def amount_paid(self) -> int:
        """Parse the numeric value of the field as a whole amount."""
        number = self.value.get("number")
        try:
            return int(number)
        except (TypeError, ValueError) as e:
            raise AmountPaidError(
                f"custom field {self.id} has no whole number value: {number!r}"
            ) from e


@dataclass
class CardAction:
    """An entry of a card's activity log."""

    id: str
    type: str
    date: str
    list_before_id: Optional[str] = None
    list_after_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CardAction":
        action_data = data.get("data") or {}
        return cls(
            id=data.get("id", ""),
            type=data.get("type", ""),
            date=data.get("date", ""),
            list_before_id=(action_data.get("listBefore") or {}).get("id"),
            list_after_id=(action_data.get("listAfter") or {}).get("id"),
        )

    def moved_into(self, list_id: str) -> bool:
        """Return True if this action moved the card into ``list_id``."""
        return self.type == "updateCard" and self.list_after_id == list_id


@dataclass
class TrelloCard:
    """Represents a completed aid request card and its exported fields."""

    id: str
    title: str
    description: str = ""
    name: str = ""
    email: str = ""
    institution: str = ""
    location: str = ""
    reason: str = ""
    amount_paid: int = 0
    fund_transfer_date: str = ""
    request_date: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TrelloCard":
        """Build a card from a Trello list-cards response entry."""
        return cls(
            id=data["id"],
            title=data.get("name", ""),
            description=data.get("desc") or "",
        )

    @staticmethod
    def csv_header() -> List[str]:
        return list(CSV_HEADER)

    def csv_row(self) -> List[str]:
        return [
            self.name,
            self.email,
            self.institution,
            self.location,
            str(self.amount_paid),
            self.reason,
            self.fund_transfer_date,
            self.request_date,
        ]

    def inflate_description(self) -> None:
        """Fill the contact and reason fields from the description."""
        try:
            fields = parse_description(self.description)
        except DescriptionParseError as e:
            raise DescriptionParseError(
                f"Card '{self.title}' has a malformed description: {e}"
            ) from e

        for attribute, value in fields.items():
            setattr(self, attribute, value)

    def inflate_amount_paid(self, client: "TrelloClient") -> None:
        """Read the amount paid from the card's custom fields."""
        items = [
            CustomFieldItem.from_api(item)
            for item in client.card_custom_field_items(self.id)
        ]
        if not items:
            raise MissingAmountPaidError(f"{self.title} is missing an amount paid value")

        # The board only defines the one custom field
        self.amount_paid = items[0].amount_paid()

    def inflate_card_history(self, client: "TrelloClient", completed_list_id: str) -> None:
        """Find when the card was moved into the completed list.

        Actions are taken in the order Trello returns them and the last
        matching one wins. The field stays empty when nothing matches.
        """
        for item in client.card_list_moves(self.id):
            action = CardAction.from_api(item)
            if action.moved_into(completed_list_id):
                self.fund_transfer_date = format_display_date(
                    parse_action_date(action.date)
                )

    def inflate_request_date(self) -> None:
        """Decode when the card was created from its id."""
        self.request_date = decode_request_date(self.id)

    def inflate(self, client: "TrelloClient", completed_list_id: str) -> None:
        """Populate every derived field, in export order.

        Raises:
            ExportError: On the first step that fails
            requests.RequestException: On transport failures

        """
        log.debug("Inflating card %s (%s)", self.id, self.title)
        self.inflate_description()
        self.inflate_amount_paid(client)
        self.inflate_card_history(client, completed_list_id)
        self.inflate_request_date()
