"""Trello aid export: CSV export of completed financial aid requests.

This library fetches the cards in the completed list of the aid board,
derives the contact, amount and date columns for each card, and writes them
as a CSV file.
"""

from .api_utils import RetryPolicy, TrelloClient, get_and_backoff
from .data_utils import decode_request_date, parse_description
from .exceptions import (
    AmountPaidError,
    DescriptionParseError,
    EmptyListError,
    ExportError,
    IdentifierDecodeError,
    MissingAmountPaidError,
    ResponseDecodeError,
    RetryLimitExceeded,
)
from .exporter import COMPLETED_LIST_ID, CardExporter, ExportConfig
from .models import CardAction, CustomFieldItem, TrelloCard

__version__ = "0.1.0"

__all__ = [
    # Data models
    "CardAction",
    "CustomFieldItem",
    "TrelloCard",
    # Data utilities
    "decode_request_date",
    "parse_description",
    # API utilities
    "RetryPolicy",
    "TrelloClient",
    "get_and_backoff",
    # Export
    "COMPLETED_LIST_ID",
    "CardExporter",
    "ExportConfig",
    # Errors
    "AmountPaidError",
    "DescriptionParseError",
    "EmptyListError",
    "ExportError",
    "IdentifierDecodeError",
    "MissingAmountPaidError",
    "ResponseDecodeError",
    "RetryLimitExceeded",
]
