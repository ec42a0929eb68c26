"""Exceptions raised while exporting completed cards."""


class ExportError(Exception):
    """Base class for every fault that aborts an export run."""


class RetryLimitExceeded(ExportError):
    """Trello kept rate limiting us past the retry ceiling."""


class ResponseDecodeError(ExportError):
    """A Trello response body was not the JSON we expected."""


class DescriptionParseError(ExportError):
    """A card description line had no ``Key: Value`` separator."""


class AmountPaidError(ExportError):
    """The amount paid custom field could not be read."""


class MissingAmountPaidError(AmountPaidError):
    """The card has no custom field items at all."""


class IdentifierDecodeError(ExportError):
    """The creation timestamp could not be decoded from a card id."""


class EmptyListError(ExportError):
    """The completed list returned no cards."""
