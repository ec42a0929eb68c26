#!/usr/bin/env python3
"""Common API utilities for Trello API access."""

import logging
import time
from typing import Any, Callable, Dict, FrozenSet, List, Optional

import requests

from .exceptions import ResponseDecodeError, RetryLimitExceeded

log = logging.getLogger(__name__)

TRELLO_API_BASE = "https://api.trello.com/1"
REQUEST_TIMEOUT = 30


def exponential_backoff(attempt: int) -> float:
    """Seconds to wait before retry number ``attempt`` (1, 2, 3, ...)."""
    return float(2 ** attempt)


class RetryPolicy:
    """Retry policy for Trello's rate limiting.

    Trello answers with HTTP 429 when a key or token sends too many requests,
    so we back off exponentially and give up after a fixed number of attempts.
    """

    def __init__(
        self,
        max_attempts: int = 10,
        backoff: Callable[[int], float] = exponential_backoff,
        retry_statuses: FrozenSet[int] = frozenset({429}),
    ):
        """Initialize the retry policy.

        Args:
            max_attempts: Rate limited responses tolerated before giving up
            backoff: Maps the attempt number to a delay in seconds
            retry_statuses: HTTP status codes that signal rate limiting

        """
        self.max_attempts = max_attempts
        self.backoff = backoff
        self.retry_statuses = frozenset(retry_statuses)

    def should_retry(self, response: requests.Response) -> bool:
        """Return True if the response signals rate limiting."""
        return response.status_code in self.retry_statuses

    def delay_for(self, attempt: int) -> float:
        """Return how long to sleep before retry number ``attempt``."""
        return self.backoff(attempt)


def get_and_backoff(
    session: requests.Session,
    url: str,
    params: Optional[Dict[str, str]] = None,
    policy: Optional[RetryPolicy] = None,
) -> requests.Response:
    """GET a URL, backing off while the server rate limits us.

    Any response that is not rate limited is returned as is, whatever its
    status code. Callers decide whether the body is usable.

    Args:
        session: Session used for the request
        url: URL to fetch
        params: Query string parameters
        policy: Retry policy, defaults to ``RetryPolicy()``

    Returns:
        The first response that was not rate limited

    Raises:
        RetryLimitExceeded: After ``policy.max_attempts`` rate limited responses
        requests.RequestException: On any transport failure, without retrying

    """
    if policy is None:
        policy = RetryPolicy()

    attempt = 0
    while True:
        response = session.get(url, params=params, timeout=REQUEST_TIMEOUT)
        if not policy.should_retry(response):
            return response

        attempt += 1
        if attempt >= policy.max_attempts:
            raise RetryLimitExceeded(
                f"retry limit exceeded after {attempt} attempts for {url}"
            )

        delay = policy.delay_for(attempt)
        log.info("Being rate limited, waiting %d seconds and trying again", delay)
        time.sleep(delay)


def decode_json(response: requests.Response, what: str) -> Any:
    """Parse a response body as JSON.

    Args:
        response: Response to decode
        what: Human-readable name of the resource, used in the error message

    Raises:
        ResponseDecodeError: If the body is not valid JSON

    """
    try:
        return response.json()
    except ValueError as e:
        raise ResponseDecodeError(
            f"Could not decode {what} (HTTP {response.status_code}): {e}"
        ) from e


class TrelloClient:
    """Read-only access to the handful of Trello endpoints the export needs."""

    def __init__(
        self,
        api_key: str,
        token: str,
        session: Optional[requests.Session] = None,
        policy: Optional[RetryPolicy] = None,
        base_url: str = TRELLO_API_BASE,
    ):
        self.api_key = api_key
        self.token = token
        self.session = session or requests.Session()
        self.policy = policy or RetryPolicy()
        self.base_url = base_url.rstrip("/")

    def _auth_params(self) -> Dict[str, str]:
        return {"key": self.api_key, "token": self.token}

    def get_json(
        self, path: str, what: str, params: Optional[Dict[str, str]] = None
    ) -> Any:
        """Fetch ``path`` under the API base and decode the JSON body."""
        response = get_and_backoff(
            self.session,
            f"{self.base_url}{path}",
            params={**self._auth_params(), **(params or {})},
            policy=self.policy,
        )
        return decode_json(response, what)

    def get_list(
        self, path: str, what: str, params: Optional[Dict[str, str]] = None
    ) -> List[Dict[str, Any]]:
        """Like ``get_json``, but the body must be a JSON array."""
        data = self.get_json(path, what, params=params)
        if not isinstance(data, list):
            raise ResponseDecodeError(f"Expected a list of {what}, got: {data!r}")
        return data

    def list_cards(self, list_id: str) -> List[Dict[str, Any]]:
        """Fetch every card currently in a list."""
        return self.get_list(f"/lists/{list_id}/cards", f"cards in list {list_id}")

    def card_custom_field_items(self, card_id: str) -> List[Dict[str, Any]]:
        """Fetch the custom field values set on a card."""
        return self.get_list(
            f"/cards/{card_id}/customFieldItems",
            f"custom fields of card {card_id}",
        )

    def card_list_moves(self, card_id: str) -> List[Dict[str, Any]]:
        """Fetch the actions that moved a card between lists."""
        return self.get_list(
            f"/cards/{card_id}/actions",
            f"actions of card {card_id}",
            params={"filter": "updateCard:idList"},
        )
