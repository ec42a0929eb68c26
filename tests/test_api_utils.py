#!/usr/bin/env python3
"""Tests for the rate-limited Trello fetcher."""

import unittest
from unittest.mock import MagicMock, patch

import requests

from trello_aid_export.api_utils import (
    RetryPolicy,
    TrelloClient,
    decode_json,
    get_and_backoff,
)
from trello_aid_export.exceptions import ResponseDecodeError, RetryLimitExceeded


def make_response(status_code=200, payload=None):
    """Build a fake response with a JSON payload."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


class TestRetryPolicy(unittest.TestCase):
    """Test RetryPolicy defaults."""

    def test_exponential_delays(self):
        policy = RetryPolicy()
        self.assertEqual(policy.delay_for(1), 2)
        self.assertEqual(policy.delay_for(2), 4)
        self.assertEqual(policy.delay_for(5), 32)

    def test_only_429_is_retried(self):
        policy = RetryPolicy()
        self.assertTrue(policy.should_retry(make_response(429)))
        self.assertFalse(policy.should_retry(make_response(200)))
        self.assertFalse(policy.should_retry(make_response(500)))


@patch("trello_aid_export.api_utils.time.sleep")
class TestGetAndBackoff(unittest.TestCase):
    """Test get_and_backoff retry behaviour."""

    def setUp(self):
        self.session = MagicMock(spec=requests.Session)
        self.url = "https://api.trello.com/1/lists/abc/cards"

    def test_success_without_retry(self, mock_sleep):
        ok = make_response(200, [])
        self.session.get.return_value = ok

        self.assertIs(get_and_backoff(self.session, self.url), ok)
        self.assertEqual(self.session.get.call_count, 1)
        mock_sleep.assert_not_called()

    def test_retries_after_rate_limit(self, mock_sleep):
        """A 429 followed by a 200 waits 2 seconds then returns the 200."""
        ok = make_response(200, [])
        self.session.get.side_effect = [make_response(429), ok]

        with self.assertLogs("trello_aid_export.api_utils", level="INFO") as logs:
            response = get_and_backoff(self.session, self.url)

        self.assertIs(response, ok)
        self.assertEqual(self.session.get.call_count, 2)
        mock_sleep.assert_called_once_with(2.0)
        self.assertIn("Being rate limited, waiting 2 seconds", logs.output[0])

    def test_gives_up_after_ten_attempts(self, mock_sleep):
        self.session.get.return_value = make_response(429)

        with self.assertRaises(RetryLimitExceeded):
            get_and_backoff(self.session, self.url)

        # No 11th request
        self.assertEqual(self.session.get.call_count, 10)
        delays = [c.args[0] for c in mock_sleep.call_args_list]
        self.assertEqual(delays, [2.0 ** n for n in range(1, 10)])

    def test_transport_error_is_not_retried(self, mock_sleep):
        self.session.get.side_effect = requests.ConnectionError("boom")

        with self.assertRaises(requests.ConnectionError):
            get_and_backoff(self.session, self.url)

        self.assertEqual(self.session.get.call_count, 1)
        mock_sleep.assert_not_called()

    def test_error_status_is_returned_as_is(self, mock_sleep):
        unauthorized = make_response(401, ValueError("invalid key"))
        self.session.get.return_value = unauthorized

        self.assertIs(get_and_backoff(self.session, self.url), unauthorized)
        mock_sleep.assert_not_called()

    def test_custom_policy(self, mock_sleep):
        policy = RetryPolicy(max_attempts=2, backoff=lambda attempt: 0.5)
        self.session.get.return_value = make_response(503)
        policy.retry_statuses = frozenset({503})

        with self.assertRaises(RetryLimitExceeded):
            get_and_backoff(self.session, self.url, policy=policy)

        self.assertEqual(self.session.get.call_count, 2)
        mock_sleep.assert_called_once_with(0.5)


class TestDecodeJson(unittest.TestCase):
    """Test decode_json error reporting."""

    def test_decodes_body(self):
        self.assertEqual(decode_json(make_response(200, [1, 2]), "numbers"), [1, 2])

    def test_bad_body_names_resource_and_status(self):
        response = make_response(401, ValueError("Expecting value"))

        with self.assertRaises(ResponseDecodeError) as ctx:
            decode_json(response, "cards in list abc")

        self.assertIn("cards in list abc", str(ctx.exception))
        self.assertIn("HTTP 401", str(ctx.exception))


class TestTrelloClient(unittest.TestCase):
    """Test the Trello endpoint wrappers."""

    def setUp(self):
        self.session = MagicMock(spec=requests.Session)
        self.client = TrelloClient("KEY", "TOKEN", session=self.session)

    def test_list_cards_sends_credentials(self):
        self.session.get.return_value = make_response(200, [{"id": "1"}])

        self.assertEqual(self.client.list_cards("list1"), [{"id": "1"}])

        args, kwargs = self.session.get.call_args
        self.assertEqual(args[0], "https://api.trello.com/1/lists/list1/cards")
        self.assertEqual(kwargs["params"], {"key": "KEY", "token": "TOKEN"})

    def test_card_list_moves_filters_list_updates(self):
        self.session.get.return_value = make_response(200, [])

        self.client.card_list_moves("card1")

        args, kwargs = self.session.get.call_args
        self.assertEqual(args[0], "https://api.trello.com/1/cards/card1/actions")
        self.assertEqual(kwargs["params"]["filter"], "updateCard:idList")

    def test_custom_field_items_url(self):
        self.session.get.return_value = make_response(200, [])

        self.client.card_custom_field_items("card1")

        args, _ = self.session.get.call_args
        self.assertEqual(
            args[0], "https://api.trello.com/1/cards/card1/customFieldItems"
        )

    def test_non_list_body_is_rejected(self):
        self.session.get.return_value = make_response(200, {"message": "nope"})

        with self.assertRaises(ResponseDecodeError):
            self.client.list_cards("list1")


if __name__ == "__main__":
    unittest.main()
