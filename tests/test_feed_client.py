"""
Unit tests for the upstream author feed client.
"""

from unittest.mock import patch

import pytest
import requests

from deal_feed.components.feed_client import AuthorFeedClient, FetchError
from deal_feed.models.config import DEFAULT_API_URL


class TestFetchError:
    """Test cases for FetchError."""

    def test_message_with_status(self):
        assert str(FetchError(status=500)) == "Bluesky fetch error (500)"

    def test_message_without_status(self):
        error = FetchError(detail="timeout")

        assert error.status is None
        assert str(error) == "Bluesky fetch error (timeout)"


class TestAuthorFeedClient:
    """Test cases for AuthorFeedClient class."""

    def test_init(self):
        """Test AuthorFeedClient initialization."""
        client = AuthorFeedClient()

        assert client.api_url == DEFAULT_API_URL
        assert client.timeout == 30
        assert "User-Agent" in client.session.headers

    @patch("requests.Session.get")
    def test_fetch_request_shape(self, mock_get, mock_response):
        """Test that one request is made with the actor and limit."""
        mock_get.return_value = mock_response(json_data={"feed": []})

        client = AuthorFeedClient(timeout=15)
        client.fetch_author_feed("did:plc:knj5sw5al3sukl6vhkpi7637", 50)

        mock_get.assert_called_once_with(
            DEFAULT_API_URL,
            params={"actor": "did:plc:knj5sw5al3sukl6vhkpi7637", "limit": 50},
            timeout=15,
        )

    @patch("requests.Session.get")
    def test_fetch_success(self, mock_get, mock_response, feed_item):
        """Test successful feed fetching."""
        items = [feed_item(cid="a"), feed_item(cid="b")]
        mock_get.return_value = mock_response(json_data={"feed": items})

        result = AuthorFeedClient().fetch_author_feed("actor", 2)

        assert result == items

    @patch("requests.Session.get")
    def test_fetch_missing_feed_is_empty(self, mock_get, mock_response):
        """Test that a response without a feed list yields no posts."""
        mock_get.return_value = mock_response(json_data={"cursor": "x"})

        assert AuthorFeedClient().fetch_author_feed("actor", 10) == []

    @pytest.mark.parametrize("status", [400, 404, 500, 503])
    @patch("requests.Session.get")
    def test_fetch_http_error(self, mock_get, status, mock_response):
        """Test that non-2xx responses raise FetchError with the status."""
        mock_get.return_value = mock_response(status_code=status)

        with pytest.raises(FetchError) as exc_info:
            AuthorFeedClient().fetch_author_feed("actor", 10)

        assert exc_info.value.status == status
        assert str(exc_info.value) == f"Bluesky fetch error ({status})"
        assert mock_get.call_count == 1

    @patch("requests.Session.get")
    def test_fetch_timeout(self, mock_get):
        """Test feed fetching with timeout."""
        mock_get.side_effect = requests.exceptions.Timeout()

        with pytest.raises(FetchError) as exc_info:
            AuthorFeedClient().fetch_author_feed("actor", 10)

        assert exc_info.value.status is None
        assert exc_info.value.detail == "timeout"

    @patch("requests.Session.get")
    def test_fetch_connection_error(self, mock_get):
        """Test feed fetching with connection error."""
        mock_get.side_effect = requests.exceptions.ConnectionError()

        with pytest.raises(FetchError) as exc_info:
            AuthorFeedClient().fetch_author_feed("actor", 10)

        assert exc_info.value.detail == "connection error"

    @patch("requests.Session.get")
    def test_fetch_invalid_json(self, mock_get, mock_response):
        """Test that an unreadable body is a fetch failure."""
        mock_get.return_value = mock_response(json_error=True)

        with pytest.raises(FetchError) as exc_info:
            AuthorFeedClient().fetch_author_feed("actor", 10)

        assert exc_info.value.status == 200
        assert exc_info.value.detail == "invalid JSON"
