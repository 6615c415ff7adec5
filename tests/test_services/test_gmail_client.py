"""Tests for Gmail client service."""
from unittest.mock import MagicMock, patch

import pytest
from googleapiclient.errors import HttpError

from inbox_sorter.config import Settings
from inbox_sorter.services.content_extraction import flatten_payload
from inbox_sorter.services.gmail_client import (
    GmailAuthError,
    GmailClient,
    GmailClientError,
    GmailRateLimitError,
    GmailTemporaryError,
    build_listing_query,
)
from tests.factories import encode


@pytest.fixture
def service():
    """Mock Gmail API service."""
    return MagicMock()


@pytest.fixture
def gmail_client(settings, service):
    """Gmail client with a mocked API service."""
    with patch("inbox_sorter.services.gmail_client.build", return_value=service):
        client = GmailClient(settings)
        client._get_service()
    return client


def http_error(status: int, content: bytes = b"error") -> HttpError:
    resp = MagicMock()
    resp.status = status
    resp.reason = "error"
    return HttpError(resp, content)


class TestCredentials:
    def test_missing_tokens(self, unauthenticated_settings):
        client = GmailClient(unauthenticated_settings)

        with pytest.raises(GmailAuthError, match="No OAuth token"):
            client._get_credentials()

    def test_credentials_from_settings(self, settings):
        credentials = GmailClient(settings)._get_credentials()

        assert credentials.refresh_token == "refresh-token"
        assert credentials.client_id == "client-id"
        assert credentials.token is None

    def test_service_cached_per_thread(self, settings):
        with patch("inbox_sorter.services.gmail_client.build") as mock_build:
            client = GmailClient(settings)
            first = client._get_service()
            second = client._get_service()

        assert first is second
        mock_build.assert_called_once()


class TestBuildListingQuery:
    def test_excludes_every_size_label(self):
        query = build_listing_query("label:inbox category:updates")
        assert query == (
            "label:inbox category:updates "
            "-label:Short -label:Medium -label:Long -label:XL"
        )

    def test_empty_base_query(self):
        assert build_listing_query("").startswith("-label:Short")


class TestListMessageIds:
    def test_returns_page(self, gmail_client, service):
        service.users().messages().list().execute.return_value = {
            "messages": [{"id": "a", "threadId": "t"}, {"id": "b", "threadId": "t"}],
            "nextPageToken": "next",
        }

        page = gmail_client.list_message_ids("q", page_token="tok", max_results=2)

        assert page.message_ids == ["a", "b"]
        assert page.next_page_token == "next"
        service.users().messages().list.assert_called_with(
            userId="me", q="q", maxResults=2, pageToken="tok"
        )

    def test_empty_result(self, gmail_client, service):
        service.users().messages().list().execute.return_value = {"resultSizeEstimate": 0}

        page = gmail_client.list_message_ids("q")

        assert page.message_ids == []
        assert page.next_page_token is None

    def test_http_error_mapped(self, gmail_client, service):
        service.users().messages().list().execute.side_effect = http_error(401)

        with pytest.raises(GmailAuthError):
            gmail_client.list_message_ids("q")

    def test_execute_retries_transient_errors(self, gmail_client, service):
        service.users().messages().list().execute.return_value = {}

        gmail_client.list_message_ids("q")

        service.users().messages().list().execute.assert_called_with(num_retries=3)


class TestGetMessage:
    def test_parses_part_tree(self, gmail_client, service):
        service.users().messages().get().execute.return_value = {
            "id": "msg_1",
            "threadId": "thread_1",
            "snippet": "Hello",
            "labelIds": ["INBOX"],
            "payload": {
                "mimeType": "multipart/alternative",
                "headers": [{"name": "Subject", "value": "Greetings"}],
                "body": {"size": 0},
                "parts": [
                    {"partId": "0", "mimeType": "text/plain", "body": {"data": encode("Hi")}},
                    {
                        "partId": "1",
                        "mimeType": "application/pdf",
                        "filename": "a.pdf",
                        "body": {"attachmentId": "att", "size": 10},
                    },
                ],
            },
        }

        message = gmail_client.get_message("msg_1")

        assert message.snippet == "Hello"
        assert message.label_ids == ["INBOX"]
        assert message.payload.get_header("subject") == "Greetings"
        assert message.payload.parts[0]["mimeType"] == "text/plain"
        assert message.payload.parts[1]["body"]["attachmentId"] == "att"

    def test_message_without_payload(self, gmail_client, service):
        service.users().messages().get().execute.return_value = {"id": "msg_1"}

        message = gmail_client.get_message("msg_1")

        assert message.payload is None
        assert message.snippet == ""

    def test_server_error(self, gmail_client, service):
        service.users().messages().get().execute.side_effect = http_error(503)

        with pytest.raises(GmailTemporaryError):
            gmail_client.get_message("msg_1")

    def test_execute_retries_transient_errors(self, gmail_client, service):
        service.users().messages().get().execute.return_value = {"id": "msg_1"}

        gmail_client.get_message("msg_1")

        service.users().messages().get().execute.assert_called_with(num_retries=3)

    def test_deeply_nested_payload(self, gmail_client, service):
        node = {"mimeType": "text/plain", "body": {"data": encode("deep leaf")}}
        for _ in range(300):
            node = {"mimeType": "multipart/mixed", "parts": [node]}
        service.users().messages().get().execute.return_value = {
            "id": "msg_1",
            "payload": node,
        }

        message = gmail_client.get_message("msg_1")

        assert flatten_payload(message.payload).plain_text == "deep leaf"


class TestModifyLabels:
    def test_add_only(self, gmail_client, service):
        gmail_client.modify_labels("msg_1", add_label_ids=["Label_1"])

        service.users().messages().modify.assert_called_with(
            userId="me", id="msg_1", body={"addLabelIds": ["Label_1"]}
        )

    def test_remove_only(self, gmail_client, service):
        gmail_client.modify_labels("msg_1", remove_label_ids=["INBOX"])

        service.users().messages().modify.assert_called_with(
            userId="me", id="msg_1", body={"removeLabelIds": ["INBOX"]}
        )

    def test_unexpected_error_wrapped(self, gmail_client, service):
        service.users().messages().modify().execute.side_effect = RuntimeError("boom")

        with pytest.raises(GmailClientError, match="boom"):
            gmail_client.modify_labels("msg_1", add_label_ids=["x"])

    def test_retry_count_from_settings(self, service):
        settings = Settings(
            _env_file=None, google_refresh_token="refresh-token", gmail_num_retries=0
        )
        with patch("inbox_sorter.services.gmail_client.build", return_value=service):
            client = GmailClient(settings)
            client.modify_labels("msg_1", add_label_ids=["x"])

        service.users().messages().modify().execute.assert_called_with(num_retries=0)


class TestHandleHttpError:
    def test_401_raises_auth_error(self, gmail_client):
        error = MagicMock()
        error.resp.status = 401
        with pytest.raises(GmailAuthError):
            gmail_client._handle_http_error(error)

    def test_429_raises_rate_limit(self, gmail_client):
        error = MagicMock()
        error.resp.status = 429
        with pytest.raises(GmailRateLimitError):
            gmail_client._handle_http_error(error)

    def test_500_raises_temporary_error(self, gmail_client):
        error = MagicMock()
        error.resp.status = 500
        with pytest.raises(GmailTemporaryError):
            gmail_client._handle_http_error(error)

    def test_403_rate_limit_reason(self, gmail_client):
        error = MagicMock()
        error.resp.status = 403
        error.__str__ = lambda self: "rateLimitExceeded"
        with pytest.raises(GmailRateLimitError):
            gmail_client._handle_http_error(error)

    def test_403_raises_client_error(self, gmail_client):
        error = MagicMock()
        error.resp.status = 403
        error.__str__ = lambda self: "forbidden"
        with pytest.raises(GmailClientError):
            gmail_client._handle_http_error(error)
