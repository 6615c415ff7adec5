"""
Gmail API client for listing, fetching and labeling messages.

Provides methods to:
- List message IDs matching a search query (paginated)
- Fetch a message with its full MIME part tree
- List labels
- Add/remove labels on a message
"""
import logging
import threading
from typing import List, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from inbox_sorter.config import Settings, get_settings
from inbox_sorter.schemas.email import GmailMessageDetail, MessagePage
from inbox_sorter.schemas.enums import SizeLabel

logger = logging.getLogger(__name__)

GMAIL_SCOPES = [
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/gmail.labels",
    "https://www.googleapis.com/auth/gmail.modify",
]

INBOX_LABEL_ID = "INBOX"


class GmailClientError(Exception):
    """Base exception for Gmail client errors."""

    pass


class GmailAuthError(GmailClientError):
    """OAuth authentication error - token invalid or revoked."""

    pass


class GmailTemporaryError(GmailClientError):
    """Temporary error that persisted through the configured retries."""

    pass


class GmailRateLimitError(GmailTemporaryError):
    """Rate limit exceeded - wait before retrying."""

    pass


def build_listing_query(base_query: str) -> str:
    """
    Build the search query for messages not yet size-labeled.

    Args:
        base_query: Gmail search query to narrow down (e.g. inbox updates)

    Returns:
        Query excluding every size label
    """
    exclusions = " ".join(f"-label:{label.value}" for label in SizeLabel)
    return f"{base_query} {exclusions}".strip()


class GmailClient:
    """
    Gmail API client for the configured mailbox.

    Service objects are kept per thread since the underlying httplib2
    transport is not thread-safe.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize Gmail client.

        Args:
            settings: Settings holding OAuth client and user tokens
        """
        self.settings = settings or get_settings()
        self._credentials: Optional[Credentials] = None
        self._local = threading.local()

    def _get_credentials(self) -> Credentials:
        """
        Get Google credentials from settings.

        Returns:
            Google OAuth Credentials object

        Raises:
            GmailAuthError: If no user tokens are configured
        """
        if not self.settings.gmail_authenticated:
            raise GmailAuthError("No OAuth token available")

        if self._credentials is None:
            self._credentials = Credentials(
                token=self.settings.google_access_token or None,
                refresh_token=self.settings.google_refresh_token or None,
                token_uri=self.settings.google_token_uri,
                client_id=self.settings.google_client_id,
                client_secret=self.settings.google_client_secret,
                scopes=GMAIL_SCOPES,
            )
        return self._credentials

    def _get_service(self):
        """
        Get or create the Gmail API service for the current thread.

        Returns:
            Gmail API service object
        """
        service = getattr(self._local, "service", None)
        if service is None:
            credentials = self._get_credentials()
            logger.info("Building Gmail service")
            try:
                service = build(
                    "gmail", "v1", credentials=credentials, cache_discovery=False
                )
            except Exception as e:
                logger.error(f"Failed to build Gmail service: {e}", exc_info=True)
                raise GmailClientError(f"Failed to build Gmail service: {e}")
            self._local.service = service
        return service

    def _handle_http_error(self, error: HttpError) -> None:
        """
        Handle Gmail API HTTP errors.

        Args:
            error: HttpError from Gmail API

        Raises:
            GmailAuthError: For auth errors (401, 403)
            GmailRateLimitError: For rate limit errors (429)
            GmailTemporaryError: For temporary errors (5xx)
            GmailClientError: For other errors
        """
        status_code = error.resp.status if error.resp else 0

        if status_code == 401:
            raise GmailAuthError("OAuth token expired or revoked")
        elif status_code == 403:
            error_reason = str(error)
            if "accessNotConfigured" in error_reason:
                raise GmailAuthError("Gmail API not enabled for this project")
            elif "insufficientPermissions" in error_reason:
                raise GmailAuthError("Insufficient OAuth permissions")
            elif "rateLimitExceeded" in error_reason:
                raise GmailRateLimitError("Gmail API rate limit exceeded")
            else:
                raise GmailClientError(f"Access forbidden: {error}")
        elif status_code == 429:
            raise GmailRateLimitError("Gmail API rate limit exceeded")
        elif status_code >= 500:
            raise GmailTemporaryError(f"Gmail API server error: {error}")
        else:
            raise GmailClientError(f"Gmail API error: {error}")

    def list_message_ids(
        self,
        query: str,
        page_token: Optional[str] = None,
        max_results: int = 10,
    ) -> MessagePage:
        """
        List one page of message IDs matching a query.

        Args:
            query: Gmail search query
            page_token: Continuation token from a previous page
            max_results: Page size

        Returns:
            MessagePage with IDs and the next page token

        Raises:
            GmailAuthError: If OAuth token is invalid
            GmailTemporaryError: For retryable errors
            GmailClientError: For other errors
        """
        try:
            service = self._get_service()
            logger.info(
                f"Listing messages, query: '{query}', max_results: {max_results}"
            )

            results = (
                service.users()
                .messages()
                .list(
                    userId="me",
                    q=query,
                    maxResults=max_results,
                    pageToken=page_token,
                )
                .execute(num_retries=self.settings.gmail_num_retries)
            )

            message_ids = [msg["id"] for msg in results.get("messages", [])]
            logger.info(f"Gmail API returned {len(message_ids)} message IDs")
            return MessagePage(
                message_ids=message_ids,
                next_page_token=results.get("nextPageToken"),
            )

        except HttpError as e:
            self._handle_http_error(e)
        except GmailClientError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error listing messages: {e}")
            raise GmailClientError(f"Failed to list messages: {e}")

    def get_message(self, message_id: str) -> GmailMessageDetail:
        """
        Get a message with its full part tree.

        Args:
            message_id: Gmail message ID

        Returns:
            GmailMessageDetail with snippet and payload

        Raises:
            GmailAuthError: If OAuth token is invalid
            GmailTemporaryError: For retryable errors
            GmailClientError: For other errors
        """
        try:
            service = self._get_service()

            message = (
                service.users()
                .messages()
                .get(userId="me", id=message_id, format="full")
                .execute(num_retries=self.settings.gmail_num_retries)
            )
            message.setdefault("id", message_id)
            return GmailMessageDetail.model_validate(message)

        except HttpError as e:
            self._handle_http_error(e)
        except GmailClientError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error getting message {message_id}: {e}")
            raise GmailClientError(f"Failed to get message {message_id}: {e}")

    def get_labels(self) -> List[dict]:
        """
        Get all labels for the Gmail account.

        Returns:
            List of label dicts with id and name

        Raises:
            GmailClientError: On API error
        """
        try:
            service = self._get_service()

            results = (
                service.users()
                .labels()
                .list(userId="me")
                .execute(num_retries=self.settings.gmail_num_retries)
            )
            return results.get("labels", [])

        except HttpError as e:
            self._handle_http_error(e)
        except GmailClientError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error getting labels: {e}")
            raise GmailClientError(f"Failed to get labels: {e}")

    def modify_labels(
        self,
        message_id: str,
        add_label_ids: Optional[List[str]] = None,
        remove_label_ids: Optional[List[str]] = None,
    ) -> None:
        """
        Add and/or remove labels on a message.

        Args:
            message_id: Gmail message ID
            add_label_ids: Label IDs to add
            remove_label_ids: Label IDs to remove

        Raises:
            GmailAuthError: If OAuth token is invalid
            GmailTemporaryError: For retryable errors
            GmailClientError: For other errors
        """
        body = {}
        if add_label_ids:
            body["addLabelIds"] = add_label_ids
        if remove_label_ids:
            body["removeLabelIds"] = remove_label_ids

        try:
            service = self._get_service()

            service.users().messages().modify(
                userId="me",
                id=message_id,
                body=body,
            ).execute(num_retries=self.settings.gmail_num_retries)

            logger.info(f"Modified labels on message {message_id}: {body}")

        except HttpError as e:
            self._handle_http_error(e)
        except GmailClientError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error modifying labels: {e}")
            raise GmailClientError(f"Failed to modify labels on {message_id}: {e}")
