# Business logic services
from inbox_sorter.services.classifier import (
    assemble_record,
    classify_message,
    classify_word_count,
)
from inbox_sorter.services.content_extraction import (
    ContentDecodeError,
    ContentExtractionError,
    FlattenedContent,
    MalformedPayloadError,
    count_words,
    flatten_payload,
    normalize_body,
    strip_quotes_and_signature,
)
from inbox_sorter.services.gmail_client import (
    GmailAuthError,
    GmailClient,
    GmailClientError,
    GmailRateLimitError,
    GmailTemporaryError,
    build_listing_query,
)
from inbox_sorter.services.inbox_review import apply_labels, fetch_classified_page
from inbox_sorter.services.paywall import PaywallVerdict, detect_paywall

__all__ = [
    "assemble_record",
    "classify_message",
    "classify_word_count",
    "ContentDecodeError",
    "ContentExtractionError",
    "FlattenedContent",
    "MalformedPayloadError",
    "count_words",
    "flatten_payload",
    "normalize_body",
    "strip_quotes_and_signature",
    "GmailClient",
    "GmailAuthError",
    "GmailClientError",
    "GmailRateLimitError",
    "GmailTemporaryError",
    "build_listing_query",
    "apply_labels",
    "fetch_classified_page",
    "PaywallVerdict",
    "detect_paywall",
]
