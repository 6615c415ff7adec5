"""
Reading-length classification of Gmail messages.

Runs the full pipeline for one message: extract the body, count words,
detect paywalls, pick a size label and assemble the record returned to
the review UI.
"""
import logging
import re
from typing import Optional

from inbox_sorter.schemas.classification import ClassifiedMessage
from inbox_sorter.schemas.email import MessagePart
from inbox_sorter.schemas.enums import SizeLabel
from inbox_sorter.services.content_extraction import (
    FlattenedContent,
    MalformedPayloadError,
    count_words,
    flatten_payload,
    normalize_body,
    strip_quotes_and_signature,
)
from inbox_sorter.services.paywall import PaywallVerdict, detect_paywall

logger = logging.getLogger(__name__)

NO_SUBJECT = "(No Subject)"

# (exclusive lower bound, label), highest first
SIZE_THRESHOLDS = (
    (5000, SizeLabel.XL),
    (1500, SizeLabel.LONG),
    (250, SizeLabel.MEDIUM),
)


def classify_word_count(word_count: int) -> SizeLabel:
    """Map a word count to a size label; boundary values fall in the lower band."""
    for lower_bound, label in SIZE_THRESHOLDS:
        if word_count > lower_bound:
            return label
    return SizeLabel.SHORT


def assemble_record(
    message_id: str,
    subject: str,
    word_count: int,
    suggested_label: SizeLabel,
    snippet: str,
    body: str,
    verdict: PaywallVerdict,
) -> ClassifiedMessage:
    """Compose the classified message record."""
    return ClassifiedMessage(
        id=message_id,
        subject=subject,
        word_count=word_count,
        suggested_label=suggested_label,
        snippet=snippet,
        body=body,
        is_paywall=verdict.is_paywall,
        paywall_reason=verdict.reason,
    )


def get_subject(payload: Optional[MessagePart]) -> str:
    """Subject header of the root part, or a placeholder."""
    if payload is None:
        return NO_SUBJECT
    return payload.get_header("Subject") or NO_SUBJECT


def classify_message(
    message_id: str,
    payload: Optional[MessagePart],
    snippet: str = "",
) -> ClassifiedMessage:
    """
    Classify a single message by reading length.

    A missing or empty payload still yields a record (empty body, Short).

    Args:
        message_id: Gmail message ID
        payload: Root of the message part tree
        snippet: Provider-supplied snippet, passed through unmodified

    Returns:
        ClassifiedMessage record
    """
    subject = get_subject(payload)

    try:
        content = flatten_payload(payload)
    except MalformedPayloadError as e:
        logger.warning(f"Message {message_id} has a malformed payload: {e}")
        content = FlattenedContent()

    body = strip_quotes_and_signature(normalize_body(content))
    word_count = count_words(body)
    verdict = detect_paywall(content.raw_all, subject, body)
    suggested_label = classify_word_count(word_count)

    preview = re.sub(r"\s+", " ", body[:100])
    logger.info(
        f"Classified {message_id}: subject={subject[:50]!r} "
        f"words={word_count} label={suggested_label.value} "
        f"paywall={verdict.is_paywall}"
        + (f" ({verdict.reason})" if verdict.reason else "")
    )
    logger.debug(f"Body preview for {message_id}: {preview}...")

    return assemble_record(
        message_id=message_id,
        subject=subject,
        word_count=word_count,
        suggested_label=suggested_label,
        snippet=snippet,
        body=body,
        verdict=verdict,
    )
