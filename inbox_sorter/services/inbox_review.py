"""
Batch operations behind the review workflow.

Contains:
- fetch_classified_page: list one page of unlabeled messages, fetch and
  classify each of them on a bounded thread pool
- apply_labels: apply the reviewer's decisions (size label, archive, skip)

Every message is handled independently: a failure is reported for that
message only and never aborts the rest of the batch.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from inbox_sorter.schemas.classification import (
    ClassifiedMessage,
    FetchFailure,
    LabelItem,
    LabelResult,
)
from inbox_sorter.schemas.enums import LabelAction, SizeLabel
from inbox_sorter.services.classifier import classify_message
from inbox_sorter.services.gmail_client import (
    INBOX_LABEL_ID,
    GmailClient,
    build_listing_query,
)

logger = logging.getLogger(__name__)


@dataclass
class ClassifiedPage:
    """One page of classified messages plus the per-message failures."""

    emails: List[ClassifiedMessage] = field(default_factory=list)
    failures: List[FetchFailure] = field(default_factory=list)
    next_page_token: Optional[str] = None


def _fetch_and_classify(
    client: GmailClient, message_id: str
) -> Tuple[Optional[ClassifiedMessage], Optional[FetchFailure]]:
    """Fetch and classify one message, capturing any failure."""
    try:
        message = client.get_message(message_id)
        record = classify_message(message.id, message.payload, message.snippet)
        return record, None
    except Exception as e:
        logger.error(f"Failed to classify message {message_id}: {e}")
        return None, FetchFailure(id=message_id, error=str(e))


def fetch_classified_page(
    client: GmailClient,
    page_token: Optional[str] = None,
    base_query: Optional[str] = None,
    max_results: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> ClassifiedPage:
    """
    List a page of messages without a size label and classify them.

    Args:
        client: Gmail client
        page_token: Continuation token from the previous page
        base_query: Search query; the size-label exclusions are appended
        max_results: Page size (defaults to settings.batch_size)
        max_workers: Concurrent fetches (defaults to settings.fetch_concurrency)

    Returns:
        ClassifiedPage in listing order

    Raises:
        GmailClientError: If the listing call itself fails
    """
    settings = client.settings
    query = build_listing_query(
        base_query if base_query is not None else settings.gmail_listing_query
    )
    page = client.list_message_ids(
        query,
        page_token=page_token,
        max_results=max_results or settings.batch_size,
    )

    result = ClassifiedPage(next_page_token=page.next_page_token)
    if not page.message_ids:
        return result

    workers = max(1, min(max_workers or settings.fetch_concurrency, len(page.message_ids)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        outcomes = executor.map(
            lambda message_id: _fetch_and_classify(client, message_id),
            page.message_ids,
        )
        for record, failure in outcomes:
            if record is not None:
                result.emails.append(record)
            if failure is not None:
                result.failures.append(failure)

    logger.info(
        f"Classified {len(result.emails)} of {len(page.message_ids)} messages "
        f"({len(result.failures)} failed)"
    )
    return result


def resolve_size_label_ids(labels: List[dict]) -> Dict[SizeLabel, str]:
    """Map each size label to its Gmail label ID, where the label exists."""
    by_name = {label.get("name"): label.get("id") for label in labels}
    return {
        size_label: by_name[size_label.value]
        for size_label in SizeLabel
        if by_name.get(size_label.value)
    }


def _apply_one(
    client: GmailClient,
    item: LabelItem,
    label_ids: Dict[SizeLabel, str],
) -> Optional[str]:
    """Apply one decision. Returns an error message on failure."""
    if item.label == LabelAction.ARCHIVE:
        logger.info(f"Archiving email: {item.id}")
        client.modify_labels(item.id, remove_label_ids=[INBOX_LABEL_ID])
        return None

    label_id = label_ids.get(item.label.size_label)
    if not label_id:
        logger.error(f"Label ID not found for: {item.label.value}")
        return f"Label ID not found for: {item.label.value}"

    logger.info(
        f"Labeling email {item.id} as {item.label.value} ({label_id}). Keeping in Inbox."
    )
    client.modify_labels(item.id, add_label_ids=[label_id])
    return None


def apply_labels(
    client: GmailClient,
    items: List[LabelItem],
    max_workers: Optional[int] = None,
) -> LabelResult:
    """
    Apply review decisions to messages.

    ``skip`` does nothing, ``archive`` removes the message from the inbox,
    and a size label is added while the message stays in the inbox.

    Args:
        client: Gmail client
        items: Decisions from the review UI
        max_workers: Concurrent modify calls (defaults to settings.fetch_concurrency)

    Returns:
        LabelResult with counts and per-message failures

    Raises:
        GmailClientError: If the label list cannot be fetched
    """
    result = LabelResult(success=True)

    pending = []
    for item in items:
        if item.label == LabelAction.SKIP:
            logger.info(f"Skipping email: {item.id}")
            result.skipped += 1
        else:
            pending.append(item)

    if not pending:
        return result

    label_ids = resolve_size_label_ids(client.get_labels())

    def run(item: LabelItem) -> Optional[str]:
        logger.info(f"Processing email: {item.id} with action: {item.label.value}")
        try:
            return _apply_one(client, item, label_ids)
        except Exception as e:
            logger.error(f"Failed to apply {item.label.value} to {item.id}: {e}")
            return str(e)

    workers = max(1, min(max_workers or client.settings.fetch_concurrency, len(pending)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        for item, error in zip(pending, executor.map(run, pending)):
            if error:
                result.failures.append(FetchFailure(id=item.id, error=error))
            elif item.label == LabelAction.ARCHIVE:
                result.archived += 1
            else:
                result.applied += 1

    result.success = not result.failures
    return result
