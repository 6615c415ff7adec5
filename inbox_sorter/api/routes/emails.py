"""
Review workflow API routes.

Endpoints:
- GET /api/status - Whether Gmail credentials are configured
- GET /api/emails - Next page of unlabeled emails, classified by length
- POST /api/label - Apply size labels / archive decisions in bulk
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool

from inbox_sorter.api.deps import get_gmail_client
from inbox_sorter.config import Settings, get_settings
from inbox_sorter.schemas.classification import (
    EmailListResponse,
    LabelRequest,
    LabelResult,
    StatusResponse,
)
from inbox_sorter.services.gmail_client import (
    GmailAuthError,
    GmailClient,
    GmailClientError,
)
from inbox_sorter.services.inbox_review import apply_labels, fetch_classified_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["emails"])


@router.get(
    "/status",
    response_model=StatusResponse,
    summary="Authentication status",
    description="Check whether Gmail credentials are configured.",
)
async def get_status(settings: Settings = Depends(get_settings)) -> StatusResponse:
    """Report whether the service can talk to Gmail."""
    logger.info(f"Status check: token exists: {settings.gmail_authenticated}")
    return StatusResponse(authenticated=settings.gmail_authenticated)


@router.get(
    "/emails",
    response_model=EmailListResponse,
    summary="List classified emails",
    description="Fetch the next page of emails without a size label and classify them.",
)
async def list_emails(
    page_token: Optional[str] = Query(
        None, alias="pageToken", description="Continuation token from the previous page"
    ),
    client: GmailClient = Depends(get_gmail_client),
) -> EmailListResponse:
    """
    List classified emails.

    Messages that fail to fetch or classify are omitted from ``emails``
    and reported in ``failures``.
    """
    try:
        page = await run_in_threadpool(fetch_classified_page, client, page_token)
    except GmailAuthError as e:
        logger.error(f"Gmail auth error fetching emails: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    except GmailClientError as e:
        logger.error(f"Error fetching emails: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch emails",
        )

    return EmailListResponse(
        emails=page.emails,
        next_page_token=page.next_page_token,
        failures=page.failures,
    )


@router.post(
    "/label",
    response_model=LabelResult,
    summary="Apply labels",
    description="Apply size labels, archive or skip a batch of reviewed emails.",
)
async def label_emails(
    request: LabelRequest,
    client: GmailClient = Depends(get_gmail_client),
) -> LabelResult:
    """
    Apply review decisions.

    Each item is applied independently; failed items are listed in
    ``failures`` and ``success`` is false if any failed.
    """
    try:
        return await run_in_threadpool(apply_labels, client, request.labels_to_apply)
    except GmailAuthError as e:
        logger.error(f"Gmail auth error applying labels: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    except GmailClientError as e:
        logger.error(f"Error applying labels: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to apply labels",
        )
