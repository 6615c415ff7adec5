"""
API dependencies for Gmail access.
"""
from fastapi import Depends, HTTPException, status

from inbox_sorter.config import Settings, get_settings
from inbox_sorter.services.gmail_client import GmailClient


def get_gmail_client(settings: Settings = Depends(get_settings)) -> GmailClient:
    """
    Get a Gmail client for the configured mailbox.

    Raises:
        HTTPException: If no Gmail credentials are configured
    """
    if not settings.gmail_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return GmailClient(settings)
