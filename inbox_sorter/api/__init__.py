# API routes
from inbox_sorter.api.deps import get_gmail_client

__all__ = [
    "get_gmail_client",
]
