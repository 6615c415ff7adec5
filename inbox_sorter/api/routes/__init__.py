"""API routes package."""
from inbox_sorter.api.routes import emails

__all__ = ["emails"]
