"""
Classification and labeling schemas exchanged with the review UI.

All models serialize with camelCase keys (``wordCount``, ``suggestedLabel``,
``nextPageToken``...) and accept either form on input.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from inbox_sorter.schemas.enums import LabelAction, SizeLabel


class CamelModel(BaseModel):
    """Base model using camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClassifiedMessage(CamelModel):
    """Display-ready record for one classified message."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str
    subject: str
    word_count: int = Field(..., ge=0)
    suggested_label: SizeLabel
    snippet: str = ""
    body: str = ""
    is_paywall: bool = False
    paywall_reason: str = ""


class FetchFailure(CamelModel):
    """A message that could not be fetched or classified."""

    id: str
    error: str


class EmailListResponse(CamelModel):
    """Response for listing classified emails."""

    emails: List[ClassifiedMessage]
    next_page_token: Optional[str] = None
    failures: List[FetchFailure] = Field(default_factory=list)


class LabelItem(CamelModel):
    """Single label decision from the review UI."""

    id: str
    label: LabelAction


class LabelRequest(CamelModel):
    """Request body for applying labels in bulk."""

    labels_to_apply: List[LabelItem]


class LabelResult(CamelModel):
    """Outcome of a bulk label application."""

    success: bool
    applied: int = 0
    skipped: int = 0
    archived: int = 0
    failures: List[FetchFailure] = Field(default_factory=list)


class StatusResponse(CamelModel):
    """Response for the authentication status check."""

    authenticated: bool
