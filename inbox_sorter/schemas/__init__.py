# Pydantic schemas
from inbox_sorter.schemas.classification import (
    ClassifiedMessage,
    EmailListResponse,
    FetchFailure,
    LabelItem,
    LabelRequest,
    LabelResult,
    StatusResponse,
)
from inbox_sorter.schemas.email import (
    GmailMessageDetail,
    MessageHeader,
    MessagePage,
    MessagePart,
    MessagePartBody,
)
from inbox_sorter.schemas.enums import LabelAction, SizeLabel

__all__ = [
    # Classification
    "ClassifiedMessage",
    "EmailListResponse",
    "FetchFailure",
    "LabelItem",
    "LabelRequest",
    "LabelResult",
    "StatusResponse",
    # Email
    "GmailMessageDetail",
    "MessageHeader",
    "MessagePage",
    "MessagePart",
    "MessagePartBody",
    # Enums
    "LabelAction",
    "SizeLabel",
]
