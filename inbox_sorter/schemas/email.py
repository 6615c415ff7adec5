"""
Gmail message schemas.

Mirrors the ``users.messages.get(format="full")`` resource closely enough to
walk the MIME part tree. Field aliases keep the API's camelCase names.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageHeader(BaseModel):
    """Single RFC 822 header from a message part."""

    name: str = ""
    value: str = ""


class MessagePartBody(BaseModel):
    """Body descriptor of a part: inline base64 data or an attachment reference."""

    model_config = ConfigDict(populate_by_name=True)

    data: Optional[str] = None
    attachment_id: Optional[str] = Field(None, alias="attachmentId")
    size: int = 0


class MessagePart(BaseModel):
    """
    Node of a (possibly nested) multi-part message body.

    Children stay as raw dicts and are validated one node at a time while
    the tree is walked, so arbitrarily deep trees never hit the validator's
    recursion limit.
    """

    model_config = ConfigDict(populate_by_name=True)

    part_id: Optional[str] = Field(None, alias="partId")
    mime_type: str = Field("", alias="mimeType")
    filename: Optional[str] = None
    headers: List[MessageHeader] = Field(default_factory=list)
    body: Optional[MessagePartBody] = None
    parts: List[Dict[str, Any]] = Field(default_factory=list)

    def get_header(self, name: str) -> str:
        """Return the first header value matching name (case-insensitive)."""
        name_lower = name.lower()
        for header in self.headers:
            if header.name.lower() == name_lower:
                return header.value
        return ""


class GmailMessageDetail(BaseModel):
    """Message fetched from Gmail with its raw part tree."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    thread_id: str = Field("", alias="threadId")
    snippet: str = ""
    label_ids: List[str] = Field(default_factory=list, alias="labelIds")
    payload: Optional[MessagePart] = None


class MessagePage(BaseModel):
    """One page of message ids from ``users.messages.list``."""

    message_ids: List[str] = Field(default_factory=list)
    next_page_token: Optional[str] = None
