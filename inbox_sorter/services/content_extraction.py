"""
Message content extraction.

Turns a Gmail MIME part tree into a single plain-text body:

- flatten the part tree into plain / HTML / raw text streams
- normalize to plain text (plain part preferred over stripped HTML)
- strip quoted replies and trailing signatures
- count words
"""
import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from inbox_sorter.schemas.email import MessagePart

logger = logging.getLogger(__name__)

# Dividers only end the message once this many lines were kept
SIGNATURE_MIN_KEPT_LINES = 20
SIGNATURE_DIVIDERS = ("--", "---")

_STYLE_BLOCK_RE = re.compile(r"<style([\s\S]*?)</style>", re.IGNORECASE)
_SCRIPT_BLOCK_RE = re.compile(r"<script([\s\S]*?)</script>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>?")


class ContentExtractionError(Exception):
    """Base exception for content extraction errors."""

    pass


class ContentDecodeError(ContentExtractionError):
    """Encoded body data of a part could not be decoded."""

    pass


class MalformedPayloadError(ContentExtractionError):
    """Message has no part tree to extract from."""

    pass


@dataclass(frozen=True)
class FlattenedContent:
    """Decoded text streams of one message, in part traversal order."""

    plain_text: str = ""
    html_text: str = ""
    raw_all: str = ""


def decode_body_data(data: str) -> str:
    """
    Decode base64 body data to text.

    Accepts both the URL-safe alphabet Gmail uses and the standard one,
    with or without padding. Invalid UTF-8 sequences are replaced.

    Raises:
        ContentDecodeError: If the data is not valid base64
    """
    compact = "".join(data.split()).replace("-", "+").replace("_", "/")
    compact += "=" * (-len(compact) % 4)
    try:
        raw = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ContentDecodeError(f"Invalid base64 body data: {e}") from e
    return raw.decode("utf-8", errors="replace")


def flatten_payload(payload: Optional[MessagePart]) -> FlattenedContent:
    """
    Walk the part tree depth-first and collect decoded text.

    Nodes with children only contribute through their children. Leaves
    holding only an attachment reference contribute nothing. A part whose
    data fails to decode, or a child that is not a valid part, is skipped.

    Raises:
        MalformedPayloadError: If there is no payload at all
    """
    if payload is None:
        raise MalformedPayloadError("Message has no payload")
    if not payload.parts and payload.body is None:
        raise MalformedPayloadError("Message payload has neither parts nor body")

    plain_chunks = []
    html_chunks = []
    raw_chunks = []

    stack = [payload]
    while stack:
        part = stack.pop()
        if part.parts:
            for raw_child in reversed(part.parts):
                try:
                    stack.append(MessagePart.model_validate(raw_child))
                except ValidationError as e:
                    logger.warning(
                        f"Skipping unparseable child of {part.mime_type or 'part'}: {e}"
                    )
            continue
        if part.body is None or not part.body.data:
            continue

        try:
            text = decode_body_data(part.body.data)
        except ContentDecodeError as e:
            logger.warning(f"Skipping undecodable {part.mime_type or 'part'}: {e}")
            continue

        raw_chunks.append(text + "\n")
        if part.mime_type == "text/plain":
            plain_chunks.append(text)
        elif part.mime_type == "text/html":
            html_chunks.append(text)

    return FlattenedContent(
        plain_text="".join(plain_chunks),
        html_text="".join(html_chunks),
        raw_all="".join(raw_chunks),
    )


def html_to_text(html: str) -> str:
    """
    Strip markup from HTML.

    Only ``&nbsp;`` and ``&amp;`` are decoded; other entities are left as-is.
    """
    text = _STYLE_BLOCK_RE.sub("", html)
    text = _SCRIPT_BLOCK_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    return text.replace("&nbsp;", " ").replace("&amp;", "&")


def normalize_body(content: FlattenedContent) -> str:
    """Return the plain-text part if it has content, else the stripped HTML."""
    if content.plain_text.strip():
        return content.plain_text
    return html_to_text(content.html_text)


def _is_reply_attribution(stripped: str) -> bool:
    return stripped.lower().startswith("on ") and "wrote:" in stripped


def strip_quotes_and_signature(body: str) -> str:
    """
    Remove quoted replies and a trailing signature from a body.

    Lines starting with ``>`` are dropped. An "On ... wrote:" line ends the
    message. A ``--``/``---`` divider ends the message once enough lines were
    kept; earlier dividers are dropped as decoration.
    """
    kept = []
    stop = False
    for line in body.split("\n"):
        if stop:
            break
        stripped = line.strip()

        if stripped.startswith(">"):
            continue
        if _is_reply_attribution(stripped):
            stop = True
        elif stripped in SIGNATURE_DIVIDERS:
            if len(kept) >= SIGNATURE_MIN_KEPT_LINES:
                stop = True
        else:
            kept.append(line)

    return "\n".join(kept).strip()


def count_words(body: str) -> int:
    """Count whitespace-separated tokens."""
    if not body.strip():
        return 0
    return len(body.split())
