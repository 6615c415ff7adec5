"""
Paywall detection heuristics.

A message is flagged when its raw text contains a known paywall phrase, or
when it comes from a known newsletter platform and its body ends in an
ellipsis (the sender truncated the post).
"""
from dataclasses import dataclass

# Checked in order against the raw decoded text, case-sensitive
PAYWALL_PHRASES = (
    "Keep reading with a 7-day free trial",
    "Subscribe to keep reading",
    "∙ Preview",
    "Subscribe to keep reading this post",
)

# (lowercase hint, display name)
NEWSLETTER_PLATFORMS = (
    ("substack", "Substack"),
)

TRUNCATION_MARKERS = ("...", "…")


@dataclass(frozen=True)
class PaywallVerdict:
    """Result of paywall detection."""

    is_paywall: bool
    reason: str = ""


def find_paywall_phrase(raw_all: str) -> str:
    """Return the first known paywall phrase found in raw_all, or ''."""
    for phrase in PAYWALL_PHRASES:
        if phrase in raw_all:
            return phrase
    return ""


def detect_truncated_platform(raw_all: str, subject: str, body: str) -> str:
    """Return the platform name if the body looks truncated by it, or ''."""
    if not body.strip().endswith(TRUNCATION_MARKERS):
        return ""

    raw_lower = raw_all.lower()
    subject_lower = subject.lower()
    for hint, name in NEWSLETTER_PLATFORMS:
        if hint in raw_lower or hint in subject_lower:
            return name
    return ""


def detect_paywall(raw_all: str, subject: str, body: str) -> PaywallVerdict:
    """
    Decide whether a message is paywalled.

    Args:
        raw_all: Every decoded part, newline-joined
        subject: Message subject
        body: Cleaned body text

    Returns:
        PaywallVerdict with a human-readable reason when flagged
    """
    reason = ""

    phrase = find_paywall_phrase(raw_all)
    if phrase:
        reason = f'Found specific paywall phrase: "{phrase}"'
    else:
        platform = detect_truncated_platform(raw_all, subject, body)
        if platform:
            reason = f"{platform} content appears truncated (ends in ...)"

    return PaywallVerdict(is_paywall=bool(reason), reason=reason)
