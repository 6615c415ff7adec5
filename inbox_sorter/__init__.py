"""Reading-length triage for Gmail inboxes."""

__version__ = "0.1.0"
