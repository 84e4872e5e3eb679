"""Replace e-mail addresses with ``<EMAIL>``.

Chain this before ``replace_urls``; otherwise the domain half of an address
is consumed as a URL first.
"""
from __future__ import annotations

from ._patterns import EMAIL_RE


def replace_emails(text: str) -> str:
    return EMAIL_RE.sub("<EMAIL>", text)


def register(registry) -> None:
    registry.register("replace_emails", lambda: replace_emails)
