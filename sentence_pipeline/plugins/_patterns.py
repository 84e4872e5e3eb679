"""Regexes shared by the builtin replacement plugins.

Every alternative of URL_RE does a bounded amount of work before it either
matches or gives up, so matching stays linear in the line length.
"""
import re

TAG_RE = re.compile(r"<[^<>\s][^<>]*>")
EMAIL_RE = re.compile(r"\b[\w.+-]+@[\w-]+(?:\.[\w-]+)+\b")
_LABEL = r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
# scheme URLs, www. hosts, and bare domain-like tokens (example.com, docs.python.org/3)
URL_RE = re.compile(
    r"(?:\b[a-zA-Z][a-zA-Z0-9+.-]{0,31}://\S+)"
    r"|(?:\bwww\.\S+)"
    rf"|(?:\b(?:{_LABEL}\.){{1,8}}[a-zA-Z]{{2,24}}\b(?:/[^\s]*)?)"
)
WS_RE = re.compile(r"\s+")
