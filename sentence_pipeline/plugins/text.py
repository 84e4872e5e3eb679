"""Small normalization transforms: whitespace, case and HTML entities."""
from __future__ import annotations

import html

from ._patterns import WS_RE


def normalize_whitespace(text: str) -> str:
    return WS_RE.sub(" ", text).strip()


def lowercase(text: str) -> str:
    return text.lower()


def unescape_entities(text: str) -> str:
    return html.unescape(text)


def register(registry) -> None:
    registry.register("normalize_whitespace", lambda: normalize_whitespace)
    registry.register("lowercase", lambda: lowercase)
    registry.register("unescape_entities", lambda: unescape_entities)
