"""Replace URLs and bare domain-like tokens with ``<URL>``.

Trailing sentence punctuation captured by a scheme URL is kept outside the
placeholder: ``see https://a.org/x.`` -> ``see <URL>.``
"""
from __future__ import annotations

import re

from ._patterns import URL_RE

_TRAILING = ".,;:!?)]}'\""


class ReplaceUrls:
    token = "<URL>"

    def _sub(self, match: re.Match) -> str:
        found = match.group(0)
        stripped = found.rstrip(_TRAILING)
        return self.token + found[len(stripped):]

    def __call__(self, text: str) -> str:
        return URL_RE.sub(self._sub, text)


def register(registry) -> None:
    registry.register("replace_urls", ReplaceUrls)
