"""Replace ``<...>`` markup with a placeholder token."""
from __future__ import annotations

from ._patterns import TAG_RE


class ReplaceTags:
    token = "<TAG>"

    def __call__(self, text: str) -> str:
        return TAG_RE.sub(self.token, text)


def register(registry) -> None:
    registry.register("replace_tags", ReplaceTags)
