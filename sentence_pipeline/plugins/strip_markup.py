"""Drop markup from a line and keep only its text content.

Unlike ``replace_tags`` this parses the line as an HTML fragment, so
entities are decoded and ``<script>``/``<style>`` bodies are removed.
"""
from __future__ import annotations

import logging

from lxml import etree
from lxml import html as lxml_html

logger = logging.getLogger(__name__)

_DROP = ("script", "style")


class StripMarkup:
    def __call__(self, text: str) -> str:
        if "<" not in text and "&" not in text:
            return text
        try:
            root = lxml_html.fragment_fromstring(text, create_parent="div")
        except (etree.ParserError, ValueError) as e:
            logger.debug("strip_markup: leaving unparsable line as-is (%s)", e)
            return text
        for el in list(root.iter(*_DROP)):
            el.drop_tree()
        return root.text_content()


def register(registry) -> None:
    registry.register("strip_markup", StripMarkup)
