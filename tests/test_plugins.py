import time

import pytest

from sentence_pipeline.discovery import build_registry

EXPECTED = {
    "replace_tags",
    "replace_urls",
    "replace_emails",
    "normalize_whitespace",
    "lowercase",
    "unescape_entities",
    "strip_markup",
}


@pytest.fixture(scope="module")
def registry():
    return build_registry(entry_points=False, environ={})


def test_expected_plugins_registered(registry):
    missing = EXPECTED.difference(registry.names())
    assert not missing, f"Missing plugins: {missing}"
    for name in registry.names():
        assert callable(registry.resolve(name)), f"Plugin {name} not callable"


def test_replace_tags(registry):
    plugin = registry.resolve("replace_tags")
    assert plugin("replace <xml> tags") == "replace <TAG> tags"
    assert plugin("<p class='x'>hi</p>") == "<TAG>hi<TAG>"
    # comparison operators are not markup
    assert plugin("a < b > c") == "a < b > c"


@pytest.mark.parametrize("line,expected", [
    ("visit example.com now", "visit <URL> now"),
    ("see https://a.org/x.", "see <URL>."),
    ("docs at www.python.org today", "docs at <URL> today"),
    ("read docs.python.org/3/library for details", "read <URL> for details"),
    ("pi is 3.14 roughly", "pi is 3.14 roughly"),
    ("no links here", "no links here"),
])
def test_replace_urls(registry, line, expected):
    assert registry.resolve("replace_urls")(line) == expected


def test_replace_emails_before_urls(registry):
    emails = registry.resolve("replace_emails")
    urls = registry.resolve("replace_urls")
    line = "mail jane.doe@example.com or visit example.org"
    assert urls(emails(line)) == "mail <EMAIL> or visit <URL>"


def test_text_helpers(registry):
    assert registry.resolve("normalize_whitespace")("  a \t b  c ") == "a b c"
    assert registry.resolve("lowercase")("MiXeD Case") == "mixed case"
    assert registry.resolve("unescape_entities")("fish &amp; chips &lt;3") == "fish & chips <3"


def test_strip_markup(registry):
    plugin = registry.resolve("strip_markup")
    assert plugin("<b>bold</b> &amp; plain") == "bold & plain"
    assert plugin("a <script>x()</script>b") == "a b"
    assert plugin("nothing to strip") == "nothing to strip"


@pytest.mark.parametrize("line", ["a." * 20000, "x" * 40000, "ab-" * 13000 + ".com", "http" * 10000])
def test_replace_urls_long_lines_stay_fast(registry, line):
    plugin = registry.resolve("replace_urls")
    start = time.perf_counter()
    plugin(line)
    assert time.perf_counter() - start < 2.0
