import pytest

from sentence_pipeline.config import ProcessingRequest
from sentence_pipeline.discovery import build_registry
from sentence_pipeline.errors import IOFailure, OutputExists, UnknownPlugin
from sentence_pipeline.pipeline import (
    Pipeline,
    output_path_for,
    process_line,
    process_stream,
    resolve_chain,
    run,
    run_request,
)
from sentence_pipeline.registry import PluginRegistry


@pytest.fixture(scope="module")
def registry():
    return build_registry(entry_points=False, environ={})


def make_input(tmp_path, lines, name="sentences.txt"):
    path = tmp_path / name
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    return path


def test_resolve_chain_keeps_order():
    registry = PluginRegistry()
    plugins = {name: registry.register(name, lambda n=name: (lambda s: s + n)) for name in "abc"}
    chain = resolve_chain(registry, ["c", "a", "b", "a"])
    assert chain == [plugins["c"], plugins["a"], plugins["b"], plugins["a"]]
    assert process_line("", chain) == "caba"


def test_resolve_chain_names_first_unknown(registry):
    with pytest.raises(UnknownPlugin) as exc:
        resolve_chain(registry, ["replace_tags", "unknown_plugin", "also_unknown"])
    assert exc.value.name == "unknown_plugin"


def test_empty_chain_is_identity():
    assert process_line("unchanged <xml> example.com", []) == "unchanged <xml> example.com"


def test_scenarios_single_plugin(registry):
    assert process_line("replace <xml> tags", resolve_chain(registry, ["replace_tags"])) == "replace <TAG> tags"
    assert process_line("visit example.com now", resolve_chain(registry, ["replace_urls"])) == "visit <URL> now"


def test_process_stream_preserves_order_and_strips_eol(registry):
    chain = resolve_chain(registry, ["replace_tags"])
    lines = ["first <a>\n", "second\r\n", "\n", "last <b>"]
    out = list(process_stream(lines, chain))
    assert out == ["first <TAG>", "second", "", "last <TAG>"]


def test_process_stream_single_pass():
    stream = process_stream(iter(["a\n", "b\n"]), [])
    assert list(stream) == ["a", "b"]
    assert list(stream) == []


@pytest.mark.parametrize("workers", [1, 4])
def test_process_stream_many_lines(registry, workers):
    chain = resolve_chain(registry, ["replace_urls"])
    lines = [f"line {i} site{i}.com\n" for i in range(1000)]
    out = list(process_stream(lines, chain, workers=workers))
    assert len(out) == 1000
    assert out == [f"line {i} <URL>" for i in range(1000)]


def test_run_two_plugins_two_lines(tmp_path, registry):
    src = make_input(tmp_path, ["replace <xml> tags", "visit example.com now"])
    result = run(registry, src, ["replace_tags", "replace_urls"])
    expected_out = tmp_path / "sentences.txt.processed"
    assert result.output == expected_out
    assert result.lines == 2
    assert result.processors == ("replace_tags", "replace_urls")
    assert expected_out.read_text(encoding="utf-8") == "replace <TAG> tags\nvisit <URL> now\n"


def test_run_unknown_plugin_creates_no_output(tmp_path, registry):
    src = make_input(tmp_path, ["replace <xml> tags"])
    with pytest.raises(UnknownPlugin) as exc:
        run(registry, src, ["replace_tags", "unknown_plugin"])
    assert exc.value.name == "unknown_plugin"
    assert not output_path_for(src).exists()


def test_run_missing_input(tmp_path, registry):
    src = tmp_path / "missing.txt"
    with pytest.raises(IOFailure):
        run(registry, src, ["replace_tags"])
    assert not output_path_for(src).exists()


def test_run_unwritable_output(tmp_path, registry):
    src = make_input(tmp_path, ["x"])
    with pytest.raises(IOFailure) as exc:
        run(registry, src, [], tmp_path / "no_such_dir" / "out.txt")
    assert isinstance(exc.value.__cause__, OSError)


def test_run_invalid_utf8(tmp_path, registry):
    src = tmp_path / "latin1.txt"
    src.write_bytes("café\n".encode("latin-1"))
    with pytest.raises(IOFailure):
        run(registry, src, [])
    assert not output_path_for(src).exists()


def test_run_overwrite_policy(tmp_path, registry):
    src = make_input(tmp_path, ["a <b> c"])
    dst = output_path_for(src)
    dst.write_text("stale\n", encoding="utf-8")
    with pytest.raises(OutputExists):
        run(registry, src, ["replace_tags"], overwrite=False)
    assert dst.read_text(encoding="utf-8") == "stale\n"
    run(registry, src, ["replace_tags"])
    assert dst.read_text(encoding="utf-8") == "a <TAG> c\n"


def test_run_empty_input(tmp_path, registry):
    src = tmp_path / "empty.txt"
    src.write_text("", encoding="utf-8")
    result = run(registry, src, ["replace_tags"])
    assert result.lines == 0
    assert result.output.read_text(encoding="utf-8") == ""


def test_run_last_line_without_newline(tmp_path, registry):
    src = tmp_path / "crlf.txt"
    src.write_bytes(b"one <x>\r\ntwo")
    result = run(registry, src, ["replace_tags"], workers=2, progress=True)
    assert result.lines == 2
    assert result.output.read_bytes() == b"one <TAG>\ntwo\n"


def test_pipeline_object(tmp_path, registry):
    pipeline = Pipeline(registry, ["replace_tags", "replace_urls"])
    assert pipeline.process_line("<i>see</i> a.io") == "<TAG>see<TAG> <URL>"
    assert list(pipeline.process_stream(["x.org\n"])) == ["<URL>"]
    src = make_input(tmp_path, ["<br> b.net"])
    out = tmp_path / "custom.out"
    result = pipeline.run(src, out)
    assert result.output == out
    assert out.read_text(encoding="utf-8") == "<TAG> <URL>\n"
    with pytest.raises(UnknownPlugin):
        Pipeline(registry, ["nope"])


def test_run_request(tmp_path, registry):
    src = make_input(tmp_path, ["Hello   World"])
    request = ProcessingRequest(input=src, processors=("normalize_whitespace", "lowercase"))
    result = run_request(registry, request)
    assert result.output.read_text(encoding="utf-8") == "hello world\n"


@pytest.mark.parametrize("as_relative", [False, True])
def test_run_refuses_output_equal_to_input(tmp_path, registry, monkeypatch, as_relative):
    src = make_input(tmp_path, ["replace <xml> tags"])
    dst = src
    if as_relative:
        monkeypatch.chdir(tmp_path)
        dst = "./sentences.txt"
    with pytest.raises(IOFailure):
        run(registry, src, ["replace_tags"], dst)
    assert src.read_text(encoding="utf-8") == "replace <xml> tags\n"


def test_run_invalid_utf8_midway_removes_partial_output(tmp_path, registry):
    src = tmp_path / "mixed.txt"
    src.write_bytes(b"good line\n" * 5000 + "caf\xe9\n".encode("latin-1"))
    with pytest.raises(IOFailure):
        run(registry, src, [])
    assert not output_path_for(src).exists()
