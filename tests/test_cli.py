import json
import logging
from pathlib import Path

import pytest

from askl import askl_cli
from askl.askl_errors import UnclosedScope

QUERY = '@a(k="v") "f" { @b }'


def test_run_askl_string_input_prints_json(capsys: pytest.CaptureFixture[str]) -> None:
    text = askl_cli.run_askl(source=QUERY, is_string=True)
    out = capsys.readouterr().out
    assert json.loads(out) == json.loads(text)
    assert json.loads(out)["statements"][0]["verbs"][0]["name"] == "a"


def test_run_askl_file_input(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    file_path = tmp_path / "rules.askl"
    file_path.write_text(QUERY, encoding="utf-8")
    askl_cli.run_askl(source=str(file_path), fmt="askl")
    assert capsys.readouterr().out.strip() == QUERY


def test_run_askl_writes_out_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out_path = tmp_path / "out.txt"
    askl_cli.run_askl(source="@a", is_string=True, fmt="tree", out=str(out_path))
    assert capsys.readouterr().out == ""
    assert out_path.read_text(encoding="utf-8").splitlines()[0] == "query @1:1"


def test_run_askl_json_indent(capsys: pytest.CaptureFixture[str]) -> None:
    text = askl_cli.run_askl(source="@a", is_string=True, indent=0)
    assert text.startswith('{\n"kind": "query"')


def test_run_askl_keeps_unicode(capsys: pytest.CaptureFixture[str]) -> None:
    text = askl_cli.run_askl(source='"名前"', is_string=True)
    assert "名前" in text


def test_run_askl_rejects_non_askl_file() -> None:
    with pytest.raises(ValueError, match="Only .askl files are supported"):
        askl_cli.run_askl(source="rules.txt")


def test_run_askl_rejects_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unknown output format"):
        askl_cli.run_askl(source="@a", is_string=True, fmt="xml")


def test_run_askl_propagates_syntax_errors() -> None:
    with pytest.raises(UnclosedScope):
        askl_cli.run_askl(source="{", is_string=True)


def test_main_success(capsys: pytest.CaptureFixture[str]) -> None:
    assert askl_cli.main(["-s", "@a; @b", "-f", "askl"]) == 0
    assert capsys.readouterr().out.strip() == "@a; @b"


def test_main_reports_syntax_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert askl_cli.main(["-s", '@a(x="1",)']) == 1
    err = capsys.readouterr().err
    assert err.startswith("MalformedArguments:")
    assert "^" in err


@pytest.mark.parametrize("fmt", ["json", "askl", "tree"])  # type: ignore[misc]
def test_main_reports_nesting_too_deep_to_format(
    fmt: str, capsys: pytest.CaptureFixture[str]
) -> None:
    depth = 5000
    assert askl_cli.main(["-s", "{" * depth + "}" * depth, "-f", fmt]) == 1
    captured = capsys.readouterr()
    assert captured.err.strip() == "askl: error: query nests too deeply to format"
    assert "Traceback" not in captured.err


def test_main_reports_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert askl_cli.main([str(tmp_path / "missing.askl")]) == 1
    assert capsys.readouterr().err.startswith("askl: error:")


def test_main_rejects_bad_extension(capsys: pytest.CaptureFixture[str]) -> None:
    assert askl_cli.main(["query.txt"]) == 1
    assert "Only .askl files are supported" in capsys.readouterr().err


def test_main_usage_error_exits_2(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        askl_cli.main(["-s", "@a", "-f", "xml"])
    assert excinfo.value.code == 2


def test_main_requires_source(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        askl_cli.main([])


@pytest.mark.parametrize(
    "verbosity,level",
    [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
)  # type: ignore[misc]
def test_configure_logging_levels(
    monkeypatch: pytest.MonkeyPatch, verbosity: int, level: int
) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    askl_cli.configure_logging(verbosity)
    assert calls[0]["level"] == level


def test_verbose_run_logs_progress(
    caplog: pytest.LogCaptureFixture, capsys: pytest.CaptureFixture[str]
) -> None:
    with caplog.at_level(logging.DEBUG):
        assert askl_cli.main(["-vv", "-s", "{ @a }"]) == 0
    messages = [r.getMessage() for r in caplog.records]
    assert "parsed 1 top-level statements" in messages
    assert any(m.startswith("entering scope") for m in messages)
