import io
import logging
import sys

from cli import main


def write(tmp_path, text):
    path = tmp_path / "puzzle.txt"
    path.write_text(text)
    return str(path)


def test_cli_prints_solution(tmp_path, capsys):
    assert main([write(tmp_path, "1\n0 0 0 2\n1\n0 1\n")]) == 0
    assert capsys.readouterr().out == "DRRU\n"


def test_cli_prints_empty_line_when_already_solved(tmp_path, capsys):
    assert main([write(tmp_path, "1\n2 2 2 2\n0\n")]) == 0
    assert capsys.readouterr().out == "\n"


def test_cli_reports_unsolvable(tmp_path, capsys):
    assert main([write(tmp_path, "2\n0 0 0 1 0\n0 0 0 0 0\n")]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error: no command sequence")


def test_cli_reports_invalid_input(tmp_path, capsys):
    assert main([write(tmp_path, "1\n0 0 9 9\n0\n")]) == 1
    assert "outside" in capsys.readouterr().err


def test_cli_verbose_traces_search(tmp_path, capsys, caplog):
    root = logging.getLogger()
    level = root.level
    try:
        assert main(["-v", write(tmp_path, "1\n0 0 0 1\n0\n")]) == 0
    finally:
        root.setLevel(level)

    assert capsys.readouterr().out == "R\n"
    assert "Looking at" in caplog.text
    assert "Pushing" in caplog.text


def test_cli_quiet_by_default(tmp_path, caplog):
    assert main([write(tmp_path, "1\n0 0 0 1\n0\n")]) == 0
    assert "Looking at" not in caplog.text


def test_cli_reads_stdin_without_closing_it(monkeypatch, capsys):
    stdin = io.StringIO("1\n0 0 0 2\n1\n0 1\n")
    monkeypatch.setattr(sys, "stdin", stdin)
    assert main([]) == 0
    assert capsys.readouterr().out == "DRRU\n"
    assert not stdin.closed
