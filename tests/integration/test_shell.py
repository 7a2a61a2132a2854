from __future__ import annotations

import io
from pathlib import Path

from rich.console import Console
from typer.testing import CliRunner

from cli.app import app
from cli.commands.shell import run_shell
from preprocessing.loader import load_corpus
from services.index_service import build_corpus_index

runner = CliRunner()


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, force_terminal=False, width=120), buffer


def test_shell_continues_after_invalid_query(corpus_dir: Path, monkeypatch) -> None:
    index = build_corpus_index(load_corpus(corpus_dir))
    answers = iter(["spring", "", "kotlin", ":quit", "never reached"])
    monkeypatch.setattr("rich.prompt.Prompt.ask", lambda *args, **kwargs: next(answers))
    console, buffer = _console()

    executed = run_shell(index, limit=10, use_idf=False, console=console)

    output = buffer.getvalue()
    assert executed == 2
    assert "spring.md#intro: 1" in output
    assert "invalid query" in output
    assert "no results" in output


def test_shell_stops_on_eof(corpus_dir: Path, monkeypatch) -> None:
    index = build_corpus_index(load_corpus(corpus_dir))

    def _eof(*args, **kwargs):
        raise EOFError

    monkeypatch.setattr("rich.prompt.Prompt.ask", _eof)
    console, _ = _console()

    assert run_shell(index, limit=10, use_idf=False, console=console) == 0


def test_shell_command_reads_stdin(corpus_dir: Path) -> None:
    result = runner.invoke(
        app,
        ["shell", "--corpus", str(corpus_dir)],
        input="dashboard\n\n:q\n",
    )

    assert result.exit_code == 0, result.output
    assert "guides/sonar.md#run: 1" in result.output
    assert "invalid query" in result.output
