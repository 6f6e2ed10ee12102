from __future__ import annotations

import os
from pathlib import Path

import pytest

from codebundle.core import OutputError, PromptAbortedError
from codebundle.rsp import collect_responses, render_response_file, write_response_file
from codebundle.schema import RESPONSE_FILE_OPTIONS


def test_collect_responses_asks_every_option_in_order(capsys: pytest.CaptureFixture[str]) -> None:
    values = iter(["all", "out.txt", "", "type", "yes", "  Jane  "])

    answers = collect_responses(read_value=lambda: next(values))

    assert [option for option, _ in answers] == list(RESPONSE_FILE_OPTIONS)
    assert answers[2] == ("--note", "")
    assert answers[5] == ("--author", "  Jane  ")
    prompts = capsys.readouterr().out.splitlines()
    assert prompts == [f"Enter value for {option}:" for option in RESPONSE_FILE_OPTIONS]


def test_collect_responses_end_of_input_aborts() -> None:
    def closed() -> str:
        raise EOFError

    with pytest.raises(PromptAbortedError, match="--language"):
        collect_responses(read_value=closed)


def test_render_response_file_one_line_per_answer() -> None:
    text = render_response_file([("--language", "go"), ("--sort", "")])

    assert text == f"--language go{os.linesep}--sort {os.linesep}"


def test_write_response_file_overwrites(tmp_path: Path) -> None:
    target = tmp_path / "saved.rsp"
    target.write_text("stale content\n", encoding="utf-8")

    resolved = write_response_file([("--output", "b.txt")], target)

    assert resolved == target.resolve()
    assert target.read_bytes().decode("utf-8") == f"--output b.txt{os.linesep}"


def test_write_response_file_unwritable_target_raises(tmp_path: Path) -> None:
    with pytest.raises(OutputError, match="Could not write response file"):
        write_response_file([("--output", "b.txt")], tmp_path / "no-such-dir" / "saved.rsp")
