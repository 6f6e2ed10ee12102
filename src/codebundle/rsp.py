"""
Interactive response-file generation for ``codebundle create-rsp``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterable, List, Tuple

from .core import OutputError, PromptAbortedError
from .schema import RESPONSE_FILE_OPTIONS


def collect_responses(
    options: Iterable[str] = RESPONSE_FILE_OPTIONS,
    read_value: Callable[[], str] = input,
) -> List[Tuple[str, str]]:
    """Ask for a value for each option; answers are taken verbatim."""
    answers: List[Tuple[str, str]] = []
    for option in options:
        print(f"Enter value for {option}:")
        try:
            value = read_value()
        except EOFError as e:
            raise PromptAbortedError(f"Input ended before a value for {option} was given") from e
        answers.append((option, value))
    return answers


def render_response_file(answers: Iterable[Tuple[str, str]]) -> str:
    return "".join(f"{option} {value}{os.linesep}" for option, value in answers)


def write_response_file(answers: Iterable[Tuple[str, str]], out_path: Path) -> Path:
    """Overwrite *out_path* with one ``<option> <value>`` line per answer."""
    text = render_response_file(answers)
    try:
        out_path = out_path.resolve()
        with out_path.open("w", encoding="utf-8", newline="") as out_fh:
            out_fh.write(text)
    except (OSError, RuntimeError) as e:
        raise OutputError(f"Could not write response file '{out_path}': {e}") from e
    return out_path


def create_response_file(
    out_path: Path,
    read_value: Callable[[], str] = input,
) -> Path:
    answers = collect_responses(read_value=read_value)
    return write_response_file(answers, out_path)
