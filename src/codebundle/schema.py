"""
Declarative option schema for the codebundle commands.

Each command is described by a tuple of :class:`OptionSpec` entries. The
argparse backend in :mod:`codebundle.cli` turns them into arguments; nothing
here depends on argparse.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class OptionKind(str, Enum):
    TEXT = "text"
    FLAG = "flag"


@dataclass(frozen=True)
class OptionSpec:
    """One command-line option: ``--name`` plus its short aliases."""

    name: str
    aliases: Tuple[str, ...] = ()
    required: bool = False
    default: object = None
    kind: OptionKind = OptionKind.TEXT
    help: str = ""
    choices: Optional[Tuple[str, ...]] = None
    # Asked for by ``create-rsp`` and written to the response file.
    prompt: bool = False

    @property
    def flag(self) -> str:
        return f"--{self.name}"

    @property
    def dest(self) -> str:
        return self.name.replace("-", "_")

    @property
    def option_strings(self) -> Tuple[str, ...]:
        return self.aliases + (self.flag,)


@dataclass(frozen=True)
class CommandSpec:
    name: str
    help: str
    options: Tuple[OptionSpec, ...]


BUNDLE_OPTIONS: Tuple[OptionSpec, ...] = (
    OptionSpec(
        "language",
        aliases=("-l",),
        required=True,
        help="Comma-separated languages to include (cs, py, java, js, go) or 'all'",
        prompt=True,
    ),
    OptionSpec(
        "output",
        aliases=("-o",),
        required=True,
        help="Path of the bundle file to write",
        prompt=True,
    ),
    OptionSpec(
        "note",
        aliases=("-n",),
        default=False,
        kind=OptionKind.FLAG,
        help="Prefix every file with a '// Source: <path>' comment",
        prompt=True,
    ),
    OptionSpec(
        "sort",
        aliases=("-s",),
        default="name",
        help="Sort files by 'name' or 'type' (default: name)",
        prompt=True,
    ),
    OptionSpec(
        "remove-empty-lines",
        aliases=("-r",),
        default=False,
        kind=OptionKind.FLAG,
        help="Drop empty and whitespace-only lines",
        prompt=True,
    ),
    OptionSpec(
        "author",
        aliases=("-a",),
        help="Add a '// Author: <name>' header line",
        prompt=True,
    ),
    OptionSpec(
        "exclude-mode",
        default="substring",
        choices=("substring", "segment"),
        help="How 'bin'/'debug' paths are excluded: anywhere in the path "
        "(substring, default) or as whole directory names (segment)",
    ),
    OptionSpec(
        "use-gitignore",
        default=False,
        kind=OptionKind.FLAG,
        help="Also skip files matched by the working directory's .gitignore",
    ),
    OptionSpec(
        "exclude-file",
        aliases=("-x",),
        help="File with extra ignore patterns (gitignore syntax, one per line)",
    ),
    OptionSpec(
        "verbose",
        aliases=("-v",),
        default=False,
        kind=OptionKind.FLAG,
        help="Verbose output",
    ),
)

CREATE_RSP_OPTIONS: Tuple[OptionSpec, ...] = (
    OptionSpec(
        "output",
        aliases=("-o",),
        required=True,
        help="Path of the response file to write",
    ),
)

COMMANDS: Tuple[CommandSpec, ...] = (
    CommandSpec("bundle", "Combine multiple code files into one.", BUNDLE_OPTIONS),
    CommandSpec(
        "create-rsp",
        "Create a response file with pre-configured options for the bundle command.",
        CREATE_RSP_OPTIONS,
    ),
)

# --language, --output, --note, --sort, --remove-empty-lines, --author
RESPONSE_FILE_OPTIONS: Tuple[str, ...] = tuple(
    spec.flag for spec in BUNDLE_OPTIONS if spec.prompt
)
