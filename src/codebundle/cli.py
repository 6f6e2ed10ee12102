"""
CLI entrypoint for codebundle package.
"""
import argparse
import sys
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence

from colorama import just_fix_windows_console

from . import __version__
from .core import CodeBundleError, BundleRequest, SortMode, bundle, validate_languages
from .rsp import create_response_file
from .schema import COMMANDS, OptionKind, OptionSpec

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}

# "--note", "-n", ... for every presence flag of every command
FLAG_OPTIONS: FrozenSet[str] = frozenset(
    option
    for command in COMMANDS
    for spec in command.options
    if spec.kind is OptionKind.FLAG
    for option in spec.option_strings
)


def _str_to_bool(value: str) -> Optional[bool]:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    return None


class ResponseFileArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose ``@file`` lines hold ``--option value`` pairs.

    Flags are written with an explicit value (``--note true``); a true value
    expands to the bare flag and a false one to nothing.
    """

    def convert_arg_line_to_args(self, arg_line: str) -> List[str]:
        line = arg_line.strip()
        if not line:
            return []
        parts = line.split(None, 1)
        if len(parts) == 1:
            # "--author " with nothing after it: leave the option at its default
            return [] if parts[0].startswith("-") else parts
        option, value = parts[0], parts[1].strip()
        if option in FLAG_OPTIONS:
            enabled = _str_to_bool(value)
            if enabled is None:
                self.error(f"argument {option}: expected true or false, got {value!r}")
            return [option] if enabled else []
        return [option, value]


def add_options(parser: argparse.ArgumentParser, specs: Iterable[OptionSpec]) -> None:
    """Register every :class:`OptionSpec` in *specs* on *parser*."""
    for spec in specs:
        kwargs = {"dest": spec.dest, "help": spec.help}
        if spec.kind is OptionKind.FLAG:
            kwargs.update(action="store_true")
        else:
            kwargs.update(required=spec.required, default=spec.default)
            if spec.choices:
                kwargs["choices"] = spec.choices
        parser.add_argument(*spec.option_strings, **kwargs)


def _request_from_args(ns: argparse.Namespace) -> BundleRequest:
    return BundleRequest(
        languages=validate_languages(ns.language),
        output_path=Path(ns.output),
        include_source_notes=ns.note,
        sort_mode=SortMode.parse(ns.sort),
        strip_empty_lines=ns.remove_empty_lines,
        author=ns.author or None,
        exclude_mode=ns.exclude_mode,
        use_gitignore=ns.use_gitignore,
        extra_exclude_file=Path(ns.exclude_file) if ns.exclude_file else None,
        verbose=ns.verbose,
    )


def run_bundle(ns: argparse.Namespace) -> int:
    print("Running bundle command...")
    try:
        out_path = bundle(_request_from_args(ns))
    except CodeBundleError as e:
        print(f"Error: {e}")
        return 1
    print(f"Bundle created at {out_path}")
    return 0


def run_create_rsp(ns: argparse.Namespace) -> int:
    try:
        out_path = create_response_file(Path(ns.output))
    except CodeBundleError as e:
        print(f"Error: {e}")
        return 1
    print(f"Response file created at {out_path}")
    return 0


HANDLERS: Dict[str, Callable[[argparse.Namespace], int]] = {
    "bundle": run_bundle,
    "create-rsp": run_create_rsp,
}


def build_parser() -> argparse.ArgumentParser:
    parser = ResponseFileArgumentParser(
        prog="codebundle",
        description="CLI tool for bundling code files and creating response files.",
        fromfile_prefix_chars="@",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True
    for command in COMMANDS:
        sub = commands.add_parser(command.name, help=command.help, description=command.help)
        add_options(sub, command.options)
        sub.set_defaults(handler=HANDLERS[command.name])
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    just_fix_windows_console()
    try:
        ns = build_parser().parse_args(argv)
        return ns.handler(ns)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
