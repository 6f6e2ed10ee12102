"""
Core logic for codebundle: scan → filter → sort → assemble → write.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, List, Optional

import pathspec
from colorama import Fore, Style


# Exceptions
class CodeBundleError(Exception): ...
class InvalidLanguageError(CodeBundleError): ...
class MissingWorkingDirectoryError(CodeBundleError): ...
class FileReadError(CodeBundleError): ...
class OutputError(CodeBundleError): ...
class ConfigFileError(CodeBundleError): ...
class PromptAbortedError(CodeBundleError): ...


# Defaults & helpers
KNOWN_LANGUAGES: FrozenSet[str] = frozenset({"cs", "py", "java", "js", "go"})
ALL_LANGUAGES = "all"

# Build-output markers; matched literally anywhere in the absolute path.
EXCLUDED_MARKERS = ("bin", "debug")
SEGMENT_SPEC = pathspec.GitIgnoreSpec.from_lines([f"{marker}/" for marker in EXCLUDED_MARKERS])


class SortMode(str, Enum):
    NAME = "name"
    TYPE = "type"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortMode":
        # Anything that is not "type" sorts by name.
        return cls.TYPE if value == cls.TYPE.value else cls.NAME


@dataclass(frozen=True)
class BundleRequest:
    languages: FrozenSet[str]
    output_path: Path
    include_source_notes: bool = False
    sort_mode: SortMode = SortMode.NAME
    strip_empty_lines: bool = False
    author: Optional[str] = None
    exclude_mode: str = "substring"
    use_gitignore: bool = False
    extra_exclude_file: Optional[Path] = None
    verbose: bool = False


def say(msg: str, colour: str = "") -> None:
    """Print a ``[codebundle]`` progress line, optionally coloured."""
    if colour:
        print(colour + f"[codebundle] {msg}" + Style.RESET_ALL)
    else:
        print(f"[codebundle] {msg}")


# Language selection
def validate_languages(raw: str) -> FrozenSet[str]:
    """Split the ``--language`` CSV and reject unknown tokens."""
    tokens = [tok.strip() for tok in raw.split(",")]
    unknown = [tok for tok in tokens if tok != ALL_LANGUAGES and tok not in KNOWN_LANGUAGES]
    if unknown:
        listed = ", ".join(repr(tok) for tok in unknown)
        raise InvalidLanguageError(
            f"Invalid language specified: {listed} "
            f"(expected {', '.join(sorted(KNOWN_LANGUAGES))} or '{ALL_LANGUAGES}')"
        )
    return frozenset(tokens)


# Ignore-file utilities
def _read_patterns(path: Path) -> "pathspec.GitIgnoreSpec":
    """Compile the gitignore-style patterns in *path*; comments and blanks are skipped."""
    try:
        with path.open("r", encoding="utf-8") as fh:
            patterns = [ln.strip() for ln in fh if ln.strip() and not ln.lstrip().startswith("#")]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read pattern file '{path}': {e}") from e
    return pathspec.GitIgnoreSpec.from_lines(patterns)


def load_gitignore(root: Path) -> "pathspec.GitIgnoreSpec":
    gitignore_path = root / ".gitignore"
    if not gitignore_path.exists():
        return pathspec.GitIgnoreSpec.from_lines([])
    return _read_patterns(gitignore_path)


def load_extra_patterns(config_path: Path) -> "pathspec.GitIgnoreSpec":
    if not config_path.is_file():
        state = "is not a file" if config_path.exists() else "does not exist"
        raise ConfigFileError(f"Exclude file '{config_path}' {state}")
    return _read_patterns(config_path)


# Exclusion predicates: (absolute path, scan root) -> excluded?
ExcludePredicate = Callable[[Path, Path], bool]


def substring_excluded(path: Path, root: Path) -> bool:
    """True if ``bin`` or ``debug`` occurs anywhere in *path*.

    No segment boundaries: ``Cabinet/Main.go`` is excluded too.
    """
    text = str(path)
    return any(marker in text for marker in EXCLUDED_MARKERS)


def segment_excluded(path: Path, root: Path) -> bool:
    """True if a directory named ``bin`` or ``debug`` is on *path* below *root*."""
    return SEGMENT_SPEC.match_file(_relative(path, root))


EXCLUDE_PREDICATES = {
    "substring": substring_excluded,
    "segment": segment_excluded,
}


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


# File discovery
def working_directory() -> Path:
    try:
        return Path.cwd()
    except OSError as e:
        raise MissingWorkingDirectoryError(f"Source directory does not exist: {e}") from e


def scan_files(root: Path) -> List[Path]:
    """Recursively collect **all** files under *root* as absolute paths."""
    try:
        root = root.resolve()
    except (OSError, RuntimeError) as e:
        raise MissingWorkingDirectoryError(f"Could not resolve directory '{root}': {e}") from e

    if not root.exists():
        raise MissingWorkingDirectoryError(f"Source directory '{root}' does not exist")
    if not root.is_dir():
        raise MissingWorkingDirectoryError(f"Source path '{root}' is not a directory")

    found: List[Path] = []
    try:
        for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            found.extend(p for p in (Path(dirpath) / name for name in filenames) if p.is_file())
    except OSError as e:
        raise MissingWorkingDirectoryError(f"Could not scan directory '{root}': {e}") from e
    return found


def _raise_walk_error(err: OSError) -> None:
    # os.walk skips unreadable directories unless told otherwise.
    raise err


# File filtering
def filter_files(
    paths: Iterable[Path],
    root: Path,
    languages: FrozenSet[str],
    exclude: ExcludePredicate = substring_excluded,
    ignore_specs: Iterable["pathspec.PathSpec"] = (),
    skip: Iterable[Path] = (),
    verbose: bool = False,
) -> List[Path]:
    """Drop build-output and ignored paths, then keep the requested extensions.

    ``all`` anywhere in *languages* keeps every extension, even when other
    tokens are listed next to it (``all,cs`` behaves like ``all``).
    """
    specs = list(ignore_specs)
    skipped = set(skip)
    keep_all = ALL_LANGUAGES in languages
    extensions = {f".{lang}" for lang in languages}

    kept: List[Path] = []
    for p in paths:
        if p in skipped:
            continue
        if exclude(p, root):
            if verbose:
                say(f"- Excluding {p}", Fore.YELLOW)
            continue
        rel = _relative(p, root)
        if any(spec.match_file(rel) for spec in specs):
            continue
        if not keep_all and p.suffix not in extensions:
            continue
        kept.append(p)
    return kept


# Sorting
def sort_files(paths: Iterable[Path], mode: SortMode = SortMode.NAME) -> List[Path]:
    if mode is SortMode.TYPE:
        return sorted(paths, key=lambda p: (p.suffix, str(p)))
    return sorted(paths, key=lambda p: (p.name, str(p)))


# Assembly
def read_lines(path: Path) -> List[str]:
    """Return the text lines of *path* without their terminators."""
    try:
        with path.open("r", encoding="utf-8-sig") as fh:
            return [ln.rstrip("\n") for ln in fh]
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"Could not read '{path}': {e}") from e


def assemble_bundle(paths: Iterable[Path], request: BundleRequest) -> str:
    """Build the whole bundle in memory; nothing touches the output path."""
    nl = os.linesep
    parts: List[str] = []
    if request.author:
        parts.append(f"// Author: {request.author}{nl}")

    for p in paths:
        if request.include_source_notes:
            parts.append(f"// Source: {p}{nl}")
        lines = read_lines(p)
        if request.strip_empty_lines:
            lines = [ln for ln in lines if ln.strip()]
        parts.append(nl.join(lines) + nl)
        parts.append(nl)
    return "".join(parts)


# Output
def write_bundle(text: str, out_path: Path) -> Path:
    """Overwrite *out_path* with *text* and return the resolved path."""
    try:
        out_path = out_path.resolve()
    except (OSError, RuntimeError) as e:
        raise OutputError(f"Could not resolve output path '{out_path}': {e}") from e

    out_dir = out_path.parent
    if not out_dir.exists():
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Could not create output directory '{out_dir}': {e}") from e

    try:
        with out_path.open("w", encoding="utf-8", newline="") as out_fh:
            out_fh.write(text)
    except OSError as e:
        raise OutputError(f"Could not write to output file '{out_path}': {e}") from e
    return out_path


def bundle(request: BundleRequest, root: Optional[Path] = None) -> Path:
    """Run scan → filter → sort → assemble → write for *request*."""
    if root is None:
        root = working_directory()
    root = root.resolve()

    ignore_specs = []
    if request.use_gitignore:
        ignore_specs.append(load_gitignore(root))
    if request.extra_exclude_file is not None:
        ignore_specs.append(load_extra_patterns((root / request.extra_exclude_file).resolve()))
        if request.verbose:
            say(f"Loaded extra patterns from {request.extra_exclude_file}")

    if request.verbose:
        say(f"Scanning {root} …")
    all_files = scan_files(root)

    kept = filter_files(
        all_files,
        root,
        request.languages,
        exclude=EXCLUDE_PREDICATES[request.exclude_mode],
        ignore_specs=ignore_specs,
        skip=[(root / request.output_path).resolve()],
        verbose=request.verbose,
    )
    if request.verbose:
        say(f"{len(all_files)} files found, {len(kept)} after filtering.")

    ordered = sort_files(kept, request.sort_mode)
    text = assemble_bundle(ordered, request)
    out_path = write_bundle(text, root / request.output_path)

    if request.verbose:
        say(f"Done. {len(ordered)} files bundled, {len(text)} characters written.", Fore.GREEN)
    return out_path
