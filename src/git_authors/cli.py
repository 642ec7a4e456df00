from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, ConfigLists, default_config_path, example_path_for, load_config
from .models import Settings
from .render import color_supported, config_notes, error_line, missing_config_warning
from .run import AUTHORED_DIRS_TOOL, AUTHORS_TOOL, run_authored_dirs, run_authors


class _HelpAndFail(argparse.Action):
    """`-h` prints usage and exits non-zero: asking for help means nothing ran."""

    def __init__(self, option_strings: list[str], dest: str = argparse.SUPPRESS, default: str = argparse.SUPPRESS, help: str | None = None) -> None:
        super().__init__(option_strings=option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None) -> None:
        parser.print_help()
        parser.exit(1)


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got: {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got: {n}")
    return n


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "directory",
        nargs="*",
        type=Path,
        help="Root directory to search for git repos. Defaults to the current working directory.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Local config file (default: $GIT_AUTHORS_CONFIG or ~/.config/git-authors/default_values.conf). "
        "A sibling '<config>.example' file is read as well.",
    )
    parser.add_argument("-j", "--jobs", type=_positive_int, default=1, help="Inspect up to N repos in parallel (default: 1).")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")
    parser.add_argument("-h", "--help", action=_HelpAndFail, help="Display this help message and exit.")


def build_authors_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=AUTHORS_TOOL,
        description="List all commit authors across the git repos under a directory.",
        add_help=False,
    )
    _add_common_args(parser)
    parser.add_argument(
        "-i",
        "--ignore-dirs",
        action="append",
        default=[],
        metavar="DIR1,DIR2,...",
        help="Add directory names to the ignore list (comma-separated, may be repeated).",
    )
    parser.add_argument("-d", "--directories", action="store_true", help="List the repos each author has contributed to.")
    parser.add_argument(
        "-q",
        "--quoted",
        action="store_true",
        help="Wrap author names in quotes for pasting into the config file (takes precedence over -d).",
    )
    return parser


def build_authored_dirs_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=AUTHORED_DIRS_TOOL,
        description="List git repos under a directory that contain commits by the configured default authors.",
        add_help=False,
    )
    _add_common_args(parser)
    return parser


def _split_csv_args(values: list[str]) -> list[str]:
    out: list[str] = []
    for v in values:
        for part in str(v).split(","):
            part = part.strip()
            if part:
                out.append(part)
    return out


def _resolve_root(parser: argparse.ArgumentParser, args: argparse.Namespace) -> Path:
    dirs: list[Path] = list(args.directory or [])
    if len(dirs) > 1:
        parser.error(f"cannot specify multiple directories (got: {', '.join(str(d) for d in dirs)})")
    return dirs[0] if dirs else Path.cwd()


def _load_config_lists(args: argparse.Namespace, *, color: bool) -> ConfigLists | None:
    config_path = args.config if args.config is not None else default_config_path()
    example_path = example_path_for(config_path)
    try:
        lists = load_config(config_path=config_path, example_path=example_path)
    except ConfigError as e:
        print(error_line(f"invalid configuration: {e}", color=color), file=sys.stderr)
        return None
    if lists.loaded_from:
        for note in config_notes(lists.loaded_from, color=color):
            print(note)
    else:
        print(missing_config_warning(config_path, example_path, color=color), file=sys.stderr)
    return lists


def _write_raw_bytes(stream) -> None:
    # Identities that are not valid UTF-8 are printed with their original bytes,
    # so `-q` output pasted into the config file still matches exactly.
    reconfigure = getattr(stream, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(errors="surrogateescape")


def _check_root(root: Path, *, color: bool) -> bool:
    if root.is_dir():
        return True
    print(error_line(f"The specified directory '{root}' does not exist or is not a directory.", color=color), file=sys.stderr)
    return False


def authors_main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_authors_parser()
    args = parser.parse_args(argv)
    root = _resolve_root(parser, args)
    _write_raw_bytes(sys.stdout)
    color = color_supported(sys.stdout, no_color=bool(args.no_color))

    lists = _load_config_lists(args, color=color)
    if lists is None:
        return 1
    if not _check_root(root, color=color):
        return 1

    ignored = set(lists.ignored_dirs)
    ignored.update(_split_csv_args(args.ignore_dirs))
    settings = Settings(
        root=root,
        ignored_dirs=frozenset(ignored),
        default_authors=lists.authors,
        show_directories=bool(args.directories),
        quoted=bool(args.quoted),
        color=color,
        jobs=int(args.jobs),
    )
    return run_authors(settings)


def authored_dirs_main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_authored_dirs_parser()
    args = parser.parse_args(argv)
    root = _resolve_root(parser, args)
    _write_raw_bytes(sys.stdout)
    color = color_supported(sys.stdout, no_color=bool(args.no_color))

    lists = _load_config_lists(args, color=color)
    if lists is None:
        return 1
    if not _check_root(root, color=color):
        return 1

    # Repos are matched by author here, so no directory is ever skipped.
    settings = Settings(
        root=root,
        ignored_dirs=frozenset(),
        default_authors=lists.authors,
        color=color,
        jobs=int(args.jobs),
    )
    return run_authored_dirs(settings)


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        print("usage: python -m git_authors <command> [options]")
        print("")
        print("commands:")
        print(f"  authors        Same as `{AUTHORS_TOOL}`: list commit authors across repos.")
        print(f"  authored-dirs  Same as `{AUTHORED_DIRS_TOOL}`: list repos with commits by the default authors.")
        print("")
        print("Run `python -m git_authors <command> --help` for command-specific options.")
        return 1
    if argv[0] == "authors":
        return authors_main(argv[1:])
    if argv[0] == "authored-dirs":
        return authored_dirs_main(argv[1:])
    print(error_line(f"unknown command: {argv[0]!r}", color=False), file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
