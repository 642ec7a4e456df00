from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TextIO

from .identity import quote_identity
from .models import AuthoredDirectoryList, AuthorReport, Settings

INDENT = "  "


class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[0;31m"
    GREEN = "\033[0;32m"
    YELLOW = "\033[1;33m"
    CYAN = "\033[0;36m"


def colorize(text: str, color: str, enabled: bool) -> str:
    if not enabled:
        return text
    return f"{color}{text}{Colors.RESET}"


def bold(text: str, enabled: bool) -> str:
    return colorize(text, Colors.BOLD, enabled)


def color_supported(stream: TextIO | None = None, *, no_color: bool = False) -> bool:
    if no_color or os.environ.get("NO_COLOR"):
        return False
    stream = stream if stream is not None else sys.stdout
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def error_line(message: str, *, color: bool) -> str:
    return f"{colorize('Error:', Colors.RED, color)} {message}"


def warning_line(message: str, *, color: bool) -> str:
    return f"{colorize('Warning:', Colors.YELLOW, color)} {message}"


def config_notes(loaded_from: tuple[Path, ...], *, color: bool) -> list[str]:
    return [f"{colorize('Loading configuration from:', Colors.CYAN, color)} {bold(str(p), color)}" for p in loaded_from]


def missing_config_warning(config_path: Path, example_path: Path, *, color: bool) -> str:
    return warning_line(f"No configuration file found at '{config_path}' or '{example_path}'. Using empty defaults.", color=color)


def render_authors_header(settings: Settings) -> str:
    c = settings.color
    lines = [bold(f"Finding all authors in '{colorize(str(settings.root), Colors.CYAN, c)}'...", c)]
    if settings.ignored_dirs:
        lines.append(f"Ignoring directories: {colorize(' '.join(sorted(settings.ignored_dirs)), Colors.YELLOW, c)}")
    lines.append("")
    return "\n".join(lines)


def render_author_report(report: AuthorReport, *, show_directories: bool, quoted: bool, color: bool) -> str:
    if report.is_empty():
        return colorize("No authors found in non-ignored directories.", Colors.YELLOW, color)

    # Quoted output is meant for pasting into the config file, so it never lists directories.
    with_dirs = show_directories and not quoted
    title = "--- All unique authors and their contributed directories:" if with_dirs else "--- All unique authors:"
    lines = [bold(title, color)]
    for author, repos in report.sorted_items():
        if quoted:
            lines.append(quote_identity(author))
        elif with_dirs:
            lines.append(colorize(f"{author}:", Colors.GREEN, color))
            lines.extend(f"{INDENT}{r}" for r in repos)
            lines.append("")
        else:
            lines.append(colorize(author, Colors.GREEN, color))
    return "\n".join(lines).rstrip("\n")


def render_authored_header(settings: Settings) -> str:
    c = settings.color
    return bold(f"Finding directories contributed to by default authors in '{colorize(str(settings.root), Colors.CYAN, c)}'...", c)


def render_author_filter(authors: frozenset[str], *, color: bool) -> str:
    return f"Filtering by authors: {colorize(', '.join(sorted(authors)), Colors.CYAN, color)}\n"


def render_no_defaults(*, color: bool) -> str:
    return warning_line("No default authors defined. Cannot filter repositories.", color=color)


def render_authored_dirs(found: AuthoredDirectoryList, *, color: bool) -> str:
    if found.is_empty():
        return colorize("No directories found with commits from the specified authors.", Colors.YELLOW, color)
    lines = [bold("--- Directories with commits by default authors:", color)]
    lines.extend(f"{INDENT}{r}" for r in found.sorted_unique())
    return "\n".join(lines)


def render_footer(tool: str, *, color: bool) -> str:
    return "\n" + bold(f"Finished {tool}.", color)
