from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TypeVar

from .git import discover_git_dirs, has_author_commits, is_repo_root, list_repo_authors
from .identity import AuthorFilter, MatchPolicy
from .models import AuthoredDirectoryList, AuthorReport, Settings
from .render import (
    render_author_filter,
    render_author_report,
    render_authored_dirs,
    render_authored_header,
    render_authors_header,
    render_footer,
    render_no_defaults,
)

T = TypeVar("T")

AUTHORS_TOOL = "git-authors"
AUTHORED_DIRS_TOOL = "git-authored-dirs"


def repo_dir_for(git_dir: Path) -> Path:
    return git_dir.parent


def inspect_authors(git_dir: Path) -> tuple[str, set[str]] | None:
    repo = repo_dir_for(git_dir)
    if not is_repo_root(repo):
        return None
    return str(repo), list_repo_authors(repo)


def inspect_authored(git_dir: Path, author_filter: AuthorFilter) -> str | None:
    repo = repo_dir_for(git_dir)
    if not is_repo_root(repo):
        return None
    if has_author_commits(repo, author_filter):
        return str(repo)
    return None


def inspect_all(git_dirs: Iterable[Path], inspect: Callable[[Path], T | None], *, jobs: int) -> Iterator[T]:
    if jobs <= 1:
        for git_dir in git_dirs:
            r = inspect(git_dir)
            if r is not None:
                yield r
        return

    with ThreadPoolExecutor(max_workers=jobs) as ex:
        futs = [ex.submit(inspect, git_dir) for git_dir in git_dirs]
        for fut in as_completed(futs):
            r = fut.result()
            if r is not None:
                yield r


def collect_author_report(settings: Settings) -> AuthorReport:
    report = AuthorReport()
    git_dirs = discover_git_dirs(settings.root, settings.ignored_dirs)
    for repo, authors in inspect_all(git_dirs, inspect_authors, jobs=settings.jobs):
        report.add(repo, authors)
    return report


def collect_authored_dirs(settings: Settings, author_filter: AuthorFilter) -> AuthoredDirectoryList:
    found = AuthoredDirectoryList()
    git_dirs = discover_git_dirs(settings.root, settings.ignored_dirs)
    for repo in inspect_all(git_dirs, lambda d: inspect_authored(d, author_filter), jobs=settings.jobs):
        found.add(repo)
    return found


def run_authors(settings: Settings) -> int:
    print(render_authors_header(settings))
    report = collect_author_report(settings)
    print(render_author_report(report, show_directories=settings.show_directories, quoted=settings.quoted, color=settings.color))
    print(render_footer(AUTHORS_TOOL, color=settings.color))
    return 0


def run_authored_dirs(settings: Settings) -> int:
    print(render_authored_header(settings))

    if not settings.default_authors:
        print(render_no_defaults(color=settings.color))
        print(render_footer(AUTHORED_DIRS_TOOL, color=settings.color))
        return 0

    author_filter = AuthorFilter(settings.default_authors, MatchPolicy.ALLOW_ALL_IF_EMPTY)
    print(render_author_filter(settings.default_authors, color=settings.color))
    found = collect_authored_dirs(settings, author_filter)
    print(render_authored_dirs(found, color=settings.color))
    print(render_footer(AUTHORED_DIRS_TOOL, color=settings.color))
    return 0
