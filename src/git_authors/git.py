from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

from .identity import AuthorFilter

AUTHOR_FORMAT = "%an <%ae>"


def git_env() -> dict[str, str]:
    env = os.environ.copy()
    # Repos mounted on another filesystem than the scan root must still be discovered.
    env["GIT_DISCOVERY_ACROSS_FILESYSTEM"] = "1"
    return env


def run_git(args: list[str], cwd: Path) -> tuple[int, str, str]:
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            env=git_env(),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
        )
    except OSError as e:
        return 127, "", str(e)
    return proc.returncode, proc.stdout, proc.stderr


def discover_git_dirs(root: Path, ignored_dirs: set[str] | frozenset[str]) -> list[Path]:
    found: list[Path] = []

    def onerror(err: OSError) -> None:
        if isinstance(err, PermissionError):
            return
        print(f"Warning: cannot read {err.filename}: {err.strerror}", file=sys.stderr)

    for dirpath, dirnames, _filenames in os.walk(root, onerror=onerror, followlinks=False):
        keep: list[str] = []
        for d in dirnames:
            if d in ignored_dirs:
                continue
            if d == ".git":
                found.append(Path(dirpath) / d)
                continue
            keep.append(d)
        dirnames[:] = keep
    return found


def get_repo_toplevel(candidate: Path) -> Path | None:
    code, out, _ = run_git(["rev-parse", "--is-inside-work-tree", "--show-toplevel"], cwd=candidate)
    if code != 0:
        return None
    lines = out.splitlines()
    if len(lines) != 2 or lines[0].strip() != "true":
        return None
    return Path(lines[1].strip()).resolve()


def is_repo_root(repo: Path) -> bool:
    # A broken `.git` makes git fall back to an enclosing repo; that is not this repo.
    top = get_repo_toplevel(repo)
    return top is not None and top == repo.resolve()


def list_repo_authors(repo: Path) -> set[str]:
    code, out, _ = run_git(["log", "--all", f"--format={AUTHOR_FORMAT}"], cwd=repo)
    if code != 0:
        return set()
    return {line for line in out.splitlines() if line.strip()}


def has_author_commits(repo: Path, author_filter: AuthorFilter) -> bool:
    if author_filter.is_empty:
        return author_filter.accepts_everything
    return any(author_filter.accepts(a) for a in list_repo_authors(repo))
