from __future__ import annotations

import dataclasses
from pathlib import Path


@dataclasses.dataclass(frozen=True)
class Settings:
    root: Path
    ignored_dirs: frozenset[str] = frozenset()
    default_authors: frozenset[str] = frozenset()
    show_directories: bool = False
    quoted: bool = False
    color: bool = False
    jobs: int = 1


@dataclasses.dataclass
class AuthorReport:
    repos_by_author: dict[str, set[str]] = dataclasses.field(default_factory=dict)

    def add(self, repo: str, authors: set[str]) -> None:
        for author in authors:
            self.repos_by_author.setdefault(author, set()).add(repo)

    def is_empty(self) -> bool:
        return not self.repos_by_author

    def sorted_items(self) -> list[tuple[str, list[str]]]:
        return [(a, sorted(self.repos_by_author[a])) for a in sorted(self.repos_by_author)]


@dataclasses.dataclass
class AuthoredDirectoryList:
    repos: list[str] = dataclasses.field(default_factory=list)

    def add(self, repo: str) -> None:
        self.repos.append(repo)

    def is_empty(self) -> bool:
        return not self.repos

    def sorted_unique(self) -> list[str]:
        return sorted(set(self.repos))
