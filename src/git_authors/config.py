from __future__ import annotations

import dataclasses
import os
import re
import shlex
from pathlib import Path

AUTHORS_KEY = "default_authors"
IGNORED_DIRS_KEY = "default_ignored_dirs"
EXAMPLE_SUFFIX = ".example"

_ASSIGN_RE = re.compile(
    r"^\s*(?:(?:declare|typeset)\s+-a\s+|export\s+)?"
    rf"(?P<key>{AUTHORS_KEY}|{IGNORED_DIRS_KEY})(?P<op>\+?=)(?P<rhs>.*)$"
)


class ConfigError(ValueError):
    pass


@dataclasses.dataclass(frozen=True)
class ConfigLists:
    authors: frozenset[str] = frozenset()
    ignored_dirs: frozenset[str] = frozenset()
    loaded_from: tuple[Path, ...] = ()


def default_config_path() -> Path:
    env = os.environ.get("GIT_AUTHORS_CONFIG", "").strip()
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config" / "git-authors" / "default_values.conf"


def example_path_for(config_path: Path) -> Path:
    return config_path.with_name(config_path.name + EXAMPLE_SUFFIX)


def _tokenize(text: str) -> list[str]:
    lex = shlex.shlex(text, posix=True, punctuation_chars="()")
    lex.whitespace_split = True
    tokens: list[str] = []
    for tok in lex:
        # shlex glues adjacent punctuation together, e.g. "()" for an empty list.
        if tok and set(tok) <= {"(", ")"}:
            tokens.extend(tok)
        else:
            tokens.append(tok)
    return tokens


def _parse_array(tokens: list[str], *, where: str, key: str) -> list[str] | None:
    if not tokens or tokens[0] != "(":
        raise ConfigError(f"{where}: expected '(' after {key}=")
    items: list[str] = []
    for tok in tokens[1:]:
        if tok == ")":
            return items
        if tok == "(":
            raise ConfigError(f"{where}: unexpected '(' in {key} list")
        items.append(tok)
    return None


def parse_config_text(text: str, *, source: str = "<config>") -> dict[str, list[str]]:
    """
    Extract the two recognized list variables from shell-style assignments.

    Nothing is evaluated: quoting follows shell rules, but `$var`, `$(...)` and
    backticks are kept as literal text, and every other line is ignored.
    """
    values: dict[str, list[str]] = {}
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        m = _ASSIGN_RE.match(lines[i])
        if m is None:
            i += 1
            continue
        key = m.group("key")
        rhs = m.group("rhs")
        where = f"{source}:{i + 1}"

        if rhs.lstrip().startswith("("):
            buf = rhs
            while True:
                try:
                    tokens = _tokenize(buf)
                except ValueError:
                    # Quote still open; the value continues on the next line.
                    tokens = None
                items = _parse_array(tokens, where=where, key=key) if tokens is not None else None
                if items is not None:
                    break
                i += 1
                if i >= len(lines):
                    raise ConfigError(f"{where}: unterminated list for {key}")
                buf += "\n" + lines[i]
        else:
            try:
                words = shlex.split(rhs, comments=True)
            except ValueError as e:
                raise ConfigError(f"{where}: {e} in {key}") from e
            items = words[:1]

        if m.group("op") == "+=":
            values[key] = values.get(key, []) + items
        else:
            values[key] = items
        i += 1
    return values


def read_config_file(path: Path) -> dict[str, list[str]] | None:
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8", errors="surrogateescape")
    except OSError as e:
        raise ConfigError(f"{path}: {e.strerror or e}") from e
    return parse_config_text(text, source=str(path))


def merge_unique(*lists: list[str]) -> frozenset[str]:
    return frozenset(item for lst in lists for item in lst if item.strip())


def load_config(*, config_path: Path, example_path: Path | None = None) -> ConfigLists:
    if example_path is None:
        example_path = example_path_for(config_path)

    authors: list[list[str]] = []
    ignored: list[list[str]] = []
    loaded: list[Path] = []
    for path in (config_path, example_path):
        values = read_config_file(path)
        if values is None:
            continue
        loaded.append(path)
        authors.append(values.get(AUTHORS_KEY, []))
        ignored.append(values.get(IGNORED_DIRS_KEY, []))

    return ConfigLists(
        authors=merge_unique(*authors),
        ignored_dirs=merge_unique(*ignored),
        loaded_from=tuple(loaded),
    )
