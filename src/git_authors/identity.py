from __future__ import annotations

import dataclasses
import enum


class MatchPolicy(enum.Enum):
    ALLOW_ALL_IF_EMPTY = "allow_all_if_empty"
    MATCH_NONE_IF_EMPTY = "match_none_if_empty"


def quote_identity(identity: str) -> str:
    return f'"{identity}"'


@dataclasses.dataclass(frozen=True)
class AuthorFilter:
    """
    Exact-match filter over `name <email>` identities.

    An empty filter either accepts every identity or none, depending on `policy`.
    """

    authors: frozenset[str] = frozenset()
    policy: MatchPolicy = MatchPolicy.ALLOW_ALL_IF_EMPTY

    @property
    def is_empty(self) -> bool:
        return not self.authors

    @property
    def accepts_everything(self) -> bool:
        return self.is_empty and self.policy is MatchPolicy.ALLOW_ALL_IF_EMPTY

    def accepts(self, identity: str) -> bool:
        if self.is_empty:
            return self.accepts_everything
        return identity in self.authors
