"""Branch, commit and deletion result models."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

DEFAULT_REMOTE = "origin"


class BranchOrigin(Enum):
    """Where a branch record was found."""

    LOCAL = "l"
    REMOTE = "r"


class BranchFilter(Enum):
    """Which branches an inventory query returns."""

    ALL = "all"
    LOCAL_ONLY = "local"
    REMOTE_ONLY = "remote"


@dataclass(frozen=True)
class BranchRecord:
    """A single named branch and where it lives.

    A name present both locally and on the remote is represented once, as a
    local record. Its remote counterpart is still reachable through
    ``remote_ref`` or ``as_remote()``.
    """

    name: str
    origin: BranchOrigin
    is_current: bool = False
    remote: str = DEFAULT_REMOTE

    def __post_init__(self) -> None:
        if self.is_current and self.origin is not BranchOrigin.LOCAL:
            raise ValueError(f"Remote branch {self.name!r} cannot be the current branch")

    @property
    def remote_ref(self) -> str:
        """Fully qualified remote tracking name, e.g. ``origin/feature``."""
        return f"{self.remote}/{self.name}"

    @property
    def ref(self) -> str:
        """Reference to resolve when looking up this branch's commits."""
        return self.name if self.origin is BranchOrigin.LOCAL else self.remote_ref

    @property
    def qualified_ref(self) -> str:
        """Full ref name, unambiguous even when a tag has the same name."""
        if self.origin is BranchOrigin.LOCAL:
            return f"refs/heads/{self.name}"
        return f"refs/remotes/{self.remote_ref}"

    @property
    def is_local(self) -> bool:
        return self.origin is BranchOrigin.LOCAL

    def as_remote(self) -> "BranchRecord":
        """Return the remote-origin record for the same name."""
        return replace(self, origin=BranchOrigin.REMOTE, is_current=False)


@dataclass(frozen=True)
class CommitInfo:
    """Latest commit on a branch."""

    full_hash: str
    subject: str
    author_date: str
    author: str

    @property
    def hash(self) -> str:
        """Abbreviated hash for display."""
        return self.full_hash[:7]


@dataclass
class DeletionResult:
    """Outcome of a batch deletion, partitioned in input order."""

    succeeded: list[BranchRecord] = field(default_factory=list)
    failed: list[BranchRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)


@dataclass(frozen=True)
class RepositoryStatus:
    """Checked-out branch and working tree changes."""

    current_branch: Optional[str]
    has_changes: bool
    changes: list[str] = field(default_factory=list)
