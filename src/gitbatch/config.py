"""Runtime settings."""

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Pattern, Union

from gitbatch.models import DEFAULT_REMOTE

# Current default branch marker in `git branch` output and symbolic HEAD pointers
DEFAULT_IGNORE_PATTERNS = (r"^\* (main|master)$", r"HEAD ->")
DEFAULT_MAX_WORKERS = 4


def compile_patterns(patterns: Iterable[Union[str, Pattern[str]]]) -> tuple[Pattern[str], ...]:
    """Compile ignore patterns, keeping their order and dropping duplicates."""
    compiled: list[Pattern[str]] = []
    seen: set[str] = set()
    for pattern in patterns:
        regex = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
        if regex.pattern in seen:
            continue
        seen.add(regex.pattern)
        compiled.append(regex)
    return tuple(compiled)


@dataclass(frozen=True)
class Settings:
    """Configuration shared by the inventory, annotator and deletion engine."""

    remote_name: str = DEFAULT_REMOTE
    ignore_patterns: tuple[Pattern[str], ...] = field(default_factory=lambda: compile_patterns(DEFAULT_IGNORE_PATTERNS))
    max_workers: int = DEFAULT_MAX_WORKERS
    command_timeout: Optional[float] = None
    force_delete: bool = True

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if not self.remote_name or "/" in self.remote_name:
            raise ValueError(f"Invalid remote name: {self.remote_name!r}")

    @classmethod
    def create(
        cls,
        remote_name: str = DEFAULT_REMOTE,
        ignore_patterns: Optional[Iterable[Union[str, Pattern[str]]]] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        command_timeout: Optional[float] = None,
        force_delete: bool = True,
    ) -> "Settings":
        """Build settings from raw values, compiling pattern strings."""
        patterns = DEFAULT_IGNORE_PATTERNS if ignore_patterns is None else ignore_patterns
        return cls(
            remote_name=remote_name,
            ignore_patterns=compile_patterns(patterns),
            max_workers=max_workers,
            command_timeout=command_timeout,
            force_delete=force_delete,
        )

    def is_ignored(self, line: str) -> bool:
        """Check a trimmed listing line against the ignore patterns."""
        return any(pattern.search(line) for pattern in self.ignore_patterns)
