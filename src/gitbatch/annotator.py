"""Latest-commit lookup for branches."""

import logging
from pathlib import Path
from typing import Optional

from gitbatch.git import GitCommandFailed, GitExecutor
from gitbatch.models import CommitInfo

logger = logging.getLogger(__name__)

LOG_FORMAT = "%H|%s|%ad|%an"
DATE_FORMAT = "%Y-%m-%d-%H:%M:%S"


def parse_commit_line(line: str) -> Optional[CommitInfo]:
    """Parse one ``hash|subject|date|author`` line.

    The subject is free text and may itself contain ``|``, so the hash is
    split off the left and the date and author off the right.
    """
    full_hash, sep, rest = line.strip().partition("|")
    if not sep or not full_hash:
        return None
    parts = rest.rsplit("|", 2)
    if len(parts) != 3:
        return None
    subject, author_date, author = parts
    return CommitInfo(full_hash=full_hash, subject=subject, author_date=author_date, author=author)


class CommitAnnotator:
    """Fetch the most recent commit reachable from a reference."""

    def __init__(self, executor: GitExecutor) -> None:
        self.executor = executor

    def get_commit_info(self, working_dir: Path, ref: str) -> Optional[CommitInfo]:
        """Get the latest commit on ``ref``, or None if it cannot be resolved."""
        try:
            output = self.executor.run(
                ["log", "-1", f"--pretty=format:{LOG_FORMAT}", f"--date=format:{DATE_FORMAT}", ref, "--"],
                working_dir,
            )
        except GitCommandFailed as err:
            logger.debug("No commit info for %s: %s", ref, err.stderr)
            return None
        if not output:
            return None
        info = parse_commit_line(output.splitlines()[0])
        if info is None:
            logger.debug("Unexpected log output for %s: %r", ref, output)
        return info
