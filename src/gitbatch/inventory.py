"""Branch listing and normalization."""

import logging
from pathlib import Path
from typing import Optional

from git import InvalidGitRepositoryError, NoSuchPathError, Repo

from gitbatch.config import Settings
from gitbatch.git import GitCommandFailed, GitExecutor, InvalidRepositoryError
from gitbatch.models import BranchFilter, BranchOrigin, BranchRecord, RepositoryStatus

logger = logging.getLogger(__name__)

CURRENT_MARKER = "* "
# Branch checked out in another worktree
WORKTREE_MARKER = "+ "
LOCAL_FORMAT = "--format=%(HEAD) %(refname:short)"


def _is_branch_name(name: str) -> bool:
    """Reject pseudo entries such as ``(HEAD detached at 1a2b3c)``."""
    return bool(name) and not name.startswith("(") and not any(char.isspace() for char in name)


class BranchInventory:
    """Query, normalize and merge the local and remote branches of a repository."""

    def __init__(self, executor: GitExecutor, settings: Optional[Settings] = None) -> None:
        self.executor = executor
        self.settings = settings or Settings()

    def is_valid_repository(self, working_dir: Path) -> bool:
        """Check whether ``working_dir`` is a non-bare git repository."""
        try:
            repo = Repo(working_dir)
        except (InvalidGitRepositoryError, NoSuchPathError, ValueError, OSError):
            return False
        try:
            return not repo.bare
        finally:
            repo.close()

    def require_repository(self, working_dir: Path) -> None:
        """Raise InvalidRepositoryError unless ``working_dir`` is a valid repository."""
        if not self.is_valid_repository(working_dir):
            raise InvalidRepositoryError(working_dir)

    def get_local_branches(self, working_dir: Path) -> list[BranchRecord]:
        """Parse the local branch listing into records.

        Lines carry a ``* `` marker for the checked-out branch. A ``+ `` marker
        (another worktree) is accepted too and yields a non-current record.
        """
        output = self.executor.run(["branch", "--no-color", "--no-column", LOCAL_FORMAT], working_dir)
        records = []
        for raw in output.splitlines():
            line = raw.strip()
            if not line or self.settings.is_ignored(line):
                continue
            is_current = line.startswith(CURRENT_MARKER)
            if is_current or line.startswith(WORKTREE_MARKER):
                name = line[len(CURRENT_MARKER) :].strip()
            else:
                name = line
            if not _is_branch_name(name):
                logger.debug("Skipping unrecognized local branch line: %r", raw)
                continue
            records.append(
                BranchRecord(
                    name=name,
                    origin=BranchOrigin.LOCAL,
                    is_current=is_current,
                    remote=self.settings.remote_name,
                )
            )
        return records

    def get_remote_branches(self, working_dir: Path) -> list[BranchRecord]:
        """Parse ``git branch -r`` output into records for the configured remote."""
        output = self.executor.run(["branch", "-r", "--no-color", "--no-column"], working_dir)
        prefix = f"{self.settings.remote_name}/"
        records = []
        for raw in output.splitlines():
            line = raw.strip()
            if not line or self.settings.is_ignored(line):
                continue
            # Symbolic remote HEAD, e.g. "origin/HEAD -> origin/main"
            if "->" in line:
                continue
            if line.startswith("remotes/"):
                line = line[len("remotes/") :]
            if not line.startswith(prefix):
                continue
            name = line[len(prefix) :]
            if name == "HEAD":
                continue
            if not _is_branch_name(name):
                logger.debug("Skipping unrecognized remote branch line: %r", raw)
                continue
            records.append(BranchRecord(name=name, origin=BranchOrigin.REMOTE, remote=self.settings.remote_name))
        return records

    def list_branches(self, working_dir: Path, branch_filter: BranchFilter = BranchFilter.ALL) -> list[BranchRecord]:
        """List branches, one record per name.

        A name found both locally and on the remote is returned once, as a
        local record. Because of this, ``REMOTE_ONLY`` never includes a branch
        that also exists locally.
        """
        merged: dict[str, BranchRecord] = {}
        for record in self.get_local_branches(working_dir):
            merged.setdefault(record.name, record)
        for record in self.get_remote_branches(working_dir):
            merged.setdefault(record.name, record)

        records = list(merged.values())
        if branch_filter is BranchFilter.LOCAL_ONLY:
            records = [record for record in records if record.origin is BranchOrigin.LOCAL]
        elif branch_filter is BranchFilter.REMOTE_ONLY:
            records = [record for record in records if record.origin is BranchOrigin.REMOTE]
        logger.debug("Found %d branches (%s) in %s", len(records), branch_filter.value, working_dir)
        return records

    def get_current_branch(self, working_dir: Path) -> Optional[str]:
        """Get current branch name, or None in a detached HEAD state."""
        try:
            return self.executor.run(["branch", "--show-current"], working_dir) or None
        except GitCommandFailed as err:
            logger.debug("Could not determine current branch: %s", err)
            return None

    def get_status(self, working_dir: Path) -> RepositoryStatus:
        """Get the current branch and the list of uncommitted changes."""
        try:
            output = self.executor.run(["status", "--porcelain"], working_dir)
        except GitCommandFailed as err:
            logger.debug("Could not read repository status: %s", err)
            return RepositoryStatus(current_branch=None, has_changes=False)
        changes = [line for line in output.splitlines() if line.strip()]
        return RepositoryStatus(
            current_branch=self.get_current_branch(working_dir),
            has_changes=bool(changes),
            changes=changes,
        )
