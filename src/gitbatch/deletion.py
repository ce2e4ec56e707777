"""Batch branch deletion."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional, Sequence

from gitbatch.config import Settings
from gitbatch.git import GitCommandFailed, GitExecutor
from gitbatch.models import BranchOrigin, BranchRecord, DeletionResult

logger = logging.getLogger(__name__)

ALREADY_DELETED_MARKER = "does not exist"


def is_already_deleted(record: BranchRecord, stderr: str) -> bool:
    """Check whether a delete failed only because the branch is already gone."""
    if ALREADY_DELETED_MARKER in stderr:
        return True
    return record.origin is BranchOrigin.LOCAL and f"branch '{record.name}' not found" in stderr


class DeletionOrchestrator:
    """Delete branch records independently and collect per-branch outcomes.

    Each record is one deletion intent: a local record deletes the local
    branch, a remote record deletes the branch on its remote. The caller is
    responsible for confirming the batch before calling ``delete_branches``.
    """

    def __init__(self, executor: GitExecutor, settings: Optional[Settings] = None) -> None:
        self.executor = executor
        self.settings = settings or Settings()

    def delete_local_branch(self, working_dir: Path, name: str, force: bool = True) -> None:
        """Delete a local branch."""
        self.executor.run(["branch", "-D" if force else "-d", name], working_dir)

    def delete_remote_branch(self, working_dir: Path, remote: str, name: str) -> None:
        """Delete a branch on a remote by pushing a delete."""
        self.executor.run(["push", remote, "--delete", f"refs/heads/{name}"], working_dir)

    def _delete_one(self, working_dir: Path, record: BranchRecord) -> bool:
        """Delete a single record. Returns True if the branch is now absent."""
        try:
            if record.origin is BranchOrigin.LOCAL:
                self.delete_local_branch(working_dir, record.name, force=self.settings.force_delete)
            else:
                remote, name = record.remote_ref.split("/", 1)
                self.delete_remote_branch(working_dir, remote, name)
        except GitCommandFailed as err:
            if is_already_deleted(record, err.stderr):
                logger.info("Branch %s was already deleted", record.ref)
                return True
            logger.warning("Failed to delete %s: %s", record.ref, err.stderr or err)
            return False
        logger.debug("Deleted %s", record.ref)
        return True

    def delete_branches(self, working_dir: Path, records: Sequence[BranchRecord]) -> DeletionResult:
        """Delete every record and partition them into succeeded and failed.

        Deletions run concurrently. A failure on one branch never stops the
        others; only errors that prevent running git at all abort the batch.
        """
        records = list(records)
        result = DeletionResult()
        if not records:
            return result

        outcomes: dict[int, bool] = {}
        workers = min(self.settings.max_workers, len(records))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            future_to_index = {
                pool.submit(self._delete_one, working_dir, record): index for index, record in enumerate(records)
            }
            for future in as_completed(future_to_index):
                try:
                    outcomes[future_to_index[future]] = future.result()
                except Exception:
                    # Git itself is unusable, stop queued deletions
                    for pending in future_to_index:
                        pending.cancel()
                    raise

        for index, record in enumerate(records):
            if outcomes[index]:
                result.succeeded.append(record)
            else:
                result.failed.append(record)
        logger.debug("Deleted %d of %d branches", len(result.succeeded), result.total)
        return result
