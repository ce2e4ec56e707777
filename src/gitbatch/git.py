"""Git command execution."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from git import Git, GitCommandError, GitCommandNotFound

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Git operation error."""


class InvalidRepositoryError(GitError):
    """The working directory is not a usable git repository."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Not a valid git repository: {path}")
        self.path = path


class GitCommandFailed(GitError):
    """A git command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], status: Optional[int], stderr: str) -> None:
        """Initialize error.

        Args:
            command: The full command line that was run
            status: Exit status reported by git, if any
            stderr: Raw error output of the command
        """
        detail = stderr or f"exit status {status}"
        super().__init__(f"'{' '.join(command)}' failed: {detail}")
        self.command = tuple(command)
        self.status = status
        self.stderr = stderr


class GitExecutableError(GitError):
    """Git could not be run at all (missing binary, unusable directory)."""


def _clean_stderr(stderr: object) -> str:
    # GitPython decorates stderr as "\n  stderr: '<text>'"
    text = str(stderr or "").strip()
    if text.startswith("stderr: '") and text.endswith("'"):
        text = text[len("stderr: '") : -1]
    return text.strip()


class GitExecutor:
    """Run single git subcommands against a working directory."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        """Initialize executor.

        Args:
            timeout: Seconds after which a running command is killed, None for no limit
        """
        self.timeout = timeout

    def run(self, args: Sequence[str], working_dir: Path) -> str:
        """Run ``git <args>`` in ``working_dir`` and return its trimmed stdout.

        Raises:
            GitCommandFailed: If git exits with a non-zero status
            GitExecutableError: If git cannot be started in ``working_dir``
        """
        if not Path(working_dir).is_dir():
            # GitPython would silently fall back to the process cwd
            raise GitExecutableError(f"Working directory does not exist: {working_dir}")
        command = ["git", *args]
        logger.debug("Running %s in %s", " ".join(command), working_dir)
        try:
            output = Git(str(working_dir)).execute(command, kill_after_timeout=self.timeout)
        except GitCommandError as err:
            raise GitCommandFailed(command, err.status, _clean_stderr(err.stderr)) from err
        except (GitCommandNotFound, OSError) as err:
            raise GitExecutableError(f"Failed to run git in {working_dir}: {err}") from err
        return str(output).rstrip()
