"""Test configuration and fixtures."""

import threading
from pathlib import Path
from typing import Callable, Generator, Sequence, Union

import pytest
from git import Actor, Repo

from gitbatch.git import GitCommandFailed, GitExecutor

Response = Union[str, Exception]


class FakeExecutor:
    """Executor that answers git commands from a table instead of running git."""

    def __init__(self, responses: dict[tuple[str, ...], Response]) -> None:
        self.responses = responses
        self.calls: list[tuple[str, ...]] = []
        self._lock = threading.Lock()

    def run(self, args: Sequence[str], working_dir: Path) -> str:
        key = tuple(args)
        with self._lock:
            self.calls.append(key)
        response = self.responses.get(key)
        if response is None:
            raise GitCommandFailed(["git", *args], 1, f"unexpected command: {' '.join(args)}")
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def executor() -> GitExecutor:
    """Executor that runs real git."""
    return GitExecutor()


@pytest.fixture
def make_executor() -> Callable[[dict[tuple[str, ...], Response]], FakeExecutor]:
    """Factory for scripted executors."""
    return FakeExecutor


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    Branches:
        main       local and remote
        feature-a  local only, checked out
        feature-b  local and remote
        hotfix-1   remote only

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)

    author = Actor("Test User", "test@example.com")
    with local_repo.config_writer() as writer:
        writer.set_value("user", "name", author.name)
        writer.set_value("user", "email", author.email)

    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author)

    # Ensure main is the only default branch
    if "main" not in local_repo.heads:
        local_repo.create_head("main")
    main_branch = local_repo.heads.main
    main_branch.checkout()
    if "master" in local_repo.heads:
        local_repo.delete_head("master", force=True)

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")

    def create_branch(name: str, push: bool) -> None:
        """Create a branch off main with one commit."""
        main_branch.checkout()
        branch = local_repo.create_head(name)
        branch.checkout()
        test_file = local_path / f"{name}.txt"
        test_file.write_text(f"{name} content")
        local_repo.index.add([f"{name}.txt"])
        local_repo.index.commit(f"Add {name}", author=author)
        if push:
            origin.push(name)

    create_branch("feature-b", push=True)
    create_branch("hotfix-1", push=True)
    main_branch.checkout()
    local_repo.delete_head("hotfix-1", force=True)
    create_branch("feature-a", push=False)

    local_repo.close()
    yield local_path, remote_path
