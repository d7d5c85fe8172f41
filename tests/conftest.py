"""Shared helpers for building throwaway git repositories."""

import os
import shutil
import subprocess

import pytest


class GitHelper:
    """Create real repositories, remotes and commits under a temp directory."""

    def __init__(self, base: str):
        self.base = base

    def run(self, path: str, *args: str) -> str:
        result = subprocess.run(
            ["git", "-C", path] + list(args),
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    def _configure(self, path: str) -> None:
        self.run(path, "config", "user.email", "test@test.com")
        self.run(path, "config", "user.name", "Test User")
        self.run(path, "config", "commit.gpgsign", "false")

    def commit(self, path: str, name: str = "file.txt", content: str = "hello\n") -> None:
        with open(os.path.join(path, name), "a") as f:
            f.write(content)
        self.run(path, "add", ".")
        self.run(path, "commit", "-m", f"Update {name}")

    def init(self, name: str) -> str:
        """A repository with one commit and no remote."""
        path = os.path.join(self.base, name)
        subprocess.run(["git", "init", path], capture_output=True, check=True)
        self._configure(path)
        self.commit(path)
        return path

    def with_remote(self, name: str) -> tuple[str, str]:
        """A repository tracking a local bare remote; returns (work, remote)."""
        remote = os.path.join(self.base, f"{name}-remote.git")
        subprocess.run(["git", "init", "--bare", remote], capture_output=True, check=True)
        work = self.init(name)
        self.run(work, "remote", "add", "origin", remote)
        self.run(work, "push", "-u", "origin", "HEAD")
        return work, remote

    def clone(self, remote: str, name: str) -> str:
        path = os.path.join(self.base, name)
        subprocess.run(["git", "clone", remote, path], capture_output=True, check=True)
        self._configure(path)
        return path

    def push_from_elsewhere(self, remote: str, name: str = "other") -> None:
        """Add a commit to remote through a second clone."""
        other = self.clone(remote, name)
        self.commit(other, "other.txt", "from elsewhere\n")
        self.run(other, "push", "origin", "HEAD")


@pytest.fixture
def git(tmp_path):
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    return GitHelper(str(tmp_path))
