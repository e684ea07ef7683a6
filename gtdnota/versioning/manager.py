"""
Git version management for gtdnota.

Keeps the document under version control: pulls before committing, commits
the document file after each change and pushes to the configured remote.
A document outside any git repository is simply not synced.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from git import Actor, GitError, InvalidGitRepositoryError, NoSuchPathError, Remote, Repo

from ..errors import VersionControlError

DEFAULT_AUTHOR_NAME = "gtdnota"
DEFAULT_AUTHOR_EMAIL = "gtdnota@localhost"


class VersionManager:
    """
    Syncs a single document file with its git repository.

    Every public operation returns True on success and False on failure, and
    logs the failure. When the file is not inside a repository every
    operation is a successful no-op.
    """

    def __init__(self, file_path: Union[str, Path], remote: str = "origin",
                 push_enabled: bool = True, author_name: str = DEFAULT_AUTHOR_NAME,
                 author_email: str = DEFAULT_AUTHOR_EMAIL):
        """
        Initialize the version manager.

        Args:
            file_path: Path to the document; the repository is searched for
                from its directory upwards
            remote: Name of the remote to pull from and push to
            push_enabled: Whether sync pushes after committing
            author_name: Commit author used when git has no user.name
            author_email: Commit author email used when git has no user.email
        """
        self.file_path = Path(file_path)
        self.remote_name = remote
        self.push_enabled = push_enabled
        self.author_name = author_name
        self.author_email = author_email
        self.repo: Optional[Repo] = self._discover_repository()

        if self.repo is None:
            logging.info(f"{self.file_path} is not in a git repository; git sync disabled")
        else:
            logging.info(f"Initialized VersionManager for: {self.repo.working_tree_dir}")

    @classmethod
    def from_config(cls, file_path: Union[str, Path], config: Any) -> "VersionManager":
        """Build a version manager from the git section of a ConfigManager."""
        return cls(
            file_path,
            remote=config.git_remote,
            push_enabled=config.git_push,
            author_name=config.git_author_name,
            author_email=config.git_author_email,
        )

    def _discover_repository(self) -> Optional[Repo]:
        try:
            repo = Repo(self.file_path.resolve().parent, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            return None
        if repo.bare:
            return None
        return repo

    def is_git_managed(self) -> bool:
        return self.repo is not None

    def _branch_name(self) -> str:
        try:
            return self.repo.active_branch.name
        except TypeError as e:
            raise VersionControlError(f"HEAD is detached: {e}") from e

    def _remote(self) -> Remote:
        try:
            return self.repo.remote(self.remote_name)
        except ValueError as e:
            raise VersionControlError(f"Remote '{self.remote_name}' is not configured") from e

    def _relative_path(self, file_path: Path) -> str:
        workdir = Path(self.repo.working_tree_dir).resolve()
        try:
            return file_path.resolve().relative_to(workdir).as_posix()
        except ValueError as e:
            raise VersionControlError(f"{file_path} is not inside {workdir}") from e

    def _actor(self) -> Actor:
        """Commit identity from the repository's git config, with fallbacks."""
        reader = self.repo.config_reader()
        name = reader.get_value("user", "name", default=self.author_name)
        email = reader.get_value("user", "email", default=self.author_email)
        return Actor(str(name), str(email))

    def pull(self) -> bool:
        """
        Fast-forward the current branch from the remote.

        Returns:
            True if the branch is up to date afterwards, False if the pull
            failed or would need a merge
        """
        if self.repo is None:
            return True

        try:
            branch = self._branch_name()
            self._remote().pull(branch, ff_only=True)
            logging.info(f"Pulled {self.remote_name}/{branch}")
            return True

        except (GitError, VersionControlError) as e:
            logging.error(f"Failed to pull from {self.remote_name}: {e}")
            return False

    def commit(self, file_path: Union[str, Path], message: str) -> bool:
        """
        Stage one file and commit it.

        Args:
            file_path: The file to commit
            message: Commit message

        Returns:
            True if a commit was created or there was nothing to commit,
            False otherwise
        """
        if self.repo is None:
            return True

        try:
            rel_path = self._relative_path(Path(file_path))
            self.repo.index.add([rel_path])

            if self.repo.head.is_valid() and not self.repo.index.diff("HEAD"):
                logging.info("No changes to commit")
                return True

            actor = self._actor()
            commit = self.repo.index.commit(message, author=actor, committer=actor)
            logging.info(f"Created commit: {commit.hexsha[:8]} - {message}")
            return True

        except (GitError, OSError, VersionControlError) as e:
            logging.error(f"Failed to commit {file_path}: {e}")
            return False

    def push(self) -> bool:
        """Push the current branch to the remote."""
        if self.repo is None:
            return True

        try:
            branch = self._branch_name()
            results = self._remote().push(refspec=f"refs/heads/{branch}")
            results.raise_if_error()
            logging.info(f"Pushed {branch} to {self.remote_name}")
            return True

        except (GitError, VersionControlError) as e:
            logging.error(f"Failed to push to {self.remote_name}: {e}")
            return False

    def sync(self, file_path: Union[str, Path], message: str) -> bool:
        """
        Pull, commit the file, then push when pushing is enabled.

        Stops at the first failing step.

        Returns:
            True if every step succeeded
        """
        if self.repo is None:
            return True

        if not self.pull():
            return False
        if not self.commit(file_path, message):
            return False
        if self.push_enabled:
            return self.push()
        return True

    def get_commit_history(self, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Get the commit history for the repository.

        Args:
            limit: Maximum number of commits to return

        Returns:
            List of commit information dictionaries, newest first
        """
        if self.repo is None or not self.repo.head.is_valid():
            return []

        try:
            commits = []
            for commit in self.repo.iter_commits(max_count=limit):
                commits.append({
                    'hash': commit.hexsha,
                    'short_hash': commit.hexsha[:8],
                    'message': commit.message.strip(),
                    'author': str(commit.author),
                    'date': commit.committed_datetime.isoformat(),
                })

            return commits

        except GitError as e:
            logging.error(f"Failed to get commit history: {e}")
            return []
