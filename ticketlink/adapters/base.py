"""Abstract base for Git platform adapters."""

from abc import ABC, abstractmethod
from typing import List


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    pass


class GitPlatformAdapter(ABC):
    """Pull request operations the linker needs from a Git host.

    Pull requests share the issue numbering, so comments, labels and
    assignees go through the issue endpoints.
    """

    @abstractmethod
    def create_comment(self, repo: str, issue_number: int, body: str) -> None:
        """Post a comment on an issue or pull request."""
        ...

    @abstractmethod
    def add_labels(self, repo: str, issue_number: int, labels: List[str]) -> None:
        """Add labels, keeping the ones already applied."""
        ...

    @abstractmethod
    def add_assignees(self, repo: str, issue_number: int, assignees: List[str]) -> None:
        """Add assignees, keeping the ones already assigned."""
        ...

    @abstractmethod
    def update_pr_body(self, repo: str, pr_number: int, body: str) -> None:
        """Replace the pull request description."""
        ...
