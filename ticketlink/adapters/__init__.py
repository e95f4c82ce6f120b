"""Platform adapters: source control (GitHub) and issue tracker (Jira)."""

from ticketlink.adapters.base import GitPlatformAdapter, GitPlatformError
from ticketlink.adapters.github import GitHubAdapter
from ticketlink.adapters.jira import JiraClient, TicketClientError, TicketNotFoundError

__all__ = [
    "GitPlatformAdapter",
    "GitPlatformError",
    "GitHubAdapter",
    "JiraClient",
    "TicketClientError",
    "TicketNotFoundError",
]
