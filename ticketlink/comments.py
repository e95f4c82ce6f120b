"""Advisory comment bodies and label/assignee rules for pull requests."""

import re
from difflib import SequenceMatcher
from html import escape
from typing import Iterable, Sequence

from ticketlink.config import DEFAULT_GATED_BRANCHES, DEFAULT_RELEASE_REVIEWER
from ticketlink.models import TicketDetails

GATED_BRANCHES: tuple[str, ...] = tuple(DEFAULT_GATED_BRANCHES)
TITLE_SIMILARITY_THRESHOLD = 0.6

_WHITESPACE_RE = re.compile(r"\s+")


def _normalize(text: str | None) -> str:
    return _WHITESPACE_RE.sub(" ", (text or "").lower()).strip()


def get_title_similarity(ticket_summary: str | None, pr_title: str | None) -> float:
    """Similarity ratio in [0, 1] of the normalized summary and title."""
    a, b = _normalize(ticket_summary), _normalize(pr_title)
    if a == b:
        return 1.0
    return SequenceMatcher(None, a, b).ratio()


def is_title_similar(
    ticket_summary: str | None,
    pr_title: str | None,
    threshold: float = TITLE_SIMILARITY_THRESHOLD,
) -> bool:
    """True if one title contains the other (ignoring case) or they are
    close enough."""
    a, b = _normalize(ticket_summary), _normalize(pr_title)
    if a == b:
        return True
    if a and b and (a in b or b in a):
        return True
    return get_title_similarity(a, b) >= threshold


def get_pr_title_comment(ticket_summary: str, pr_title: str) -> str:
    """Comment comparing the PR title with the ticket summary."""
    if is_title_similar(ticket_summary, pr_title):
        return (
            "<p>The PR title matches the ticket summary. Nice! :white_check_mark:</p>"
            f"<blockquote>{escape(pr_title)}</blockquote>"
        )
    return (
        "<p>Knock Knock! :mag:</p>"
        "<p>Just thought I'd let you know that your <em>PR title</em> and <em>ticket summary</em> "
        "look <strong>quite different</strong>. PR titles that closely resemble the ticket summary "
        "make it easier for reviewers to understand the context of the PR.</p>"
        "<table>"
        f"<tr><th>Ticket Summary</th><td>{escape(ticket_summary)}</td></tr>"
        f"<tr><th>PR Title</th><td>{escape(pr_title)}</td></tr>"
        "</table>"
    )


def is_humongous_pr(additions: int, threshold: int) -> bool:
    """True when the PR adds more lines than the threshold allows."""
    return additions > threshold


def get_huge_pr_comment(additions: int, threshold: int) -> str:
    """Comment asking to split a PR with too many additions."""
    return (
        "<p>This PR is too huge for one to review :broken_heart:</p>"
        "<table>"
        f"<tr><th>Additions</th><td>{additions} :no_good:</td></tr>"
        f"<tr><th>Expected</th><td>:arrow_down: {threshold}</td></tr>"
        "</table>"
        "<p>Consider breaking it down into multiple small PRs so that each can be reviewed "
        "and merged on its own.</p>"
    )


def get_no_issue_key_comment(head_branch: str) -> str:
    """Comment for a branch that does not name a ticket."""
    return (
        "<p>A Jira issue key is missing from your branch name, "
        "or the ticket it names could not be found :broken_heart:</p>"
        f"<p>Branch: <code>{escape(head_branch)}</code></p>"
        "<p>Rename the branch so it ends with the ticket key, for example "
        "<code>feature/short-description-ABC-123</code>.</p>"
    )


def is_issue_status_valid(validate: bool, allowed_statuses: Sequence[str], details: TicketDetails) -> bool:
    """True if validation is off, no allow-list is set, or the ticket
    status is allowed."""
    if not validate or not allowed_statuses:
        return True
    return details.status in allowed_statuses


def get_invalid_issue_status_comment(status: str, allowed_statuses: Sequence[str]) -> str:
    """Comment for a ticket whose status is not in the allow-list."""
    allowed = escape(", ".join(allowed_statuses))
    return (
        "<p>:broken_heart: The linked Jira issue is not in an acceptable status.</p>"
        "<table>"
        f"<tr><th>Current status</th><td>{escape(status)}</td></tr>"
        f"<tr><th>Allowed statuses</th><td>{allowed}</td></tr>"
        "</table>"
        "<p>Please move the ticket to one of the allowed statuses.</p>"
    )


def get_gated_labels(base_branch: str, gated: Sequence[str] = GATED_BRANCHES) -> list[str]:
    """The base branch as a label when it is a deployment branch."""
    return [branch for branch in gated if branch == base_branch]


def get_assignees(
    base_branch: str,
    reviewers: Iterable[str] = (),
    release_reviewer: str = DEFAULT_RELEASE_REVIEWER,
    gated: Sequence[str] = GATED_BRANCHES,
) -> list[str]:
    """Requested reviewers, plus the release reviewer for PRs into a
    gated branch other than develop."""
    assignees = [r for r in reviewers if r]
    if release_reviewer and base_branch != "develop" and base_branch in gated:
        assignees.append(release_reviewer)
    return list(dict.fromkeys(assignees))
