"""Link one pull request to its Jira ticket.

Steps, in order: labels and assignees from the base branch, issue key from
the head branch, ticket lookup, optional review transition, description
update, advisory comments. Labels, assignees, the transition and comments
are best-effort: a failure is logged and the run goes on. Anything else
that goes wrong fails the run.
"""

import logging
from pathlib import Path
from typing import Any, Callable

from ticketlink.adapters import GitHubAdapter, GitPlatformAdapter, JiraClient, TicketNotFoundError
from ticketlink.branches import get_issue_key, should_skip_branch_lint
from ticketlink.comments import (
    get_assignees,
    get_gated_labels,
    get_huge_pr_comment,
    get_no_issue_key_comment,
    get_pr_title_comment,
    is_humongous_pr,
    is_issue_status_valid,
)
from ticketlink.config import AppConfig
from ticketlink.description import get_pr_description, should_update_pr_description
from ticketlink.event import context_from_payload, load_event
from ticketlink.models import PullRequestContext, TicketDetails

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1

NO_BRANCH_COMMENT = "ticketlink is unable to determine the head and base branch"


def _best_effort(what: str, func: Callable[..., Any], *args: Any) -> None:
    """Issue a request whose outcome does not affect the run."""
    try:
        func(*args)
    except Exception as e:
        logger.warning("%s failed (ignored): %s", what, e)


def _fetch_ticket(jira: JiraClient, key: str) -> TicketDetails | None:
    try:
        details = jira.get_ticket_details(key)
    except TicketNotFoundError as e:
        logger.info("No ticket for %s: %s", key, e)
        return None
    return details if details.key else None


def _missing_ticket(config: AppConfig, context: PullRequestContext, github: GitPlatformAdapter, reason: str) -> int:
    """Skip quietly, or comment and fail when the policy asks for it."""
    if not config.lint.fail_on_missing_issue:
        logger.info("%s; nothing to link", reason)
        return EXIT_OK
    _best_effort(
        "No issue key comment",
        github.create_comment,
        context.full_name,
        context.number,
        get_no_issue_key_comment(context.head_branch),
    )
    logger.error("%s on branch %s", reason, context.head_branch)
    return EXIT_FAILED


def run_link(
    config: AppConfig,
    context: PullRequestContext,
    github: GitPlatformAdapter,
    jira: JiraClient,
) -> int:
    """Run the linking pipeline for one pull request and return the exit
    code."""
    repo = context.full_name
    lint = config.lint

    if not context.head_branch and not context.base_branch:
        _best_effort("Branch diagnostic comment", github.create_comment, repo, context.number, NO_BRANCH_COMMENT)
        logger.error("Unable to get the head and base branch")
        return EXIT_FAILED

    logger.info("Base branch -> %s", context.base_branch)
    logger.info("Head branch -> %s", context.head_branch)

    labels = get_gated_labels(context.base_branch, lint.gated_branches)
    if labels:
        _best_effort("Add labels", github.add_labels, repo, context.number, labels)

    assignees = get_assignees(
        context.base_branch,
        context.requested_reviewers,
        release_reviewer=lint.release_reviewer,
        gated=lint.gated_branches,
    )
    if assignees:
        _best_effort("Add assignees", github.add_assignees, repo, context.number, assignees)

    if should_skip_branch_lint(context.head_branch, lint.skip_branches):
        return EXIT_OK

    issue_key = get_issue_key(context.head_branch)
    logger.info("Jira key -> %s", issue_key)
    if not issue_key:
        return _missing_ticket(config, context, github, "No issue key in branch name")

    details = _fetch_ticket(jira, issue_key)
    if details is None:
        return _missing_ticket(config, context, github, f"Ticket {issue_key} not found")

    # Status allow-list is reported, not enforced
    if not is_issue_status_valid(lint.validate_issue_status, lint.allowed_statuses, details):
        logger.warning(
            "Ticket %s is %r, not one of: %s", details.key, details.status, ", ".join(lint.allowed_statuses)
        )

    if details.status_id == config.jira.in_progress_status_id:
        logger.info("Moving %s to review (transition %s)", issue_key, config.jira.review_transition_id)
        _best_effort("Transition issue", jira.transition_issue, issue_key, config.jira.review_transition_id)

    if not should_update_pr_description(context.body):
        logger.info("Description already linked to a ticket")
        return EXIT_OK

    github.update_pr_body(repo, context.number, get_pr_description(context.body, details))
    logger.info("Description updated with %s", details.key)

    if lint.skip_comments:
        return EXIT_OK

    logger.info("Adding comment for the PR title")
    _best_effort(
        "PR title comment",
        github.create_comment,
        repo,
        context.number,
        get_pr_title_comment(details.summary, context.title),
    )
    if is_humongous_pr(context.additions, lint.pr_threshold):
        logger.info("Adding comment for huge PR")
        _best_effort(
            "Huge PR comment",
            github.create_comment,
            repo,
            context.number,
            get_huge_pr_comment(context.additions, lint.pr_threshold),
        )
    return EXIT_OK


def run(
    config: AppConfig,
    event_path: Path | None = None,
    github: GitPlatformAdapter | None = None,
    jira: JiraClient | None = None,
) -> int:
    """Build clients and context, then link; any uncaught error fails the
    run."""
    try:
        context = context_from_payload(load_event(event_path))
        if github is None:
            github = GitHubAdapter(token=config.github_token_resolved or "", api_url=config.github.api_url)
        if jira is None:
            jira = JiraClient(
                base_url=config.jira.base_url,
                token=config.jira_token_resolved or "",
                auth_scheme=config.jira.auth_scheme,
                timeout=config.jira.timeout,
            )
        return run_link(config, context, github, jira)
    except Exception as e:
        logger.exception("Linking failed: %s", e)
        return EXIT_FAILED
