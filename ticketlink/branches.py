"""Branch name rules: lint exemptions and issue key extraction."""

import logging
import re

logger = logging.getLogger(__name__)

# PROJECT-NUMBER: uppercase letters or digits, hyphen, digits (ABC-123, 2FA-12)
ISSUE_KEY_RE = re.compile(r"[A-Z0-9]+-\d+")


def should_skip_branch_lint(head_branch: str, ignore_pattern: str | None) -> bool:
    """Return True if the head branch matches the ignore pattern.

    An empty or invalid pattern never skips.

    Args:
        head_branch: Source branch of the pull request.
        ignore_pattern: Regular expression from configuration, may be empty.

    Returns:
        True when the branch should not be linted.
    """
    if not ignore_pattern or not head_branch:
        return False
    try:
        matched = re.search(ignore_pattern, head_branch) is not None
    except re.error as e:
        logger.warning("Ignoring invalid skip-branches pattern %r: %s", ignore_pattern, e)
        return False
    if matched:
        logger.info("Branch %s matches skip pattern %r", head_branch, ignore_pattern)
    return matched


def get_issue_keys(head_branch: str | None) -> list[str]:
    """All issue keys in the branch name, left to right."""
    if not head_branch:
        return []
    return ISSUE_KEY_RE.findall(head_branch)


def get_issue_key(head_branch: str | None) -> str | None:
    """The key placed last in the branch name, or None.

    Branches are named like feature/short-desc-ABC-123, so the rightmost
    key wins when several appear.
    """
    keys = get_issue_keys(head_branch)
    return keys[-1] if keys else None
