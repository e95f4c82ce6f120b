"""Build PullRequestContext from a GitHub pull_request event payload."""

import json
import os
from pathlib import Path
from typing import Any, Dict

from ticketlink.models import PullRequestContext


class EventError(Exception):
    """Raised when the event payload is missing or lacks repository data."""

    pass


def load_event(event_path: Path | None = None) -> Dict[str, Any]:
    """Read the event JSON from event_path or $GITHUB_EVENT_PATH."""
    if event_path is None:
        env_path = os.environ.get("GITHUB_EVENT_PATH")
        if not env_path:
            raise EventError("No event file: pass --event or set GITHUB_EVENT_PATH")
        event_path = Path(env_path)
    try:
        data = json.loads(event_path.read_text())
    except (OSError, ValueError) as e:
        raise EventError(f"Cannot read event payload {event_path}: {e}") from e
    if not isinstance(data, dict):
        raise EventError(f"Event payload {event_path} is not a JSON object")
    return data


def _not_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def context_from_payload(payload: Dict[str, Any]) -> PullRequestContext:
    """Snapshot the triggering pull request.

    Null fields fall back to defaults (empty body, zero additions).
    Raises EventError when repository or pull_request is missing.
    """
    repository = payload.get("repository")
    if not isinstance(repository, dict):
        raise EventError("Missing 'repository' from event payload")
    pull_request = payload.get("pull_request")
    if not isinstance(pull_request, dict):
        raise EventError("Missing 'pull_request' from event payload; is this a pull_request event?")

    # Organization repos carry the org; personal repos only the owner
    org = payload.get("organization") or {}
    owner = org.get("login") or (repository.get("owner") or {}).get("login") or ""

    pr = _not_none(pull_request)
    base = pr.get("base") or {}
    head = pr.get("head") or {}
    reviewers = tuple(r["login"] for r in (pr.get("requested_reviewers") or []) if isinstance(r, dict) and r.get("login"))

    return PullRequestContext(
        owner=owner,
        repo=repository.get("name") or "",
        number=pr.get("number", 0),
        base_branch=base.get("ref") or "",
        head_branch=head.get("ref") or "",
        body=pr.get("body", ""),
        title=pr.get("title", ""),
        additions=pr.get("additions", 0),
        requested_reviewers=reviewers,
        html_url=pr.get("html_url"),
    )
