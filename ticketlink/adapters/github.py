"""GitHub API adapter."""

import logging
from typing import Any, Dict, List

import requests

from ticketlink.adapters.base import GitPlatformAdapter, GitPlatformError

logger = logging.getLogger(__name__)


class GitHubAdapter(GitPlatformAdapter):
    """GitHub REST implementation."""

    def __init__(self, token: str, api_url: str = "https://api.github.com", timeout: int = 30) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _request(
        self,
        method: str,
        path: str,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(method, url, json=json, timeout=self._timeout)
        except requests.RequestException as e:
            raise GitPlatformError(f"{method} {path} failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                payload = resp.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict) and payload.get("message"):
                msg = payload["message"]
            raise GitPlatformError(f"{resp.status_code}: {msg}")
        return resp

    def create_comment(self, repo: str, issue_number: int, body: str) -> None:
        self._request("POST", f"/repos/{repo}/issues/{issue_number}/comments", json={"body": body})

    def add_labels(self, repo: str, issue_number: int, labels: List[str]) -> None:
        self._request("POST", f"/repos/{repo}/issues/{issue_number}/labels", json={"labels": labels})

    def add_assignees(self, repo: str, issue_number: int, assignees: List[str]) -> None:
        self._request("POST", f"/repos/{repo}/issues/{issue_number}/assignees", json={"assignees": assignees})

    def update_pr_body(self, repo: str, pr_number: int, body: str) -> None:
        self._request("PATCH", f"/repos/{repo}/pulls/{pr_number}", json={"body": body})
