"""Jira REST client: read ticket details and request workflow transitions.

Only the two calls the linker needs are implemented. Authentication is a
single Authorization header set when the client is built.
"""

import logging
from typing import Any, Dict
from urllib.parse import quote

import requests

from ticketlink.models import TicketDetails, TicketLabel, TicketProject, TicketType

logger = logging.getLogger(__name__)

# Story points on Jira Cloud
ESTIMATE_FIELD = "customfield_10016"
ISSUE_FIELDS = ("project", "summary", "issuetype", "labels", "status", ESTIMATE_FIELD)
# Left unescaped in JQL search links
_JQL_SAFE = "!*'()"


class TicketClientError(Exception):
    """Raised when a Jira API call fails."""

    pass


class TicketNotFoundError(TicketClientError):
    """Raised when the key does not resolve to an issue."""

    pass


def _label_search_url(base_url: str, project_key: str, label: str) -> str:
    jql = f"project = {project_key} AND labels = {label} ORDER BY created DESC"
    return f"{base_url}/issues?jql={quote(jql, safe=_JQL_SAFE)}"


def _estimate_from_fields(fields: Dict[str, Any]) -> int | float | str:
    value = fields.get(ESTIMATE_FIELD)
    if isinstance(value, bool) or value is None:
        return "N/A"
    if isinstance(value, (int, float, str)):
        return value
    return "N/A"


def details_from_issue(base_url: str, data: Dict[str, Any]) -> TicketDetails:
    """Flatten a native Jira issue into TicketDetails."""
    fields = data.get("fields") or {}
    key = data.get("key") or ""
    status = fields.get("status") or {}
    issuetype = fields.get("issuetype") or {}
    project = fields.get("project") or {}
    project_key = project.get("key") or ""
    labels = [
        TicketLabel(name=name, url=_label_search_url(base_url, project_key, name))
        for name in (fields.get("labels") or [])
        if isinstance(name, str)
    ]
    return TicketDetails(
        key=key,
        summary=fields.get("summary") or "",
        url=f"{base_url}/browse/{key}",
        status=status.get("name") or "",
        status_id=str(status.get("id") or ""),
        type=TicketType(
            id=str(issuetype.get("id") or ""),
            name=issuetype.get("name") or "",
            icon=issuetype.get("iconUrl") or "",
        ),
        project=TicketProject(
            name=project.get("name") or "",
            url=f"{base_url}/browse/{project_key}" if project_key else "",
            key=project_key,
        ),
        estimate=_estimate_from_fields(fields),
        labels=tuple(labels),
    )


class JiraClient:
    """Jira Cloud REST API v3 client."""

    def __init__(self, base_url: str, token: str, auth_scheme: str = "Basic", timeout: int = 10) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_url = f"{self._base_url}/rest/api/3"
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"{auth_scheme} {token}"
        self._session.headers["Accept"] = "application/json"

    @property
    def base_url(self) -> str:
        return self._base_url

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(method, url, params=params, json=json, timeout=self._timeout)
        except requests.RequestException as e:
            raise TicketClientError(f"{method} {path} failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                payload = resp.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict) and payload.get("errorMessages"):
                msg = "; ".join(str(m) for m in payload["errorMessages"])
            if resp.status_code == 404:
                raise TicketNotFoundError(f"Not found: {path} ({msg})")
            raise TicketClientError(f"{resp.status_code}: {msg}")
        return resp

    def get_issue(self, key: str) -> Dict[str, Any]:
        """Fetch the native issue with only the fields the linker uses."""
        resp = self._request("GET", f"/issue/{key}", params={"fields": ",".join(ISSUE_FIELDS)})
        return resp.json() or {}

    def get_ticket_details(self, key: str) -> TicketDetails:
        """Fetch an issue and flatten it for display."""
        data = self.get_issue(key)
        if not data.get("key"):
            raise TicketNotFoundError(f"Not found: issue {key}")
        return details_from_issue(self._base_url, data)

    def transition_issue(self, key: str, transition_id: str) -> None:
        """Move the issue through the given workflow transition."""
        self._request("POST", f"/issue/{key}/transitions", json={"transition": {"id": transition_id}})
