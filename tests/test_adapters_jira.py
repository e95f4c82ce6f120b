"""Unit tests for the Jira client (mocked API)."""

from unittest.mock import Mock, patch
from urllib.parse import unquote

import pytest

from ticketlink.adapters.jira import (
    ISSUE_FIELDS,
    JiraClient,
    TicketClientError,
    TicketNotFoundError,
    details_from_issue,
)
from ticketlink.models import TicketDetails

BASE = "https://acme.atlassian.net"


@pytest.fixture
def client() -> JiraClient:
    return JiraClient(base_url=BASE + "/", token="dXNlcjp0b2tlbg==")


@pytest.fixture
def issue_data() -> dict:
    return {
        "id": "10042",
        "key": "ABC-12",
        "fields": {
            "summary": "Add login page",
            "status": {"name": "In Progress", "id": "10600"},
            "issuetype": {"id": "10001", "name": "Story", "iconUrl": f"{BASE}/story.svg"},
            "project": {"key": "ABC", "name": "Acme"},
            "labels": ["frontend", "auth"],
            "customfield_10016": 5,
        },
    }


def _resp(status: int, data: object = None, text: str = "") -> Mock:
    resp = Mock()
    resp.status_code = status
    resp.text = text
    resp.json.return_value = data
    return resp


def test_session_auth_header() -> None:
    """The credential is set once, Basic by default."""
    assert JiraClient(BASE, "abc")._session.headers["Authorization"] == "Basic abc"
    assert JiraClient(BASE, "abc", auth_scheme="Bearer")._session.headers["Authorization"] == "Bearer abc"


def test_base_url_trailing_slash_stripped(client: JiraClient) -> None:
    assert client.base_url == BASE


def test_get_issue_requests_needed_fields(client: JiraClient, issue_data: dict) -> None:
    """get_issue GETs the v3 issue endpoint restricted to used fields."""
    with patch.object(client._session, "request", return_value=_resp(200, issue_data)) as req:
        data = client.get_issue("ABC-12")

    assert data == issue_data
    call_args = req.call_args
    assert call_args[0][0] == "GET"
    assert call_args[0][1] == f"{BASE}/rest/api/3/issue/ABC-12"
    assert call_args[1]["params"] == {"fields": ",".join(ISSUE_FIELDS)}


def test_get_ticket_details_maps_fields(client: JiraClient, issue_data: dict) -> None:
    """Native issue is flattened into TicketDetails."""
    with patch.object(client._session, "request", return_value=_resp(200, issue_data)):
        details = client.get_ticket_details("ABC-12")

    assert isinstance(details, TicketDetails)
    assert details.key == "ABC-12"
    assert details.summary == "Add login page"
    assert details.url == f"{BASE}/browse/ABC-12"
    assert details.status == "In Progress"
    assert details.status_id == "10600"
    assert details.type.name == "Story"
    assert details.type.icon == f"{BASE}/story.svg"
    assert details.project.key == "ABC"
    assert details.project.url == f"{BASE}/browse/ABC"
    assert details.estimate == 5
    assert [label.name for label in details.labels] == ["frontend", "auth"]


def test_label_urls_search_project_and_label(issue_data: dict) -> None:
    """Each label links to a JQL search for that label in the project."""
    details = details_from_issue(BASE, issue_data)
    url = details.labels[0].url
    assert url.startswith(f"{BASE}/issues?jql=")
    assert " " not in url
    assert unquote(url.split("jql=", 1)[1]) == "project = ABC AND labels = frontend ORDER BY created DESC"


@pytest.mark.parametrize("value", [None, {"value": 3}, True])
def test_estimate_not_available(issue_data: dict, value: object) -> None:
    """Missing or non-scalar estimates show N/A."""
    issue_data["fields"]["customfield_10016"] = value
    assert details_from_issue(BASE, issue_data).estimate == "N/A"


def test_sparse_issue_does_not_fail() -> None:
    """An issue with almost no fields still maps."""
    details = details_from_issue(BASE, {"key": "ABC-1", "fields": {}})
    assert details.key == "ABC-1"
    assert details.labels == ()
    assert details.project.url == ""


def test_get_ticket_details_404_raises_not_found(client: JiraClient) -> None:
    """Unknown keys raise TicketNotFoundError."""
    resp = _resp(404, {"errorMessages": ["Issue does not exist or you do not have permission to see it."]})
    with patch.object(client._session, "request", return_value=resp):
        with pytest.raises(TicketNotFoundError, match="does not exist"):
            client.get_ticket_details("NOPE-1")


def test_get_ticket_details_without_key_is_not_found(client: JiraClient) -> None:
    """A response without a key counts as no ticket."""
    with patch.object(client._session, "request", return_value=_resp(200, {})):
        with pytest.raises(TicketNotFoundError):
            client.get_ticket_details("ABC-1")


def test_server_error_raises_client_error(client: JiraClient) -> None:
    """Other errors raise TicketClientError, not TicketNotFoundError."""
    with patch.object(client._session, "request", return_value=_resp(401, None, "Unauthorized")):
        with pytest.raises(TicketClientError) as exc_info:
            client.get_issue("ABC-1")
    assert not isinstance(exc_info.value, TicketNotFoundError)
    assert "401: Unauthorized" in str(exc_info.value)


def test_transition_issue(client: JiraClient) -> None:
    """transition_issue POSTs the transition id."""
    with patch.object(client._session, "request", return_value=_resp(204)) as req:
        client.transition_issue("ABC-12", "41")

    call_args = req.call_args
    assert call_args[0][0] == "POST"
    assert call_args[0][1] == f"{BASE}/rest/api/3/issue/ABC-12/transitions"
    assert call_args[1]["json"] == {"transition": {"id": "41"}}


def test_transition_issue_error(client: JiraClient) -> None:
    """A rejected transition raises TicketClientError."""
    resp = _resp(400, {"errorMessages": ["Transition id '41' is not valid for this issue."]})
    with patch.object(client._session, "request", return_value=resp):
        with pytest.raises(TicketClientError, match="not valid"):
            client.transition_issue("ABC-12", "41")


def test_null_fields_render_blank() -> None:
    """Explicit nulls from Jira map to empty values."""
    data = {
        "key": "ABC-1",
        "fields": {
            "summary": None,
            "status": {"name": None, "id": None},
            "issuetype": {"id": None, "name": None, "iconUrl": None},
            "project": {"key": None, "name": None},
            "labels": None,
        },
    }
    details = details_from_issue(BASE, data)
    assert details.summary == ""
    assert details.status == ""
    assert details.status_id == ""
    assert details.type.icon == ""
    assert details.type.name == ""
    assert details.project.key == ""
    assert details.project.url == ""
    assert details.labels == ()
