"""Flattened Jira ticket details used to render PR descriptions."""

from pydantic import BaseModel, ConfigDict, Field


class TicketType(BaseModel):
    """Issue type (story, bug, ...) with its icon."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str = ""
    icon: str = ""


class TicketProject(BaseModel):
    """Project the ticket belongs to."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    url: str = ""
    key: str = ""


class TicketLabel(BaseModel):
    """Ticket label and the search URL listing tickets with it."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str


class TicketDetails(BaseModel):
    """Ticket fields shown in the pull request."""

    model_config = ConfigDict(frozen=True)

    key: str
    summary: str = ""
    url: str = ""
    status: str = ""
    status_id: str = ""
    type: TicketType = Field(default_factory=TicketType)
    project: TicketProject = Field(default_factory=TicketProject)
    estimate: int | float | str = "N/A"
    labels: tuple[TicketLabel, ...] = Field(default_factory=tuple)
