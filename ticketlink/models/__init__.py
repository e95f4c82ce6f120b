"""Data models for pull request context and ticket details (Pydantic)."""

from ticketlink.models.pull_request import PullRequestContext
from ticketlink.models.ticket import TicketDetails, TicketLabel, TicketProject, TicketType

__all__ = ["PullRequestContext", "TicketDetails", "TicketLabel", "TicketProject", "TicketType"]
