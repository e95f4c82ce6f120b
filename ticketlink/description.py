"""Render the ticket block embedded in pull request descriptions.

The block is delimited by HTML comments so it is invisible in the rendered
description, can be detected on later runs, and can be replaced without
touching what the author wrote.
"""

import re
from html import escape

from ticketlink.models import TicketDetails, TicketLabel

HIDDEN_MARKER = "added_by_ticketlink"
BLOCK_START = (
    "<!--\n"
    "  do not remove this marker as it will break ticketlink's functionality.\n"
    f"  {HIDDEN_MARKER}\n"
    "-->"
)
BLOCK_END = "<!-- end_of_ticketlink_block -->"

_BLOCK_RE = re.compile(
    r"\s*" + re.escape(BLOCK_START) + r".*?" + re.escape(BLOCK_END) + r"\s*",
    re.DOTALL,
)


def should_update_pr_description(body: str | None) -> bool:
    """True unless the body already carries the generated ticket block."""
    return HIDDEN_MARKER not in (body or "")


def strip_generated_block(body: str | None) -> str:
    """Remove every generated block and return the author's text."""
    if not body:
        return ""
    return _BLOCK_RE.sub("\n\n", body).strip()


def _render_labels(labels: tuple[TicketLabel, ...]) -> str:
    if not labels:
        return "-"
    return " ".join(
        f'<a href="{escape(label.url)}" title="{escape(label.name)}"><code>{escape(label.name)}</code></a>'
        for label in labels
    )


def _render_icon(details: TicketDetails) -> str:
    if not details.type.icon:
        return ""
    return f'<img alt="{escape(details.type.name)}" src="{escape(details.type.icon)}" /> '


def _render_type(details: TicketDetails) -> str:
    return _render_icon(details) + (escape(details.type.name) or "-")


def _render_project(details: TicketDetails) -> str:
    name = escape(details.project.name or details.project.key)
    if details.project.url:
        return f'<a href="{escape(details.project.url)}" title="{name}">{name}</a>'
    return name or "-"


def render_ticket_block(details: TicketDetails) -> str:
    """HTML block with the ticket link, summary and a details table."""
    key = escape(details.key)
    rows = [
        ("Type", _render_type(details)),
        ("Status", escape(details.status) or "-"),
        ("Estimate", escape(str(details.estimate))),
        ("Project", _render_project(details)),
        ("Labels", _render_labels(details.labels)),
    ]
    table = "\n".join(f"    <tr><th>{th}</th><td>{td}</td></tr>" for th, td in rows)
    return "\n".join(
        [
            BLOCK_START,
            f'<div><a href="{escape(details.url)}" title="{key}" target="_blank">{_render_icon(details)}{key}</a>'
            f" {escape(details.summary)}</div>",
            "<br />",
            "<details open>",
            "  <summary><strong>Jira Issue Details</strong></summary>",
            "  <br />",
            "  <table>",
            table,
            "  </table>",
            "</details>",
            BLOCK_END,
        ]
    )


def get_pr_description(existing_body: str | None, details: TicketDetails) -> str:
    """Return the author's text followed by a freshly rendered ticket block.

    Any block from a previous run is dropped first, so calling this on its
    own output only swaps the block.
    """
    remainder = strip_generated_block(existing_body)
    block = render_ticket_block(details)
    if not remainder:
        return block
    return f"{remainder}\n\n{block}"
