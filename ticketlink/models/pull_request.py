"""Pull request snapshot taken from the triggering event."""

from pydantic import BaseModel, ConfigDict, Field


class PullRequestContext(BaseModel):
    """Read-only view of the pull request that triggered the run."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int = 0
    base_branch: str = ""
    head_branch: str = ""
    body: str = ""
    title: str = ""
    additions: int = 0
    requested_reviewers: tuple[str, ...] = Field(default_factory=tuple)
    html_url: str | None = None

    @property
    def full_name(self) -> str:
        """Repository as owner/repo."""
        return f"{self.owner}/{self.repo}"
