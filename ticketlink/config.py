"""Configuration loading from YAML, environment and GitHub Actions inputs.

Secrets (tokens) are taken from environment variables or from files
(Docker secrets). Never put real tokens in config files committed to the
repo.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PR_ADDITIONS_THRESHOLD = 800
DEFAULT_GATED_BRANCHES = ["develop", "testing", "uat", "staging", "production"]
DEFAULT_RELEASE_REVIEWER = "vipanhira"


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


# Injected by load_config so secrets and action inputs are read from one snapshot
_current_env: dict[str, str] = {}


class GitHubConfig(BaseSettings):
    """GitHub API settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="Actions token or PAT; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")


class JiraConfig(BaseSettings):
    """Jira REST API settings and workflow ids."""

    model_config = SettingsConfigDict(env_prefix="JIRA_", extra="ignore")

    token: str | None = Field(default=None, description="Pre-encoded Basic credential or bearer token")
    base_url: str = Field(default="", description="Jira site, e.g. https://acme.atlassian.net")
    auth_scheme: str = Field(default="Basic", description="Authorization scheme: Basic or Bearer")
    timeout: int = Field(default=10, ge=1, description="Request timeout in seconds")
    in_progress_status_id: str = Field(default="10600", description="Status id that triggers the review transition")
    review_transition_id: str = Field(default="41", description="Transition id moving a ticket to code review")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class LintConfig(BaseSettings):
    """Branch, comment and labeling rules."""

    model_config = SettingsConfigDict(env_prefix="LINT_", extra="ignore")

    skip_branches: str = Field(default="", description="Regex; matching head branches are not linted")
    skip_comments: bool = Field(default=False, description="Do not post advisory comments")
    pr_threshold: int = Field(
        default=DEFAULT_PR_ADDITIONS_THRESHOLD, ge=0, description="Additions above which a PR is huge"
    )
    validate_issue_status: bool = Field(default=False, description="Check the ticket status allow-list")
    allowed_issue_statuses: str = Field(default="", description="Comma separated allowed status names")
    # Off by default: a branch without a ticket ends the run successfully
    fail_on_missing_issue: bool = Field(default=False, description="Fail the run when no ticket is linked")
    gated_branches: list[str] = Field(default_factory=lambda: list(DEFAULT_GATED_BRANCHES))
    release_reviewer: str = Field(default=DEFAULT_RELEASE_REVIEWER, description="Login assigned on release branches")

    @property
    def allowed_statuses(self) -> list[str]:
        """Allowed status names as a list (empty entries dropped)."""
        return [s.strip() for s in self.allowed_issue_statuses.split(",") if s.strip()]


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    jira: JiraConfig = Field(default_factory=JiraConfig)
    lint: LintConfig = Field(default_factory=LintConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")

    @property
    def jira_token_resolved(self) -> str | None:
        """Resolve Jira token from config, env or Docker secret file."""
        t = self.jira.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("JIRA_TOKEN", "JIRA_TOKEN_FILE")

    def validate_required(self) -> None:
        """Raise ConfigError if a value needed to talk to GitHub or Jira is
        missing."""
        missing = []
        if not self.github_token_resolved:
            missing.append("github-token")
        if not self.jira_token_resolved:
            missing.append("jira-token")
        if not self.jira.base_url:
            missing.append("jira-base-url")
        if missing:
            raise ConfigError(f"Missing required input(s): {', '.join(missing)}")


# GitHub Actions exposes `with:` inputs as INPUT_<NAME> (uppercased, hyphens kept)
ACTION_INPUTS: dict[str, tuple[str, str]] = {
    "jira-token": ("jira", "token"),
    "jira-base-url": ("jira", "base_url"),
    "github-token": ("github", "token"),
    "skip-branches": ("lint", "skip_branches"),
    "skip-comments": ("lint", "skip_comments"),
    "pr-threshold": ("lint", "pr_threshold"),
    "validate_issue_status": ("lint", "validate_issue_status"),
    "allowed_issue_statuses": ("lint", "allowed_issue_statuses"),
}

_BOOL_INPUTS = {"skip-comments", "validate_issue_status"}


def _action_input(name: str) -> str | None:
    """Return the raw value of an action input, or None when unset or
    blank."""
    key = "INPUT_" + name.replace(" ", "_").upper()
    value = _current_env.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_threshold(value: str) -> int:
    """Parse pr-threshold; zero or anything that is not an integer gives
    the default."""
    try:
        return int(value) or DEFAULT_PR_ADDITIONS_THRESHOLD
    except ValueError:
        return DEFAULT_PR_ADDITIONS_THRESHOLD


def _apply_action_inputs(raw: dict[str, Any]) -> dict[str, Any]:
    """Overlay INPUT_* values onto the raw section dicts."""
    for name, (section, field) in ACTION_INPUTS.items():
        value = _action_input(name)
        if value is None:
            continue
        converted: Any = value
        if name in _BOOL_INPUTS:
            converted = value.lower() == "true"
        elif name == "pr-threshold":
            converted = _parse_threshold(value)
        raw[section] = {**(raw.get(section) or {}), field: converted}
    return raw


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file, environment and action inputs.

    Secrets: GITHUB_TOKEN or GITHUB_TOKEN_FILE, JIRA_TOKEN or JIRA_TOKEN_FILE.
    Action inputs (INPUT_JIRA-TOKEN, INPUT_PR-THRESHOLD, ...) win over YAML.
    """
    global _current_env

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    raw: dict[str, Any] = {}
    if path.is_file():
        raw = yaml.safe_load(path.read_text()) or {}
        raw = _substitute_env(raw)
    raw = _apply_action_inputs(raw)

    # Explicit kwargs beat env, so YAML/input values override LINT_* etc.
    github = GitHubConfig(**(raw.get("github") or {}))
    jira = JiraConfig(**(raw.get("jira") or {}))
    lint = LintConfig(**(raw.get("lint") or {}))
    logging = LoggingConfig(**(raw.get("logging") or {}))

    return AppConfig(github=github, jira=jira, lint=lint, logging=logging)
