"""Tests for config loading (YAML, env, action inputs, secrets)."""

import os
from pathlib import Path

import pytest

from ticketlink.config import (
    DEFAULT_GATED_BRANCHES,
    DEFAULT_PR_ADDITIONS_THRESHOLD,
    AppConfig,
    ConfigError,
    JiraConfig,
    LintConfig,
    load_config,
)

_PREFIXES = ("GITHUB_", "JIRA_", "LINT_", "LOGGING_", "INPUT_")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop variables that would leak runner settings into the tests."""
    for key in list(os.environ):
        if key.upper().startswith(_PREFIXES):
            monkeypatch.delenv(key, raising=False)


def test_defaults_without_file(tmp_path: Path) -> None:
    """A missing config file gives defaults."""
    config = load_config(tmp_path / "missing.yaml")
    assert isinstance(config, AppConfig)
    assert config.github.api_url == "https://api.github.com"
    assert config.jira.auth_scheme == "Basic"
    assert config.jira.in_progress_status_id == "10600"
    assert config.jira.review_transition_id == "41"
    assert config.lint.pr_threshold == DEFAULT_PR_ADDITIONS_THRESHOLD == 800
    assert config.lint.skip_branches == ""
    assert config.lint.skip_comments is False
    assert config.lint.fail_on_missing_issue is False
    assert config.lint.gated_branches == DEFAULT_GATED_BRANCHES
    assert config.logging.level == "INFO"


def test_yaml_with_env_substitution(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """YAML values are read and ${VAR} is replaced from env."""
    monkeypatch.setenv("MY_JIRA_SECRET", "s3cret")
    path = tmp_path / "config.yaml"
    path.write_text(
        "jira:\n"
        "  token: ${MY_JIRA_SECRET}\n"
        "  base_url: https://acme.atlassian.net/\n"
        "lint:\n"
        "  skip_branches: '^release/'\n"
        "  pr_threshold: 500\n"
        "logging:\n"
        "  level: DEBUG\n"
    )
    config = load_config(path)
    assert config.jira.token == "s3cret"
    assert config.jira.base_url == "https://acme.atlassian.net"
    assert config.lint.skip_branches == "^release/"
    assert config.lint.pr_threshold == 500
    assert config.logging.level == "DEBUG"


def test_section_env_vars(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Prefixed env vars fill sections not set in YAML."""
    monkeypatch.setenv("LINT_SKIP_COMMENTS", "true")
    monkeypatch.setenv("JIRA_BASE_URL", "https://env.atlassian.net/")
    config = load_config(tmp_path / "missing.yaml")
    assert config.lint.skip_comments is True
    assert config.jira.base_url == "https://env.atlassian.net"


def test_action_inputs_override_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """INPUT_* values from the workflow step win over YAML."""
    path = tmp_path / "config.yaml"
    path.write_text("lint:\n  pr_threshold: 500\n  skip_comments: false\n")
    monkeypatch.setenv("INPUT_PR-THRESHOLD", "1000")
    monkeypatch.setenv("INPUT_SKIP-COMMENTS", "true")
    monkeypatch.setenv("INPUT_SKIP-BRANCHES", "^hotfix/")
    monkeypatch.setenv("INPUT_JIRA-TOKEN", "jt")
    monkeypatch.setenv("INPUT_JIRA-BASE-URL", "https://input.atlassian.net/")
    monkeypatch.setenv("INPUT_GITHUB-TOKEN", "gt")
    monkeypatch.setenv("INPUT_VALIDATE_ISSUE_STATUS", "true")
    monkeypatch.setenv("INPUT_ALLOWED_ISSUE_STATUSES", "In Progress, In Review")

    config = load_config(path)
    assert config.lint.pr_threshold == 1000
    assert config.lint.skip_comments is True
    assert config.lint.skip_branches == "^hotfix/"
    assert config.jira.token == "jt"
    assert config.jira.base_url == "https://input.atlassian.net"
    assert config.github.token == "gt"
    assert config.lint.validate_issue_status is True
    assert config.lint.allowed_statuses == ["In Progress", "In Review"]


@pytest.mark.parametrize("value", ["abc", "12.5", "0"])
def test_invalid_threshold_input_uses_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    """A zero or non-integer pr-threshold falls back to 800."""
    monkeypatch.setenv("INPUT_PR-THRESHOLD", value)
    assert load_config(tmp_path / "missing.yaml").lint.pr_threshold == 800


def test_blank_input_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Actions passes unset optional inputs as empty strings."""
    monkeypatch.setenv("INPUT_PR-THRESHOLD", "")
    monkeypatch.setenv("INPUT_SKIP-COMMENTS", "")
    config = load_config(tmp_path / "missing.yaml")
    assert config.lint.pr_threshold == 800
    assert config.lint.skip_comments is False


def test_allowed_statuses_parsing() -> None:
    assert LintConfig(allowed_issue_statuses="").allowed_statuses == []
    assert LintConfig(allowed_issue_statuses="A,,B , C").allowed_statuses == ["A", "B", "C"]


def test_jira_base_url_validator() -> None:
    assert JiraConfig(base_url="https://x.atlassian.net///").base_url == "https://x.atlassian.net"


def test_tokens_from_secret_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """*_FILE variables point to Docker secrets."""
    (tmp_path / "gh").write_text("gh-from-file\n")
    (tmp_path / "jira").write_text("jira-from-file\n")
    monkeypatch.setenv("GITHUB_TOKEN_FILE", str(tmp_path / "gh"))
    monkeypatch.setenv("JIRA_TOKEN_FILE", str(tmp_path / "jira"))
    config = load_config(tmp_path / "missing.yaml")
    assert config.github_token_resolved == "gh-from-file"
    assert config.jira_token_resolved == "jira-from-file"


def test_validate_required_lists_missing(tmp_path: Path) -> None:
    """Missing tokens and base URL are reported together."""
    config = load_config(tmp_path / "missing.yaml")
    with pytest.raises(ConfigError) as exc_info:
        config.validate_required()
    message = str(exc_info.value)
    assert "github-token" in message
    assert "jira-token" in message
    assert "jira-base-url" in message


def test_validate_required_ok(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INPUT_GITHUB-TOKEN", "gt")
    monkeypatch.setenv("INPUT_JIRA-TOKEN", "jt")
    monkeypatch.setenv("INPUT_JIRA-BASE-URL", "https://acme.atlassian.net")
    load_config(tmp_path / "missing.yaml").validate_required()
