"""Link pull requests to Jira tickets from a CI step."""

__version__ = "0.1.0"
