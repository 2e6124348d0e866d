"""Test data factories for creating consistent test objects."""

from datetime import datetime, timedelta
from typing import Any

from mcp_jira.models.jira import JiraIssue

STORY_POINTS_FIELD = "customfield_10016"
SPRINT_FIELD = "customfield_10020"

STATUSES = {
    "new": {
        "id": "1",
        "name": "To Do",
        "statusCategory": {"id": 2, "key": "new", "name": "To Do"},
    },
    "indeterminate": {
        "id": "3",
        "name": "In Progress",
        "statusCategory": {"id": 4, "key": "indeterminate", "name": "In Progress"},
    },
    "done": {
        "id": "10001",
        "name": "Done",
        "statusCategory": {"id": 3, "key": "done", "name": "Done"},
    },
}


def jira_timestamp(value: datetime) -> str:
    """Format a datetime the way the Jira REST API does."""
    return value.strftime("%Y-%m-%dT%H:%M:%S.000%z")


class JiraIssueFactory:
    """Factory for creating Jira issue test data."""

    @staticmethod
    def create(key: str = "TEST-123", **overrides) -> dict[str, Any]:
        """Create a Jira issue with default values."""
        defaults = {
            "id": "12345",
            "key": key,
            "self": f"https://test.atlassian.net/rest/api/3/issue/{key}",
            "fields": {
                "summary": "Test Issue Summary",
                "description": "Test issue description",
                "status": STATUSES["new"],
                "issuetype": {"name": "Task", "id": "10001"},
                "priority": {"name": "Medium", "id": "3"},
                "assignee": {
                    "accountId": "user-1",
                    "displayName": "Test User",
                    "emailAddress": "test@example.com",
                },
                "labels": [],
                "created": "2023-01-01T12:00:00.000+0000",
                "updated": "2023-01-01T12:00:00.000+0000",
            },
        }
        return deep_merge(defaults, overrides)

    @staticmethod
    def create_minimal(key: str = "TEST-123") -> dict[str, Any]:
        """Create minimal Jira issue for basic tests."""
        return {
            "key": key,
            "fields": {"summary": "Test Issue", "status": {"name": "Open"}},
        }

    @staticmethod
    def create_for_analysis(
        key: str = "TEST-123",
        *,
        summary: str | None = None,
        issue_type: str = "Story",
        category: str = "new",
        points: float | None = None,
        updated: datetime | str | None = None,
        assignee: str | None = "Test User",
        sprint: str | None = None,
        **overrides,
    ) -> dict[str, Any]:
        """Create a Jira issue carrying the fields the hierarchy analysis reads."""
        fields: dict[str, Any] = {
            "summary": summary or f"{issue_type} {key}",
            "status": STATUSES[category],
            "issuetype": {"name": issue_type, "id": "100"},
            "assignee": {"displayName": assignee} if assignee else None,
        }
        if points is not None:
            fields[STORY_POINTS_FIELD] = points
        if isinstance(updated, datetime):
            fields["updated"] = jira_timestamp(updated)
        elif updated is not None:
            fields["updated"] = updated
        if sprint:
            fields[SPRINT_FIELD] = [{"id": 7, "name": sprint, "state": "active"}]

        return deep_merge(
            JiraIssueFactory.create(key, fields=fields), overrides
        )

    @staticmethod
    def create_model(key: str = "TEST-123", **kwargs) -> JiraIssue:
        """Create a JiraIssue model via create_for_analysis."""
        return JiraIssue.from_api_response(
            JiraIssueFactory.create_for_analysis(key, **kwargs)
        )

    @staticmethod
    def create_ref(
        key: str = "TEST-1", summary: str = "Referenced issue", category: str = "new"
    ) -> dict[str, Any]:
        """Create an embedded issue reference as found in parent/subtasks/links."""
        return {
            "id": "20000",
            "key": key,
            "fields": {
                "summary": summary,
                "status": STATUSES[category],
                "issuetype": {"name": "Story", "id": "100"},
            },
        }


class ContextBundleFactory:
    """Factory for raw context bundles as handed over by the fetch layer."""

    @staticmethod
    def create_epic_scenario(now: datetime) -> dict[str, Any]:
        """EPIC-1 (20 points) with one done and one stale in-progress story."""
        return {
            "issue": JiraIssueFactory.create_for_analysis(
                "EPIC-1",
                summary="Checkout revamp",
                issue_type="Epic",
                category="new",
                points=20,
                updated=now - timedelta(days=1),
            ),
            "children": [
                JiraIssueFactory.create_for_analysis(
                    "STORY-1",
                    category="done",
                    points=8,
                    updated=now - timedelta(days=2),
                ),
                JiraIssueFactory.create_for_analysis(
                    "STORY-2",
                    category="indeterminate",
                    points=5,
                    updated=now - timedelta(days=7),
                ),
            ],
            "linked_issues": [],
        }

    @staticmethod
    def create_with_children(
        count: int, now: datetime, root_key: str = "EPIC-9", **overrides
    ) -> dict[str, Any]:
        """A root epic with ``count`` estimated, recently updated children."""
        bundle = {
            "issue": JiraIssueFactory.create_for_analysis(
                root_key,
                issue_type="Epic",
                points=count,
                updated=now,
            ),
            "children": [
                JiraIssueFactory.create_for_analysis(
                    f"STORY-{i}", points=1, updated=now
                )
                for i in range(1, count + 1)
            ],
            "linked_issues": [],
        }
        bundle.update(overrides)
        return bundle


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
