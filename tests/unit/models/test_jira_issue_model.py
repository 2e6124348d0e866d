"""Tests for the JiraIssue model."""

import math
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from mcp_jira.models.constants import JIRA_DEFAULT_KEY
from mcp_jira.models.jira import JiraIssue
from tests.utils.factories import JiraIssueFactory


class TestJiraIssueFromApiResponse:
    """Tests for JiraIssue.from_api_response."""

    def test_basic_fields(self):
        """Test that the core fields are mapped."""
        issue = JiraIssue.from_api_response(
            JiraIssueFactory.create(
                "PROJ-1",
                fields={"labels": ["backend", "api", "backend"]},
            )
        )
        assert issue.key == "PROJ-1"
        assert issue.id == "12345"
        assert issue.summary == "Test Issue Summary"
        assert issue.description == "Test issue description"
        assert issue.status.name == "To Do"
        assert issue.status_category == "new"
        assert issue.issue_type.name == "Task"
        assert issue.priority is not None and issue.priority.name == "Medium"
        assert issue.assignee is not None
        assert issue.assignee.display_name == "Test User"
        assert issue.labels == ["backend", "api"]
        assert issue.url == "https://test.atlassian.net/rest/api/3/issue/PROJ-1"

    def test_timestamps(self):
        """Test that the timestamp mixin parses created/updated."""
        issue = JiraIssue.from_api_response(JiraIssueFactory.create())
        assert issue.created_at == datetime(2023, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert issue.updated_at == issue.created_at

    @pytest.mark.parametrize(
        "data",
        [
            pytest.param(None, id="none"),
            pytest.param({}, id="empty"),
            pytest.param("not a dict", id="string"),
        ],
    )
    def test_empty_payload_gives_defaults(self, data):
        """Test that empty or invalid payloads give a default instance."""
        issue = JiraIssue.from_api_response(data)
        assert issue.key == JIRA_DEFAULT_KEY
        assert issue.story_points is None
        assert issue.status_category == "undefined"

    def test_minimal_payload(self):
        """Test a payload with nothing but a summary and a status name."""
        issue = JiraIssue.from_api_response(JiraIssueFactory.create_minimal("MIN-1"))
        assert issue.key == "MIN-1"
        assert issue.status.name == "Open"
        assert issue.status_category == "undefined"
        assert issue.assignee is None
        assert issue.updated == ""
        assert issue.updated_at is None

    def test_adf_description(self):
        """Test that paragraph text is extracted from an ADF description."""
        adf = {
            "type": "doc",
            "version": 1,
            "content": [
                {"type": "paragraph", "content": [{"type": "text", "text": "First"}]},
                {"type": "paragraph", "content": [{"type": "text", "text": "Second"}]},
            ],
        }
        issue = JiraIssue.from_api_response(
            JiraIssueFactory.create(fields={"description": adf})
        )
        assert issue.description == "First\nSecond"

    def test_parent_subtasks_and_links(self):
        """Test that embedded references are mapped to JiraIssueRef."""
        issue = JiraIssue.from_api_response(
            JiraIssueFactory.create(
                "PROJ-2",
                fields={
                    "parent": JiraIssueFactory.create_ref("PROJ-1", "Parent"),
                    "subtasks": [JiraIssueFactory.create_ref("PROJ-3", "Sub")],
                    "issuelinks": [
                        {
                            "id": "1",
                            "type": {"name": "Relates", "outward": "relates to"},
                            "outwardIssue": JiraIssueFactory.create_ref("PROJ-4"),
                        },
                        {"id": "2", "type": {"name": "Broken"}},
                    ],
                },
            )
        )
        assert issue.parent is not None and issue.parent.key == "PROJ-1"
        assert [s.key for s in issue.subtasks] == ["PROJ-3"]
        assert [link.linked_issue.key for link in issue.issue_links] == ["PROJ-4"]


class TestStoryPoints:
    """Tests for story point extraction and validation."""

    @pytest.mark.parametrize(
        "fields, expected",
        [
            pytest.param({"customfield_10016": 5}, 5, id="cloud-field"),
            pytest.param({"customfield_10026": 2.5}, 2.5, id="fractional"),
            pytest.param({"customfield_10016": 0}, 0, id="zero"),
            pytest.param(
                {"customfield_10016": None, "customfield_10028": 3}, 3, id="fallback"
            ),
            pytest.param({"customfield_10016": "8"}, None, id="string"),
            pytest.param({"customfield_10016": True}, None, id="boolean"),
            pytest.param({"customfield_10016": math.nan}, None, id="nan"),
            pytest.param({"customfield_10016": math.inf}, None, id="infinite"),
            pytest.param({"customfield_10016": -3}, None, id="negative"),
            pytest.param({}, None, id="absent"),
        ],
    )
    def test_extraction(self, fields, expected):
        """Test which custom field values count as story points."""
        issue = JiraIssue.from_api_response(JiraIssueFactory.create(fields=fields))
        assert issue.story_points == expected
        assert issue.is_estimated is (expected is not None)

    def test_negative_logs_warning(self, caplog):
        """Test that a negative estimate is ignored with a warning."""
        JiraIssue.from_api_response(
            JiraIssueFactory.create(fields={"customfield_10016": -1})
        )
        assert "Ignoring negative story points" in caplog.text

    @pytest.mark.parametrize(
        "points",
        [
            pytest.param(-1, id="negative"),
            pytest.param(math.nan, id="nan"),
            pytest.param(math.inf, id="infinite"),
            pytest.param(-math.inf, id="negative-infinite"),
        ],
    )
    def test_invalid_points_rejected_by_model(self, points):
        """Test that constructing an issue with unusable points fails."""
        with pytest.raises(ValidationError):
            JiraIssue(key="PROJ-1", story_points=points)

    def test_points_immutable(self):
        """Test that an issue cannot be re-estimated after construction."""
        issue = JiraIssueFactory.create_model("PROJ-1", points=3)
        with pytest.raises(ValidationError):
            issue.story_points = 8
        with pytest.raises(ValidationError):
            issue.status.category.key = "done"
        assert issue.story_points == 3
        assert issue.status_category == "new"


class TestSprints:
    """Tests for sprint extraction."""

    def test_active_sprint_preferred(self):
        """Test that the active sprint becomes the current sprint."""
        issue = JiraIssue.from_api_response(
            JiraIssueFactory.create(
                fields={
                    "customfield_10020": [
                        {"id": 1, "name": "Sprint 1", "state": "closed"},
                        {"id": 2, "name": "Sprint 2", "state": "active"},
                        {"id": 3, "name": "Sprint 3", "state": "future"},
                    ]
                }
            )
        )
        assert issue.sprint is not None and issue.sprint.name == "Sprint 2"
        assert [s.id for s in issue.sprints] == [1, 2, 3]

    def test_latest_sprint_without_active(self):
        """Test that the last sprint is current when none is active."""
        issue = JiraIssue.from_api_response(
            JiraIssueFactory.create(
                fields={
                    "customfield_10020": [
                        {"id": 1, "name": "Sprint 1", "state": "closed"},
                        {"id": 2, "name": "Sprint 2", "state": "closed"},
                    ]
                }
            )
        )
        assert issue.sprint is not None and issue.sprint.id == 2

    def test_malformed_sprints_ignored(self):
        """Test that sprint entries without id and name are skipped."""
        issue = JiraIssue.from_api_response(
            JiraIssueFactory.create(fields={"customfield_10020": ["legacy-string"]})
        )
        assert issue.sprint is None
        assert issue.sprints == []


class TestToSimplifiedDict:
    """Tests for JiraIssue.to_simplified_dict."""

    def test_simplified_dict(self):
        """Test the rendered dictionary of an estimated sprint issue."""
        issue = JiraIssueFactory.create_model(
            "PROJ-7", points=3, sprint="Sprint 7", category="done"
        )
        result = issue.to_simplified_dict()
        assert result["key"] == "PROJ-7"
        assert result["status"] == {"name": "Done", "category": "done"}
        assert result["story_points"] == 3
        assert result["sprint"] == {"id": 7, "name": "Sprint 7", "state": "active"}
        assert result["assignee"]["display_name"] == "Test User"

    def test_unassigned(self):
        """Test that a missing assignee renders as Unassigned."""
        issue = JiraIssueFactory.create_model("PROJ-8", assignee=None)
        assert issue.to_simplified_dict()["assignee"] == {"display_name": "Unassigned"}
        assert "story_points" not in issue.to_simplified_dict()
