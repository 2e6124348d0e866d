"""
Jira issue models.

This module provides Pydantic models for Jira issues.
"""

import logging
import math
from typing import Any

from pydantic import Field, field_validator

from ..base import ApiModel, TimestampMixin
from ..constants import (
    EMPTY_STRING,
    JIRA_DEFAULT_ID,
    JIRA_DEFAULT_KEY,
    SPRINT_FIELD_CANDIDATES,
    STORY_POINTS_FIELD_CANDIDATES,
)
from .common import (
    JiraIssueType,
    JiraPriority,
    JiraStatus,
    JiraUser,
)
from .link import JiraIssueLink, JiraIssueRef
from .sprint import JiraSprint

logger = logging.getLogger(__name__)

StoryPoints = int | float


class JiraIssue(ApiModel, TimestampMixin):
    """
    Model representing a Jira issue.

    Carries the fields the hierarchy analysis relies on (status category,
    story points, sprint, assignee) together with the parent, subtask and
    link references needed to assemble a hierarchy.
    """

    id: str = JIRA_DEFAULT_ID
    key: str = JIRA_DEFAULT_KEY
    summary: str = EMPTY_STRING
    description: str | None = None
    created: str = EMPTY_STRING
    updated: str = EMPTY_STRING
    status: JiraStatus = Field(default_factory=JiraStatus)
    issue_type: JiraIssueType = Field(default_factory=JiraIssueType)
    priority: JiraPriority | None = None
    assignee: JiraUser | None = None
    reporter: JiraUser | None = None
    labels: list[str] = Field(default_factory=list)
    components: list[str] = Field(default_factory=list)
    story_points: StoryPoints | None = None
    sprint: JiraSprint | None = None
    sprints: list[JiraSprint] = Field(default_factory=list)
    parent: JiraIssueRef | None = None
    subtasks: list[JiraIssueRef] = Field(default_factory=list)
    issue_links: list[JiraIssueLink] = Field(default_factory=list)
    url: str | None = None

    @field_validator("story_points")
    @classmethod
    def _check_story_points(cls, value: StoryPoints | None) -> StoryPoints | None:
        if value is None:
            return value
        if not math.isfinite(value):
            raise ValueError(f"story_points must be finite, got {value}")
        if value < 0:
            raise ValueError(f"story_points must be non-negative, got {value}")
        return value

    @property
    def status_category(self) -> str:
        """The normalized status category of this issue."""
        return self.status.category_key

    @property
    def is_done(self) -> bool:
        """Whether the issue is in the ``done`` status category."""
        return self.status_category == "done"

    @property
    def is_estimated(self) -> bool:
        """Whether the issue carries a story point estimate."""
        return self.story_points is not None

    @staticmethod
    def _extract_story_points(fields: dict[str, Any]) -> StoryPoints | None:
        """
        Extract story points from the well-known custom fields.

        Args:
            fields: The fields dictionary from the Jira API

        Returns:
            The first numeric value found, or None
        """
        for field_id in STORY_POINTS_FIELD_CANDIDATES:
            value = fields.get(field_id)
            # bool is an int subclass; Jira never stores points as booleans
            if isinstance(value, bool) or not isinstance(value, int | float):
                continue
            if not math.isfinite(value):
                continue
            if value < 0:
                logger.warning(
                    f"Ignoring negative story points {value} in field {field_id}"
                )
                continue
            return value
        return None

    @staticmethod
    def _extract_sprints(
        fields: dict[str, Any],
    ) -> tuple[JiraSprint | None, list[JiraSprint]]:
        """
        Extract sprint data from the well-known custom fields.

        Args:
            fields: The fields dictionary from the Jira API

        Returns:
            Tuple of (current sprint, all sprints). The current sprint is the
            active one if any, otherwise the most recent.
        """
        for field_id in SPRINT_FIELD_CANDIDATES:
            value = fields.get(field_id)
            if not isinstance(value, list) or not value:
                continue

            sprints = [
                JiraSprint.from_api_response(item)
                for item in value
                if isinstance(item, dict) and "id" in item and "name" in item
            ]
            if not sprints:
                continue

            active = next((s for s in sprints if s.state == "active"), None)
            return active or sprints[-1], sprints

        return None, []

    @staticmethod
    def _extract_text(content: Any) -> str | None:
        """
        Extract plain text from a description.

        Handles plain strings and the paragraph level of Atlassian Document
        Format payloads.
        """
        if content is None:
            return None
        if isinstance(content, str):
            return content
        if isinstance(content, dict) and "content" in content:
            texts = [
                inline["text"]
                for block in content.get("content") or []
                if isinstance(block, dict)
                for inline in block.get("content") or []
                if isinstance(inline, dict) and inline.get("text")
            ]
            return "\n".join(texts) or None
        return None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraIssue":
        """
        Create a JiraIssue from a Jira API response.

        Args:
            data: The issue data from the Jira API
            **kwargs: Additional arguments to pass to the constructor

        Returns:
            A JiraIssue instance
        """
        if not data:
            return cls()

        # Handle non-dictionary data by returning a default instance
        if not isinstance(data, dict):
            logger.debug("Received non-dictionary data, returning default instance")
            return cls()

        fields = data.get("fields", {})
        if not isinstance(fields, dict):
            fields = {}

        # Extract assignee data
        assignee = None
        if assignee_data := fields.get("assignee"):
            assignee = JiraUser.from_api_response(assignee_data)

        # Extract reporter data
        reporter = None
        if reporter_data := fields.get("reporter"):
            reporter = JiraUser.from_api_response(reporter_data)

        priority = None
        if priority_data := fields.get("priority"):
            priority = JiraPriority.from_api_response(priority_data)

        # Labels keep Jira's order; duplicates are dropped
        labels: list[str] = []
        if labels_data := fields.get("labels"):
            if isinstance(labels_data, list):
                labels = list(dict.fromkeys(str(label) for label in labels_data if label))

        components = []
        if components_data := fields.get("components"):
            if isinstance(components_data, list):
                components = [
                    str(comp.get("name", "")) if isinstance(comp, dict) else str(comp)
                    for comp in components_data
                    if comp
                ]

        sprint, sprints = cls._extract_sprints(fields)

        parent = None
        if parent_data := fields.get("parent"):
            parent = JiraIssueRef.from_api_response(parent_data)

        subtasks = []
        if subtasks_data := fields.get("subtasks"):
            if isinstance(subtasks_data, list):
                subtasks = [
                    JiraIssueRef.from_api_response(subtask)
                    for subtask in subtasks_data
                    if subtask
                ]

        issue_links = []
        if links_data := fields.get("issuelinks"):
            if isinstance(links_data, list):
                for link_data in links_data:
                    link = JiraIssueLink.from_api_response(link_data)
                    if link is not None:
                        issue_links.append(link)

        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            key=str(data.get("key", JIRA_DEFAULT_KEY)),
            summary=str(fields.get("summary", EMPTY_STRING)),
            description=cls._extract_text(fields.get("description")),
            created=str(fields.get("created") or EMPTY_STRING),
            updated=str(fields.get("updated") or EMPTY_STRING),
            status=JiraStatus.from_api_response(fields.get("status") or {}),
            issue_type=JiraIssueType.from_api_response(fields.get("issuetype") or {}),
            priority=priority,
            assignee=assignee,
            reporter=reporter,
            labels=labels,
            components=components,
            story_points=cls._extract_story_points(fields),
            sprint=sprint,
            sprints=sprints,
            parent=parent,
            subtasks=subtasks,
            issue_links=issue_links,
            url=data.get("self"),
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "id": self.id,
            "key": self.key,
            "summary": self.summary,
            "status": self.status.to_simplified_dict(),
            "issue_type": self.issue_type.to_simplified_dict(),
        }

        if self.url:
            result["url"] = self.url

        if self.description:
            result["description"] = self.description

        if self.priority:
            result["priority"] = self.priority.to_simplified_dict()

        # Add assignee and reporter
        if self.assignee:
            result["assignee"] = self.assignee.to_simplified_dict()
        else:
            result["assignee"] = {"display_name": "Unassigned"}

        if self.reporter:
            result["reporter"] = self.reporter.to_simplified_dict()

        # Add lists
        if self.labels:
            result["labels"] = self.labels

        if self.components:
            result["components"] = self.components

        if self.story_points is not None:
            result["story_points"] = self.story_points

        if self.sprint:
            result["sprint"] = self.sprint.to_simplified_dict()

        if self.parent:
            result["parent"] = self.parent.to_simplified_dict()

        if self.subtasks:
            result["subtasks"] = [s.to_simplified_dict() for s in self.subtasks]

        if self.issue_links:
            result["issue_links"] = [
                link.to_simplified_dict() for link in self.issue_links
            ]

        # Add created and updated timestamps
        if self.created:
            result["created"] = self.created

        if self.updated:
            result["updated"] = self.updated

        return result
