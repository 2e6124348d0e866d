"""
Jira issue reference and link models.

Parent, subtask and linked-issue payloads are embedded in an issue as
minimal projections. They are mapped to JiraIssueRef, which is used for
lookup only and never owns a hierarchy node.
"""

from typing import Any, Literal

from pydantic import Field

from ..base import ApiModel
from ..constants import EMPTY_STRING, JIRA_DEFAULT_ID, JIRA_DEFAULT_KEY, UNKNOWN
from .common import JiraIssueType, JiraPriority, JiraStatus, StatusCategoryKey


class JiraIssueRef(ApiModel):
    """
    Minimal projection of a Jira issue.
    """

    id: str = JIRA_DEFAULT_ID
    key: str = JIRA_DEFAULT_KEY
    summary: str = EMPTY_STRING
    status: str = UNKNOWN
    status_category: StatusCategoryKey = "undefined"
    issue_type: str = UNKNOWN
    priority: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraIssueRef":
        """
        Create a JiraIssueRef from an embedded issue payload.

        Args:
            data: A ``{"id", "key", "fields": {...}}`` payload as found in
                ``parent``, ``subtasks`` and ``issuelinks``

        Returns:
            A JiraIssueRef instance
        """
        if not data or not isinstance(data, dict):
            return cls()

        fields = data.get("fields", {})
        if not isinstance(fields, dict):
            fields = {}

        status = JiraStatus.from_api_response(fields.get("status") or {})
        issue_type = JiraIssueType.from_api_response(fields.get("issuetype") or {})
        priority = None
        if priority_data := fields.get("priority"):
            priority = JiraPriority.from_api_response(priority_data).name

        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            key=str(data.get("key", JIRA_DEFAULT_KEY)),
            summary=str(fields.get("summary", EMPTY_STRING)),
            status=status.name,
            status_category=status.category_key,
            issue_type=issue_type.name,
            priority=priority,
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "key": self.key,
            "summary": self.summary,
            "status": self.status,
            "type": self.issue_type,
        }
        if self.priority:
            result["priority"] = self.priority
        return result


class JiraIssueLinkType(ApiModel):
    """
    Model representing a Jira issue link type (e.g. "Blocks").
    """

    id: str = JIRA_DEFAULT_ID
    name: str = UNKNOWN
    inward: str = EMPTY_STRING
    outward: str = EMPTY_STRING

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraIssueLinkType":
        """Create a JiraIssueLinkType from a Jira API response."""
        if not data or not isinstance(data, dict):
            return cls()

        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            name=str(data.get("name", UNKNOWN)),
            inward=str(data.get("inward", EMPTY_STRING)),
            outward=str(data.get("outward", EMPTY_STRING)),
        )


class JiraIssueLink(ApiModel):
    """
    Model representing a link from one issue to another.
    """

    id: str = JIRA_DEFAULT_ID
    type: JiraIssueLinkType = Field(default_factory=JiraIssueLinkType)
    direction: Literal["inward", "outward"] = "outward"
    linked_issue: JiraIssueRef = Field(default_factory=JiraIssueRef)

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraIssueLink | None":
        """
        Create a JiraIssueLink from a Jira API response.

        Returns:
            A JiraIssueLink, or None when neither side of the link is present
        """
        if not data or not isinstance(data, dict):
            return None

        if inward := data.get("inwardIssue"):
            direction = "inward"
            linked = inward
        elif outward := data.get("outwardIssue"):
            direction = "outward"
            linked = outward
        else:
            return None

        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            type=JiraIssueLinkType.from_api_response(data.get("type") or {}),
            direction=direction,
            linked_issue=JiraIssueRef.from_api_response(linked),
        )

    @property
    def relationship(self) -> str:
        """The human-readable relationship label for this direction."""
        return self.type.inward if self.direction == "inward" else self.type.outward

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return {
            "type": self.type.name,
            "relationship": self.relationship,
            "issue": self.linked_issue.to_simplified_dict(),
        }
