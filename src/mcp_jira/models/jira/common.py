"""
Common Jira entity models.

This module provides Pydantic models for the small Jira entities that are
embedded in issues: users, statuses, status categories, issue types and
priorities.
"""

import logging
from typing import Any, Literal

from ..base import ApiModel
from ..constants import (
    EMPTY_STRING,
    JIRA_DEFAULT_ID,
    JIRA_DEFAULT_STATUS_CATEGORY,
    JIRA_STATUS_CATEGORY_KEYS,
    UNASSIGNED,
    UNKNOWN,
)

logger = logging.getLogger(__name__)

StatusCategoryKey = Literal["new", "indeterminate", "done", "undefined"]


class JiraUser(ApiModel):
    """
    Model representing a Jira user.
    """

    account_id: str | None = None
    display_name: str = UNASSIGNED
    email: str | None = None
    active: bool = True
    avatar_url: str | None = None
    time_zone: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraUser":
        """
        Create a JiraUser from a Jira API response.

        Args:
            data: The user data from the Jira API
            **kwargs: Additional arguments to pass to the constructor

        Returns:
            A JiraUser instance
        """
        if not data or not isinstance(data, dict):
            return cls()

        avatar_url = None
        if avatars := data.get("avatarUrls"):
            if isinstance(avatars, dict):
                avatar_url = avatars.get("48x48") or avatars.get("32x32")

        return cls(
            account_id=data.get("accountId"),
            display_name=str(data.get("displayName", UNASSIGNED)),
            email=data.get("emailAddress"),
            active=bool(data.get("active", True)),
            avatar_url=avatar_url,
            time_zone=data.get("timeZone"),
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {"display_name": self.display_name}
        if self.email:
            result["email"] = self.email
        if self.avatar_url:
            result["avatar_url"] = self.avatar_url
        return result


class JiraStatusCategory(ApiModel):
    """
    Model representing a Jira status category.

    The ``key`` is the normalized lifecycle bucket (new, indeterminate,
    done, undefined) shared by every workflow status.
    """

    id: int = 0
    key: str = EMPTY_STRING
    name: str = UNKNOWN
    color_name: str = EMPTY_STRING

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraStatusCategory":
        """
        Create a JiraStatusCategory from a Jira API response.

        Args:
            data: The status category data from the Jira API

        Returns:
            A JiraStatusCategory instance
        """
        if not data or not isinstance(data, dict):
            return cls()

        category_id = data.get("id", 0)
        try:
            category_id = int(category_id)
        except (TypeError, ValueError):
            category_id = 0

        return cls(
            id=category_id,
            key=str(data.get("key", EMPTY_STRING)),
            name=str(data.get("name", UNKNOWN)),
            color_name=str(data.get("colorName", EMPTY_STRING)),
        )


class JiraStatus(ApiModel):
    """
    Model representing a Jira issue status.
    """

    id: str = JIRA_DEFAULT_ID
    name: str = UNKNOWN
    description: str | None = None
    category: JiraStatusCategory | None = None

    @property
    def category_key(self) -> StatusCategoryKey:
        """
        The normalized status category.

        Anything Jira reports outside the four known buckets, including a
        missing category, is reported as ``undefined``.
        """
        if self.category and self.category.key in JIRA_STATUS_CATEGORY_KEYS:
            return self.category.key  # type: ignore[return-value]
        return JIRA_DEFAULT_STATUS_CATEGORY

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraStatus":
        """
        Create a JiraStatus from a Jira API response.

        Args:
            data: The status data from the Jira API

        Returns:
            A JiraStatus instance
        """
        if not data or not isinstance(data, dict):
            return cls()

        category = None
        if category_data := data.get("statusCategory"):
            category = JiraStatusCategory.from_api_response(category_data)

        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            name=str(data.get("name", UNKNOWN)),
            description=data.get("description"),
            category=category,
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return {"name": self.name, "category": self.category_key}


class JiraIssueType(ApiModel):
    """
    Model representing a Jira issue type.
    """

    id: str = JIRA_DEFAULT_ID
    name: str = UNKNOWN
    description: str | None = None
    icon_url: str | None = None
    subtask: bool = False

    @property
    def is_epic(self) -> bool:
        """Whether this issue type is an epic."""
        return self.name.lower() == "epic"

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraIssueType":
        """
        Create a JiraIssueType from a Jira API response.

        Args:
            data: The issue type data from the Jira API

        Returns:
            A JiraIssueType instance
        """
        if not data or not isinstance(data, dict):
            return cls()

        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            name=str(data.get("name", UNKNOWN)),
            description=data.get("description"),
            icon_url=data.get("iconUrl"),
            subtask=bool(data.get("subtask", False)),
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return {"name": self.name}


class JiraPriority(ApiModel):
    """
    Model representing a Jira priority.
    """

    id: str = JIRA_DEFAULT_ID
    name: str = UNKNOWN
    icon_url: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraPriority":
        """
        Create a JiraPriority from a Jira API response.

        Args:
            data: The priority data from the Jira API

        Returns:
            A JiraPriority instance
        """
        if not data or not isinstance(data, dict):
            return cls()

        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            name=str(data.get("name", UNKNOWN)),
            icon_url=data.get("iconUrl"),
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return {"name": self.name}
