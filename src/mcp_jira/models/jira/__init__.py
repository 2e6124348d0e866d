"""
Jira data models for the MCP Jira analysis package.

This package provides Pydantic models for Jira API data structures,
organized by entity type for better maintainability and clarity.
"""

from .common import (
    JiraIssueType,
    JiraPriority,
    JiraStatus,
    JiraStatusCategory,
    JiraUser,
)
from .issue import JiraIssue
from .link import JiraIssueLink, JiraIssueLinkType, JiraIssueRef
from .sprint import JiraSprint

__all__ = [
    # Common models
    "JiraUser",
    "JiraStatusCategory",
    "JiraStatus",
    "JiraIssueType",
    "JiraPriority",
    # Entity-specific models
    "JiraSprint",
    "JiraIssue",
    "JiraIssueRef",
    "JiraIssueLinkType",
    "JiraIssueLink",
]
