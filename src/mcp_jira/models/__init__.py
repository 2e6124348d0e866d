"""
Pydantic models for Jira API responses and hierarchy analysis results.
"""

from .analysis import (
    AnalysisDepth,
    AnalysisOutputMode,
    Anomaly,
    AnomalySeverity,
    AnomalyType,
    CompactIssue,
    EffectiveLevel,
    FormattedAnalysisOutput,
    HierarchyMetrics,
    HierarchySummary,
    IssueHierarchy,
    IssueHierarchyNode,
    StatusDistribution,
    TokenLevel,
)
from .base import ApiModel, TimestampMixin
from .jira import (
    JiraIssue,
    JiraIssueLink,
    JiraIssueLinkType,
    JiraIssueRef,
    JiraIssueType,
    JiraPriority,
    JiraSprint,
    JiraStatus,
    JiraStatusCategory,
    JiraUser,
)

__all__ = [
    # Base models
    "ApiModel",
    "TimestampMixin",
    # Jira models
    "JiraUser",
    "JiraStatusCategory",
    "JiraStatus",
    "JiraIssueType",
    "JiraPriority",
    "JiraSprint",
    "JiraIssue",
    "JiraIssueRef",
    "JiraIssueLinkType",
    "JiraIssueLink",
    # Analysis models
    "AnalysisDepth",
    "AnalysisOutputMode",
    "TokenLevel",
    "EffectiveLevel",
    "AnomalyType",
    "AnomalySeverity",
    "IssueHierarchyNode",
    "IssueHierarchy",
    "StatusDistribution",
    "HierarchyMetrics",
    "Anomaly",
    "CompactIssue",
    "HierarchySummary",
    "FormattedAnalysisOutput",
]
