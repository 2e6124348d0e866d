"""
Hierarchy analysis models.

This module provides the Pydantic models produced by the deep analysis of
an issue hierarchy: the tree itself, its aggregate metrics, detected
anomalies and the token-adaptive output record.

Hierarchy models are frozen. A node owns its children exclusively and keeps
no reference back to its parent; the hierarchy's parent and linked issues
are stored as non-owning JiraIssueRef lookups.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .jira.issue import JiraIssue, StoryPoints
from .jira.link import JiraIssueRef


class AnalysisDepth(Enum):
    """How much of the tree was fetched upstream."""

    SHALLOW = "shallow"
    STANDARD = "standard"
    DEEP = "deep"


class AnalysisOutputMode(Enum):
    """Output verbosity requested by the caller."""

    SUMMARY = "summary"
    DETAILED = "detailed"
    FULL = "full"


class TokenLevel(Enum):
    """Verbosity ceiling derived from the size of the fetched context."""

    FULL = "FULL"
    DETAILED = "DETAILED"
    COMPACT = "COMPACT"
    SUMMARY = "SUMMARY"


class EffectiveLevel(Enum):
    """Rendering level actually used for the output."""

    FULL = "full"
    DETAILED = "detailed"
    COMPACT = "compact"
    SUMMARY = "summary"


class AnomalyType(Enum):
    """Kinds of process-health deviations the detector reports."""

    POINTS_MISMATCH = "POINTS_MISMATCH"
    UNESTIMATED_CHILDREN = "UNESTIMATED_CHILDREN"
    STALE_IN_PROGRESS = "STALE_IN_PROGRESS"
    NO_ASSIGNEE_IN_SPRINT = "NO_ASSIGNEE_IN_SPRINT"


class AnomalySeverity(Enum):
    """Severity of an anomaly, most severe first."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class IssueHierarchyNode(BaseModel):
    """
    One issue in the hierarchy tree.

    ``children_story_points`` is the sum of the immediate children's story
    points (unestimated children count as zero). It is derived from
    ``children`` when the node is constructed and cannot change afterwards.
    """

    model_config = ConfigDict(frozen=True)

    issue: JiraIssue
    children: tuple["IssueHierarchyNode", ...] = ()
    depth: int = 0
    children_story_points: StoryPoints = 0

    @model_validator(mode="before")
    @classmethod
    def _derive_children_story_points(cls, data: Any) -> Any:
        if isinstance(data, dict):
            children = tuple(
                IssueHierarchyNode.model_validate(child)
                for child in data.get("children") or ()
            )
            data = {
                **data,
                "children": children,
                "children_story_points": sum(
                    (child.story_points or 0 for child in children), 0
                ),
            }
        return data

    @property
    def key(self) -> str:
        """The issue key of this node."""
        return self.issue.key

    @property
    def story_points(self) -> StoryPoints | None:
        """The node's own story point estimate."""
        return self.issue.story_points


class IssueHierarchy(BaseModel):
    """
    Complete issue hierarchy for one analysis call.
    """

    model_config = ConfigDict(frozen=True)

    root: IssueHierarchyNode
    parent: JiraIssueRef | None = None
    linked_issues: tuple[JiraIssueRef, ...] = ()
    total_nodes: int = 1
    max_depth: int = 0
    truncated: bool = False
    truncation_info: str | None = None


class StatusDistribution(BaseModel):
    """Issue counts per status category."""

    model_config = ConfigDict(frozen=True)

    new: int = 0
    in_progress: int = 0
    done: int = 0
    total: int = 0

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return {
            "new": self.new,
            "in_progress": self.in_progress,
            "done": self.done,
            "total": self.total,
        }


class HierarchyMetrics(BaseModel):
    """
    Aggregated metrics for a hierarchy.

    Derived on every call and never stored.
    """

    model_config = ConfigDict(frozen=True)

    total_issues: int = 0
    total_story_points: StoryPoints = 0
    estimated_issues: int = 0
    unestimated_issues: int = 0
    status_distribution: StatusDistribution = Field(default_factory=StatusDistribution)
    completed_story_points: StoryPoints = 0
    remaining_story_points: StoryPoints = 0
    completion_percentage: int = Field(default=0, ge=0, le=100)

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return {
            "total_issues": self.total_issues,
            "total_story_points": self.total_story_points,
            "estimated_issues": self.estimated_issues,
            "unestimated_issues": self.unestimated_issues,
            "status_distribution": self.status_distribution.to_simplified_dict(),
            "completed_story_points": self.completed_story_points,
            "remaining_story_points": self.remaining_story_points,
            "completion_percentage": self.completion_percentage,
        }


class Anomaly(BaseModel):
    """
    A rule-detected process-health deviation in a hierarchy.
    """

    model_config = ConfigDict(frozen=True)

    type: AnomalyType
    severity: AnomalySeverity
    title: str
    description: str
    affected_issues: tuple[str, ...] = ()
    suggestion: str | None = None

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "type": self.type.value,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "affected_issues": list(self.affected_issues),
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        return result


class CompactIssue(BaseModel):
    """Token-efficient projection of an issue."""

    model_config = ConfigDict(frozen=True)

    key: str
    summary: str
    status: str
    type: str
    points: StoryPoints | None = None
    assignee: str | None = None

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "key": self.key,
            "summary": self.summary,
            "status": self.status,
            "type": self.type,
        }
        if self.points is not None:
            result["points"] = self.points
        if self.assignee:
            result["assignee"] = self.assignee
        return result


class HierarchySummary(BaseModel):
    """Structural summary of a hierarchy, present at every output level."""

    model_config = ConfigDict(frozen=True)

    root_key: str
    root_type: str
    root_summary: str
    parent: str | None = None
    status_breakdown: dict[str, int] = Field(default_factory=dict)
    type_breakdown: dict[str, int] = Field(default_factory=dict)

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "root_key": self.root_key,
            "root_type": self.root_type,
            "root_summary": self.root_summary,
        }
        if self.parent:
            result["parent"] = self.parent
        result["status_breakdown"] = dict(self.status_breakdown)
        result["type_breakdown"] = dict(self.type_breakdown)
        return result


class FormattedAnalysisOutput(BaseModel):
    """
    Final analysis record, ready for JSON serialization.

    Which of ``hierarchy``, ``children`` and ``linked_issues`` are set
    depends on the effective output level. ``info`` is rendered as
    ``_info`` and explains downgrades and truncation.
    """

    model_config = ConfigDict(frozen=True)

    summary: HierarchySummary
    metrics: HierarchyMetrics
    anomalies: tuple[Anomaly, ...] = ()
    effective_level: EffectiveLevel = EffectiveLevel.SUMMARY
    hierarchy: dict[str, Any] | None = None
    children: tuple[CompactIssue, ...] | None = None
    linked_issues: tuple[CompactIssue, ...] | None = None
    info: str | None = None

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "summary": self.summary.to_simplified_dict(),
            "metrics": self.metrics.to_simplified_dict(),
            "anomalies": [anomaly.to_simplified_dict() for anomaly in self.anomalies],
            "effective_level": self.effective_level.value,
        }
        if self.hierarchy is not None:
            result["hierarchy"] = self.hierarchy
        if self.children is not None:
            result["children"] = [c.to_simplified_dict() for c in self.children]
        if self.linked_issues is not None:
            result["linked_issues"] = [
                issue.to_simplified_dict() for issue in self.linked_issues
            ]
        if self.info:
            result["_info"] = self.info
        return result
