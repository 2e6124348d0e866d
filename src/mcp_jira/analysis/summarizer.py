"""
Token-adaptive summarizer.

Formats an analysed hierarchy for output. The caller's requested mode and
the token ceiling derived from the result size are mapped onto one ordinal
scale; the lower of the two decides how much of the tree is rendered.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any

from ..models.analysis import (
    AnalysisOutputMode,
    Anomaly,
    CompactIssue,
    EffectiveLevel,
    FormattedAnalysisOutput,
    HierarchyMetrics,
    HierarchySummary,
    IssueHierarchy,
    IssueHierarchyNode,
    TokenLevel,
)
from ..models.jira import JiraIssue, JiraIssueRef
from ..exceptions import InvalidInputError
from .anomalies import sort_anomalies
from .hierarchy import flatten_hierarchy
from .metrics import get_status_breakdown, get_type_breakdown

logger = logging.getLogger("mcp-jira.analysis")

TOKEN_LEVEL_RANKS: dict[TokenLevel, int] = {
    TokenLevel.FULL: 3,
    TokenLevel.DETAILED: 2,
    TokenLevel.COMPACT: 1,
    TokenLevel.SUMMARY: 0,
}

OUTPUT_MODE_RANKS: dict[AnalysisOutputMode, int] = {
    AnalysisOutputMode.FULL: 3,
    AnalysisOutputMode.DETAILED: 2,
    AnalysisOutputMode.SUMMARY: 0,
}

EFFECTIVE_LEVELS_BY_RANK: dict[int, EffectiveLevel] = {
    3: EffectiveLevel.FULL,
    2: EffectiveLevel.DETAILED,
    1: EffectiveLevel.COMPACT,
    0: EffectiveLevel.SUMMARY,
}


def coerce_output_mode(mode: AnalysisOutputMode | str) -> AnalysisOutputMode:
    """Accept an output mode as enum member or its string value."""
    if isinstance(mode, AnalysisOutputMode):
        return mode
    try:
        return AnalysisOutputMode(str(mode).lower())
    except ValueError:
        valid = ", ".join(m.value for m in AnalysisOutputMode)
        raise InvalidInputError(
            f"Invalid output mode '{mode}'. Expected one of: {valid}"
        ) from None


def coerce_token_level(level: TokenLevel | str) -> TokenLevel:
    """Accept a token level as enum member or its string value."""
    if isinstance(level, TokenLevel):
        return level
    try:
        return TokenLevel(str(level).upper())
    except ValueError:
        valid = ", ".join(t.value for t in TokenLevel)
        raise InvalidInputError(
            f"Invalid token level '{level}'. Expected one of: {valid}"
        ) from None


def get_effective_level(
    token_level: TokenLevel | str, output_mode: AnalysisOutputMode | str
) -> EffectiveLevel:
    """
    Determine the rendering level for a ceiling and a requested mode.

    The token level acts as a ceiling: the result is the lower of the two.
    """
    rank = min(
        TOKEN_LEVEL_RANKS[coerce_token_level(token_level)],
        OUTPUT_MODE_RANKS[coerce_output_mode(output_mode)],
    )
    return EFFECTIVE_LEVELS_BY_RANK[rank]


def to_compact_issue(issue: JiraIssue) -> CompactIssue:
    """Convert an issue to its compact projection."""
    return CompactIssue(
        key=issue.key,
        summary=issue.summary,
        status=issue.status.name,
        type=issue.issue_type.name,
        points=issue.story_points,
        assignee=issue.assignee.display_name if issue.assignee else None,
    )


def ref_to_compact_issue(ref: JiraIssueRef) -> CompactIssue:
    """Convert an issue reference to its compact projection."""
    return CompactIssue(
        key=ref.key,
        summary=ref.summary,
        status=ref.status,
        type=ref.issue_type,
    )


def create_hierarchy_summary(hierarchy: IssueHierarchy) -> HierarchySummary:
    """Create the structural summary included at every output level."""
    root = hierarchy.root.issue
    issues = flatten_hierarchy(hierarchy)
    return HierarchySummary(
        root_key=root.key,
        root_type=root.issue_type.name,
        root_summary=root.summary,
        status_breakdown=get_status_breakdown(issues),
        type_breakdown=get_type_breakdown(issues),
    )


def _drop_none(result: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in result.items() if value is not None}


def _full_fields(issue: JiraIssue) -> dict[str, Any]:
    """All rendered fields of an issue, absent values omitted."""
    return _drop_none(
        {
            "key": issue.key,
            "summary": issue.summary,
            "type": issue.issue_type.name,
            "status": issue.status.name,
            "status_category": issue.status_category,
            "priority": issue.priority.name if issue.priority else None,
            "assignee": issue.assignee.display_name if issue.assignee else None,
            "story_points": issue.story_points,
            "labels": list(issue.labels) or None,
            "sprint": issue.sprint.name if issue.sprint else None,
            "created": issue.created or None,
            "updated": issue.updated or None,
        }
    )


def format_node_full(node: IssueHierarchyNode) -> dict[str, Any]:
    """Render a node and all of its descendants with every field."""
    result = _full_fields(node.issue)
    if node.children:
        result["children"] = [format_node_full(child) for child in node.children]
        result["children_story_points"] = node.children_story_points
    return result


def format_node_compact(node: IssueHierarchyNode) -> dict[str, Any]:
    """Render a node as a compact projection, nesting compact descendants."""
    result = to_compact_issue(node.issue).to_simplified_dict()
    if node.children:
        result["children"] = [format_node_compact(child) for child in node.children]
    return result


def format_node_detailed(node: IssueHierarchyNode) -> dict[str, Any]:
    """Render a node with every field and its descendants compactly."""
    result = _full_fields(node.issue)
    if node.children:
        result["children"] = [format_node_compact(child) for child in node.children]
        result["children_story_points"] = node.children_story_points
    return result


def format_analysis_output(
    hierarchy: IssueHierarchy,
    metrics: HierarchyMetrics,
    anomalies: Sequence[Anomaly],
    *,
    token_level: TokenLevel | str,
    output_mode: AnalysisOutputMode | str,
) -> FormattedAnalysisOutput:
    """
    Format the analysis result at the effective output level.

    - full: every field at every depth
    - detailed: the root with every field, descendants compact
    - compact: only the root's immediate children, compact
    - summary: summary, metrics and anomalies only

    Linked issues are included at detailed level and above. When the token
    ceiling lowers the requested mode, ``info`` says so.

    Args:
        hierarchy: The built hierarchy
        metrics: Metrics calculated for the hierarchy
        anomalies: Detected anomalies
        token_level: Verbosity ceiling for the result size
        output_mode: Verbosity requested by the caller

    Returns:
        The formatted output record
    """
    output_mode = coerce_output_mode(output_mode)
    level = get_effective_level(token_level, output_mode)

    rendered_tree = None
    children = None
    linked = None

    match level:
        case EffectiveLevel.FULL:
            rendered_tree = format_node_full(hierarchy.root)
        case EffectiveLevel.DETAILED:
            rendered_tree = format_node_detailed(hierarchy.root)
        case EffectiveLevel.COMPACT:
            if hierarchy.root.children:
                children = tuple(
                    to_compact_issue(child.issue) for child in hierarchy.root.children
                )
        case EffectiveLevel.SUMMARY:
            pass

    if (
        level in (EffectiveLevel.FULL, EffectiveLevel.DETAILED)
        and hierarchy.linked_issues
    ):
        linked = tuple(ref_to_compact_issue(ref) for ref in hierarchy.linked_issues)

    info = None
    if level.value != output_mode.value:
        info = (
            f"Output reduced from '{output_mode.value}' to '{level.value}' "
            f"due to result size ({hierarchy.total_nodes} issues)"
        )
        logger.debug(info)

    return FormattedAnalysisOutput(
        summary=create_hierarchy_summary(hierarchy),
        metrics=metrics,
        anomalies=tuple(sort_anomalies(list(anomalies))),
        effective_level=level,
        hierarchy=rendered_tree,
        children=children,
        linked_issues=linked,
        info=info,
    )


def format_as_json(output: FormattedAnalysisOutput) -> str:
    """Serialize formatted output to a JSON string for a tool response."""
    return json.dumps(output.to_simplified_dict(), indent=2, ensure_ascii=False)
