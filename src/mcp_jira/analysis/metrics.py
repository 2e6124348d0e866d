"""
Metrics calculator.

Aggregates story points and status distribution over an issue hierarchy.
"""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from ..models.analysis import HierarchyMetrics, IssueHierarchy, StatusDistribution
from ..models.jira import JiraIssue
from .hierarchy import flatten_hierarchy

logger = logging.getLogger("mcp-jira.analysis")


def round_half_up(value: float | Decimal) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _to_points(value: Decimal) -> int | float:
    """Convert an exact point sum back to int when it is whole, else float."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def calculate_status_distribution(issues: Iterable[JiraIssue]) -> StatusDistribution:
    """
    Count issues per status category.

    Issues in the ``undefined`` category count toward the total only.
    """
    new = in_progress = done = total = 0
    for issue in issues:
        total += 1
        match issue.status_category:
            case "new":
                new += 1
            case "indeterminate":
                in_progress += 1
            case "done":
                done += 1

    return StatusDistribution(new=new, in_progress=in_progress, done=done, total=total)


def calculate_metrics(hierarchy: IssueHierarchy) -> HierarchyMetrics:
    """
    Calculate aggregate metrics for a hierarchy.

    Completion is measured in story points when any issue is estimated.
    Otherwise it falls back to the share of done issues, since a
    point-based ratio is meaningless without estimates.

    Args:
        hierarchy: The hierarchy to measure

    Returns:
        HierarchyMetrics for every issue in the tree
    """
    issues = flatten_hierarchy(hierarchy)

    # Summed as decimals so 0.1 + 0.2 stays 0.3
    done_sum = Decimal(0)
    open_sum = Decimal(0)
    estimated = 0
    for issue in issues:
        if issue.story_points is None:
            continue
        estimated += 1
        if issue.is_done:
            done_sum += Decimal(str(issue.story_points))
        else:
            open_sum += Decimal(str(issue.story_points))

    # total is derived from the parts so completed + remaining == total holds
    completed_points = _to_points(done_sum)
    remaining_points = _to_points(open_sum)
    total_points = completed_points + remaining_points

    distribution = calculate_status_distribution(issues)

    point_sum = done_sum + open_sum
    if point_sum > 0:
        completion = round_half_up(done_sum * 100 / point_sum)
    elif distribution.done > 0:
        completion = round_half_up(distribution.done / distribution.total * 100)
    else:
        completion = 0

    metrics = HierarchyMetrics(
        total_issues=len(issues),
        total_story_points=total_points,
        estimated_issues=estimated,
        unestimated_issues=len(issues) - estimated,
        status_distribution=distribution,
        completed_story_points=completed_points,
        remaining_story_points=remaining_points,
        completion_percentage=completion,
    )
    logger.debug(
        f"Metrics for {hierarchy.root.key}: {metrics.total_issues} issues, "
        f"{metrics.total_story_points} points, {metrics.completion_percentage}% done"
    )
    return metrics


def get_status_breakdown(issues: Iterable[JiraIssue]) -> dict[str, int]:
    """Count issues per status name, in first-seen order."""
    breakdown: dict[str, int] = {}
    for issue in issues:
        breakdown[issue.status.name] = breakdown.get(issue.status.name, 0) + 1
    return breakdown


def get_type_breakdown(issues: Iterable[JiraIssue]) -> dict[str, int]:
    """Count issues per issue type name, in first-seen order."""
    breakdown: dict[str, int] = {}
    for issue in issues:
        breakdown[issue.issue_type.name] = breakdown.get(issue.issue_type.name, 0) + 1
    return breakdown
