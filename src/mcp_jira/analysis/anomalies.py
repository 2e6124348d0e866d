"""
Anomaly detector.

Runs a fixed, ordered battery of independent rule checks over a hierarchy.
Each detector is a pure function returning at most one Anomaly; results are
ordered by severity, then by the order the detectors are registered in.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from ..models.analysis import (
    Anomaly,
    AnomalySeverity,
    AnomalyType,
    IssueHierarchy,
)
from ..utils.date import days_since
from ..utils.ranking import rank_and_truncate
from .config import AnalysisConfig
from .hierarchy import iter_nodes
from .metrics import round_half_up

logger = logging.getLogger("mcp-jira.analysis")

SEVERITY_ORDER: dict[AnomalySeverity, int] = {
    AnomalySeverity.CRITICAL: 0,
    AnomalySeverity.WARNING: 1,
    AnomalySeverity.INFO: 2,
}

Detector = Callable[[IssueHierarchy, AnalysisConfig, datetime], Anomaly | None]


def _format_points(points: float) -> str:
    """Render story points without a trailing ``.0``."""
    if float(points).is_integer():
        return str(int(points))
    return str(points)


def detect_points_mismatch(
    hierarchy: IssueHierarchy, config: AnalysisConfig, now: datetime
) -> Anomaly | None:
    """
    Compare the root's estimate with the sum of its children's estimates.

    Skipped when the root has no (or zero) points or the children total is
    zero. A mismatch is reported only when the relative difference strictly
    exceeds the configured threshold.
    """
    root = hierarchy.root
    parent_points = root.story_points
    children_points = root.children_story_points

    if not root.children or not parent_points or children_points == 0:
        return None

    diff = abs(parent_points - children_points)
    ratio = diff / max(parent_points, children_points)
    if ratio <= config.points_mismatch_threshold:
        return None

    exceeds = children_points > parent_points
    direction = "exceeds" if exceeds else "falls short of"
    if exceeds:
        advice = "Consider updating the parent estimate or breaking it down further."
    else:
        advice = "Some children may be missing estimates."

    return Anomaly(
        type=AnomalyType.POINTS_MISMATCH,
        severity=AnomalySeverity.WARNING,
        title="Story Points Mismatch",
        description=(
            f"{root.key} has {_format_points(parent_points)} story points but "
            f"children total {_format_points(children_points)} points "
            f"({direction} parent by {round_half_up(ratio * 100)}%)"
        ),
        affected_issues=(root.key,),
        suggestion=f"Review and align story point estimates. {advice}",
    )


def detect_unestimated_children(
    hierarchy: IssueHierarchy, config: AnalysisConfig, now: datetime
) -> Anomaly | None:
    """Flag immediate children without a story point estimate."""
    children = hierarchy.root.children
    if not children:
        return None

    unestimated = [child.key for child in children if child.story_points is None]
    if not unestimated:
        return None

    if len(unestimated) > len(children) * config.unestimated_warning_ratio:
        severity = AnomalySeverity.WARNING
    else:
        severity = AnomalySeverity.INFO

    return Anomaly(
        type=AnomalyType.UNESTIMATED_CHILDREN,
        severity=severity,
        title="Children Without Estimates",
        description=(
            f"{len(unestimated)} of {len(children)} children are missing "
            "story point estimates"
        ),
        affected_issues=tuple(unestimated),
        suggestion="Add story point estimates to improve tracking accuracy.",
    )


def detect_stale_in_progress(
    hierarchy: IssueHierarchy, config: AnalysisConfig, now: datetime
) -> Anomaly | None:
    """
    Flag in-progress issues anywhere in the tree that stopped moving.

    Issues whose ``updated`` timestamp is missing or unparseable are skipped.
    """
    stale: list[str] = []
    for node in iter_nodes(hierarchy.root):
        issue = node.issue
        if issue.status_category != "indeterminate":
            continue
        days = days_since(issue.updated, now)
        if days is None:
            logger.debug(f"Skipping staleness check for {issue.key}: no valid update time")
            continue
        if days >= config.stale_threshold_days:
            stale.append(f"{issue.key} ({days} days)")

    if not stale:
        return None

    return Anomaly(
        type=AnomalyType.STALE_IN_PROGRESS,
        severity=AnomalySeverity.WARNING,
        title="Stale In-Progress Issues",
        description=(
            f'{len(stale)} issue(s) have been "In Progress" without updates '
            f"for {config.stale_threshold_days}+ days"
        ),
        affected_issues=tuple(stale),
        suggestion="Review these issues for blockers or forgotten status updates.",
    )


def detect_no_assignee_in_sprint(
    hierarchy: IssueHierarchy, config: AnalysisConfig, now: datetime
) -> Anomaly | None:
    """Flag unfinished sprint items anywhere in the tree that nobody owns."""
    unassigned = [
        node.key
        for node in iter_nodes(hierarchy.root)
        if node.issue.sprint is not None
        and node.issue.assignee is None
        and not node.issue.is_done
    ]
    if not unassigned:
        return None

    return Anomaly(
        type=AnomalyType.NO_ASSIGNEE_IN_SPRINT,
        severity=AnomalySeverity.INFO,
        title="Sprint Items Without Assignee",
        description=f"{len(unassigned)} issue(s) in sprints have no assignee",
        affected_issues=tuple(unassigned),
        suggestion="Assign team members to ensure work is properly distributed.",
    )


DETECTORS: tuple[Detector, ...] = (
    detect_points_mismatch,
    detect_unestimated_children,
    detect_stale_in_progress,
    detect_no_assignee_in_sprint,
)


def sort_anomalies(anomalies: list[Anomaly], limit: int | None = None) -> list[Anomaly]:
    """Order anomalies by severity, keeping detector order within a severity."""
    return rank_and_truncate(
        anomalies, rank=lambda anomaly: SEVERITY_ORDER[anomaly.severity], limit=limit
    )


def detect_anomalies(
    hierarchy: IssueHierarchy,
    *,
    config: AnalysisConfig | None = None,
    now: datetime | None = None,
) -> list[Anomaly]:
    """
    Detect all anomalies in the hierarchy.

    Args:
        hierarchy: The hierarchy to check
        config: Analysis thresholds (default: built-in thresholds)
        now: Reference time for staleness (default: current UTC time)

    Returns:
        Anomalies ordered critical, warning, info
    """
    config = config or AnalysisConfig()
    if now is None:
        now = datetime.now(timezone.utc)

    anomalies = []
    for detector in DETECTORS:
        anomaly = detector(hierarchy, config, now)
        if anomaly is not None:
            logger.debug(
                f"{detector.__name__} flagged {len(anomaly.affected_issues)} issue(s) "
                f"in {hierarchy.root.key}"
            )
            anomalies.append(anomaly)

    return sort_anomalies(anomalies)
