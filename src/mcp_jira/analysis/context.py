"""
Fetch planning for deep analysis.

The network fetch itself belongs to the Jira client. This module holds the
pure parts of it: how many children and linked issues each depth mode may
pull, which token level a fetched context maps to, and the FetchedContext
record the client hands over to the analysis.
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import InvalidInputError
from ..models.analysis import AnalysisDepth, TokenLevel
from ..models.jira import JiraIssue, JiraIssueRef
from .config import (
    DEEP_MAX_LINKED_ISSUES,
    STANDARD_MAX_CHILDREN,
    STANDARD_MAX_LINKED_ISSUES,
    AnalysisConfig,
)

logger = logging.getLogger("mcp-jira.analysis")


@dataclass(frozen=True)
class FetchBudget:
    """How much related context a depth mode may fetch."""

    max_children: int
    max_linked_issues: int
    fetch_parent: bool


def coerce_depth(depth: AnalysisDepth | str) -> AnalysisDepth:
    """Accept a depth mode as enum member or its string value."""
    if isinstance(depth, AnalysisDepth):
        return depth
    try:
        return AnalysisDepth(str(depth).lower())
    except ValueError:
        valid = ", ".join(d.value for d in AnalysisDepth)
        raise InvalidInputError(
            f"Invalid depth '{depth}'. Expected one of: {valid}"
        ) from None


def validate_max_children(
    max_children: int, config: AnalysisConfig | None = None
) -> int:
    """
    Check a caller-supplied children limit.

    Raises:
        InvalidInputError: If the limit is not an integer in
            ``[1, config.max_children_limit]``
    """
    config = config or AnalysisConfig()
    if isinstance(max_children, bool) or not isinstance(max_children, int):
        raise InvalidInputError(
            f"max_children must be an integer, got {max_children!r}"
        )
    if max_children < 1:
        raise InvalidInputError(f"max_children must be positive, got {max_children}")
    if max_children > config.max_children_limit:
        raise InvalidInputError(
            f"max_children must not exceed {config.max_children_limit}, "
            f"got {max_children}"
        )
    return max_children


def get_fetch_budget(
    depth: AnalysisDepth | str,
    max_children: int,
    config: AnalysisConfig | None = None,
) -> FetchBudget:
    """
    Determine the fetch budget for a depth mode.

    - shallow: only the root issue
    - standard: up to 50 children, 10 linked issues and the parent
    - deep: up to ``max_children`` children, 20 linked issues and the parent

    Args:
        depth: The analysis depth
        max_children: Caller-supplied children limit
        config: Analysis configuration (default: built-in thresholds)

    Returns:
        The FetchBudget for this depth

    Raises:
        InvalidInputError: If depth or max_children is invalid
    """
    depth = coerce_depth(depth)
    max_children = validate_max_children(max_children, config)

    match depth:
        case AnalysisDepth.SHALLOW:
            return FetchBudget(max_children=0, max_linked_issues=0, fetch_parent=False)
        case AnalysisDepth.STANDARD:
            return FetchBudget(
                max_children=min(max_children, STANDARD_MAX_CHILDREN),
                max_linked_issues=STANDARD_MAX_LINKED_ISSUES,
                fetch_parent=True,
            )
        case AnalysisDepth.DEEP:
            return FetchBudget(
                max_children=max_children,
                max_linked_issues=DEEP_MAX_LINKED_ISSUES,
                fetch_parent=True,
            )


def calculate_token_level(
    total_issues: int, config: AnalysisConfig | None = None
) -> TokenLevel:
    """
    Determine the verbosity ceiling for a number of fetched issues.

    Fewer than 20 issues get full details, fewer than 50 detailed output,
    fewer than 100 compact output, anything larger a summary.

    Raises:
        InvalidInputError: If total_issues is negative
    """
    if total_issues < 0:
        raise InvalidInputError(f"total_issues must be non-negative, got {total_issues}")

    config = config or AnalysisConfig()
    if total_issues < config.token_threshold_full:
        return TokenLevel.FULL
    if total_issues < config.token_threshold_detailed:
        return TokenLevel.DETAILED
    if total_issues < config.token_threshold_compact:
        return TokenLevel.COMPACT
    return TokenLevel.SUMMARY


def to_issue_ref(issue: JiraIssue | JiraIssueRef) -> JiraIssueRef:
    """Project an issue onto its minimal reference form."""
    if isinstance(issue, JiraIssueRef):
        return issue
    return JiraIssueRef(
        id=issue.id,
        key=issue.key,
        summary=issue.summary,
        status=issue.status.name,
        status_category=issue.status.category_key,
        issue_type=issue.issue_type.name,
        priority=issue.priority.name if issue.priority else None,
    )


class FetchedContext(BaseModel):
    """
    Already-fetched issue data for one analysis call.

    ``descendants`` maps an issue key to the children fetched beneath it,
    for deep fetches that went past the root's immediate children.
    """

    model_config = ConfigDict(frozen=True)

    root_issue: JiraIssue
    parent: JiraIssue | None = None
    children: tuple[JiraIssue, ...] = ()
    linked_issues: tuple[JiraIssue, ...] = ()
    descendants: dict[str, tuple[JiraIssue, ...]] = Field(default_factory=dict)
    token_level: TokenLevel = TokenLevel.FULL
    truncated: bool = False
    truncation_info: str | None = None

    @property
    def total_issues(self) -> int:
        """Number of issues fetched: root, parent, children and links."""
        return (
            1
            + (1 if self.parent else 0)
            + len(self.children)
            + len(self.linked_issues)
        )

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], config: AnalysisConfig | None = None
    ) -> "FetchedContext":
        """
        Create a FetchedContext from a bundle of raw Jira issue payloads.

        Expected shape::

            {
                "issue": {...},
                "parent": {...},            # optional
                "children": [{...}, ...],
                "linked_issues": [{...}, ...],
                "descendants": {"KEY-1": [{...}, ...]},  # optional
                "truncated": false,         # optional
                "truncation_info": "..."    # optional
            }

        The token level is derived from the number of fetched issues unless
        the bundle names one explicitly.

        Raises:
            InvalidInputError: If the root issue is missing
        """
        if not isinstance(data, dict) or not data.get("issue"):
            raise InvalidInputError("Context bundle must contain a root 'issue'")

        parent = None
        if parent_data := data.get("parent"):
            parent = JiraIssue.from_api_response(parent_data)

        children = tuple(
            JiraIssue.from_api_response(child) for child in data.get("children") or []
        )
        linked = tuple(
            JiraIssue.from_api_response(issue)
            for issue in data.get("linked_issues") or []
        )
        descendants = {
            str(key): tuple(JiraIssue.from_api_response(item) for item in items or [])
            for key, items in (data.get("descendants") or {}).items()
        }

        context = cls(
            root_issue=JiraIssue.from_api_response(data["issue"]),
            parent=parent,
            children=children,
            linked_issues=linked,
            descendants=descendants,
            truncated=bool(data.get("truncated", False)),
            truncation_info=data.get("truncation_info"),
        )

        if token_level := data.get("token_level"):
            try:
                level = TokenLevel(str(token_level).upper())
            except ValueError:
                raise InvalidInputError(
                    f"Invalid token_level '{token_level}'"
                ) from None
        else:
            level = calculate_token_level(context.total_issues, config)

        logger.debug(
            f"Context for {context.root_issue.key}: {context.total_issues} issues, "
            f"token level {level.value}"
        )
        return context.model_copy(update={"token_level": level})
