"""
Deep hierarchy analysis for Jira issues.

``analyze_issue`` chains the builder, the metrics calculator, the anomaly
detector and the token-adaptive summarizer over an already-fetched context.
"""

from datetime import datetime
from typing import Any

from ..exceptions import InvalidInputError
from ..logging_config import get_logger, log_operation
from ..models.analysis import (
    AnalysisDepth,
    AnalysisOutputMode,
    FormattedAnalysisOutput,
    TokenLevel,
)
from .anomalies import DETECTORS, SEVERITY_ORDER, detect_anomalies, sort_anomalies
from .config import AnalysisConfig
from .context import (
    FetchBudget,
    FetchedContext,
    calculate_token_level,
    coerce_depth,
    get_fetch_budget,
    to_issue_ref,
    validate_max_children,
)
from .hierarchy import (
    build_hierarchy,
    create_node,
    find_node_by_key,
    flatten_hierarchy,
    get_issues_at_depth,
    get_path_to_node,
    hierarchy_to_refs,
    iter_nodes,
)
from .metrics import (
    calculate_metrics,
    calculate_status_distribution,
    get_status_breakdown,
    get_type_breakdown,
    round_half_up,
)
from .summarizer import (
    coerce_output_mode,
    coerce_token_level,
    create_hierarchy_summary,
    format_analysis_output,
    format_as_json,
    get_effective_level,
    ref_to_compact_issue,
    to_compact_issue,
)

logger = get_logger("mcp-jira.analysis")


def analyze_issue(
    context: FetchedContext | dict[str, Any],
    *,
    output_mode: AnalysisOutputMode | str = AnalysisOutputMode.DETAILED,
    depth: AnalysisDepth | str = AnalysisDepth.STANDARD,
    max_children: int | None = None,
    include_links: bool | None = None,
    token_level: TokenLevel | str | None = None,
    config: AnalysisConfig | None = None,
    now: datetime | None = None,
) -> FormattedAnalysisOutput:
    """
    Analyze an issue together with its fetched parent, children and links.

    Args:
        context: The fetched context, or its raw JSON bundle
        output_mode: Requested verbosity
        depth: Depth mode the context was fetched with
        max_children: Children limit (default: ``config.default_max_children``)
        include_links: Whether to report linked issues (default:
            ``config.include_links``)
        token_level: Verbosity ceiling (default: ``context.token_level``)
        config: Analysis configuration (default: built-in thresholds)
        now: Reference time for staleness checks (default: current UTC time)

    Returns:
        The formatted analysis output

    Raises:
        InvalidInputError: If the context or any option is malformed
    """
    config = config or AnalysisConfig()
    if isinstance(context, dict):
        context = FetchedContext.from_api_response(context, config)

    with log_operation(logger, "analyze_issue", issue_key=context.root_issue.key):
        try:
            mode = coerce_output_mode(output_mode)
            ceiling = (
                coerce_token_level(token_level)
                if token_level is not None
                else context.token_level
            )

            hierarchy = build_hierarchy(
                context.root_issue,
                context.children,
                depth=depth,
                max_children=max_children,
                include_links=include_links,
                linked_issues=context.linked_issues,
                parent=context.parent,
                descendants=context.descendants,
                upstream_truncated=context.truncated,
                upstream_truncation_info=context.truncation_info,
                config=config,
            )
        except InvalidInputError as e:
            logger.warning(f"Rejected analysis input for {context.root_issue.key}: {e}")
            raise

        metrics = calculate_metrics(hierarchy)
        anomalies = detect_anomalies(hierarchy, config=config, now=now)
        output = format_analysis_output(
            hierarchy,
            metrics,
            anomalies,
            token_level=ceiling,
            output_mode=mode,
        )

        notes = [note for note in (output.info, hierarchy.truncation_info) if note]
        update: dict[str, Any] = {"info": ". ".join(notes) or None}
        if hierarchy.parent is not None:
            parent = f"{hierarchy.parent.key}: {hierarchy.parent.summary}"
            update["summary"] = output.summary.model_copy(update={"parent": parent})

        logger.info(
            f"Analyzed {context.root_issue.key}: {hierarchy.total_nodes} issues, "
            f"{len(anomalies)} anomalies, level {output.effective_level.value}"
        )
        return output.model_copy(update=update)


__all__ = [
    "analyze_issue",
    # Configuration
    "AnalysisConfig",
    # Fetch planning
    "FetchBudget",
    "FetchedContext",
    "calculate_token_level",
    "coerce_depth",
    "get_fetch_budget",
    "to_issue_ref",
    "validate_max_children",
    # Hierarchy
    "build_hierarchy",
    "create_node",
    "find_node_by_key",
    "flatten_hierarchy",
    "get_issues_at_depth",
    "get_path_to_node",
    "hierarchy_to_refs",
    "iter_nodes",
    # Metrics
    "calculate_metrics",
    "calculate_status_distribution",
    "get_status_breakdown",
    "get_type_breakdown",
    "round_half_up",
    # Anomalies
    "DETECTORS",
    "SEVERITY_ORDER",
    "detect_anomalies",
    "sort_anomalies",
    # Summarizer
    "coerce_output_mode",
    "coerce_token_level",
    "create_hierarchy_summary",
    "format_analysis_output",
    "format_as_json",
    "get_effective_level",
    "ref_to_compact_issue",
    "to_compact_issue",
]
