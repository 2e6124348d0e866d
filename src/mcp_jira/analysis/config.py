"""Configuration module for hierarchy analysis thresholds and limits."""

from dataclasses import dataclass

from ..utils.env import get_env_float, get_env_int, is_env_truthy

# Issues "In Progress" without an update for this many days are stale
STALE_THRESHOLD_DAYS = 5

# Children points may differ from the parent estimate by up to this ratio
POINTS_MISMATCH_THRESHOLD = 0.1

# Unestimated children above this share of all children raise a warning
UNESTIMATED_WARNING_RATIO = 0.5

DEFAULT_MAX_CHILDREN = 50
MAX_CHILDREN_LIMIT = 100

# Children and linked issues considered per depth mode
STANDARD_MAX_CHILDREN = 50
STANDARD_MAX_LINKED_ISSUES = 10
DEEP_MAX_LINKED_ISSUES = 20

# Issue counts below which each token level still applies
TOKEN_THRESHOLD_FULL = 20
TOKEN_THRESHOLD_DETAILED = 50
TOKEN_THRESHOLD_COMPACT = 100


@dataclass
class AnalysisConfig:
    """Hierarchy analysis configuration.

    Every threshold defaults to the module-level constant of the same name
    and can be overridden per instance or through environment variables.
    """

    stale_threshold_days: int = STALE_THRESHOLD_DAYS
    points_mismatch_threshold: float = POINTS_MISMATCH_THRESHOLD
    unestimated_warning_ratio: float = UNESTIMATED_WARNING_RATIO
    default_max_children: int = DEFAULT_MAX_CHILDREN
    max_children_limit: int = MAX_CHILDREN_LIMIT
    include_links: bool = True
    token_threshold_full: int = TOKEN_THRESHOLD_FULL
    token_threshold_detailed: int = TOKEN_THRESHOLD_DETAILED
    token_threshold_compact: int = TOKEN_THRESHOLD_COMPACT

    def __post_init__(self) -> None:
        """Validate threshold ranges."""
        if self.stale_threshold_days < 0:
            raise ValueError(
                f"Invalid stale_threshold_days: {self.stale_threshold_days}. "
                "Must be zero or greater."
            )
        if not 0 <= self.points_mismatch_threshold < 1:
            raise ValueError(
                "Invalid points_mismatch_threshold: "
                f"{self.points_mismatch_threshold}. Must be in [0, 1)."
            )
        if not 0 <= self.unestimated_warning_ratio <= 1:
            raise ValueError(
                "Invalid unestimated_warning_ratio: "
                f"{self.unestimated_warning_ratio}. Must be in [0, 1]."
            )
        if self.max_children_limit < 1:
            raise ValueError(
                f"Invalid max_children_limit: {self.max_children_limit}. "
                "Must be at least 1."
            )
        if not 1 <= self.default_max_children <= self.max_children_limit:
            raise ValueError(
                f"Invalid default_max_children: {self.default_max_children}. "
                f"Must be between 1 and {self.max_children_limit}."
            )
        thresholds = (
            self.token_threshold_full,
            self.token_threshold_detailed,
            self.token_threshold_compact,
        )
        if not 0 < thresholds[0] <= thresholds[1] <= thresholds[2]:
            raise ValueError(
                f"Invalid token thresholds: {thresholds}. "
                "Must be positive and non-decreasing (full <= detailed <= compact)."
            )

    @classmethod
    def from_env(cls) -> "AnalysisConfig":
        """Create configuration from environment variables.

        Returns:
            AnalysisConfig with values from environment variables

        Raises:
            ValueError: If an environment variable is malformed or out of range
        """
        return cls(
            stale_threshold_days=get_env_int(
                "JIRA_ANALYSIS_STALE_DAYS", STALE_THRESHOLD_DAYS
            ),
            points_mismatch_threshold=get_env_float(
                "JIRA_ANALYSIS_POINTS_MISMATCH_THRESHOLD", POINTS_MISMATCH_THRESHOLD
            ),
            unestimated_warning_ratio=get_env_float(
                "JIRA_ANALYSIS_UNESTIMATED_WARNING_RATIO", UNESTIMATED_WARNING_RATIO
            ),
            default_max_children=get_env_int(
                "JIRA_ANALYSIS_MAX_CHILDREN", DEFAULT_MAX_CHILDREN
            ),
            max_children_limit=get_env_int(
                "JIRA_ANALYSIS_MAX_CHILDREN_LIMIT", MAX_CHILDREN_LIMIT
            ),
            include_links=is_env_truthy("JIRA_ANALYSIS_INCLUDE_LINKS", "true"),
        )
