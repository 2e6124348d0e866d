"""
Hierarchy builder.

Assembles already-fetched issues into a rooted IssueHierarchy and provides
traversal helpers over it. Nothing here performs I/O: the builder is a pure,
total transformation that either returns a complete hierarchy or refuses
malformed structural input with InvalidInputError.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence

from ..exceptions import InvalidInputError
from ..models.analysis import AnalysisDepth, IssueHierarchy, IssueHierarchyNode
from ..models.jira import JiraIssue, JiraIssueRef
from .config import AnalysisConfig
from .context import coerce_depth, to_issue_ref, validate_max_children

logger = logging.getLogger("mcp-jira.analysis")


def create_node(
    issue: JiraIssue,
    children: Sequence[IssueHierarchyNode] = (),
    depth: int = 0,
) -> IssueHierarchyNode:
    """
    Create a hierarchy node.

    ``children_story_points`` is derived from ``children`` by the model.

    Raises:
        InvalidInputError: If depth is negative or a child is not exactly
            one level deeper
    """
    if depth < 0:
        raise InvalidInputError(f"Node depth must be non-negative, got {depth}")
    for child in children:
        if child.depth != depth + 1:
            raise InvalidInputError(
                f"Child {child.key} has depth {child.depth}, expected {depth + 1}"
            )
    return IssueHierarchyNode(issue=issue, children=tuple(children), depth=depth)


def _build_subtree(
    issue: JiraIssue,
    depth: int,
    descendants: Mapping[str, Sequence[JiraIssue]],
    limit: int,
    seen: set[str],
    notes: list[str],
) -> IssueHierarchyNode:
    """Build the node for ``issue`` and everything fetched beneath it."""
    fetched = descendants.get(issue.key, ())
    if len(fetched) > limit:
        notes.append(
            f"Children of {issue.key} limited to {limit} ({len(fetched)} total)"
        )

    children = []
    for child in fetched[:limit]:
        if child.key in seen:
            logger.debug(f"Skipping {child.key} under {issue.key}: already in tree")
            continue
        seen.add(child.key)
        children.append(
            _build_subtree(child, depth + 1, descendants, limit, seen, notes)
        )
    return create_node(issue, children, depth)


def _collect_linked_refs(
    root: JiraIssue,
    linked_issues: Iterable[JiraIssue | JiraIssueRef],
) -> tuple[JiraIssueRef, ...]:
    """Reference every linked issue once, excluding the root itself."""
    supplied = [to_issue_ref(issue) for issue in linked_issues]
    if not supplied:
        supplied = [link.linked_issue for link in root.issue_links]

    refs: list[JiraIssueRef] = []
    keys: set[str] = set()
    for ref in supplied:
        if ref.key == root.key or ref.key in keys:
            continue
        keys.add(ref.key)
        refs.append(ref)
    return tuple(refs)


def build_hierarchy(
    root: JiraIssue,
    children: Sequence[JiraIssue] = (),
    *,
    depth: AnalysisDepth | str = AnalysisDepth.STANDARD,
    max_children: int | None = None,
    include_links: bool | None = None,
    linked_issues: Iterable[JiraIssue | JiraIssueRef] = (),
    parent: JiraIssue | JiraIssueRef | None = None,
    descendants: Mapping[str, Sequence[JiraIssue]] | None = None,
    upstream_truncated: bool = False,
    upstream_truncation_info: str | None = None,
    config: AnalysisConfig | None = None,
) -> IssueHierarchy:
    """
    Build the issue hierarchy for one analysis call.

    The root sits at depth 0 and each supplied child at depth 1. Issues
    listed in ``descendants`` under a node's key are attached one level
    below it. Everything supplied is attached: the per-depth fetch budget
    (see ``get_fetch_budget``) applies upstream, and the only bound here is
    ``max_children`` per node. Anything left out is reported through
    ``truncated`` and ``truncation_info``.

    Args:
        root: The root issue, with its embedded parent/subtask/link refs
        children: Fetched child issues, in fetch order
        depth: Depth mode describing how much was fetched upstream
        max_children: Children limit (default: ``config.default_max_children``)
        include_links: Whether to keep linked issues (default:
            ``config.include_links``)
        linked_issues: Fetched linked issues; the root's own link refs are
            used when none are supplied
        parent: Fetched parent issue; the root's embedded parent ref is
            used when none is supplied
        descendants: Issue key -> children fetched beneath that issue
        upstream_truncated: Whether the fetch layer hit one of its limits
        upstream_truncation_info: The fetch layer's explanation, if any
        config: Analysis configuration (default: built-in thresholds)

    Returns:
        The assembled IssueHierarchy

    Raises:
        InvalidInputError: If depth or max_children is invalid
    """
    config = config or AnalysisConfig()
    depth = coerce_depth(depth)
    if max_children is None:
        max_children = config.default_max_children
    limit = validate_max_children(max_children, config)
    if include_links is None:
        include_links = config.include_links

    notes: list[str] = []
    if upstream_truncation_info:
        notes.append(upstream_truncation_info)

    if len(children) > limit:
        notes.append(f"Children limited to {limit} ({len(children)} total)")
    elif len(root.subtasks) > limit:
        notes.append(f"Subtasks limited to {limit} ({len(root.subtasks)} total)")

    seen = {root.key}
    child_nodes = []
    for child in children[:limit]:
        if child.key in seen:
            logger.debug(f"Skipping duplicate child {child.key} of {root.key}")
            continue
        seen.add(child.key)
        child_nodes.append(
            _build_subtree(child, 1, descendants or {}, limit, seen, notes)
        )

    root_node = create_node(root, child_nodes, 0)

    parent_ref = to_issue_ref(parent) if parent is not None else root.parent

    linked_refs: tuple[JiraIssueRef, ...] = ()
    if include_links:
        linked_refs = _collect_linked_refs(root, linked_issues)

    nodes = list(iter_nodes(root_node))
    hierarchy = IssueHierarchy(
        root=root_node,
        parent=parent_ref,
        linked_issues=linked_refs,
        total_nodes=len(nodes),
        max_depth=max(node.depth for node in nodes),
        truncated=upstream_truncated or bool(notes),
        truncation_info="; ".join(notes) or None,
    )

    logger.debug(
        f"Built {depth.value} hierarchy for {root.key}: {hierarchy.total_nodes} "
        f"nodes, max depth {hierarchy.max_depth}, {len(linked_refs)} linked issues"
    )
    return hierarchy


def iter_nodes(node: IssueHierarchyNode) -> Iterator[IssueHierarchyNode]:
    """Yield ``node`` and all of its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def flatten_hierarchy(hierarchy: IssueHierarchy) -> list[JiraIssue]:
    """Flatten the hierarchy into a pre-order list of issues."""
    return [node.issue for node in iter_nodes(hierarchy.root)]


def get_issues_at_depth(hierarchy: IssueHierarchy, target_depth: int) -> list[JiraIssue]:
    """
    Get all issues at a specific depth level.

    Raises:
        InvalidInputError: If target_depth is negative
    """
    if target_depth < 0:
        raise InvalidInputError(f"Depth must be non-negative, got {target_depth}")
    return [
        node.issue for node in iter_nodes(hierarchy.root) if node.depth == target_depth
    ]


def find_node_by_key(hierarchy: IssueHierarchy, key: str) -> IssueHierarchyNode | None:
    """Find the node for an issue key, or None if it is not in the tree."""
    return next(
        (node for node in iter_nodes(hierarchy.root) if node.key == key), None
    )


def get_path_to_node(hierarchy: IssueHierarchy, key: str) -> list[str]:
    """
    Get the issue keys from the root down to ``key``.

    Returns:
        The path including both ends, or an empty list if ``key`` is not in
        the tree
    """
    path: list[str] = []

    def search(node: IssueHierarchyNode) -> bool:
        path.append(node.key)
        if node.key == key:
            return True
        if any(search(child) for child in node.children):
            return True
        path.pop()
        return False

    search(hierarchy.root)
    return path


def hierarchy_to_refs(node: IssueHierarchyNode) -> list[JiraIssueRef]:
    """Convert a subtree to issue refs for token-efficient output."""
    return [to_issue_ref(n.issue) for n in iter_nodes(node)]
