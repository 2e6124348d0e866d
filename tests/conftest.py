"""Shared fixtures for the MCP Jira analysis test suite."""

import logging
from datetime import datetime, timezone

import pytest

from mcp_jira.analysis import AnalysisConfig
from mcp_jira.analysis.context import FetchedContext
from tests.utils.factories import ContextBundleFactory, JiraIssueFactory


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handler setup done by the CLI so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("mcp-jira")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for staleness checks."""
    return datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def config() -> AnalysisConfig:
    """Analysis configuration with the built-in thresholds."""
    return AnalysisConfig()


@pytest.fixture
def make_issue():
    """Build JiraIssue models through the raw-payload factory."""
    return JiraIssueFactory.create_model


@pytest.fixture
def epic_bundle(now):
    """Raw bundle: EPIC-1 (20 points), STORY-1 (8, done), STORY-2 (5, stale)."""
    return ContextBundleFactory.create_epic_scenario(now)


@pytest.fixture
def epic_context(epic_bundle) -> FetchedContext:
    """FetchedContext built from the EPIC-1 bundle."""
    return FetchedContext.from_api_response(epic_bundle)
