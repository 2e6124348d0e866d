"""Tests for the mcp-jira-analysis command line interface."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from mcp_jira import main
from tests.utils.factories import ContextBundleFactory

AS_OF = ["--as-of", "2024-03-15T12:00:00"]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def bundle_file(tmp_path, epic_bundle) -> Path:
    path = tmp_path / "context.json"
    path.write_text(json.dumps(epic_bundle), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_environ():
    """Keep variables loaded from .env files out of other tests."""
    with patch.dict(os.environ, {}):
        os.environ.pop("LOG_LEVEL", None)
        yield


class TestMain:
    """Tests for the main command."""

    def test_default_output(self, runner, bundle_file):
        """Test that the analysis is printed as JSON on stdout."""
        result = runner.invoke(main, [str(bundle_file), *AS_OF])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["effective_level"] == "detailed"
        assert data["metrics"]["total_story_points"] == 33
        assert data["metrics"]["completion_percentage"] == 24
        assert [a["type"] for a in data["anomalies"]] == [
            "POINTS_MISMATCH",
            "STALE_IN_PROGRESS",
        ]
        assert data["hierarchy"]["key"] == "EPIC-1"

    def test_summary_mode(self, runner, bundle_file):
        """Test that summary mode prints no hierarchy."""
        result = runner.invoke(
            main, [str(bundle_file), "--output-mode", "summary", *AS_OF]
        )
        assert result.exit_code == 0, result.output
        assert "hierarchy" not in json.loads(result.stdout)

    def test_token_level_override(self, runner, bundle_file):
        """Test that the ceiling can be forced, case-insensitively."""
        result = runner.invoke(
            main,
            [str(bundle_file), "--output-mode", "full", "--token-level", "summary"],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["effective_level"] == "summary"
        assert data["_info"].startswith("Output reduced from 'full' to 'summary'")

    def test_reads_stdin(self, runner, epic_bundle):
        """Test that '-' reads the bundle from stdin."""
        result = runner.invoke(main, ["-", *AS_OF], input=json.dumps(epic_bundle))
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["summary"]["root_key"] == "EPIC-1"

    def test_no_links(self, runner, tmp_path, now):
        """Test that --no-include-links drops linked issues."""
        bundle = ContextBundleFactory.create_epic_scenario(now)
        bundle["linked_issues"] = [bundle["children"][0]]
        path = tmp_path / "linked.json"
        path.write_text(json.dumps(bundle), encoding="utf-8")

        with_links = runner.invoke(main, [str(path)])
        without = runner.invoke(main, [str(path), "--no-include-links"])

        assert "linked_issues" in json.loads(with_links.stdout)
        assert "linked_issues" not in json.loads(without.stdout)

    def test_env_file(self, runner, bundle_file, tmp_path):
        """Test that thresholds are read from the .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("JIRA_ANALYSIS_STALE_DAYS=10\n", encoding="utf-8")

        result = runner.invoke(
            main, [str(bundle_file), "--env-file", str(env_file), *AS_OF]
        )

        assert result.exit_code == 0, result.output
        types = [a["type"] for a in json.loads(result.stdout)["anomalies"]]
        assert "STALE_IN_PROGRESS" not in types

    def test_log_dir(self, runner, bundle_file, tmp_path):
        """Test that -vv with --log-dir writes debug logs to a file."""
        log_dir = tmp_path / "logs"
        result = runner.invoke(
            main, [str(bundle_file), "-vv", "--log-dir", str(log_dir), *AS_OF]
        )

        assert result.exit_code == 0, result.output
        log_text = (log_dir / "mcp-jira.log").read_text(encoding="utf-8")
        assert "Operation started: cli_analysis" in log_text
        assert "Operation started: analyze_issue" in log_text


class TestMainErrors:
    """Tests for error reporting."""

    def test_invalid_json(self, runner, tmp_path):
        """Test that malformed JSON is reported."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_missing_root_issue(self, runner, tmp_path):
        """Test that a bundle without root issue is reported."""
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"children": []}), encoding="utf-8")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == 1
        assert "root 'issue'" in result.output

    def test_invalid_max_children(self, runner, bundle_file):
        """Test that a non-positive children limit is reported."""
        result = runner.invoke(main, [str(bundle_file), "--max-children", "0"])
        assert result.exit_code == 1
        assert "max_children must be positive" in result.output

    def test_invalid_env_value(self, runner, bundle_file):
        """Test that a malformed threshold variable is reported."""
        result = runner.invoke(
            main, [str(bundle_file)], env={"JIRA_ANALYSIS_STALE_DAYS": "soon"}
        )
        assert result.exit_code == 1
        assert "Invalid JIRA_ANALYSIS_STALE_DAYS" in result.output

    def test_unknown_depth(self, runner, bundle_file):
        """Test that click rejects an unknown depth mode."""
        result = runner.invoke(main, [str(bundle_file), "--depth", "abyss"])
        assert result.exit_code == 2

    def test_missing_file(self, runner, tmp_path):
        """Test that a missing context file is a usage error."""
        result = runner.invoke(main, [str(tmp_path / "nope.json")])
        assert result.exit_code == 2
