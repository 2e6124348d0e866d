import json
from datetime import datetime
from typing import TextIO

import click
from dotenv import load_dotenv

__version__ = "0.1.0"

# Contextual logging must be installed before any module logger is created
from .logging_config import get_logger, log_operation, setup_logger  # noqa: E402

from .analysis import AnalysisConfig, analyze_issue, format_as_json  # noqa: E402
from .analysis.context import FetchedContext  # noqa: E402
from .exceptions import MCPJiraError  # noqa: E402
from .models.analysis import AnalysisDepth, AnalysisOutputMode, TokenLevel  # noqa: E402

logger = get_logger("mcp-jira")


@click.command()
@click.argument("context_file", type=click.File("r", encoding="utf-8"))
@click.option(
    "--output-mode",
    type=click.Choice([mode.value for mode in AnalysisOutputMode]),
    default=AnalysisOutputMode.DETAILED.value,
    show_default=True,
    help="Requested output verbosity",
)
@click.option(
    "--depth",
    type=click.Choice([depth.value for depth in AnalysisDepth]),
    default=AnalysisDepth.STANDARD.value,
    show_default=True,
    help="Depth mode the context was fetched with",
)
@click.option(
    "--max-children",
    type=int,
    default=None,
    help="Maximum children per level (default: JIRA_ANALYSIS_MAX_CHILDREN or 50)",
)
@click.option(
    "--include-links/--no-include-links",
    default=None,
    help="Include linked issues (default: JIRA_ANALYSIS_INCLUDE_LINKS or true)",
)
@click.option(
    "--token-level",
    type=click.Choice([level.value for level in TokenLevel], case_sensitive=False),
    default=None,
    help="Override the verbosity ceiling derived from the context size",
)
@click.option(
    "--as-of",
    type=click.DateTime(),
    default=None,
    help="Reference time for staleness checks (default: now, UTC)",
)
@click.option(
    "--env-file", type=click.Path(exists=True, dir_okay=False), help="Path to .env file"
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (can be used multiple times)",
)
@click.option(
    "--log-dir",
    help="Also write rotating log files to this directory",
)
def main(
    context_file: TextIO,
    output_mode: str,
    depth: str,
    max_children: int | None,
    include_links: bool | None,
    token_level: str | None,
    as_of: datetime | None,
    env_file: str | None,
    verbose: int,
    log_dir: str | None,
) -> None:
    """MCP Jira Analysis - deep hierarchy analysis of a fetched Jira issue

    CONTEXT_FILE is a JSON bundle with the root "issue" and, optionally, its
    "parent", "children", "linked_issues" and "descendants" as returned by
    the Jira REST API. Use "-" to read from stdin.
    """
    # Load environment variables from file if specified, otherwise try default .env
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    logging_level = None
    if verbose == 1:
        logging_level = "INFO"
    elif verbose >= 2:
        logging_level = "DEBUG"

    try:
        setup_logger(
            name="mcp-jira",
            level=logging_level,
            log_to_file=bool(log_dir),
            log_dir=log_dir,
        )
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    with log_operation(logger, "cli_analysis", app_version=__version__):
        if env_file:
            logger.info(f"Loaded environment from file: {env_file}")

        try:
            data = json.load(context_file)
        except json.JSONDecodeError as e:
            raise click.ClickException(
                f"Invalid JSON in {context_file.name}: {e}"
            ) from e

        try:
            config = AnalysisConfig.from_env()
            context = FetchedContext.from_api_response(data, config)
            output = analyze_issue(
                context,
                output_mode=output_mode,
                depth=depth,
                max_children=max_children,
                include_links=include_links,
                token_level=token_level,
                config=config,
                now=as_of,
            )
        except (MCPJiraError, ValueError) as e:
            raise click.ClickException(str(e)) from e

        click.echo(format_as_json(output))


__all__ = ["main", "analyze_issue", "__version__", "setup_logger", "log_operation"]

if __name__ == "__main__":
    main()
