class MCPJiraError(Exception):
    """Base exception for MCP-Jira errors."""

    pass


class InvalidInputError(MCPJiraError, ValueError):
    """Raised when structural analysis input is malformed (negative depth, bad limits)."""

    pass
