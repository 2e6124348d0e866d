"""Environment variable utility functions for MCP Jira."""

import os


def is_env_truthy(env_var_name: str, default: str = "") -> bool:
    """Check if environment variable is set to a standard truthy value.

    Considers 'true', '1', 'yes' as truthy values (case-insensitive).

    Args:
        env_var_name: Name of the environment variable to check
        default: Default value if environment variable is not set

    Returns:
        True if the environment variable is set to a truthy value, False otherwise
    """
    return os.getenv(env_var_name, default).lower() in ("true", "1", "yes")


def get_env_int(env_var_name: str, default: int) -> int:
    """Read an integer environment variable.

    Args:
        env_var_name: Name of the environment variable to read
        default: Value used when the variable is unset or blank

    Returns:
        The parsed integer

    Raises:
        ValueError: If the variable is set but is not an integer
    """
    raw = os.getenv(env_var_name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        msg = f"Invalid {env_var_name}: expected an integer, got '{raw}'"
        raise ValueError(msg) from None


def get_env_float(env_var_name: str, default: float) -> float:
    """Read a float environment variable.

    Args:
        env_var_name: Name of the environment variable to read
        default: Value used when the variable is unset or blank

    Returns:
        The parsed float

    Raises:
        ValueError: If the variable is set but is not a number
    """
    raw = os.getenv(env_var_name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        msg = f"Invalid {env_var_name}: expected a number, got '{raw}'"
        raise ValueError(msg) from None
