"""
Configuration constants for the Twitch chat client

This module contains the network and timing constants used by the client.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Attempts to parse the environment variable as a float. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# IRC endpoint (plain TCP, no TLS)
TWITCH_IRC_HOST = os.getenv("TWITCH_IRC_HOST", "irc.chat.twitch.tv")
TWITCH_IRC_PORT = _get_env_int("TWITCH_IRC_PORT", 6667)

# Connection timing
IRC_CONNECT_TIMEOUT = _get_env_float(
    "IRC_CONNECT_TIMEOUT", 10.0
)  # Seconds allowed for the TCP connect
IRC_READ_TIMEOUT = _get_env_float(
    "IRC_READ_TIMEOUT", 600.0
)  # Idle read timeout; Twitch pings roughly every 5 minutes
IRC_MAX_LINE_LENGTH = _get_env_int(
    "IRC_MAX_LINE_LENGTH", 65536
)  # StreamReader buffer limit (bytes) for a single line

# Protocol defaults
DEFAULT_CAPABILITIES = ("commands", "tags")
CAPABILITY_NAMESPACE = "twitch.tv/"
LINE_TERMINATOR = "\r\n"

# Token validation (HTTPS)
TOKEN_VALIDATE_URL = "https://id.twitch.tv/oauth2/validate"
TOKEN_VALIDATE_TIMEOUT = _get_env_int(
    "TOKEN_VALIDATE_TIMEOUT", 30
)  # Seconds for the validate request
