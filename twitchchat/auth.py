"""OAuth token validation against the Twitch ID service."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import aiohttp

from .constants import TOKEN_VALIDATE_TIMEOUT, TOKEN_VALIDATE_URL
from .errors import AuthenticationError, NetworkError, ParsingError
from .logs.logger import logger


@dataclass
class TokenInfo:
    login: str
    user_id: str
    client_id: str
    scopes: list[str] = field(default_factory=list)
    expires_in: int | None = None


async def validate_token(session: aiohttp.ClientSession, token: str) -> TokenInfo:
    """Ask Twitch who owns ``token`` before using it for IRC.

    Args:
        session: Open aiohttp session used for the request.
        token: Access token, with or without the ``oauth:`` prefix.

    Returns:
        TokenInfo describing the token owner and granted scopes.

    Raises:
        AuthenticationError: Twitch answered 401 (invalid or expired token).
        NetworkError: Timeout, transport failure or unexpected HTTP status.
        ParsingError: The 200 response body lacks the expected fields.
    """
    if token.startswith("oauth:"):
        token = token[len("oauth:") :]
    headers = {"Authorization": f"OAuth {token}"}
    timeout = aiohttp.ClientTimeout(total=TOKEN_VALIDATE_TIMEOUT)
    try:
        async with session.get(
            TOKEN_VALIDATE_URL, headers=headers, timeout=timeout
        ) as resp:
            if resp.status == 401:
                logger.log_event(
                    "auth", "validation_invalid", level=logging.WARNING, status=401
                )
                raise AuthenticationError("Token is invalid or expired")
            if resp.status != 200:
                logger.log_event(
                    "auth",
                    "validation_failed_status",
                    level=logging.WARNING,
                    status=resp.status,
                )
                raise NetworkError(
                    f"HTTP {resp.status} during token validation",
                    data={"status": resp.status},
                )
            data = await resp.json()
    except TimeoutError as e:
        logger.log_event("auth", "validation_timeout", level=logging.WARNING)
        raise NetworkError("Token validation timeout") from e
    except aiohttp.ClientError as e:
        logger.log_event(
            "auth",
            "validation_network_error",
            level=logging.WARNING,
            error_type=type(e).__name__,
        )
        raise NetworkError(f"Network error during validation: {e}") from e
    except ValueError as e:
        raise ParsingError(f"Invalid JSON in validate response: {e}") from e

    if not isinstance(data, dict) or not data.get("login"):
        raise ParsingError("Missing login in validate response")
    info = TokenInfo(
        login=str(data["login"]),
        user_id=str(data.get("user_id", "")),
        client_id=str(data.get("client_id", "")),
        scopes=list(data.get("scopes") or []),
        expires_in=data.get("expires_in"),
    )
    logger.log_event(
        "auth",
        "validated",
        user=info.login,
        expires_in=info.expires_in,
        scopes=",".join(info.scopes),
    )
    return info
