"""Validation of connection parameters read from the environment."""
import re
from typing import Tuple

from .errors import EnvVarError

# Nacos accepts only these characters in data ids and group names
IDENTIFIER_PATTERN = re.compile(r'^[a-zA-Z0-9_\-.:]+$')


def validate_identifier(value: str, variable: str) -> None:
    """
    Validate a data id or group name against the configuration service rules.

    Args:
        value: Identifier to validate
        variable: Name of the environment variable it was read from

    Raises:
        EnvVarError if the identifier contains characters the service rejects
    """
    if not IDENTIFIER_PATTERN.match(value):
        raise EnvVarError(
            variable,
            f"{variable} has invalid value '{value}'. "
            f"Allowed characters: letters, numbers, underscores (_), hyphens (-), dots (.), colons (:)"
        )


def split_server_addr(addr: str) -> Tuple[str, str]:
    """
    Split an optional http:// or https:// prefix off a server address.

    Args:
        addr: Address as configured, e.g. "https://nacos.internal:8848"

    Returns:
        Tuple of (scheme, host:port)

    Raises:
        EnvVarError if nothing is left after the scheme
    """
    scheme = "http"
    for prefix in ("http://", "https://"):
        if addr.startswith(prefix):
            scheme = prefix[:-3]
            addr = addr[len(prefix):]
            break

    addr = addr.rstrip("/")
    if not addr:
        raise EnvVarError("NACOS_ADDR", "NACOS_ADDR has no host after the scheme")
    return scheme, addr
