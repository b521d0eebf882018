"""Handle validation utilities."""

import re
from typing import Any

from pydantic import BaseModel

from social.graze.bsvalias.errors import InvalidHandleError

HANDLE_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


class ParsedHandle(BaseModel):
    """A handle split into its local part and domain."""

    alias: str
    domain: str

    def __str__(self) -> str:
        return f"{self.alias}@{self.domain}"


def check_paymail_handle(handle: Any) -> None:
    """Raise InvalidHandleError unless handle looks like alias@domain.

    Args:
        handle: Value to check

    Raises:
        InvalidHandleError: If the value is not a string or not a valid handle
    """
    if not isinstance(handle, str):
        raise InvalidHandleError("`handle` must be a string")

    if HANDLE_PATTERN.match(handle) is None:
        raise InvalidHandleError("`handle` must be a valid paymail handle")


def parse_handle(handle: str) -> ParsedHandle:
    """Validate a handle and split it into alias and domain.

    Args:
        handle: Handle such as alice@example.com

    Returns:
        ParsedHandle with the alias and the lower-cased domain
    """
    if isinstance(handle, str):
        handle = handle.strip()

    check_paymail_handle(handle)

    alias, _, domain = handle.rpartition("@")
    return ParsedHandle(alias=alias, domain=domain.lower())
