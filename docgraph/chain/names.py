"""Validation of the chain's account/action names and checksum256 values."""

import re

NAME_CHARS = ".12345abcdefghijklmnopqrstuvwxyz"

_NAME_RE = re.compile(r"^[.1-5a-z]{0,12}[.1-5a-j]?$")
_CHECKSUM256_RE = re.compile(r"^[0-9a-fA-F]{64}$")


def is_valid_name(name: str) -> bool:
    """Return True if `name` round-trips through the chain's 64-bit name encoding.

    Names are up to 13 characters from ``.12345a-z``; the 13th character may
    only use the first 16 symbols (``.1-5a-j``), and trailing dots are not
    significant so they are rejected.
    """
    if not isinstance(name, str) or not _NAME_RE.match(name):
        return False
    return not name.endswith(".")


def is_checksum256(value: str) -> bool:
    return isinstance(value, str) and bool(_CHECKSUM256_RE.match(value))
