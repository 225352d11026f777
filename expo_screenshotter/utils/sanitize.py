"""Filename sanitization utilities."""

import re

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def sanitize_filename(name: str) -> str:
    """Replace every non-alphanumeric character with ``_`` and lower-case."""
    return _NON_ALNUM.sub("_", name).lower()
