"""Text normalization for identifiers, literals and file paths.

Nothing here quotes or parameterizes anything; these helpers only strip
characters outside an allow-list, or backslash-escape quote characters, so
that text spliced directly into SQL cannot break out of its position.
"""
from __future__ import annotations

import re

_IDENTIFIER_DISALLOWED = re.compile(r"[^\w\-]", re.ASCII)
_PATH_DISALLOWED = re.compile(r"[^\w\-:\\/@$#!+~.,\s ]", re.ASCII)
_QUOTE_CHARS = re.compile(r"""([\\"'])""")


def to_identifier(text: str) -> str:
    """Remove every character outside ``[A-Za-z0-9_-]``.

    Relative order of the surviving characters is kept, so an already
    clean identifier comes back unchanged.

    Example::

        >>> to_identifier("user name; --")
        'username--'
    """
    return _IDENTIFIER_DISALLOWED.sub("", text)


def escape_quotes(text: str) -> str:
    """Prefix backslashes and single / double quotes with a backslash."""
    return _QUOTE_CHARS.sub(r"\\\1", text)


def to_safe_path(path: str) -> str:
    """Reduce a filesystem path to the characters allowed in a file DSN."""
    return _PATH_DISALLOWED.sub("", path)
