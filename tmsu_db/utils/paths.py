"""
Connection-path resolution.

A connection path has the shape ``[scheme://]address``:

    "mysql://user:pw@tcp(db:3306)/tags"  -> kind "mysql", address "user:pw@tcp(db:3306)/tags"
    "/home/me/.tmsu/db"                  -> kind "sqlite", address "/home/me/.tmsu/db"

A scheme must be at least two word characters long; single-letter
prefixes such as Windows drive letters ("C://...") are treated as plain
filesystem paths.

Everything here is pure string handling. Nothing touches the filesystem
or the network.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass


EMBEDDED_KIND = "sqlite"

DB_DIR_NAME = ".tmsu"
DB_FILE_NAME = "db"

_SCHEME_RE = re.compile(r"\w+?://")
_SEPARATOR = "://"


# ----------------------------------------------------------------------
# Scheme helpers
# ----------------------------------------------------------------------

def get_scheme(path: str) -> str:
    """
    Return the part before '://', or "" when there is none.

    Example:
        "mysql://db" -> "mysql"
    """
    match = _SCHEME_RE.search(path)
    if match is None:
        return ""
    return match.group(0).replace(_SEPARATOR, "", 1)


def split_path_from_scheme(path: str) -> str:
    """
    Return the part after the scheme, or the original string if there is
    no separator.
    """
    parts = path.split(_SEPARATOR, 1)
    if len(parts) != 2:
        return path
    return parts[1]


def has_scheme(path: str) -> bool:
    return len(get_scheme(path)) > 1


# ----------------------------------------------------------------------
# Resolution
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class ResolvedPath:
    """
    A connection path split into backend kind and backend address.

    Attributes
    ----------
    kind:
        Lower-cased scheme, or "sqlite" for plain filesystem paths.
    address:
        Backend-specific address (DSN remainder or filesystem path).
    original:
        The path as supplied by the caller, used in error messages.
    """

    kind: str
    address: str
    original: str

    @property
    def is_networked(self) -> bool:
        return self.kind != EMBEDDED_KIND


def resolve(path: str) -> ResolvedPath:
    if has_scheme(path):
        return ResolvedPath(
            kind=get_scheme(path).lower(),
            address=split_path_from_scheme(path),
            original=path,
        )
    return ResolvedPath(kind=EMBEDDED_KIND, address=path, original=path)


def database_path_for(directory: str) -> str:
    """
    Location of the embedded store for a directory.

    Example:
        "/home/me/photos" -> "/home/me/photos/.tmsu/db"
    """
    return os.path.join(directory, DB_DIR_NAME, DB_FILE_NAME)


__all__ = [
    "EMBEDDED_KIND",
    "DB_DIR_NAME",
    "DB_FILE_NAME",
    "ResolvedPath",
    "get_scheme",
    "split_path_from_scheme",
    "has_scheme",
    "resolve",
    "database_path_for",
]
