"""
Release tag parsing and ordering for gefetch.

This package turns free-form GE release tags into canonical, totally ordered
semantic versions. It performs no network or file I/O.

Modules
-------
semver : module
    Digit-run extraction, release candidate disambiguation and the SemVer
    value type.
tag : module
    The Tag type (raw tag string plus derived SemVer) and sorting helpers.

Public API
----------
SemVer : dataclass
    ``{major, minor, patch, identifier}`` with a total order.
Tag : class
    Raw release tag with its SemVer; compared and hashed by version.
VersionNumber : dataclass
    A run of digits inside a tag with its span.
parse_semver : function
    Parse a raw tag into a SemVer.
version_numbers : function
    List the digit runs of a raw tag.
sort_tags : function
    Sort tags by version.

Examples
--------
    >>> from gefetch.versioning import Tag
    >>> str(Tag("7.0rc3-GE-1").semver)
    '7.0.1-rc3'
    >>> Tag("6.19-GE-1") < Tag("6.20-GE-1")
    True

Notes
-----
- Parsing targets the tag dialects GE has actually published, it is not a
  general SemVer parser.
- Tags outside those dialects raise TagParseError instead of producing a
  guessed version.
"""

from .semver import (
    RELEASE_CANDIDATE_MARKER,
    TAG_MARKERS,
    SemVer,
    VersionNumber,
    parse_semver,
    version_numbers,
)
from .tag import Tag, sort_tags

__all__ = [
    "RELEASE_CANDIDATE_MARKER",
    "TAG_MARKERS",
    "SemVer",
    "Tag",
    "VersionNumber",
    "parse_semver",
    "sort_tags",
    "version_numbers",
]
