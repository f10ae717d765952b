# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""GitHub release tags with a comparable semantic version.

A Tag keeps the raw tag string exactly as published (it is the name of the
release and of the installed compatibility tool directory) and derives a
SemVer from it once, at construction. Comparing "6.20.1" with "7.8.0" is
much easier than comparing "Proton-6.20-GE-1" with "GE-Proton7-8".

Equality, ordering and hashing all use the SemVer only, so two tags that
differ in spelling but parse to the same version are the same tag, also
inside sets and dict keys.

Serialized form:
    ```json
    {"str": "6.20-GE-1",
     "semver": {"major": 6, "minor": 20, "patch": 1, "identifier": null}}
    ```

    State files written before gefetch 0.2.0 used "value" instead of "str";
    Tag.from_dict accepts both.
"""

from __future__ import annotations

from collections.abc import Iterable
import functools
from typing import Any

from .semver import SemVer, parse_semver

# Alias for state files written before version 0.2.0.
_LEGACY_RAW_KEY = "value"
_RAW_KEY = "str"


@functools.total_ordering
class Tag:
    """A GitHub release tag and its semantic version.

    Attributes:
        raw: The tag exactly as published (e.g., "GE-Proton7-8").
        semver: The version parsed from ``raw`` (e.g., 7.8.0).

    Example:
        ```python
        tag = Tag("GE-Proton7-8")
        str(tag.semver)  # '7.8.0'
        Tag("6.20-GE-1") < tag  # True
        ```

    """

    __slots__ = ("_raw", "_semver")

    def __init__(self, raw: str = "", *, semver: SemVer | None = None) -> None:
        """Create a tag, parsing ``raw`` unless a stored ``semver`` is given.

        Raises:
            TagParseError: If ``raw`` is outside the supported tag dialects.

        """
        self._raw = raw
        self._semver = semver if semver is not None else parse_semver(raw)

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def semver(self) -> SemVer:
        return self._semver

    @classmethod
    def from_optional(cls, raw: str | None) -> Tag:
        """Return the default (empty) tag for None."""
        return cls(raw) if raw is not None else cls()

    def to_dict(self) -> dict[str, Any]:
        return {_RAW_KEY: self._raw, "semver": self._semver.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tag:
        """Rebuild a tag from its serialized form.

        The stored semver is used as is and not derived again from the raw
        string.

        Raises:
            KeyError: If the raw string or the semver is missing.

        """
        if _RAW_KEY in data:
            raw = data[_RAW_KEY]
        else:
            raw = data[_LEGACY_RAW_KEY]
        return cls(raw, semver=SemVer.from_dict(data["semver"]))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self._semver == other._semver

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self._semver < other._semver

    def __hash__(self) -> int:
        return hash(self._semver)

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"Tag({self._raw!r}, semver={str(self._semver)!r})"

    def __fspath__(self) -> str:
        return self._raw


def sort_tags(tags: Iterable[Tag], newest_first: bool = True) -> list[Tag]:
    """Sort tags by semantic version, newest first by default.

    Tags with equal versions keep their input order.
    """
    return sorted(tags, reverse=newest_first)
