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

"""Semantic versions derived from GE release tags.

This module is format-agnostic: it does NOT talk to GitHub. It only turns
raw release tag strings into comparable SemVer values.

GE release tags follow several conventions over the years:

- ``6.20-GE-1``, ``6.20-GE`` (Proton GE, Wine GE)
- ``GE-Proton7-8`` (Proton GE since 7.x)
- ``6.16-GE-3-LoL``, ``6.16-2-GE-LoL`` (Wine GE for League of Legends)
- ``7.0rc3-GE-1``, ``5.0-rc5-GE-1`` (release candidates)
- ``5.11-GE-1-MF`` (media foundation builds)
- ``proton-3.16-5`` (early Proton GE)

Instead of one grammar per dialect, every run of digits in the tag is
collected and the first three become major, minor and patch. The only
ambiguity is a release candidate number, which must not be consumed as a
version component.
"""

from __future__ import annotations

from dataclasses import dataclass
import functools
import re
from typing import Any

from gefetch.exceptions import TagParseError

_NUMBERS = re.compile(r"\d+")

RELEASE_CANDIDATE_MARKER = "rc"

# Checked in order, first hit wins.
TAG_MARKERS: tuple[str, ...] = (RELEASE_CANDIDATE_MARKER, "LoL", "MF")

_COMPONENT_MAX = 255


@dataclass(frozen=True)
class VersionNumber:
    """A run of digits inside a tag together with its span.

    Attributes:
        value: The digits as they appear in the tag (e.g., "20").
        start: Index of the first digit in the tag.
        end: Index one past the last digit.

    """

    value: str
    start: int
    end: int


def version_numbers(tag: str) -> list[VersionNumber]:
    """Return every run of digits in ``tag`` in order of appearance.

    Example:
        >>> [n.value for n in version_numbers("GE-Proton7-8")]
        ['7', '8']
    """
    return [VersionNumber(m.group(0), m.start(), m.end()) for m in _NUMBERS.finditer(tag)]


@functools.total_ordering
@dataclass(frozen=True)
class SemVer:
    """Canonical version of a release tag.

    Ordering compares major, minor and patch numerically, then the
    identifier. A version without identifier sorts before any version with
    one, identifiers compare as plain strings.

    Attributes:
        major: Major version (0-255).
        minor: Minor version (0-255).
        patch: Patch version (0-255).
        identifier: Release candidate marker ("rc3") or tag marker ("LoL",
            "MF"), or None.

    Raises:
        ValueError: If a component is not an int in 0..255 or the
            identifier is neither a string nor None.

    """

    major: int = 0
    minor: int = 0
    patch: int = 0
    identifier: str | None = None

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            # bool is an int subclass but never a version component
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"SemVer {name} must be an int, got {value!r}")
            if not 0 <= value <= _COMPONENT_MAX:
                raise ValueError(
                    f"SemVer {name} must be in 0..{_COMPONENT_MAX}, got {value}"
                )
        if self.identifier is not None and not isinstance(self.identifier, str):
            raise ValueError(
                f"SemVer identifier must be a string or None, got {self.identifier!r}"
            )

    def _key(self) -> tuple[int, int, int, bool, str]:
        return (
            self.major,
            self.minor,
            self.patch,
            self.identifier is not None,
            self.identifier or "",
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        """Return the canonical string, e.g. "7.0.1-rc3"."""
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.identifier is not None:
            return f"{base}-{self.identifier}"
        return base

    def to_dict(self) -> dict[str, Any]:
        return {
            "major": self.major,
            "minor": self.minor,
            "patch": self.patch,
            "identifier": self.identifier,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SemVer:
        """Rebuild a SemVer from its serialized form.

        Raises:
            KeyError: If a version component is missing.
            ValueError: If a component is not an int in 0..255 or the
                identifier is not a string.

        """
        return cls(
            major=data["major"],
            minor=data["minor"],
            patch=data["patch"],
            identifier=data.get("identifier"),
        )


def _rc_number(tag: str, numbers: list[VersionNumber]) -> VersionNumber | None:
    """Find the digit run that belongs to the release candidate marker.

    The first run is skipped: it is always the major version, even in tags
    like "5.0-rc5" where it has the same value as the candidate number.
    """
    for number in numbers[1:]:
        if f"{RELEASE_CANDIDATE_MARKER}{number.value}" in tag:
            return number
    return None


def _semver_from_numbers(
    tag: str, numbers: list[VersionNumber], identifier: str | None
) -> SemVer:
    components: list[int] = []
    for number in numbers[:3]:
        value = int(number.value)
        if value > _COMPONENT_MAX:
            raise TagParseError(
                f"Version component {number.value} in tag {tag!r} is larger "
                f"than {_COMPONENT_MAX}",
                tag,
            )
        components.append(value)

    # Tags like "6.20-GE" have no patch number.
    components.extend([0] * (3 - len(components)))
    return SemVer(components[0], components[1], components[2], identifier)


def parse_semver(tag: str) -> SemVer:
    """Parse a raw GE release tag into a SemVer.

    Args:
        tag: Raw release tag (e.g., "Proton-6.20-GE-1").

    Returns:
        The parsed version. An empty tag yields 0.0.0.

    Raises:
        TagParseError: If the tag contains "rc" without a candidate number,
            or a component exceeds 255.

    Example:
        >>> str(parse_semver("7.0rc3-GE-1"))
        '7.0.1-rc3'
        >>> str(parse_semver("6.16-2-GE-LoL"))
        '6.16.2-LoL'
    """
    numbers = version_numbers(tag)

    if RELEASE_CANDIDATE_MARKER in tag:
        rc_number = _rc_number(tag, numbers)
        if rc_number is None:
            raise TagParseError(
                f"Tag {tag!r} contains {RELEASE_CANDIDATE_MARKER!r} but no "
                f"release candidate number",
                tag,
            )
        # Remove by span, the same value can appear twice.
        remaining = [n for n in numbers if n != rc_number]
        return _semver_from_numbers(
            tag, remaining, f"{RELEASE_CANDIDATE_MARKER}{rc_number.value}"
        )

    identifier = next((marker for marker in TAG_MARKERS if marker in tag), None)
    return _semver_from_numbers(tag, numbers, identifier)
