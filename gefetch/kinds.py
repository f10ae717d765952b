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

"""Compatibility tool families for gefetch.

GE builds exist for both Proton and Wine. Wine GE additionally ships a
League of Legends flavor from the same repository, recognizable by the
"LoL" marker in its tags. TagKind enumerates the three release streams:

- PROTON: GE-Proton (GloriousEggroll/proton-ge-custom)
- WINE: Wine-GE (GloriousEggroll/wine-ge-custom)
- LOL_WINE: Wine-GE for League of Legends (GloriousEggroll/wine-ge-custom)

The canonical tokens "PROTON", "WINE" and "LOL_WINE" are the enum values
and are used on the command line and in state files. For the persisted
form TagKind.to_dict produces a tagged union with a "type" discriminator:

    {"type": "Proton"}
    {"type": "Wine", "kind": {"type": "WineGe"}}
    {"type": "Wine", "kind": {"type": "LolWineGe"}}

Example:
    ```python
    from gefetch.kinds import TagKind

    kind = TagKind.from_str("LOL_WINE")
    kind.compatibility_tool_name  # 'Wine GE (LoL)'
    kind.owns_tag("6.16-GE-3-LoL")  # True
    ```
"""

from __future__ import annotations

from enum import Enum
import functools
from typing import Any

from gefetch.exceptions import TagKindError

PROTON = "PROTON"
WINE = "WINE"
LOL_WINE = "LOL_WINE"

LOL_MARKER = "LoL"

PROTON_GE_REPO = "GloriousEggroll/proton-ge-custom"
WINE_GE_REPO = "GloriousEggroll/wine-ge-custom"


def _declaration_index(member: Enum) -> int:
    return list(type(member)).index(member)


@functools.total_ordering
class WineTagKind(Enum):
    """The two Wine GE flavors, ordered by declaration."""

    WINE_GE = WINE
    LOL_WINE_GE = LOL_WINE

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, WineTagKind):
            return NotImplemented
        return _declaration_index(self) < _declaration_index(other)

    @classmethod
    def from_str(cls, token: str) -> WineTagKind:
        """Map "WINE" or "LOL_WINE" to a flavor.

        Raises:
            TagKindError: For any other string.

        """
        try:
            return cls(token)
        except ValueError as err:
            raise TagKindError(
                f"Cannot map {token!r} to a Wine GE flavor"
            ) from err

    @classmethod
    def for_tag(cls, tag: str) -> WineTagKind:
        """Classify a wine-ge-custom release tag by its LoL marker."""
        return cls.LOL_WINE_GE if LOL_MARKER in tag else cls.WINE_GE

    def to_dict(self) -> dict[str, str]:
        return {"type": _WINE_TYPE_NAMES[self]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WineTagKind:
        if not isinstance(data, dict):
            raise TagKindError(f"Wine GE flavor must be an object, got {data!r}")
        for flavor, name in _WINE_TYPE_NAMES.items():
            if data.get("type") == name:
                return flavor
        raise TagKindError(f"Unknown Wine GE flavor: {data!r}")


_WINE_TYPE_NAMES = {
    WineTagKind.WINE_GE: "WineGe",
    WineTagKind.LOL_WINE_GE: "LolWineGe",
}


@functools.total_ordering
class TagKind(Enum):
    """The kind of compatibility tool a release tag belongs to.

    Members are ordered by declaration: PROTON < WINE < LOL_WINE.
    """

    PROTON = PROTON
    WINE = WINE
    LOL_WINE = LOL_WINE

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TagKind):
            return NotImplemented
        return _declaration_index(self) < _declaration_index(other)

    def __str__(self) -> str:
        return self.value

    @classmethod
    def proton(cls) -> TagKind:
        return cls.PROTON

    @classmethod
    def wine(cls) -> TagKind:
        """Create a Wine GE TagKind."""
        return cls.WINE

    @classmethod
    def lol(cls) -> TagKind:
        """Create a Wine GE LoL TagKind."""
        return cls.LOL_WINE

    @classmethod
    def values(cls) -> list[TagKind]:
        """Return all kinds in declaration order."""
        return list(cls)

    @classmethod
    def from_wine_kind(cls, wine_kind: WineTagKind) -> TagKind:
        return cls(wine_kind.value)

    @classmethod
    def from_str(cls, token: str) -> TagKind:
        """Map a canonical token ("PROTON", "WINE", "LOL_WINE") to a kind.

        The match is exact and case-sensitive.

        Raises:
            TagKindError: If ``token`` is not a canonical token.

        """
        try:
            return cls(token)
        except ValueError as err:
            raise TagKindError(
                f"Could not create TagKind from {token!r}. "
                f"Expected one of: {', '.join(k.value for k in cls)}"
            ) from err

    @property
    def token(self) -> str:
        """The 1:1 string representation of the kind."""
        return self.value

    @property
    def wine_kind(self) -> WineTagKind | None:
        """The Wine GE flavor, or None for Proton."""
        if self is TagKind.PROTON:
            return None
        return WineTagKind(self.value)

    @property
    def compatibility_tool_name(self) -> str:
        """Human readable tool name, e.g. "Wine GE (LoL)"."""
        return _TOOL_NAMES[self]

    @property
    def compatibility_tool_kind(self) -> str:
        """Human readable tool kind, "Proton" or "Wine"."""
        return "Proton" if self is TagKind.PROTON else "Wine"

    @property
    def repository(self) -> str:
        """GitHub repository ("owner/name") publishing this kind."""
        return PROTON_GE_REPO if self is TagKind.PROTON else WINE_GE_REPO

    def owns_tag(self, tag: str) -> bool:
        """Return True if a release tag of :attr:`repository` belongs to this kind.

        Proton GE owns every tag of its repository. The Wine GE repository
        publishes both flavors, they are told apart by the LoL marker.
        """
        wine_kind = self.wine_kind
        if wine_kind is None:
            return True
        return WineTagKind.for_tag(tag) is wine_kind

    def to_dict(self) -> dict[str, Any]:
        wine_kind = self.wine_kind
        if wine_kind is None:
            return {"type": "Proton"}
        return {"type": "Wine", "kind": wine_kind.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TagKind:
        """Rebuild a kind from its tagged-union form.

        Raises:
            TagKindError: If ``data`` is not an object, or the discriminator
                or the Wine flavor is unknown.

        """
        if not isinstance(data, dict):
            raise TagKindError(f"TagKind must be an object, got {data!r}")
        kind_type = data.get("type")
        if kind_type == "Proton":
            return cls.PROTON
        if kind_type == "Wine":
            return cls.from_wine_kind(WineTagKind.from_dict(data.get("kind") or {}))
        raise TagKindError(f"Unknown TagKind type: {kind_type!r}")


_TOOL_NAMES = {
    TagKind.PROTON: "Proton GE",
    TagKind.WINE: "Wine GE",
    TagKind.LOL_WINE: "Wine GE (LoL)",
}
