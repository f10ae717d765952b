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

"""GitHub release metadata for gefetch.

Only the tag name and the assets of a release matter. Each GE release
carries one compressed archive and one ``sha512sum`` checksum file; the two
are told apart by the content type GitHub reports for them:

- application/gzip: GE Proton archives (.tar.gz)
- application/x-xz: Wine GE archives (.tar.xz)
- application/octet-stream: checksum files (.sha512sum)

Any other asset is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from gefetch.exceptions import (
    MissingAssetError,
    NetworkError,
    ReleaseHasNoAssetsError,
)
from gefetch.versioning import Tag

APPLICATION_GZIP = "application/gzip"
APPLICATION_XZ = "application/x-xz"
APPLICATION_OCTET_STREAM = "application/octet-stream"

ARCHIVE_CONTENT_TYPES: tuple[str, ...] = (APPLICATION_GZIP, APPLICATION_XZ)
CHECKSUM_CONTENT_TYPES: tuple[str, ...] = (APPLICATION_OCTET_STREAM,)


@dataclass(frozen=True)
class ReleaseAsset:
    """A downloadable file attached to a GitHub release.

    Attributes:
        name: File name of the asset.
        content_type: MIME type reported by GitHub.
        download_url: The asset's browser_download_url.

    """

    name: str
    content_type: str
    download_url: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ReleaseAsset:
        return cls(
            name=data["name"],
            content_type=data["content_type"],
            download_url=data["browser_download_url"],
        )


@dataclass(frozen=True)
class Release:
    """A GitHub release: its tag name and assets.

    Attributes:
        tag_name: The raw release tag (e.g., "GE-Proton8-25").
        assets: Assets in the order GitHub lists them.

    Example:
        ```python
        release = Release.from_api(response.json()[0])
        archive = release.archive_asset()
        checksum = release.checksum_asset()
        ```

    """

    tag_name: str
    assets: tuple[ReleaseAsset, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Release:
        """Build a release from a GitHub releases API object.

        Raises:
            NetworkError: If the object lacks ``tag_name``, ``assets`` or an
                asset field.

        """
        try:
            tag_name = data["tag_name"]
            assets = tuple(ReleaseAsset.from_api(a) for a in data["assets"])
        except (KeyError, TypeError) as err:
            raise NetworkError(
                f"Malformed release in GitHub response: missing or invalid field {err}"
            ) from err
        return cls(tag_name=tag_name, assets=assets)

    @property
    def tag(self) -> Tag:
        """The parsed tag of this release.

        Raises:
            TagParseError: If the tag is outside the supported dialects.

        """
        return Tag(self.tag_name)

    def _find_asset(self, content_types: tuple[str, ...], label: str) -> ReleaseAsset:
        if not self.assets:
            raise ReleaseHasNoAssetsError(f"Release {self.tag_name} has no assets")
        for asset in self.assets:
            if asset.content_type in content_types:
                return asset
        available = ", ".join(f"{a.name} ({a.content_type})" for a in self.assets)
        raise MissingAssetError(
            f"Release {self.tag_name} has no {label} asset with content type "
            f"{' or '.join(content_types)}. Available assets: {available}",
            tag=self.tag_name,
            content_types=content_types,
        )

    def checksum_asset(self) -> ReleaseAsset:
        """Return the first checksum (octet-stream) asset.

        Raises:
            ReleaseHasNoAssetsError: If the release has no assets.
            MissingAssetError: If no asset is an octet-stream.

        """
        return self._find_asset(CHECKSUM_CONTENT_TYPES, "checksum")

    def archive_asset(self) -> ReleaseAsset:
        """Return the first gzip or xz archive asset.

        Raises:
            ReleaseHasNoAssetsError: If the release has no assets.
            MissingAssetError: If no asset is a gzip or xz archive.

        """
        return self._find_asset(ARCHIVE_CONTENT_TYPES, "archive")
