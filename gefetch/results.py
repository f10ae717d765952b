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

"""Public API return types for gefetch.

The download flow hands these values to the caller, which owns them from
then on (typically to verify the checksum and extract the archive).

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using result types:
        ```python
        from gefetch.kinds import TagKind
        from gefetch.releases import DownloadRequest, download_release_assets

        assets = download_release_assets(DownloadRequest(TagKind.proton()))
        print(assets.tag)                    # 'GE-Proton8-25'
        print(assets.archive.file_name)      # 'GE-Proton8-25.tar.gz'
        if assets.checksum is not None:
            print(assets.checksum.checksum)  # 'a1b2...  GE-Proton8-25.tar.gz'
        ```
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DownloadedArchive:
    """The compressed archive of a compatibility tool.

    GE Proton ships ``.tar.gz`` archives, Wine GE ships ``.tar.xz``.

    Attributes:
        content: The compressed archive bytes.
        file_name: Asset file name (e.g., "GE-Proton8-25.tar.gz").
    """

    content: bytes = field(repr=False)
    file_name: str


@dataclass(frozen=True)
class DownloadedChecksum:
    """The published checksum file of an archive.

    Attributes:
        checksum: Text of the ``sha512sum`` file as published.
        file_name: Asset file name (e.g., "GE-Proton8-25.sha512sum").
    """

    checksum: str
    file_name: str


@dataclass(frozen=True)
class DownloadedAssets:
    """Assets of a GE Proton or Wine GE release.

    Attributes:
        tag: Tag name of the release.
        archive: The compressed archive.
        checksum: The checksum file, or None if it was not requested.
    """

    tag: str
    archive: DownloadedArchive
    checksum: DownloadedChecksum | None = None
