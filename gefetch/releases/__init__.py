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

"""GE release metadata, GitHub access and asset downloads.

Public API:

- Release, ReleaseAsset: GitHub release metadata and asset resolution
- GitHubClient: HTTP access to the GitHub releases API and assets
- DownloadRequest, download_release_assets: download a release's archive
  and checksum
- fetch_releases, select_release, fetch_tags, latest_tag: release listing
  and selection

Example:
    ```python
    from gefetch.kinds import TagKind
    from gefetch.releases import fetch_tags

    for tag in fetch_tags(TagKind.lol()):
        print(tag, tag.semver)
    ```
"""

from .client import GitHubClient, make_session
from .download import (
    DownloadRequest,
    download_release_assets,
    fetch_releases,
    fetch_tags,
    latest_tag,
    select_release,
)
from .models import (
    APPLICATION_GZIP,
    APPLICATION_OCTET_STREAM,
    APPLICATION_XZ,
    Release,
    ReleaseAsset,
)

__all__ = [
    "APPLICATION_GZIP",
    "APPLICATION_OCTET_STREAM",
    "APPLICATION_XZ",
    "DownloadRequest",
    "GitHubClient",
    "Release",
    "ReleaseAsset",
    "download_release_assets",
    "fetch_releases",
    "fetch_tags",
    "latest_tag",
    "make_session",
    "select_release",
]
