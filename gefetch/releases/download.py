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

"""Release selection and asset download for gefetch.

This module ties the pieces together: it asks the GitHub client for the
release list of a family, picks a release, resolves its archive and checksum
assets and downloads them.

Release Selection:

- Latest: the first release of the family in the order GitHub returns them
  (newest first). The order is trusted, not re-derived from tag versions.
- Explicit tag: the first release whose tag name equals the requested tag.

Wine GE and Wine GE LoL share one repository; releases are filtered with
TagKind.owns_tag before selecting. Further pages of the release list are
requested while the wanted release has not turned up (see fetch_releases).

Downloads are sequential (release list, archive, checksum) and nothing is
retried here. Either a complete DownloadedAssets is returned or an exception
is raised. The checksum is NOT verified against the archive; that is up to
the caller (see gefetch.checksum).

Example:
    Download the latest GE Proton with its checksum:
        ```python
        from gefetch.kinds import TagKind
        from gefetch.releases import DownloadRequest, download_release_assets

        assets = download_release_assets(DownloadRequest(TagKind.proton()))
        Path(assets.archive.file_name).write_bytes(assets.archive.content)
        ```

    Download a specific Wine GE release without checksum:
        ```python
        request = DownloadRequest(
            TagKind.wine(), tag="GE-Proton8-26", download_checksum=False
        )
        assets = download_release_assets(request)
        ```
"""

from __future__ import annotations

from dataclasses import dataclass
import functools

from gefetch.exceptions import (
    NoReleasesError,
    ReleaseNotFoundError,
    TagParseError,
)
from gefetch.kinds import TagKind
from gefetch.logging import Logger, format_size, get_global_logger
from gefetch.results import DownloadedArchive, DownloadedAssets, DownloadedChecksum
from gefetch.versioning import Tag, sort_tags

from .client import GitHubClient, ProgressCallback
from .models import Release


@dataclass(frozen=True)
class DownloadRequest:
    """What to download.

    Attributes:
        kind: The compatibility tool family.
        tag: Exact release tag, or None for the latest release.
        download_checksum: Also download the checksum file.
    """

    kind: TagKind
    tag: str | None = None
    download_checksum: bool = True


def _has_wanted(releases: list[Release], tag: str | None) -> bool:
    if tag is None:
        return bool(releases)
    return any(r.tag_name == tag for r in releases)


def fetch_releases(
    kind: TagKind,
    client: GitHubClient | None = None,
    logger: Logger | None = None,
    tag: str | None = None,
) -> list[Release]:
    """Fetch the releases belonging to ``kind``, in GitHub order.

    Wine GE and Wine GE LoL share a repository, so one page may hold no
    release of ``kind`` at all. Pages are requested until a release of
    ``kind`` (or the release tagged ``tag``) turns up, GitHub returns a short
    or empty page, or ``github.max_pages`` pages have been read.

    Raises:
        NetworkError: If the GitHub API call fails.
        NoReleasesError: If no release of ``kind`` was returned.

    """
    client = client or GitHubClient()
    logger = logger or get_global_logger()

    owned: list[Release] = []
    page = 1
    while True:
        logger.verbose(
            "GITHUB", f"Fetching releases page {page}: {client.releases_url(kind)}"
        )
        releases = client.fetch_release_list(kind, page=page)
        page_owned = [r for r in releases if kind.owns_tag(r.tag_name)]
        owned.extend(page_owned)
        logger.verbose(
            "GITHUB",
            f"Received {len(releases)} release(s), {len(page_owned)} for "
            f"{kind.compatibility_tool_name}",
        )
        if _has_wanted(owned, tag):
            break
        if not releases or len(releases) < client.per_page:
            break
        if page >= client.max_pages:
            logger.verbose("GITHUB", f"Stopping after {page} page(s)")
            break
        page += 1

    if not owned:
        raise NoReleasesError(
            f"No {kind.compatibility_tool_name} releases found in "
            f"{kind.repository}"
        )
    return owned


def select_release(releases: list[Release], tag: str | None) -> Release:
    """Pick the latest release (first in list) or the one tagged ``tag``.

    Raises:
        NoReleasesError: If ``releases`` is empty.
        ReleaseNotFoundError: If no release is tagged ``tag``.

    """
    if not releases:
        raise NoReleasesError("No releases to select from")
    if tag is None:
        return releases[0]
    for release in releases:
        if release.tag_name == tag:
            return release
    available = ", ".join(r.tag_name for r in releases[:10])
    raise ReleaseNotFoundError(
        f"No release tagged {tag!r}. Recent releases: {available}"
    )


def latest_tag(
    kind: TagKind,
    client: GitHubClient | None = None,
    logger: Logger | None = None,
) -> Tag:
    """Return the tag of the latest release of ``kind``.

    Raises:
        NetworkError: If the GitHub API call fails.
        NoReleasesError: If no release of ``kind`` exists.
        TagParseError: If the latest tag is outside the supported dialects.

    """
    return select_release(fetch_releases(kind, client, logger), None).tag


def fetch_tags(
    kind: TagKind,
    client: GitHubClient | None = None,
    logger: Logger | None = None,
) -> list[Tag]:
    """Return the release tags of ``kind`` sorted newest first by version.

    Tags that cannot be parsed are skipped (and logged) rather than failing
    the whole listing.

    Raises:
        NetworkError: If the GitHub API call fails.
        NoReleasesError: If no release of ``kind`` exists.

    """
    logger = logger or get_global_logger()
    tags: list[Tag] = []
    for release in fetch_releases(kind, client, logger):
        try:
            tags.append(release.tag)
        except TagParseError as err:
            logger.verbose("TAG", f"Skipping release {release.tag_name}: {err}")
    return sort_tags(tags)


def download_release_assets(
    request: DownloadRequest,
    client: GitHubClient | None = None,
    logger: Logger | None = None,
    progress: ProgressCallback | None = None,
) -> DownloadedAssets:
    """Download the archive (and checksum) of a GE release.

    Args:
        request: Kind, tag (None for latest) and whether to fetch the
            checksum.
        client: GitHub client. A default client is created if omitted.
        logger: Logger. The global logger is used if omitted.
        progress: Optional archive download progress callback receiving
            ``(downloaded, total)``. Defaults to the logger's progress
            output.

    Returns:
        The tag name, archive bytes and file name, and the checksum text
        and file name when requested.

    Raises:
        NetworkError: If an API call or download fails (StatusNotOkError
            for non-200 responses).
        NoReleasesError: If GitHub returned no release of the kind.
        ReleaseNotFoundError: If the requested tag does not exist.
        ReleaseHasNoAssetsError: If the release has no assets.
        MissingAssetError: If the archive or requested checksum asset is
            missing.

    """
    client = client or GitHubClient()
    logger = logger or get_global_logger()
    kind = request.kind
    total_steps = 3 if request.download_checksum else 2
    wanted = request.tag or "latest"

    logger.step(
        1, total_steps, f"Resolving {kind.compatibility_tool_name} release ({wanted})..."
    )
    release = select_release(
        fetch_releases(kind, client, logger, tag=request.tag), request.tag
    )
    logger.verbose("RELEASE", f"Selected release: {release.tag_name}")

    archive_asset = release.archive_asset()
    checksum_asset = release.checksum_asset() if request.download_checksum else None
    logger.verbose("RELEASE", f"Archive asset: {archive_asset.name}")
    if checksum_asset is not None:
        logger.verbose("RELEASE", f"Checksum asset: {checksum_asset.name}")

    logger.step(2, total_steps, f"Downloading {archive_asset.name}...")
    logger.debug("HTTP", f"GET {archive_asset.download_url}")
    if progress is None:
        progress = functools.partial(logger.progress, archive_asset.name)
    content = client.fetch_bytes(
        archive_asset.download_url, progress=progress, kind=kind, tag=release.tag_name
    )
    logger.verbose("RELEASE", f"Downloaded {format_size(len(content))}")
    archive = DownloadedArchive(content=content, file_name=archive_asset.name)

    checksum = None
    if checksum_asset is not None:
        logger.step(3, total_steps, f"Downloading {checksum_asset.name}...")
        logger.debug("HTTP", f"GET {checksum_asset.download_url}")
        text = client.fetch_text(
            checksum_asset.download_url, kind=kind, tag=release.tag_name
        )
        checksum = DownloadedChecksum(checksum=text, file_name=checksum_asset.name)

    return DownloadedAssets(tag=release.tag_name, archive=archive, checksum=checksum)
