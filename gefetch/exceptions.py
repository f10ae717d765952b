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

"""Exception hierarchy for gefetch.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- TagParseError: A release tag is outside the supported tag dialects
- TagKindError: A string does not name a known compatibility tool family
- ConfigError: Configuration file problems (missing file, YAML errors)
- NetworkError: GitHub API or download failures (transport, status, JSON)
- ReleaseError: The published release no longer has the expected shape
- StateError: The state file could not be used

All exceptions inherit from GEFetchError, allowing users to catch all gefetch
errors with a single except clause if needed.

Example:
    Skipping releases with unsupported tags:
        ```python
        from gefetch.exceptions import TagParseError
        from gefetch.versioning import Tag

        tags = []
        for name in names:
            try:
                tags.append(Tag(name))
            except TagParseError:
                continue
        ```

    Catching all gefetch errors:
        ```python
        from gefetch.exceptions import GEFetchError

        try:
            assets = download_release_assets(DownloadRequest(TagKind.proton()))
        except GEFetchError as e:
            print(f"gefetch error: {e}")
        ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import requests

__all__ = [
    "GEFetchError",
    "TagParseError",
    "TagKindError",
    "ConfigError",
    "NetworkError",
    "StatusNotOkError",
    "ReleaseError",
    "NoReleasesError",
    "ReleaseNotFoundError",
    "ReleaseHasNoAssetsError",
    "MissingAssetError",
    "StateError",
]


class GEFetchError(Exception):
    """Base exception for all gefetch errors."""

    pass


class TagParseError(GEFetchError):
    """Raised when a release tag cannot be turned into a semantic version.

    This exception is raised when:

    - The tag contains the release candidate marker "rc" but no version
      number follows it
    - A version component does not fit into the range 0..255

    It aborts the parse of a single tag only. Callers iterating over many
    releases can catch it and skip the offending tag.

    Attributes:
        tag: The raw tag string that failed to parse.
    """

    def __init__(self, message: str, tag: str) -> None:
        super().__init__(message)
        self.tag = tag


class TagKindError(GEFetchError):
    """Raised when a TagKind could not be created from the provided string."""

    pass


class ConfigError(GEFetchError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - Missing configuration files
    - YAML parsing (syntax errors, invalid structure)
    - Configuration values of the wrong type
    """

    pass


class NetworkError(GEFetchError):
    """Raised for GitHub API and download failures.

    This exception is raised when there are problems with:

    - Connection failures and timeouts
    - GitHub API responses that are not valid JSON or have the wrong shape
    - Asset downloads that fail midway

    Attributes:
        kind: The compatibility tool family of the request, if known.
        tag: The release tag of the request, if known.
    """

    def __init__(self, message: str, kind: Any = None, tag: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.tag = tag


class StatusNotOkError(NetworkError):
    """Raised when the GitHub API or a download answers with a non-200 status.

    The raw response is kept so the caller can inspect headers such as the
    rate limit reset time before deciding to retry.

    Attributes:
        response: The ``requests.Response`` that was not OK.
    """

    def __init__(
        self,
        message: str,
        response: requests.Response,
        kind: Any = None,
        tag: str | None = None,
    ) -> None:
        super().__init__(message, kind=kind, tag=tag)
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code


class ReleaseError(GEFetchError):
    """Raised when published releases do not have the expected shape.

    Unlike NetworkError this is not a transient condition: the publisher's
    output no longer matches what gefetch knows how to handle.
    """

    pass


class NoReleasesError(ReleaseError):
    """Raised when the GitHub API returned no releases for a family."""

    pass


class ReleaseNotFoundError(ReleaseError):
    """Raised when a requested tag is not among the fetched releases."""

    pass


class ReleaseHasNoAssetsError(ReleaseError):
    """Raised when a release has no assets at all."""

    pass


class MissingAssetError(ReleaseError):
    """Raised when a release lacks the archive or checksum asset.

    Attributes:
        tag: Tag name of the release.
        content_types: The content types that were searched for.
    """

    def __init__(self, message: str, tag: str, content_types: tuple[str, ...]) -> None:
        super().__init__(message)
        self.tag = tag
        self.content_types = content_types


class StateError(GEFetchError):
    """Raised when the state file is corrupted or cannot be interpreted."""

    pass
