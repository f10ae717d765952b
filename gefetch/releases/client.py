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

"""GitHub HTTP client for gefetch.

Thin transport layer between the release resolution logic and GitHub. It
knows the endpoints and how to turn HTTP failures into gefetch exceptions,
nothing about tags or assets beyond decoding them.

Endpoints:

- ``GET {api_url}/repos/{repo}/releases?per_page=N&page=P``: release list,
  newest first
- ``GET {api_url}/repos/{repo}/tags?per_page=N&page=P``: tag names
- ``GET {browser_download_url}``: asset content (redirects to GitHub's CDN)

Failure mapping:

- Connection errors and timeouts -> NetworkError
- Any status other than 200 -> StatusNotOkError (keeps the response)
- Invalid JSON or unexpected payload shape -> NetworkError

The session retries transient statuses (429, 5xx) at the adapter level, as
configured by ``http.retries``. Nothing above this module retries.

Rate Limits:

- Unauthenticated: 60 requests/hour per IP
- Authenticated: 5000 requests/hour per token (``github.token``)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from gefetch.config import load_config
from gefetch.exceptions import NetworkError, StatusNotOkError
from gefetch.kinds import TagKind

from .models import Release

# Stream size per chunk (1 MiB).
DEFAULT_CHUNK = 1024 * 1024

GITHUB_API_HEADERS = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}

ProgressCallback = Callable[[int, int], None]


def make_session(
    user_agent: str, retries: int = 3, token: str | None = None
) -> requests.Session:
    """
    Create a requests.Session for GitHub API calls and asset downloads.

    - Retries on common transient status codes with exponential backoff.
    - Sets a User-Agent, GitHub rejects requests without one.
    - Authenticates with ``token`` when given.
    """
    s = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
        raise_on_status=False,
    )
    s.headers.update({"User-Agent": user_agent})
    if token:
        s.headers["Authorization"] = f"token {token}"
    s.mount("http://", HTTPAdapter(max_retries=retry))
    s.mount("https://", HTTPAdapter(max_retries=retry))
    return s


class GitHubClient:
    """Fetches GE release metadata and assets from GitHub.

    Args:
        config: Effective configuration (see gefetch.config). Defaults to
            the built-in configuration.
        session: Session to use instead of one built by make_session.

    Example:
        ```python
        client = GitHubClient()
        releases = client.fetch_release_list(TagKind.proton())
        archive = client.fetch_bytes(releases[0].archive_asset().download_url)
        ```

    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if config is None:
            config = load_config()
        github = config["github"]
        http = config["http"]

        self.api_url: str = github["api_url"].rstrip("/")
        self.per_page: int = github["per_page"]
        self.max_pages: int = github["max_pages"]
        self.timeout: int = http["timeout"]
        self.session = session or make_session(
            http["user_agent"], retries=http["retries"], token=github.get("token")
        )

    def releases_url(self, kind: TagKind) -> str:
        return f"{self.api_url}/repos/{kind.repository}/releases"

    def tags_url(self, kind: TagKind) -> str:
        return f"{self.api_url}/repos/{kind.repository}/tags"

    def _get(
        self,
        url: str,
        kind: TagKind | None = None,
        tag: str | None = None,
        **kwargs: Any,
    ) -> requests.Response:
        what = f"{kind.compatibility_tool_name} " if kind is not None else ""
        try:
            response = self.session.get(url, timeout=self.timeout, **kwargs)
            if response.status_code != 200:
                # Keep the error body of streamed responses on the exception.
                _ = response.content
        except requests.RequestException as err:
            raise NetworkError(
                f"Failed to fetch {what}resource {url}: {err}", kind=kind, tag=tag
            ) from err

        if response.status_code != 200:
            response.close()
            hint = ""
            if response.status_code == 403:
                hint = " (GitHub API rate limit exceeded? Consider using a token)"
            raise StatusNotOkError(
                f"HTTP response status for {what}resource {url} was not OK (200): "
                f"{response.status_code} {response.reason}{hint}",
                response=response,
                kind=kind,
                tag=tag,
            )
        return response

    def _get_json_list(self, url: str, kind: TagKind, page: int) -> list[Any]:
        response = self._get(
            url,
            kind=kind,
            params={"per_page": self.per_page, "page": page},
            headers=GITHUB_API_HEADERS,
        )
        try:
            data = response.json()
        except ValueError as err:
            raise NetworkError(
                f"GitHub response from {url} is not valid JSON", kind=kind
            ) from err
        if not isinstance(data, list):
            raise NetworkError(
                f"GitHub response from {url} is not a list", kind=kind
            )
        return data

    def fetch_release_list(self, kind: TagKind, page: int = 1) -> list[Release]:
        """Fetch one page of releases of ``kind``'s repository, newest first.

        The list is not filtered by kind: Wine GE and Wine GE LoL releases
        come from the same repository.

        Raises:
            NetworkError: On transport failures or malformed responses.
            StatusNotOkError: If GitHub does not answer 200.

        """
        url = self.releases_url(kind)
        data = self._get_json_list(url, kind, page)
        try:
            return [Release.from_api(item) for item in data]
        except NetworkError as err:
            raise NetworkError(str(err), kind=kind) from err

    def fetch_release_tags(self, kind: TagKind, page: int = 1) -> list[str]:
        """Fetch one page of tag names of ``kind``'s repository.

        Raises:
            NetworkError: On transport failures or malformed responses.
            StatusNotOkError: If GitHub does not answer 200.

        """
        url = self.tags_url(kind)
        data = self._get_json_list(url, kind, page)
        try:
            return [item["name"] for item in data]
        except (KeyError, TypeError) as err:
            raise NetworkError(
                f"Malformed tag in GitHub response from {url}: {err}", kind=kind
            ) from err

    def fetch_bytes(
        self,
        url: str,
        progress: ProgressCallback | None = None,
        kind: TagKind | None = None,
        tag: str | None = None,
    ) -> bytes:
        """Download ``url`` into memory.

        Args:
            url: Asset download URL.
            progress: Called with ``(downloaded, total)`` after every chunk.
                ``total`` is 0 when the server sends no Content-Length.
            kind: Kind of the release, for error context.
            tag: Tag of the release, for error context.

        Raises:
            NetworkError: On transport failures, also midway through the
                body.
            StatusNotOkError: If the final response is not 200.

        """
        response = self._get(url, kind=kind, tag=tag, stream=True)
        try:
            total = int(response.headers.get("Content-Length", 0))
        except ValueError:
            total = 0
        chunks: list[bytes] = []
        downloaded = 0
        try:
            for chunk in response.iter_content(chunk_size=DEFAULT_CHUNK):
                if not chunk:
                    continue
                chunks.append(chunk)
                downloaded += len(chunk)
                if progress is not None:
                    progress(downloaded, total)
        except requests.RequestException as err:
            raise NetworkError(
                f"Download of {url} failed after {downloaded} bytes: {err}",
                kind=kind,
                tag=tag,
            ) from err
        finally:
            response.close()
        return b"".join(chunks)

    def fetch_text(
        self, url: str, kind: TagKind | None = None, tag: str | None = None
    ) -> str:
        """Download ``url`` and decode it as text.

        Raises:
            NetworkError: On transport failures.
            StatusNotOkError: If the final response is not 200.

        """
        response = self._get(url, kind=kind, tag=tag)
        # GitHub serves assets without a charset.
        response.encoding = response.encoding or "utf-8"
        return response.text
