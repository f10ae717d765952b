"""
Tests for gefetch.releases.download module.

Tests the download flow including:
- Latest and explicit tag selection
- Wine GE / Wine GE LoL filtering in the shared repository
- Optional checksum downloads
- Failure propagation without partial results
- Tag listing and latest tag lookup
"""

from __future__ import annotations

import pytest
import requests_mock

from gefetch.config import load_config
from gefetch.exceptions import (
    MissingAssetError,
    NoReleasesError,
    ReleaseNotFoundError,
    StatusNotOkError,
)
from gefetch.kinds import TagKind
from gefetch.releases import (
    DownloadRequest,
    GitHubClient,
    Release,
    download_release_assets,
    fetch_releases,
    fetch_tags,
    latest_tag,
    select_release,
)
from gefetch.versioning import Tag

from conftest import (
    PROTON_RELEASES_URL,
    WINE_RELEASES_URL,
    make_release,
    make_wine_release,
)

ARCHIVE = b"\x1f\x8b archive bytes"
CHECKSUM = "0123abcd  GE-Proton8-25.tar.gz\n"


def _register_assets(m: requests_mock.Mocker, release: dict) -> None:
    """Serve archive and checksum content for every asset of ``release``."""
    for asset in release["assets"]:
        url = asset["browser_download_url"]
        if asset["name"].endswith(".sha512sum"):
            m.get(url, content=CHECKSUM.encode("utf-8"))
        else:
            m.get(url, content=ARCHIVE, headers={"Content-Length": str(len(ARCHIVE))})


class RecordingLogger:
    """Logger that records steps and progress."""

    def __init__(self):
        self.steps = []
        self.progress_calls = []

    def step(self, current, total, message):
        self.steps.append((current, total, message))

    def verbose(self, prefix, message):
        pass

    def debug(self, prefix, message):
        pass

    def progress(self, label, downloaded, total):
        self.progress_calls.append((label, downloaded, total))


class TestSelectRelease:
    """Tests for select_release."""

    def test_latest_is_first(self, proton_releases):
        releases = [Release.from_api(r) for r in proton_releases]

        assert select_release(releases, None).tag_name == "GE-Proton8-25"

    def test_exact_tag(self, proton_releases):
        releases = [Release.from_api(r) for r in proton_releases]

        assert select_release(releases, "7.0rc3-GE-1").tag_name == "7.0rc3-GE-1"

    def test_tag_match_is_exact(self, proton_releases):
        """Test that an equal version with another spelling does not match."""
        releases = [Release.from_api(r) for r in proton_releases]

        with pytest.raises(ReleaseNotFoundError, match="Proton-6.21-GE-2"):
            select_release(releases, "Proton-6.21-GE-2")

    def test_empty_list_raises(self):
        with pytest.raises(NoReleasesError):
            select_release([], "GE-Proton8-25")


class TestFetchReleases:
    """Tests for fetching releases of one kind."""

    def test_proton_keeps_all(self, client, proton_releases):
        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=proton_releases)
            releases = fetch_releases(TagKind.proton(), client)

        assert len(releases) == 5

    def test_wine_excludes_lol(self, client, wine_releases):
        with requests_mock.Mocker() as m:
            m.get(WINE_RELEASES_URL, json=wine_releases)
            releases = fetch_releases(TagKind.wine(), client)

        assert [r.tag_name for r in releases] == ["GE-Proton8-26", "GE-Proton8-25"]

    def test_lol_only(self, client, wine_releases):
        with requests_mock.Mocker() as m:
            m.get(WINE_RELEASES_URL, json=wine_releases)
            releases = fetch_releases(TagKind.lol(), client)

        assert [r.tag_name for r in releases] == ["7.0-GE-5-LoL", "6.16-GE-3-LoL"]

    def test_empty_list_raises(self, client):
        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=[])
            with pytest.raises(NoReleasesError, match="Proton GE"):
                fetch_releases(TagKind.proton(), client)

    def test_lol_release_on_second_page(self, client):
        """Test that paging continues while a page holds no release of the kind."""
        plain = [make_wine_release(f"GE-Proton8-{n}") for n in range(30, 0, -1)]

        with requests_mock.Mocker() as m:
            m.get(f"{WINE_RELEASES_URL}?page=1", json=plain)
            m.get(
                f"{WINE_RELEASES_URL}?page=2",
                json=[make_wine_release("7.0-GE-5-LoL")],
            )
            releases = fetch_releases(TagKind.lol(), client)

        assert [r.tag_name for r in releases] == ["7.0-GE-5-LoL"]
        assert [r.qs["page"] for r in m.request_history] == [["1"], ["2"]]

    def test_explicit_tag_on_second_page(self, client):
        page_one = [make_release(f"GE-Proton8-{n}") for n in range(30, 0, -1)]

        with requests_mock.Mocker() as m:
            m.get(f"{PROTON_RELEASES_URL}?page=1", json=page_one)
            m.get(f"{PROTON_RELEASES_URL}?page=2", json=[make_release("GE-Proton7-55")])
            releases = fetch_releases(TagKind.proton(), client, tag="GE-Proton7-55")

        assert select_release(releases, "GE-Proton7-55").tag_name == "GE-Proton7-55"
        assert m.call_count == 2

    def test_latest_stops_after_first_owned_page(self, client):
        page_one = [make_release(f"GE-Proton8-{n}") for n in range(30, 0, -1)]

        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=page_one)
            fetch_releases(TagKind.proton(), client)

        assert m.call_count == 1

    def test_empty_page_ends_paging(self, client):
        plain = [make_wine_release(f"GE-Proton8-{n}") for n in range(30, 0, -1)]

        with requests_mock.Mocker() as m:
            m.get(f"{WINE_RELEASES_URL}?page=1", json=plain)
            m.get(f"{WINE_RELEASES_URL}?page=2", json=[])
            with pytest.raises(NoReleasesError):
                fetch_releases(TagKind.lol(), client)

        assert m.call_count == 2

    def test_paging_stops_at_max_pages(self):
        config = load_config()
        config["github"]["max_pages"] = 3
        client = GitHubClient(config)
        plain = [make_wine_release(f"GE-Proton8-{n}") for n in range(30, 0, -1)]

        with requests_mock.Mocker() as m:
            m.get(WINE_RELEASES_URL, json=plain)
            with pytest.raises(NoReleasesError):
                fetch_releases(TagKind.lol(), client)

        assert m.call_count == 3

    def test_download_lol_from_second_page(self, client):
        plain = [make_wine_release(f"GE-Proton8-{n}") for n in range(30, 0, -1)]
        lol = make_wine_release("7.0-GE-5-LoL")

        with requests_mock.Mocker() as m:
            m.get(f"{WINE_RELEASES_URL}?page=1", json=plain)
            m.get(f"{WINE_RELEASES_URL}?page=2", json=[lol])
            _register_assets(m, lol)
            assets = download_release_assets(
                DownloadRequest(TagKind.lol()), client=client
            )

        assert assets.tag == "7.0-GE-5-LoL"

    def test_no_release_of_flavor_raises(self, client):
        """Test that a Wine list without LoL releases has none for LoL."""
        with requests_mock.Mocker() as m:
            m.get(WINE_RELEASES_URL, json=[make_wine_release("GE-Proton8-26")])
            with pytest.raises(NoReleasesError):
                fetch_releases(TagKind.lol(), client)


class TestDownloadReleaseAssets:
    """Tests for download_release_assets."""

    def test_latest_with_checksum(self, client, proton_releases):
        """Test downloading the latest release and its checksum."""
        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=proton_releases)
            _register_assets(m, proton_releases[0])
            assets = download_release_assets(
                DownloadRequest(TagKind.proton()), client=client
            )

        assert assets.tag == "GE-Proton8-25"
        assert assets.archive.content == ARCHIVE
        assert assets.archive.file_name == "GE-Proton8-25.tar.gz"
        assert assets.checksum is not None
        assert assets.checksum.checksum == CHECKSUM
        assert assets.checksum.file_name == "GE-Proton8-25.sha512sum"

    def test_explicit_tag(self, client, proton_releases):
        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=proton_releases)
            _register_assets(m, proton_releases[2])
            assets = download_release_assets(
                DownloadRequest(TagKind.proton(), tag="GE-Proton7-20"), client=client
            )

        assert assets.tag == "GE-Proton7-20"
        assert assets.archive.file_name == "GE-Proton7-20.tar.gz"

    def test_without_checksum(self, client, proton_releases):
        """Test that the checksum URL is never requested when not wanted."""
        checksum_url = proton_releases[0]["assets"][1]["browser_download_url"]

        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=proton_releases)
            _register_assets(m, proton_releases[0])
            assets = download_release_assets(
                DownloadRequest(TagKind.proton(), download_checksum=False),
                client=client,
            )

        assert assets.checksum is None
        assert checksum_url not in [r.url for r in m.request_history]

    def test_without_checksum_tolerates_missing_checksum_asset(self, client):
        release = make_release("GE-Proton8-25", with_checksum=False)

        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=[release])
            _register_assets(m, release)
            assets = download_release_assets(
                DownloadRequest(TagKind.proton(), download_checksum=False),
                client=client,
            )

        assert assets.archive.content == ARCHIVE

    def test_lol_release(self, client, wine_releases):
        """Test that LoL downloads skip the newer plain Wine GE release."""
        with requests_mock.Mocker() as m:
            m.get(WINE_RELEASES_URL, json=wine_releases)
            _register_assets(m, wine_releases[1])
            assets = download_release_assets(
                DownloadRequest(TagKind.lol()), client=client
            )

        assert assets.tag == "7.0-GE-5-LoL"
        assert assets.archive.file_name == "wine-lutris-7.0-GE-5-LoL-x86_64.tar.xz"

    def test_unknown_tag_raises(self, client, proton_releases):
        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=proton_releases)
            with pytest.raises(ReleaseNotFoundError):
                download_release_assets(
                    DownloadRequest(TagKind.proton(), tag="GE-Proton9-1"),
                    client=client,
                )

    def test_missing_checksum_fails_before_download(self, client):
        """Test that asset resolution happens before any download."""
        release = make_release("GE-Proton8-25", with_checksum=False)

        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=[release])
            _register_assets(m, release)
            with pytest.raises(MissingAssetError):
                download_release_assets(
                    DownloadRequest(TagKind.proton()), client=client
                )

        assert m.call_count == 1

    def test_archive_status_error(self, client, proton_releases):
        archive_url = proton_releases[0]["assets"][0]["browser_download_url"]

        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=proton_releases)
            m.get(archive_url, status_code=404)
            with pytest.raises(StatusNotOkError) as exc_info:
                download_release_assets(
                    DownloadRequest(TagKind.proton()), client=client
                )

        assert exc_info.value.tag == "GE-Proton8-25"

    def test_checksum_status_error(self, client, proton_releases):
        """Test that a failed checksum download yields no result at all."""
        release = proton_releases[0]
        archive_url = release["assets"][0]["browser_download_url"]
        checksum_url = release["assets"][1]["browser_download_url"]

        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=proton_releases)
            m.get(archive_url, content=ARCHIVE)
            m.get(checksum_url, status_code=502)
            with pytest.raises(StatusNotOkError):
                download_release_assets(
                    DownloadRequest(TagKind.proton()), client=client
                )

    def test_steps_logged(self, client, proton_releases):
        logger = RecordingLogger()

        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=proton_releases)
            _register_assets(m, proton_releases[0])
            download_release_assets(
                DownloadRequest(TagKind.proton()), client=client, logger=logger
            )

        assert [(c, t) for c, t, _ in logger.steps] == [(1, 3), (2, 3), (3, 3)]
        assert logger.progress_calls[-1] == (
            "GE-Proton8-25.tar.gz",
            len(ARCHIVE),
            len(ARCHIVE),
        )

    def test_progress_forwarded(self, client, proton_releases):
        calls = []

        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=proton_releases)
            _register_assets(m, proton_releases[0])
            download_release_assets(
                DownloadRequest(TagKind.proton(), download_checksum=False),
                client=client,
                progress=lambda d, t: calls.append((d, t)),
            )

        assert calls[-1] == (len(ARCHIVE), len(ARCHIVE))


class TestTags:
    """Tests for fetch_tags and latest_tag."""

    def test_fetch_tags_sorted_newest_first(self, client):
        releases = [
            make_release("6.21-GE-2"),
            make_release("GE-Proton8-25"),
            make_release("7.0rc3-GE-1"),
        ]

        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=releases)
            tags = fetch_tags(TagKind.proton(), client)

        assert [t.raw for t in tags] == ["GE-Proton8-25", "7.0rc3-GE-1", "6.21-GE-2"]

    def test_fetch_tags_skips_unparsable(self, client, proton_releases):
        """Test that one bad tag does not fail the listing."""
        releases = [make_release("rc-GE"), *proton_releases]

        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=releases)
            tags = fetch_tags(TagKind.proton(), client)

        assert len(tags) == 5
        assert "rc-GE" not in [t.raw for t in tags]

    def test_latest_tag_uses_api_order(self, client):
        """Test that the latest tag is the first listed, not the highest."""
        releases = [make_release("GE-Proton7-20"), make_release("GE-Proton8-25")]

        with requests_mock.Mocker() as m:
            m.get(PROTON_RELEASES_URL, json=releases)
            tag = latest_tag(TagKind.proton(), client)

        assert tag == Tag("GE-Proton7-20")
        assert tag.raw == "GE-Proton7-20"
