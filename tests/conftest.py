"""
Pytest configuration and shared fixtures for gefetch tests.

This module provides reusable fixtures and test utilities used across
the test suite: GitHub release payloads and the matching API and download
URLs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from gefetch.config import load_config
from gefetch.releases import GitHubClient

API_URL = "https://api.github.com"
PROTON_RELEASES_URL = f"{API_URL}/repos/GloriousEggroll/proton-ge-custom/releases"
WINE_RELEASES_URL = f"{API_URL}/repos/GloriousEggroll/wine-ge-custom/releases"
PROTON_TAGS_URL = f"{API_URL}/repos/GloriousEggroll/proton-ge-custom/tags"

DOWNLOAD_BASE = "https://github.com/GloriousEggroll"


def make_release(
    tag: str,
    repo: str = "proton-ge-custom",
    extension: str = "tar.gz",
    content_type: str = "application/gzip",
    with_checksum: bool = True,
) -> dict[str, Any]:
    """Build a GitHub releases API object for ``tag``."""
    base = f"{DOWNLOAD_BASE}/{repo}/releases/download/{tag}"
    assets = [
        {
            "name": f"{tag}.tar.gz" if extension == "tar.gz" else f"{tag}.{extension}",
            "content_type": content_type,
            "browser_download_url": f"{base}/{tag}.{extension}",
        }
    ]
    if with_checksum:
        assets.append(
            {
                "name": f"{tag}.sha512sum",
                "content_type": "application/octet-stream",
                "browser_download_url": f"{base}/{tag}.sha512sum",
            }
        )
    return {"tag_name": tag, "prerelease": False, "assets": assets}


def make_wine_release(tag: str, with_checksum: bool = True) -> dict[str, Any]:
    name = f"wine-lutris-{tag}-x86_64"
    base = f"{DOWNLOAD_BASE}/wine-ge-custom/releases/download/{tag}"
    assets = [
        {
            "name": f"{name}.tar.xz",
            "content_type": "application/x-xz",
            "browser_download_url": f"{base}/{name}.tar.xz",
        }
    ]
    if with_checksum:
        assets.append(
            {
                "name": f"{name}.sha512sum",
                "content_type": "application/octet-stream",
                "browser_download_url": f"{base}/{name}.sha512sum",
            }
        )
    return {"tag_name": tag, "assets": assets}


@pytest.fixture
def proton_releases() -> list[dict[str, Any]]:
    """GE Proton releases, newest first as GitHub lists them."""
    return [
        make_release("GE-Proton8-25"),
        make_release("GE-Proton8-24"),
        make_release("GE-Proton7-20"),
        make_release("7.0rc3-GE-1"),
        make_release("6.21-GE-2"),
    ]


@pytest.fixture
def wine_releases() -> list[dict[str, Any]]:
    """Wine GE releases of both flavors from the shared repository."""
    return [
        make_wine_release("GE-Proton8-26"),
        make_wine_release("7.0-GE-5-LoL"),
        make_wine_release("GE-Proton8-25"),
        make_wine_release("6.16-GE-3-LoL"),
    ]


@pytest.fixture
def client() -> GitHubClient:
    """GitHub client with the default configuration."""
    return GitHubClient(load_config())


@pytest.fixture
def create_config_file(tmp_path: Path):
    """
    Factory fixture for creating temporary YAML config files.

    Usage:
        path = create_config_file("github:\\n  per_page: 5\\n")
    """

    def _create(text: str, filename: str = "gefetch.yaml") -> Path:
        path = tmp_path / filename
        path.write_text(text, encoding="utf-8")
        return path

    return _create
