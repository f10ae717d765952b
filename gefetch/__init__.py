"""
gefetch - GE release resolver

A Python library and CLI for resolving and downloading GloriousEggroll's
compatibility tool builds (GE-Proton, Wine-GE and Wine-GE for League of
Legends) from their GitHub releases.

gefetch provides:
  - Normalization of free-form release tags into ordered semantic versions
  - Classification of tags into compatibility tool kinds
  - Release asset resolution (archive and checksum) by content type
  - Archive and checksum download from GitHub
  - Tracking of downloaded versions in a JSON state file

Quick Start
-----------
List GE Proton releases:

    $ gefetch tags PROTON

Download the latest Wine GE:

    $ gefetch download WINE --output-dir ./downloads

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
versioning : package
    Tag parsing, SemVer and ordering.
kinds : module
    TagKind and WineTagKind.
releases : package
    GitHub client, release models and the download flow.
checksum : module
    Checksum file parsing and comparison.
config : package
    YAML configuration loading.
state : package
    Downloaded version tracking.

Public API
----------
    from gefetch.versioning import Tag, SemVer
    from gefetch.kinds import TagKind
    from gefetch.releases import DownloadRequest, download_release_assets

Project Information
-------------------
Author: Roger Cibrian
License: Apache-2.0
"""

__version__ = "0.2.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Resolve and download GE-Proton and Wine-GE releases"

# Re-export commonly used names for convenience
from gefetch.kinds import TagKind, WineTagKind
from gefetch.releases import DownloadRequest, download_release_assets
from gefetch.results import DownloadedArchive, DownloadedAssets, DownloadedChecksum
from gefetch.versioning import SemVer, Tag

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "DownloadRequest",
    "DownloadedArchive",
    "DownloadedAssets",
    "DownloadedChecksum",
    "SemVer",
    "Tag",
    "TagKind",
    "WineTagKind",
    "download_release_assets",
]
