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

"""Command-line interface for gefetch.

Commands:

    tags: List release tags of a compatibility tool kind, newest first
    download: Download the archive and checksum of a release

Example:
    List GE Proton releases:
        ```bash
        $ gefetch tags PROTON
        ```

    Download the latest Wine GE for League of Legends:
        ```bash
        $ gefetch download LOL_WINE --output-dir ./downloads
        ```

    Download a specific release without checksum:
        ```bash
        $ gefetch download PROTON --tag GE-Proton8-25 --no-checksum
        ```

Exit Codes:

- 0: Success
- 1: Error (unknown kind, configuration, network or release problems)

Note:
    The CLI uses argparse for command parsing.
    Variables from a .env file are loaded before the configuration, so
    ``github.token: "${GITHUB_TOKEN}"`` can be satisfied from there.
    Verbose mode shows full tracebacks on errors for debugging.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
import traceback

from dotenv import load_dotenv

from gefetch import __version__
from gefetch.config import load_config
from gefetch.exceptions import GEFetchError, StateError
from gefetch.kinds import TagKind
from gefetch.logging import get_logger, set_global_logger
from gefetch.releases import (
    DownloadRequest,
    GitHubClient,
    download_release_assets,
    fetch_tags,
)
from gefetch.state import StateTracker
from gefetch.versioning import Tag


def _print_error(err: Exception, args: argparse.Namespace) -> None:
    print(f"Error: {err}")
    if args.verbose or args.debug:
        traceback.print_exc()


def cmd_tags(args: argparse.Namespace) -> int:
    """Handler for 'gefetch tags'.

    Prints release tags (or repository git tags with --git-tags) with their
    parsed versions.
    """
    set_global_logger(get_logger(verbose=args.verbose, debug=args.debug))

    try:
        kind = TagKind.from_str(args.kind)
        client = GitHubClient(load_config(args.config))
        if args.git_tags:
            names = client.fetch_release_tags(kind)
            for name in names:
                print(name)
            return 0
        tags = fetch_tags(kind, client)
    except GEFetchError as err:
        _print_error(err, args)
        return 1

    print(f"{kind.compatibility_tool_name} releases:")
    for tag in tags:
        print(f"  {tag.raw:<28} {tag.semver}")
    return 0


def cmd_download(args: argparse.Namespace) -> int:
    """Handler for 'gefetch download'.

    Downloads the archive (and checksum unless --no-checksum) into the
    output directory and records the tag in the state file. The state file
    is read before anything is downloaded: a corrupted file only produces a
    warning, an undecodable entry aborts the command.
    """
    set_global_logger(get_logger(verbose=args.verbose, debug=args.debug))

    output_dir = Path(args.output_dir).resolve()

    try:
        kind = TagKind.from_str(args.kind)
        client = GitHubClient(load_config(args.config))
        request = DownloadRequest(
            kind=kind, tag=args.tag, download_checksum=not args.no_checksum
        )

        tracker = None
        previous = None
        if not args.stateless:
            tracker = StateTracker(args.state_file)
            try:
                tracker.load()
            except StateError as err:
                # The corrupted file was backed up and replaced by a fresh one.
                print(f"Warning: {err}")
            previous = tracker.latest_installed(kind)

        assets = download_release_assets(request, client)

        output_dir.mkdir(parents=True, exist_ok=True)
        archive_path = output_dir / assets.archive.file_name
        archive_path.write_bytes(assets.archive.content)
        checksum_path = None
        if assets.checksum is not None:
            checksum_path = output_dir / assets.checksum.file_name
            checksum_path.write_text(assets.checksum.checksum, encoding="utf-8")

        if tracker is not None:
            tracker.add_installed(kind, Tag(assets.tag))
            tracker.save()
    except GEFetchError as err:
        _print_error(err, args)
        return 1

    print("=" * 70)
    print("DOWNLOAD RESULTS")
    print("=" * 70)
    print(f"Kind:            {kind.compatibility_tool_name}")
    print(f"Tag:             {assets.tag}")
    if tracker is not None:
        print(f"Previous:        {previous.raw if previous else 'none'}")
    print(f"Archive:         {archive_path}")
    print(f"Checksum:        {checksum_path or 'not downloaded'}")
    print("=" * 70)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the gefetch CLI."""
    parser = argparse.ArgumentParser(
        prog="gefetch",
        description="Resolve and download GE-Proton and Wine-GE releases",
    )
    parser.add_argument("--version", action="version", version=f"gefetch {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "kind",
        help=f"Compatibility tool kind: {', '.join(k.token for k in TagKind.values())}",
    )
    common.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file overriding the defaults",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    common.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )

    subparsers = parser.add_subparsers(
        dest="command", help="Available commands", required=True
    )

    parser_tags = subparsers.add_parser(
        "tags", parents=[common], help="List release tags, newest first"
    )
    parser_tags.add_argument(
        "--git-tags",
        action="store_true",
        help="List the repository's git tags instead of release tags",
    )
    parser_tags.set_defaults(func=cmd_tags)

    parser_download = subparsers.add_parser(
        "download", parents=[common], help="Download a release archive"
    )
    parser_download.add_argument(
        "--tag", default=None, help="Exact release tag (default: latest)"
    )
    parser_download.add_argument(
        "--no-checksum",
        action="store_true",
        help="Do not download the checksum file",
    )
    parser_download.add_argument(
        "--output-dir",
        default="./downloads",
        help="Directory to save downloaded files (default: ./downloads)",
    )
    parser_download.add_argument(
        "--state-file",
        type=Path,
        default=Path("state/installed.json"),
        help="State file for installed versions (default: state/installed.json)",
    )
    parser_download.add_argument(
        "--stateless",
        action="store_true",
        help="Do not record the downloaded version",
    )
    parser_download.set_defaults(func=cmd_download)

    args = parser.parse_args(argv)
    # GITHUB_TOKEN and friends may live in .env
    load_dotenv()
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
