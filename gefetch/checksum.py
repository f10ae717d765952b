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

"""Checksum file handling for gefetch.

GE releases publish a ``sha512sum`` file next to every archive:

    3f8a...e1  GE-Proton8-25.tar.gz

This module only reads that file and compares strings. Hashing the archive
is left to the caller, who already holds the bytes.
"""

from __future__ import annotations


def expected_checksum(checksum_text: str) -> str:
    """Return the hex digest from a ``sha512sum`` file, lowercased.

    Returns an empty string for an empty file.
    """
    parts = checksum_text.split()
    return parts[0].lower() if parts else ""


def checksums_match(actual_hex: str, checksum_text: str) -> bool:
    """Compare a computed hex digest with a published checksum file.

    The comparison is case-insensitive. An empty checksum file never
    matches.
    """
    expected = expected_checksum(checksum_text)
    return bool(expected) and actual_hex.strip().lower() == expected
