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

"""State tracking implementation for gefetch.

The state file remembers which GE versions were downloaded, per
compatibility tool kind. Entries are stored in the serialized forms of
TagKind and Tag:

    {
      "metadata": {"gefetch_version": "0.2.0", "schema_version": "1", ...},
      "installed": [
        {"kind": {"type": "Proton"},
         "tag": {"str": "GE-Proton8-25",
                 "semver": {"major": 8, "minor": 25, "patch": 0,
                            "identifier": null}}}
      ]
    }

Tags written by older versions use "value" instead of "str" and are read
transparently.

Example:
    ```python
    from pathlib import Path
    from gefetch.kinds import TagKind
    from gefetch.state import StateTracker
    from gefetch.versioning import Tag

    tracker = StateTracker(Path("state/installed.json"))
    tracker.load()
    tracker.add_installed(TagKind.proton(), Tag("GE-Proton8-25"))
    tracker.save()
    ```
"""

from __future__ import annotations

from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Any, NoReturn

from gefetch import __version__
from gefetch.exceptions import StateError, TagKindError
from gefetch.kinds import TagKind
from gefetch.versioning import Tag, sort_tags


class StateTracker:
    """Keeps track of downloaded GE versions with JSON persistence.

    Attributes:
        state_file: Path to the JSON state file.
        state: In-memory state dictionary.

    """

    def __init__(self, state_file: Path):
        self.state_file = state_file
        self.state: dict[str, Any] = {}

    def load(self) -> dict[str, Any]:
        """Load state from file.

        Creates the default state if the file doesn't exist. A corrupted
        file (invalid JSON, or a document that is not a state object) is
        moved to ``<name>.json.backup`` and replaced by a fresh one.

        Returns:
            Loaded state dictionary.

        Raises:
            StateError: If the file was corrupted (after backing it up).

        """
        try:
            state = load_state(self.state_file)
        except FileNotFoundError:
            self.state = create_default_state()
            self.save()
            return self.state
        except json.JSONDecodeError as err:
            self._replace_corrupted(err)

        if not (
            isinstance(state, dict)
            and isinstance(state.get("installed", []), list)
            and isinstance(state.get("metadata", {}), dict)
        ):
            self._replace_corrupted(None)

        self.state = state
        return self.state

    def _replace_corrupted(self, cause: Exception | None) -> NoReturn:
        backup = self.state_file.with_suffix(".json.backup")
        self.state_file.replace(backup)
        self.state = create_default_state()
        self.save()
        raise StateError(
            f"Corrupted state file backed up to {backup}. "
            f"Created fresh state file."
        ) from cause

    def save(self) -> None:
        """Save current state, updating metadata.last_updated."""
        self.state.setdefault("metadata", {})
        self.state["metadata"]["last_updated"] = datetime.now(UTC).isoformat()
        save_state(self.state, self.state_file)

    def _entries(self) -> list[dict[str, Any]]:
        return self.state.setdefault("installed", [])

    def _decode(self, entry: Any) -> tuple[TagKind, Tag]:
        try:
            return TagKind.from_dict(entry["kind"]), Tag.from_dict(entry["tag"])
        except (KeyError, TypeError, ValueError, TagKindError) as err:
            raise StateError(
                f"Invalid entry in state file {self.state_file}: {entry!r}"
            ) from err

    def installed(self, kind: TagKind) -> list[Tag]:
        """Return the installed tags of ``kind``, newest first.

        Raises:
            StateError: If an entry cannot be decoded.

        """
        tags: list[Tag] = []
        for entry in self._entries():
            entry_kind, tag = self._decode(entry)
            if entry_kind is kind:
                tags.append(tag)
        return sort_tags(tags)

    def is_installed(self, kind: TagKind, tag: Tag) -> bool:
        return tag in self.installed(kind)

    def latest_installed(self, kind: TagKind) -> Tag | None:
        tags = self.installed(kind)
        return tags[0] if tags else None

    def add_installed(self, kind: TagKind, tag: Tag) -> None:
        """Record ``tag`` as installed for ``kind`` (no-op if already there)."""
        if self.is_installed(kind, tag):
            return
        self._entries().append({"kind": kind.to_dict(), "tag": tag.to_dict()})

    def remove_installed(self, kind: TagKind, tag: Tag) -> bool:
        """Forget ``tag`` for ``kind``.

        Returns:
            True if an entry was removed.

        Raises:
            StateError: If an entry cannot be decoded.

        """
        entries = self._entries()
        for i, entry in enumerate(entries):
            if self._decode(entry) == (kind, tag):
                del entries[i]
                return True
        return False


def create_default_state() -> dict[str, Any]:
    """Create a default empty state structure."""
    return {
        "metadata": {
            "gefetch_version": __version__,
            "schema_version": "1",
            "last_updated": datetime.now(UTC).isoformat(),
        },
        "installed": [],
    }


def load_state(state_file: Path) -> dict[str, Any]:
    """Load state from JSON file.

    Raises:
        FileNotFoundError: If state file doesn't exist.
        json.JSONDecodeError: If file contains invalid JSON.

    """
    with open(state_file, encoding="utf-8") as f:
        return json.load(f)


def save_state(state: dict[str, Any], state_file: Path) -> None:
    """Save state to JSON file with pretty-printing.

    Creates parent directories if needed. Uses 2-space indentation and
    sorted keys for consistent diffs, plus a trailing newline.
    """
    state_file.parent.mkdir(parents=True, exist_ok=True)

    with open(state_file, "w", encoding="utf-8") as f:
        json.dump(state, f, indent=2, sort_keys=True)
        f.write("\n")
