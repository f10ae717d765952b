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

"""Output channel for gefetch.

Release resolution and downloads report what they do through a logger
object instead of printing directly, so the same code runs silently inside
another program (a launcher, a Steam tool manager) and chatty from the CLI.

Output levels:

- step: Always printed by the console logger ("[2/3] Downloading ...")
- verbose: Printed when verbose mode is enabled
- debug: Printed when debug mode is enabled (implies verbose)
- progress: Archive download progress, printed in verbose mode at every
  10% of the download

Example:
    The CLI installs a console logger for the whole process:
        ```python
        from gefetch.logging import get_logger, set_global_logger

        set_global_logger(get_logger(verbose=True))
        ```

    Library callers can pass one explicitly instead:
        ```python
        from gefetch.logging import get_logger
        from gefetch.releases import DownloadRequest, download_release_assets

        assets = download_release_assets(
            DownloadRequest(TagKind.proton()), logger=get_logger(debug=True)
        )
        ```

Note:
    The global logger is silent until something installs another one.
"""

from __future__ import annotations

from typing import Protocol

_MIB = 1024 * 1024


class Logger(Protocol):
    """What gefetch needs from a logger."""

    def step(self, step: int, total: int, message: str) -> None:
        """Report one step of a multi-step operation (1-based)."""
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Report a status message.

        Args:
            prefix: Area of the message (e.g., "GITHUB", "RELEASE").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Report a diagnostic message (e.g., prefix "HTTP")."""
        ...

    def progress(self, label: str, downloaded: int, total: int) -> None:
        """Report download progress.

        Args:
            label: What is being downloaded, usually the asset file name.
            downloaded: Bytes received so far.
            total: Expected size in bytes, 0 if unknown.
        """
        ...


def format_size(num_bytes: int) -> str:
    """Format a byte count in MiB with one decimal (e.g., "412.3 MiB")."""
    return f"{num_bytes / _MIB:.1f} MiB"


class ConsoleLogger:
    """Logger printing to stdout, honoring verbose and debug flags."""

    def __init__(self, verbose: bool = False, debug: bool = False) -> None:
        self._verbose = verbose or debug
        self._debug = debug
        # label -> last reported tenth of the download
        self._progress_marks: dict[str, int] = {}

    def step(self, step: int, total: int, message: str) -> None:
        print(f"[{step}/{total}] {message}")

    def verbose(self, prefix: str, message: str) -> None:
        if self._verbose:
            print(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        if self._debug:
            print(f"[{prefix}] {message}")

    def progress(self, label: str, downloaded: int, total: int) -> None:
        if not self._verbose:
            return
        if total <= 0:
            # Unknown size, only the debug channel sees every chunk.
            self.debug("DOWNLOAD", f"{label}: {format_size(downloaded)}")
            return

        tenth = min(downloaded * 10 // total, 10)
        if tenth <= self._progress_marks.get(label, 0) and downloaded < total:
            return
        self._progress_marks[label] = tenth
        print(
            f"[DOWNLOAD] {label}: {format_size(downloaded)} / "
            f"{format_size(total)} ({downloaded * 100 // total}%)"
        )
        if downloaded >= total:
            del self._progress_marks[label]


class SilentLogger:
    """Logger that discards everything."""

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass

    def progress(self, label: str, downloaded: int, total: int) -> None:
        pass


_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False) -> Logger:
    """Return a console logger with the given verbosity."""
    return ConsoleLogger(verbose=verbose, debug=debug)


def get_global_logger() -> Logger:
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Install ``logger`` as the process-wide logger.

    Every library function called without an explicit ``logger`` reports to
    it.
    """
    global _global_logger
    _global_logger = logger
