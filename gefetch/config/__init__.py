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

"""Configuration loading for gefetch.

Built-in defaults (GitHub API URL, page size, HTTP timeout and retries) can
be overridden by an optional YAML file. Dicts are merged recursively, lists
and scalars are replaced.

Public API:

- load_config: Load the effective configuration
- DEFAULT_CONFIG: The built-in defaults

Example:
    Basic usage:

        from pathlib import Path
        from gefetch.config import load_config

        config = load_config(Path("gefetch.yaml"))
        print(config["github"]["api_url"])

"""

from .loader import DEFAULT_CONFIG, load_config

__all__ = ["DEFAULT_CONFIG", "load_config"]
