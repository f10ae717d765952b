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

"""
Configuration loader for gefetch.

gefetch works without any configuration file. A YAML file can override the
built-in defaults, for example to raise the GitHub rate limit with a token
or to point at a GitHub Enterprise / mock API.

Layering
--------
1. **Built-in defaults** (DEFAULT_CONFIG)
2. **Configuration file** (optional, passed with --config)

Merge Behavior
--------------
Deep merge with "last wins" semantics:
  - **Dicts**: Recursively merged (keys from overlay override base)
  - **Lists**: Completely replaced
  - **Scalars**: Overwritten

Environment Expansion
---------------------
``github.token`` may be written as "${VAR}" and is replaced by the value of
the environment variable VAR (None if unset).

Example File
------------
    github:
      token: "${GITHUB_TOKEN}"
      per_page: 50
      max_pages: 20
    http:
      timeout: 60

Error Handling
--------------
- ConfigError: file missing, YAML parse errors, non-mapping content,
  values of the wrong type
- All errors are chained with "from err" for better debugging

Examples
--------
    >>> from pathlib import Path
    >>> from gefetch.config import load_config
    >>> cfg = load_config(Path("gefetch.yaml"))
    >>> cfg["http"]["timeout"]
    60
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml

from gefetch.exceptions import ConfigError

DEFAULT_CONFIG: dict[str, Any] = {
    "github": {
        "api_url": "https://api.github.com",
        "token": None,
        "per_page": 30,
        "max_pages": 10,
    },
    "http": {
        "timeout": 30,
        "retries": 3,
        "user_agent": "gefetch/0.1 (+https://github.com/RogerCibrian/gefetch)",
    },
}

_INT_FIELDS = (
    ("github", "per_page"),
    ("github", "max_pages"),
    ("http", "timeout"),
    ("http", "retries"),
)


def _load_yaml_file(p: Path) -> Any:
    """
    Load a YAML file and return the parsed Python object.

    Raises:
      ConfigError - when the file does not exist or is not valid YAML
    """
    if not p.exists():
        raise ConfigError(f"config file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts with "overlay wins".

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


def _expand_env(value: Any) -> Any:
    """Replace a "${VAR}" string with the environment variable VAR."""
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        return os.environ.get(value[2:-1])
    return value


def _validate(cfg: dict[str, Any], source: Path) -> None:
    for section, key in _INT_FIELDS:
        value = cfg.get(section, {}).get(key)
        # bool is an int subclass but never a valid count
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ConfigError(
                f"{source}: '{section}.{key}' must be a non-negative integer, "
                f"got {value!r}"
            )
    if not isinstance(cfg["github"].get("api_url"), str):
        raise ConfigError(f"{source}: 'github.api_url' must be a string")


def load_config(path: Path | None = None) -> dict[str, Any]:
    """
    Load the effective configuration.

    Parameters
    ----------
    path : Path | None
        Optional YAML file overriding the defaults.

    Returns
    -------
    dict
        The merged configuration. Always contains the "github" and "http"
        sections of DEFAULT_CONFIG.

    Raises
    ------
    ConfigError
        If the file is missing, unparsable, not a mapping, or holds values
        of the wrong type.
    """
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if path is None:
        return cfg

    path = Path(path)
    overlay = _load_yaml_file(path)
    if overlay is None:
        overlay = {}
    if not isinstance(overlay, dict):
        raise ConfigError(f"{path}: top-level YAML must be a mapping")
    for section in ("github", "http"):
        if section in overlay and not isinstance(overlay[section], dict):
            raise ConfigError(f"{path}: '{section}' must be a mapping")

    cfg = _deep_merge_dicts(cfg, overlay)
    cfg["github"]["token"] = _expand_env(cfg["github"].get("token"))
    _validate(cfg, path)
    return cfg
