#!/usr/bin/env python3
"""
Cache Settings File

Loads the TOML file that declares what a cache contains and how its key is
derived:

    paths = ["node_modules"]
    fallback_keys = ["cache-v1-"]

    [key]
    files = ["package.json", "*.lock"]
    prefix = "cache-v1"

`key` may also be a plain string, which is then used verbatim as the key.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from typeguard import typechecked

from cafce.errors import CafceError
from cafce.key.builder import generate_key
from cafce.key.config import DEFAULT_MAX_FILES, KeyConfig


logger = logging.getLogger(__name__)


SETTING_TEMPLATE = """\
# cafce cache settings

# Files and directories stored in the cache artifact
paths = ["node_modules"]

# Key prefixes to try, in order, when no artifact exists for the exact key
fallback_keys = ["cache-v1-"]

# The key is "<prefix>-<sha256 over the matched files>".
# Use `key = "some-fixed-key"` instead for a key that never changes.
[key]
files = ["package.json", "*.lock"]
prefix = "cache-v1"
"""


class SettingError(CafceError):
    """Settings file is missing, malformed or has invalid values"""


def _string_list(data: Mapping[str, Any], name: str, required: bool) -> List[str]:
    if name not in data:
        if required:
            raise SettingError(f"Missing required setting: {name}")
        return []
    value = data[name]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SettingError(f"Setting '{name}' must be a list of strings")
    return list(value)


def _parse_key(value: Any) -> Union[str, KeyConfig]:
    if isinstance(value, str):
        if not value:
            raise SettingError("Setting 'key' must not be empty")
        return value
    if not isinstance(value, dict):
        raise SettingError("Setting 'key' must be a string or a table")

    files = _string_list(value, "files", required=True)
    prefix = value.get("prefix")
    if prefix is not None and not isinstance(prefix, str):
        raise SettingError("Setting 'key.prefix' must be a string")
    return KeyConfig(files=files, prefix=prefix)


@typechecked
@dataclass
class Setting:
    """
    Parsed cache settings.

    Attributes:
        paths: Files and directories the cache artifact contains
        key: Literal key string, or the pattern set a key is computed from
        fallback_keys: Ordered key prefixes to fall back to on a miss
    """

    paths: List[str]
    key: Union[str, KeyConfig]
    fallback_keys: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Setting":
        """
        Build settings from already-parsed TOML data.

        Raises:
            SettingError: If a required setting is missing or has the wrong type
        """
        if "key" not in data:
            raise SettingError("Missing required setting: key")
        return cls(
            paths=_string_list(data, "paths", required=True),
            key=_parse_key(data["key"]),
            fallback_keys=_string_list(data, "fallback_keys", required=False),
        )

    @classmethod
    def from_file(cls, path: Path) -> "Setting":
        """
        Load settings from a TOML file.

        Raises:
            SettingError: If the file cannot be read or parsed
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError as e:
            raise SettingError(f"Settings file not found: {path}") from e
        except OSError as e:
            raise SettingError(f"Cannot read settings file {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise SettingError(f"Invalid TOML in {path}: {e}") from e

        logger.debug(f"Loaded settings from {path}")
        return cls.from_dict(data)

    def resolve_key(
        self,
        root: Union[str, Path],
        max_files: int = DEFAULT_MAX_FILES,
        jobs: int = 1,
    ) -> str:
        """
        Return the cache key for these settings.

        A literal key is returned unchanged; a pattern set is hashed under root.

        Raises:
            CacheKeyError: If key computation fails
        """
        if isinstance(self.key, str):
            return self.key
        return generate_key(self.key, root, max_files, jobs)


@typechecked
def init_setting_file(path: Path, force: bool = False) -> Path:
    """
    Write the settings template to path.

    Args:
        path: Destination file
        force: Overwrite an existing file

    Returns:
        The written path

    Raises:
        SettingError: If the file exists and force is False, or cannot be written
    """
    if path.exists() and not force:
        raise SettingError(f"Settings file already exists: {path} (use --force)")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(SETTING_TEMPLATE, encoding="utf-8")
    except OSError as e:
        raise SettingError(f"Cannot write settings file {path}: {e}") from e
    logger.info(f"Wrote settings template to {path}")
    return path
