"""YAML settings source with include: directives and --include files."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

from jetgit.core.log import logger

DEFAULTS_FILE = Path(__file__).parent.parent / "defaults" / "default.yaml"
PROJECT_FILE = "jetgit.yaml"


def user_config_file() -> Path:
    """Per-user configuration file location."""
    return Path(user_config_dir("jetgit", appauthor=False)) / PROJECT_FILE


def cli_includes(argv: list[str] | None = None) -> list[str]:
    """Collect --include values ahead of pydantic's own CLI parsing."""
    argv = sys.argv if argv is None else argv
    includes = []
    i = 1
    while i < len(argv):
        if argv[i] == "--include" and i + 1 < len(argv):
            includes.append(argv[i + 1])
            i += 1
        i += 1
    return includes


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """Deep-merges every configuration layer, lowest priority first:
    package defaults < user config < ./jetgit.yaml < --include files.

    Each file may carry an include: key naming further files, resolved
    relative to the including file; the including file wins.
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file=None,
        argv: list[str] | None = None,
    ):
        includes = cli_includes(argv)
        super().__init__(settings_cls, includes or yaml_file)

    def _read_files(self, files):
        files_to_load = [DEFAULTS_FILE, user_config_file(), Path(PROJECT_FILE)]
        if files:
            if isinstance(files, (str, os.PathLike)):
                files = [files]
            files_to_load.extend(Path(f).expanduser() for f in files)

        result: dict = {}
        for file_path in files_to_load:
            if not file_path.is_file():
                logger.debug(
                    "Configuration file not found (skipping)",
                    file=str(file_path),
                )
                continue
            logger.debug("Loading configuration", file=str(file_path))
            data = self._load_file_recursive(file_path, set())
            result = self._deep_merge(result, data)
        return result

    def _load_file_recursive(
        self, filepath: Path, visited: set[Path]
    ) -> dict:
        """Load one file, resolving include: directives.

        Raises:
            ValueError: If an include cycle is found
        """
        filepath = filepath.resolve()
        if filepath in visited:
            raise ValueError(f"Circular include: {filepath}")
        visited.add(filepath)

        with open(filepath, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        includes = data.pop("include", None)
        if isinstance(includes, str):
            includes = [includes]
        for inc in includes or []:
            inc_path = self._resolve_path(inc, filepath)
            inc_data = self._load_file_recursive(inc_path, visited.copy())
            data = self._deep_merge(inc_data, data)

        return data

    @staticmethod
    def _resolve_path(include_path: str, relative_to: Path) -> Path:
        path = Path(include_path).expanduser()
        if path.is_absolute():
            return path
        return (relative_to.parent / path).resolve()

    @classmethod
    def _deep_merge(cls, base: dict, override: dict) -> dict:
        """Return base updated by override, recursing into dicts."""
        result = base.copy()
        for key, value in override.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = cls._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
