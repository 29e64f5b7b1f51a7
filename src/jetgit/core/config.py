"""Application configuration and runtime state."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from jetgit.core.base import BaseConfig, BaseState
from jetgit.core.log import Logger
from jetgit.core.yaml_settings import YamlWithIncludesSettingsSource

# Modules reachable from {...} templates in YAML, e.g.
# {platformdirs.user_state_dir} or {os.getcwd}
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class ResolverSettings(BaseConfig):
    """Tuning for the automatic conflict resolution rules."""

    max_line_delta: int = Field(
        default=5,
        ge=0,
        description=(
            "Three-way rule: largest allowed difference between a side's "
            "line count and the base's before changes count as overlapping"
        ),
    )
    common_line_ratio: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description=(
            "Three-way rule: share of base lines each side must still "
            "contain for its changes to count as non-overlapping"
        ),
    )
    comment_length_tolerance: float = Field(
        default=0.1,
        ge=0.0,
        description=(
            "Comment rule: relative length difference under which the "
            "current side is kept"
        ),
    )
    tab_width: int = Field(
        default=4,
        ge=1,
        description="Whitespace rule: spaces substituted for a tab",
    )
    disabled_rules: list[str] = Field(
        default_factory=list,
        description=(
            "Rule names to skip: pure_addition, pure_deletion, identical, "
            "whitespace, three_way, imports, comments"
        ),
    )
    diff3: bool = Field(
        default=False,
        description=(
            "Read a ||||||| base section (merge.conflictStyle=diff3) "
            "into the region's base content"
        ),
    )


class DiffSettings(BaseConfig):
    """Diff rendering settings."""

    context_lines: int = Field(
        default=3,
        ge=0,
        description="Unchanged lines shown around each conflict hunk",
    )


class GitConfig(BaseConfig):
    """Repository the resolve workflow operates on."""

    workdir: Path = Field(
        default_factory=Path.cwd,
        description="Path to the git working tree",
    )
    stage_resolved: bool = Field(
        default=True,
        description="Stage files once all their conflicts are resolved",
    )
    write_partial: bool = Field(
        default=False,
        description=(
            "Also write files that still hold unresolved conflicts, "
            "with the auto-resolved regions applied"
        ),
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger | None = Field(
        default=None,
        description="Logger configuration and runtime instance",
    )
    resolver: ResolverSettings = Field(
        default_factory=ResolverSettings,
        description="Automatic conflict resolution settings",
    )
    diff: DiffSettings = Field(
        default_factory=DiffSettings,
        description="Diff rendering settings",
    )
    git: GitConfig = Field(
        default_factory=GitConfig,
        description="Repository settings",
    )
    log_level: str = Field(
        default="info",
        alias="log-level",
        description="Console log level: trace, debug, info, warn, error",
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "jetgit"
        ),
        description="Root directory for log files",
    )
    session_name: str = Field(
        default="session",
        description="Name of this run, used for log paths",
    )

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode='after')
    def _setup_logger(self) -> Config:
        """Install the global logger from the loaded configuration."""
        from jetgit.core.log import setup_logger

        if self.logger is None:
            self.logger = Logger(level=self.log_level)

        setup_logger(
            log_root=self.log_root,
            session_name=self.session_name,
            console=self.logger.console,
            file=self.logger.file,
            logfire=self.logger.logfire,
            level=self.logger.level,
        )
        return self

    def close(self):
        """Close the global logger, then the remaining children."""
        from jetgit.core.log import close_logger
        close_logger()
        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutated during workflow execution)
# ============================================================

class ResolveState(BaseState):
    """Runtime state of the resolve workflow."""

    repository: Any = Field(
        default=None,
        description="Repository capability in use",
    )
    conflicted_files: list[str] = Field(
        default_factory=list,
        description="Files git reports as unmerged",
    )
    regions: dict[str, list] = Field(
        default_factory=dict,
        description="Conflict regions per file after auto-resolution",
    )
    resolved_files: list[str] = Field(
        default_factory=list,
        description="Files written with every conflict resolved",
    )
    pending_files: list[str] = Field(
        default_factory=list,
        description="Files still needing manual resolution",
    )
    failed_files: dict[str, str] = Field(
        default_factory=dict,
        description="Files that could not be processed, with the error",
    )
    status: str = Field(
        default="pending",
        description="Workflow status: pending, running, complete, blocked",
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Runtime(BaseModel):
    """Runtime state grouped by workflow."""

    resolve: ResolveState = Field(
        default_factory=ResolveState,
        description="Resolve workflow runtime state",
    )


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Configuration plus runtime state; flows through every workflow.

    Sources, highest priority first: constructor arguments, YAML files
    (see YamlWithIncludesSettingsSource), .env, JETGIT_* environment
    variables, file secrets.
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)",
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during workflow execution)",
    )
    include: list[str] | None = Field(
        default=None,
        description="Additional YAML files to deep-merge over the config",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="JETGIT_",
        env_nested_delimiter="__",
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> State:
        """Replace {config.x.y} and {module.attr} templates everywhere."""
        self._substitute_recursive(self)
        return self

    def _substitute_recursive(self, obj: Any) -> None:
        if isinstance(obj, BaseModel):
            for field_name in obj.__class__.model_fields:
                value = getattr(obj, field_name)
                new_value = self._substitute_value(value)
                if new_value is not value:
                    setattr(obj, field_name, new_value)
        elif isinstance(obj, dict):
            for key in obj:
                obj[key] = self._substitute_value(obj[key])
        elif isinstance(obj, list):
            for i in range(len(obj)):
                obj[i] = self._substitute_value(obj[i])

    def _substitute_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._substitute_string(value)
        if isinstance(value, Path):
            substituted = self._substitute_string(str(value))
            return value if substituted == str(value) else Path(substituted)
        if isinstance(value, (BaseModel, dict, list)):
            self._substitute_recursive(value)
        return value

    def _substitute_string(self, value: str) -> str:
        """Resolve {dotted.path} against TEMPLATE_NAMESPACE or self.

        Unresolvable templates are left as written.
        """
        def replace_template(match):
            parts = match.group(1).split(".")
            root = parts[0]
            if root in TEMPLATE_NAMESPACE:
                obj = TEMPLATE_NAMESPACE[root]
                parts = parts[1:]
            else:
                obj = self

            try:
                for part in parts:
                    obj = getattr(obj, part)
                if callable(obj):
                    # platformdirs helpers want the application name
                    if root == 'platformdirs':
                        obj = obj('jetgit', appauthor=False)
                    else:
                        obj = obj()
                return str(obj)
            except (AttributeError, TypeError):
                return match.group(0)

        return re.sub(r'\{([a-zA-Z_][a-zA-Z0-9._]*)\}', replace_template, value)


__all__ = [
    "Config",
    "DiffSettings",
    "GitConfig",
    "ResolverSettings",
    "ResolveState",
    "State",
]
