"""Application state and configuration."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from reroller.core.base import BaseConfig, BaseState
from reroller.core.log import Logger
from reroller.core.prompt import confirm
from reroller.core.yaml_settings import YamlWithIncludesSettingsSource

# Modules available for template substitution in YAML files
# Usage: {platformdirs.user_log_dir}, {Path.home}
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class GitConfig(BaseConfig):
    """Repository and branch settings."""

    workdir: Path = Field(
        default_factory=Path.cwd,
        description="Root of the git working tree to reroll in",
    )
    target_ref: str = Field(
        default="8.x-1.x",
        description=(
            "Branch the patch is rerolled onto when none is given "
            "on the command line"
        ),
    )
    branch_prefix: str = Field(
        default="test-",
        description="Prefix of the ephemeral branch, followed by the issue",
    )


class RerollConfig(BaseConfig):
    """Reroll behaviour."""

    state_file: Path = Field(
        default=Path(".reroll-state"),
        description=(
            "Saved session file, relative to the working tree unless "
            "absolute"
        ),
    )
    output_template: str = Field(
        default="{issue}-rerolled.patch",
        description="Name of the regenerated patch ({issue} is replaced)",
    )
    commit_message: str = Field(
        default="Applying patch from issue {issue}",
        description="Message of the commit made at the historical point",
    )
    locate_strategy: Literal["auto", "timestamp", "bisect"] = Field(
        default="auto",
        description=(
            "How to find the historical commit: 'timestamp' uses the "
            "patch Date header, 'bisect' binary-searches the history, "
            "'auto' uses the date when the patch has one"
        ),
    )
    command_timeout: int | None = Field(
        default=None,
        description="Timeout in seconds for each git command",
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default=None,
        description="Logger configuration and runtime instance"
    )
    git: GitConfig = Field(
        default_factory=GitConfig,
        description="Repository settings"
    )
    reroll: RerollConfig = Field(
        default_factory=RerollConfig,
        description="Reroll settings"
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "reroller"
        ),
        description=(
            "Root directory for log files "
            "(supports {platformdirs.*} templates)"
        ),
    )
    commands: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Command templates organized by category (git, ...)",
    )

    @model_validator(mode='after')
    def _setup_logger(self) -> 'Config':
        """Initialize the global logger from the loaded settings."""
        from reroller.core.log import setup_logger

        if self.logger is None:
            self.logger = Logger()

        setup_logger(
            log_root=self.log_root,
            level=self.logger.level,
            console=self.logger.console,
            file=self.logger.file,
            logfire=self.logger.logfire,
        )

        from reroller.core.yaml_settings import _cleanup_bootstrap_logger
        _cleanup_bootstrap_logger()

        return self

    def close(self):
        from reroller.core.log import logger
        if logger is not None:
            logger.close()

        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutable during workflow execution)
# ============================================================

class RerollState(BaseState):
    """Reroll workflow runtime state."""

    repository: Any = Field(
        default=None,
        description="GitRepository for the working tree",
    )
    store: Any = Field(
        default=None,
        description="SessionStore holding the persisted session",
    )
    session: Any = Field(
        default=None,
        description="Active Session (fresh or resumed)",
    )
    patch: Any = Field(
        default=None,
        description="PatchArtifact read during validation",
    )
    historical_commit: str | None = Field(
        default=None,
        description="Commit the Locator chose",
    )
    branch_created: bool = Field(
        default=False,
        description="Whether the ephemeral branch belongs to this session",
    )
    output_path: Path | None = Field(
        default=None,
        description="Where the regenerated patch was written",
    )
    verified: bool | None = Field(
        default=None,
        description="Whether the regenerated patch applies to the target",
    )
    status: str = Field(
        default="fresh",
        description=(
            "Workflow state: fresh, validated, located, branch-created, "
            "patch-applied, rebasing, conflicted, patch-generated, "
            "verified, complete, failed"
        ),
    )
    confirm: Any = Field(
        default=confirm,
        description="Callable asking the operator a yes/no question",
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Runtime(BaseModel):
    """All runtime state organized by workflow."""

    reroll: RerollState = Field(
        default_factory=RerollState,
        description="Reroll workflow runtime state"
    )


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Complete application state - configuration and runtime.

    This is the object every workflow node receives as ctx.state.
    Configuration is read once from YAML/env/CLI; runtime is
    mutated as the reroll advances.
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)"
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during workflow execution)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to include and merge. "
            "Use --include on CLI or include: in YAML files."
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file="reroller.yaml",
        env_file=".env",
        env_prefix="REROLLER_",
        env_nested_delimiter="__",
        cli_parse_args=True,
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore'
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
        """Priority: init arguments, environment, .env, YAML files,
        secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> "State":
        """Replace {config.*} and {platformdirs.*} templates in every
        string and Path field.

        Placeholders that do not resolve, such as {ref} or {issue} in
        command templates, are left for their users to fill in.
        """
        self._substitute_recursive(self.config)
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
            return Path(self._substitute_string(str(value)))
        if isinstance(value, (BaseModel, dict, list)):
            self._substitute_recursive(value)
        return value

    def _substitute_string(self, value: str) -> str:
        """Replace {field.path} templates with actual field values.

        Examples:
            "{config.git.workdir}/out" -> "/home/user/drupal/out"
            "{platformdirs.user_log_dir}" -> "~/.local/state/reroller/log"
        """
        def replace_template(match):
            parts = match.group(1).split(".")

            if parts[0] in TEMPLATE_NAMESPACE:
                obj = TEMPLATE_NAMESPACE[parts[0]]
                parts = parts[1:]
            else:
                obj = self

            try:
                for part in parts:
                    obj = getattr(obj, part)
                if callable(obj):
                    obj = obj('reroller', appauthor=False)
                return str(obj)
            except (AttributeError, TypeError):
                return match.group(0)

        return re.sub(r'\{([a-z._]+)\}', replace_template, value)

    def state_path(self) -> Path:
        """Absolute location of the persisted session file."""
        path = self.config.reroll.state_file
        if path.is_absolute():
            return path
        return self.config.git.workdir / path


__all__ = ["State", "Config", "GitConfig", "RerollConfig", "RerollState"]
