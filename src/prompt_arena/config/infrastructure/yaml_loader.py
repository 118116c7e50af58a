"""YAML settings loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from prompt_arena.config.domain.observer import ConfigObserver
from prompt_arena.config.domain.settings import ArenaSettings
from prompt_arena.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from prompt_arena.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)


class YamlSettingsLoader:
    """Loads, interpolates, validates, and returns ArenaSettings from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> ArenaSettings:
        """
        Load, interpolate, validate, and return ArenaSettings from a YAML file.

        An empty file yields the default settings.

        Raises:
            ConfigLoadError: if the file is missing, unreadable, or not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the schema is violated.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        settings = _build_settings(interpolated=interpolate(raw))
        if settings.runner.max_concurrent is None:
            self._observer.config_unbounded_concurrency_warning(
                variations=settings.variations
            )
        self._observer.config_loaded(
            path=path,
            judge_model=settings.judge.model,
            runner_model=settings.runner.model,
        )
        return settings


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    except OSError as exc:
        raise ConfigLoadError(path=path, reason=exc.strerror or str(exc)) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason="invalid YAML") from exc
    return {} if raw is None else raw


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _build_settings(interpolated: Any) -> ArenaSettings:
    if not isinstance(interpolated, dict):
        raise ConfigValidationError("top-level settings must be a mapping")
    try:
        return ArenaSettings.model_validate(interpolated)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
