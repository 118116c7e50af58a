"""Tests for YAML settings loading infrastructure."""

from pathlib import Path

import pytest

from prompt_arena.config.domain.settings import ArenaSettings
from prompt_arena.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)
from prompt_arena.config.infrastructure.yaml_loader import YamlSettingsLoader
from tests.config.fake_observer import FakeConfigObserver

# __file__ is tests/config/infrastructure/test_yaml_loader.py
FIXTURES = Path(__file__).parent.parent.parent / "fixtures"


def _fixture(name: str) -> Path:
    return FIXTURES / name


def _load(name: str, observer: FakeConfigObserver | None = None) -> ArenaSettings:
    return YamlSettingsLoader(observer or FakeConfigObserver()).load(_fixture(name))


class TestValidSettingsLoading:
    """A valid settings file loads with env vars interpolated."""

    def test_interpolates_required_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ARENA_JUDGE_MODEL", "opus")
        settings = _load("valid_settings.yaml")
        assert settings.judge.model == "opus"

    def test_default_applies_when_var_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ARENA_JUDGE_MODEL", "opus")
        monkeypatch.delenv("ARENA_RUNNER_MODEL", raising=False)
        assert _load("valid_settings.yaml").runner.model == "sonnet"

    def test_set_var_overrides_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ARENA_JUDGE_MODEL", "opus")
        monkeypatch.setenv("ARENA_RUNNER_MODEL", "haiku")
        assert _load("valid_settings.yaml").runner.model == "haiku"

    def test_loads_remaining_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ARENA_JUDGE_MODEL", "opus")
        settings = _load("valid_settings.yaml")
        assert settings.runner.max_concurrent == 3
        assert settings.runner.binary == "claude"
        assert settings.variations == 4
        assert settings.user_mode is True
        assert settings.output_root == Path("/tmp/arena-runs")

    def test_emits_config_loaded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ARENA_JUDGE_MODEL", "opus")
        monkeypatch.setenv("ARENA_RUNNER_MODEL", "haiku")
        observer = FakeConfigObserver()
        _load("valid_settings.yaml", observer)

        assert len(observer.loaded) == 1
        assert observer.loaded[0].path == _fixture("valid_settings.yaml")
        assert observer.loaded[0].judge_model == "opus"
        assert observer.loaded[0].runner_model == "haiku"
        assert observer.unbounded_warnings == []

    def test_empty_file_gives_defaults(self) -> None:
        settings = _load("empty_settings.yaml")
        assert settings.judge.model == "opus"
        assert settings.runner.model == "haiku"
        assert settings.variations == 5
        assert settings.user_mode is False
        assert settings.output_root is None


class TestUnboundedConcurrency:
    def test_warns_when_max_concurrent_is_absent(self) -> None:
        observer = FakeConfigObserver()
        settings = _load("unbounded_settings.yaml", observer)

        assert settings.runner.max_concurrent is None
        assert observer.unbounded_warnings == [8]
        assert len(observer.loaded) == 1


class TestMissingEnvVars:
    """All unset variables are reported together, each once."""

    def test_collects_every_missing_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ARENA_MISSING_JUDGE", raising=False)
        monkeypatch.delenv("ARENA_MISSING_RUNNER", raising=False)

        with pytest.raises(MissingEnvVarsError) as exc_info:
            _load("missing_env_settings.yaml")

        assert sorted(exc_info.value.missing_vars) == [
            "ARENA_MISSING_JUDGE",
            "ARENA_MISSING_RUNNER",
        ]
        assert "ARENA_MISSING_JUDGE, ARENA_MISSING_RUNNER" in str(exc_info.value)

    def test_no_events_on_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ARENA_MISSING_JUDGE", raising=False)
        monkeypatch.delenv("ARENA_MISSING_RUNNER", raising=False)
        observer = FakeConfigObserver()

        with pytest.raises(MissingEnvVarsError):
            _load("missing_env_settings.yaml", observer)

        assert observer.loaded == []


class TestInvalidSettings:
    def test_missing_file(self) -> None:
        with pytest.raises(ConfigLoadError, match="file not found"):
            _load("does_not_exist.yaml")

    def test_malformed_yaml(self) -> None:
        with pytest.raises(ConfigLoadError, match="invalid YAML"):
            _load("malformed_settings.yaml")

    def test_schema_violation(self) -> None:
        with pytest.raises(ConfigValidationError, match="Failed to validate settings"):
            _load("invalid_schema_settings.yaml")

    def test_top_level_list(self) -> None:
        with pytest.raises(ConfigValidationError, match="must be a mapping"):
            _load("list_settings.yaml")
