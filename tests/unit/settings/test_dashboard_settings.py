"""Unit tests covering environment variable and config file overrides for settings."""

from __future__ import annotations

import textwrap

import pytest

from maiscam.settings.config import PROJECT_ROOT, reload_settings


def _clear_env(monkeypatch: object, *names: str) -> None:
    """Remove env vars for every alias and prefixed variant."""

    for name in names:
        monkeypatch.delenv(name, raising=False)
        if name.startswith("MAISCAM_"):
            monkeypatch.delenv(name.removeprefix("MAISCAM_"), raising=False)
        else:
            monkeypatch.delenv(f"MAISCAM_{name}", raising=False)


@pytest.fixture(autouse=True)
def _restore_settings():
    yield
    reload_settings()


def test_store_defaults_point_at_sample_export(monkeypatch: object) -> None:
    """The default config reads the bundled sample export."""

    _clear_env(
        monkeypatch,
        "MAISCAM_STORE__BACKEND",
        "MAISCAM_STORE_BACKEND",
        "MAISCAM_STORE__PAGE_LIMIT",
        "MAISCAM_SETTINGS_FILE",
    )

    settings = reload_settings(env="dev")
    assert settings.store.backend == "local"
    assert settings.store.page_limit == 100
    assert settings.store.firestore_collection == "mai-scam-detection-results"
    assert settings.store.local_path == (PROJECT_ROOT / "data" / "sample_detections.json").resolve()
    assert settings.store_configured is True
    assert settings.report.top_domains_limit == 10
    assert settings.report.language_insights_limit == 8


def test_store_backend_env_override(monkeypatch: object) -> None:
    """Ensure store.backend follows prefixed and short-form environment overrides."""

    _clear_env(monkeypatch, "MAISCAM_STORE__BACKEND", "MAISCAM_STORE_BACKEND", "STORE__BACKEND", "STORE_BACKEND")

    monkeypatch.setenv("MAISCAM_STORE__BACKEND", "firestore")
    overridden = reload_settings(env="dev")
    assert overridden.store.backend == "firestore"
    assert overridden.store_configured is False

    monkeypatch.delenv("MAISCAM_STORE__BACKEND")
    monkeypatch.setenv("STORE_BACKEND", "FIRESTORE")
    short_form = reload_settings(env="dev")
    assert short_form.store.backend == "firestore"


def test_firestore_env_overrides(monkeypatch: object) -> None:
    """Firestore project and collection honor nested environment variables."""

    _clear_env(
        monkeypatch,
        "MAISCAM_STORE__BACKEND",
        "MAISCAM_STORE__FIRESTORE_PROJECT",
        "MAISCAM_STORE__FIRESTORE_COLLECTION",
        "MAISCAM_STORE__PAGE_LIMIT",
        "STORE_BACKEND",
    )

    monkeypatch.setenv("MAISCAM_STORE__BACKEND", "firestore")
    monkeypatch.setenv("MAISCAM_STORE__FIRESTORE_PROJECT", "mai-scam-prod")
    monkeypatch.setenv("MAISCAM_STORE__FIRESTORE_COLLECTION", "detections")
    monkeypatch.setenv("MAISCAM_STORE__PAGE_LIMIT", "250")

    settings = reload_settings(env="dev")
    assert settings.store.firestore_project == "mai-scam-prod"
    assert settings.store.firestore_collection == "detections"
    assert settings.store.page_limit == 250
    assert settings.store_configured is True


def test_settings_file_override(tmp_path, monkeypatch: object) -> None:
    """TOML config files populate report caps and API settings."""

    _clear_env(monkeypatch, "MAISCAM_REPORT__TOP_DOMAINS_LIMIT", "MAISCAM_API__BASE_URL", "MAISCAM_ENV")

    settings_file = tmp_path / "settings.local.toml"
    settings_file.write_text(
        textwrap.dedent(
            """
            [api]
            base_url = "https://dashboard.example"

            [report]
            top_domains_limit = 3
            trend_days = 14
            """
        ).strip(),
        encoding="utf-8",
    )

    monkeypatch.setenv("MAISCAM_SETTINGS_FILE", str(settings_file))
    settings_from_file = reload_settings()
    assert settings_from_file.api_base_url == "https://dashboard.example"
    assert settings_from_file.report.top_domains_limit == 3
    assert settings_from_file.report.trend_days == 14
    assert settings_file in settings_from_file.config_files

    monkeypatch.setenv("MAISCAM_REPORT__TOP_DOMAINS_LIMIT", "6")
    env_override = reload_settings()
    assert env_override.report.top_domains_limit == 6


def test_relative_local_path_resolves_against_project_root(tmp_path, monkeypatch: object) -> None:
    """Relative export paths in config files resolve against the project root."""

    _clear_env(monkeypatch, "MAISCAM_STORE__LOCAL_PATH", "MAISCAM_SETTINGS_FILE", "MAISCAM_ENV")

    local_file = tmp_path / "settings.local.toml"
    local_file.write_text('[store]\nlocal_path = "exports/detections.json"\n', encoding="utf-8")
    default_file = tmp_path / "settings.default.toml"
    default_file.write_text('env = "dev"', encoding="utf-8")

    monkeypatch.setattr("maiscam.settings.config.LOCAL_CONFIG_FILE", local_file)
    monkeypatch.setattr("maiscam.settings.config.DEFAULT_CONFIG_FILE", default_file)

    settings = reload_settings(env="dev")
    assert settings.store.local_path == (PROJECT_ROOT / "exports/detections.json").resolve()
    assert settings.store_configured is False


def test_observability_statsd_env_overrides(monkeypatch: object) -> None:
    """Verify StatsD-related observability settings honor env overrides."""

    _clear_env(
        monkeypatch,
        "MAISCAM_OBSERVABILITY__STATSD_HOST",
        "OBS_STATSD_HOST",
        "MAISCAM_OBSERVABILITY__STATSD_PREFIX",
        "OBS_STATSD_PREFIX",
        "MAISCAM_OBSERVABILITY__SERVICE_NAME",
        "OBS_SERVICE_NAME",
    )

    default_settings = reload_settings(env="dev")
    assert default_settings.observability.statsd_host is None
    assert default_settings.observability.statsd_prefix == "maiscam"

    monkeypatch.setenv("MAISCAM_OBSERVABILITY__STATSD_HOST", "127.0.0.1")
    monkeypatch.setenv("MAISCAM_OBSERVABILITY__STATSD_PREFIX", "dash")
    overridden = reload_settings(env="dev")
    assert overridden.observability.statsd_host == "127.0.0.1"
    assert overridden.observability.statsd_prefix == "dash"
