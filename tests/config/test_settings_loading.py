from __future__ import annotations

from pathlib import Path

import pytest

from avalonia_mcp.config import DEFAULT_DATA_DIR, Settings, load_settings, resolve_data_dir


def test_defaults_match_cache_constants() -> None:
    settings = Settings()
    assert settings.cache.default_ttl_seconds == 1800
    assert settings.cache.max_entries == 50
    assert settings.cache.preload_ttl_seconds == 3600
    assert settings.cache.preload_files == ["controls.json", "xaml-patterns.json", "migration-guide.json"]
    assert settings.cache.single_flight is False
    assert resolve_data_dir(settings) == DEFAULT_DATA_DIR
    assert (DEFAULT_DATA_DIR / "controls.json").is_file()


def test_yaml_values_expand_environment_placeholders(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "cache:\n"
        "  max_entries: 10\n"
        "  data_dir: ${KB_DIR:-/srv/avalonia/Data}\n"
        "logging:\n"
        "  level: ${LOG_LEVEL}\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("KB_DIR", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = load_settings(str(config_path))

    assert settings.cache.max_entries == 10
    assert settings.cache.data_dir == "/srv/avalonia/Data"
    assert settings.logging.level == "DEBUG"


def test_environment_overrides_win_over_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("cache:\n  max_entries: 10\n", encoding="utf-8")
    monkeypatch.setenv("AVALONIA_MCP_CACHE_MAX_ENTRIES", "25")
    monkeypatch.setenv("AVALONIA_MCP_SINGLE_FLIGHT", "true")
    monkeypatch.setenv("AVALONIA_MCP_PRELOAD_FILES", "controls.json, xaml-patterns.json")
    monkeypatch.setenv("AVALONIA_MCP_DATA_DIR", str(tmp_path))

    settings = load_settings(str(config_path))

    assert settings.cache.max_entries == 25
    assert settings.cache.single_flight is True
    assert settings.cache.preload_files == ["controls.json", "xaml-patterns.json"]
    assert resolve_data_dir(settings) == tmp_path.resolve()


def test_missing_config_file_yields_defaults(tmp_path: Path) -> None:
    settings = load_settings(str(tmp_path / "absent.yaml"))
    assert settings.server.port == 8090
