"""Tests for settings and district loading."""

import os
from pathlib import Path
from unittest.mock import patch

from listam_index.config import Settings, load_districts
from listam_index.models import DISTRICTS

PROJECT_ROOT = Path(__file__).parent.parent


class TestSettings:
    def test_production_does_not_persist_cache(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("APP_ENV", raising=False)
        monkeypatch.delenv("LISTAM_USE_CACHE", raising=False)
        settings = Settings.from_env()
        assert settings.persist_cache is False
        assert settings.use_cache is True

    def test_development_persists_cache(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("APP_ENV", "development")
        assert Settings.from_env().persist_cache is True

    def test_flags_from_env(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LISTAM_USE_CACHE", "0")
        monkeypatch.setenv("LISTAM_RENDER_CHARTS", "false")
        settings = Settings.from_env()
        assert settings.use_cache is False
        assert settings.render_charts is False

    def test_paths_follow_working_directory(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        settings = Settings.from_env()
        assert settings.data_file == tmp_path / "data.json"
        assert settings.cache_file == tmp_path / "cache.json"
        assert settings.images_dir == tmp_path / "images"
        assert settings.districts_file == tmp_path / "districts.yaml"

    def test_reads_dotenv_from_working_directory(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("APP_ENV=development\n", encoding="utf-8")
        with patch.dict(os.environ):
            os.environ.pop("APP_ENV", None)
            assert Settings.from_env().persist_cache is True


class TestLoadDistricts:
    def test_missing_file_uses_builtin_table(self, tmp_path):
        districts = load_districts(tmp_path / "districts.yaml")
        assert {d.code: d.name for d in districts} == DISTRICTS

    def test_default_path_is_working_directory(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "districts.yaml").write_text(
            "districts:\n  - code: 8\n    name: Kentron\n", encoding="utf-8"
        )
        assert [(d.code, d.name) for d in load_districts()] == [(8, "Kentron")]

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "districts.yaml"
        path.write_text(
            "districts:\n  - code: 8\n    name: Kentron\n  - code: 13\n    name: Shengavit\n",
            encoding="utf-8",
        )
        districts = load_districts(path)
        assert [(d.code, d.name) for d in districts] == [(8, "Kentron"), (13, "Shengavit")]

    def test_shipped_config_matches_builtin_table(self):
        districts = load_districts(PROJECT_ROOT / "districts.yaml")
        assert {d.code: d.name for d in districts} == DISTRICTS
