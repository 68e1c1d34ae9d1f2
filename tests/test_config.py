"""Tests for loading options files."""

from __future__ import annotations

import json

import pytest

from bundle_license.config import CONFIG_PATH_ENV_VAR, ConfigError, load_options


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    monkeypatch.delenv(CONFIG_PATH_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)


class TestLoadOptions:
    def test_json(self, tmp_path):
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"banner": "Hello"}), encoding="utf-8")
        assert load_options(path) == {"banner": "Hello"}

    def test_yaml(self, tmp_path):
        path = tmp_path / "options.yml"
        path.write_text(
            "third_party:\n  allow: MIT\n  output:\n    - dist/third-party.txt\n",
            encoding="utf-8",
        )
        assert load_options(path) == {
            "third_party": {"allow": "MIT", "output": ["dist/third-party.txt"]}
        }

    def test_default_file_in_cwd(self, tmp_path):
        (tmp_path / "bundle-license.json").write_text('{"debug": true}', encoding="utf-8")
        assert load_options() == {"debug": True}

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("cwd: /srv/app\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(path))
        assert load_options() == {"cwd": "/srv/app"}

    def test_missing_default_file(self):
        assert load_options() == {}

    def test_missing_default_file_when_required(self):
        with pytest.raises(ConfigError, match="Configuration file not found"):
            load_options(required=True)

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Configuration file not found"):
            load_options(tmp_path / "nope.json")

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_options(path) == {}


class TestInvalidFiles:
    def test_invalid_json(self, tmp_path):
        path = tmp_path / "options.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_options(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "options.yaml"
        path.write_text("banner: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_options(path)

    def test_top_level_must_be_an_object(self, tmp_path):
        path = tmp_path / "options.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ConfigError, match="must be an object"):
            load_options(path)
