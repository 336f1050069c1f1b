"""
Unit tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from pagelens.config import Config, find_config_file


def test_defaults():
    config = Config()

    assert config.renderer.backend == "http"
    assert config.renderer.timeout_ms == 60000
    assert config.insights.model == "gemini-2.0-flash-lite"
    assert config.insights.digest_paragraphs == 10
    assert config.storage.max_results == 50
    assert config.storage.cache_ttl_seconds == 3600
    assert config.web.port == 3001


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PAGELENS_INSIGHTS__API_KEY", "from-env")
    monkeypatch.setenv("PAGELENS_RENDERER__BACKEND", "playwright")

    config = Config()

    assert config.insights.api_key == "from-env"
    assert config.renderer.backend == "playwright"


def test_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("insights:\n  max_topics: 3\nweb:\n  port: 9000\n")

    config = Config.from_yaml(path)

    assert config.insights.max_topics == 3
    assert config.web.port == 9000


def test_empty_yaml_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert Config.from_yaml(path).storage.max_results == 50


def test_missing_yaml(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.from_yaml(tmp_path / "missing.yaml")


def test_invalid_values_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("renderer:\n  backend: carrier-pigeon\n")

    with pytest.raises(ValidationError):
        Config.from_yaml(path)


def test_find_config_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert find_config_file() is None

    (tmp_path / "config.yml").write_text("{}")
    assert find_config_file() == tmp_path / "config.yml"


def test_log_file_parent_created(tmp_path):
    config = Config.model_validate({"monitoring": {"log_file": str(tmp_path / "logs" / "pagelens.log")}})

    assert (tmp_path / "logs").is_dir()
    assert config.monitoring.log_file.endswith("pagelens.log")
