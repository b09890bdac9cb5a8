from __future__ import annotations

from pathlib import Path

from vcard_parser.config import CONF_ENV, Settings, load_settings, write_default_config


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv(CONF_ENV, raising=False)
    assert load_settings() == Settings()


def test_missing_file_gives_defaults(tmp_path: Path):
    assert load_settings(tmp_path / "nope.toml") == Settings()


def test_load_from_file(tmp_path: Path):
    conf = tmp_path / "vcard.toml"
    conf.write_text('collapse = true\nlog_level = "debug"\n', encoding="utf-8")
    assert load_settings(conf) == Settings(collapse=True, log_level="DEBUG")


def test_env_var_names_file(tmp_path: Path, monkeypatch):
    conf = tmp_path / "vcard.toml"
    conf.write_text("collapse = true\n", encoding="utf-8")
    monkeypatch.setenv(CONF_ENV, str(conf))
    assert load_settings().collapse is True


def test_malformed_file_falls_back(tmp_path: Path):
    conf = tmp_path / "vcard.toml"
    conf.write_text("collapse = = nope\n", encoding="utf-8")
    assert load_settings(conf) == Settings()


def test_write_default_config(tmp_path: Path):
    conf = tmp_path / "local" / "vcard.toml"
    assert write_default_config(conf) is True
    assert "collapse = false" in conf.read_text()
    assert load_settings(conf) == Settings()
    assert write_default_config(conf) is False
