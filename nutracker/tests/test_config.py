import pytest

from nutracker import config
from nutracker.config import ConfigError, load_settings, save_settings, settings_path
from nutracker.models import DEFAULT_COMMENT_COLUMNS, Settings


def test_config_dir_from_env(config_dir):
    assert settings_path() == config_dir / "settings.yml"


def test_config_dir_xdg(tmp_path, monkeypatch):
    monkeypatch.delenv("NU_TRACKER_CONFIG_DIR")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert config.config_dir() == tmp_path / "nu-tracker"


def test_missing_settings_generates_file(config_dir, capsys):
    settings = load_settings()
    assert settings == Settings()
    assert (config_dir / "settings.yml").exists()
    assert "Saved default settings file as:" in capsys.readouterr().out


def test_load_settings_from_yaml(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text("group: i18n\ncomment_columns:\n- id\n- title\n")
    settings = load_settings(path)
    assert settings.group == "i18n"
    assert settings.comment_columns == ["id", "title"]
    assert settings.design_columns == DEFAULT_COMMENT_COLUMNS


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "settings.yml"
    save_settings(Settings(group="aria", repos_file="/tmp/repos.yml"), path)
    settings = load_settings(path)
    assert settings.group == "aria"
    assert settings.repos_file == "/tmp/repos.yml"


def test_invalid_yaml(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text("group: [unclosed\n")
    with pytest.raises(ConfigError):
        load_settings(path)


def test_not_a_mapping(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text("- apa\n")
    with pytest.raises(ConfigError, match="expected a mapping"):
        load_settings(path)
