from __future__ import annotations

import os
from dataclasses import asdict
from pathlib import Path

import yaml

from nutracker.models import Settings

APP_DIR = "nu-tracker"
SETTINGS_FILE = "settings.yml"


class ConfigError(Exception):
    pass


def config_dir() -> Path:
    override = os.environ.get("NU_TRACKER_CONFIG_DIR")
    if override:
        return Path(override)
    base = os.environ.get("XDG_CONFIG_HOME")
    return (Path(base) if base else Path.home() / ".config") / APP_DIR


def settings_path() -> Path:
    return config_dir() / SETTINGS_FILE


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping of settings")
    return data


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    path = path or settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(asdict(settings), f, default_flow_style=False, sort_keys=False)
    return path


def _generate_settings(path: Path) -> dict:
    settings = Settings()
    save_settings(settings, path)
    print(f"Saved default settings file as: {path}")
    return asdict(settings)


def load_settings(path: Path | None = None) -> Settings:
    path = path or settings_path()
    data = _load_yaml(path)
    if not data:
        data = _generate_settings(path)

    defaults = Settings()
    return Settings(
        group=data.get("group") or defaults.group,
        comment_columns=list(data.get("comment_columns") or defaults.comment_columns),
        design_columns=list(data.get("design_columns") or defaults.design_columns),
        repos_file=data.get("repos_file") or "",
    )
