"""Load and validate Calendar Reminder configuration from config.yaml."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("calreminder")

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "config.yaml"

_DEFAULTS: dict[str, Any] = {
    "poll_interval": 2,
    "notifications": "macos",
    "log_dir": "logs",
    "log_level": "INFO",
    "calendar": {"osascript_timeout": 60},
}

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load configuration from YAML file, with env-var overrides.

    Environment variable overrides (if set):
        CALREMINDER_TARGET_FILE  -> target_file
        CALREMINDER_WORKSPACE    -> workspace_root
        CALREMINDER_LOG_DIR      -> log_dir
        CALREMINDER_LOG_LEVEL    -> log_level
    """
    path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as fh:
        loaded = yaml.safe_load(fh) or {}

    cfg: dict[str, Any] = {**_DEFAULTS, **loaded}
    cfg["calendar"] = {**_DEFAULTS["calendar"], **(loaded.get("calendar") or {})}

    _env_override(cfg, "CALREMINDER_TARGET_FILE", "target_file")
    _env_override(cfg, "CALREMINDER_WORKSPACE", "workspace_root")
    _env_override(cfg, "CALREMINDER_LOG_DIR", "log_dir")
    _env_override(cfg, "CALREMINDER_LOG_LEVEL", "log_level")

    _validate(cfg)
    return cfg


def _env_override(cfg: dict, env_key: str, *keys: str) -> None:
    """Override a nested config value from an environment variable."""
    val = os.environ.get(env_key)
    if val is None:
        return
    target = cfg
    for k in keys[:-1]:
        target = target.setdefault(k, {})
    target[keys[-1]] = val


def _validate(cfg: dict[str, Any]) -> None:
    """Check required keys; a missing target file is only a warning."""
    if not cfg.get("target_file"):
        raise ValueError("Config is missing 'target_file'")

    if cfg["notifications"] not in ("macos", "log"):
        raise ValueError(f"Unknown notifications mode: {cfg['notifications']!r}")

    try:
        cfg["poll_interval"] = float(cfg["poll_interval"])
    except (TypeError, ValueError):
        raise ValueError(f"poll_interval must be a number: {cfg['poll_interval']!r}") from None
    if cfg["poll_interval"] <= 0:
        raise ValueError("poll_interval must be positive")

    target = resolve_target_file(cfg)
    if not target.is_file():
        logger.warning("Target file not found at %s; waiting for it to be created", target)


def resolve_target_file(cfg: dict[str, Any]) -> Path:
    """Return the absolute path of the watched document.

    A relative ``target_file`` is resolved against ``workspace_root``
    (or the current directory when that is unset).
    """
    target = Path(cfg["target_file"]).expanduser()
    if not target.is_absolute():
        root = Path(cfg.get("workspace_root") or Path.cwd()).expanduser()
        target = root / target
    return target.resolve()


def setup_logging(cfg: dict[str, Any]) -> None:
    """Configure root logging: stderr + rotating file."""
    log_dir = Path(cfg["log_dir"]).expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)

    from logging.handlers import RotatingFileHandler

    fmt = logging.Formatter(_LOG_FORMAT)

    root = logging.getLogger("calreminder")
    root.setLevel(getattr(logging, str(cfg.get("log_level", "INFO")).upper(), logging.INFO))
    if root.handlers:
        return

    # stderr
    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    root.addHandler(sh)

    # rotating file
    fh = RotatingFileHandler(log_dir / "calreminder.log", maxBytes=5_000_000, backupCount=3)
    fh.setFormatter(fmt)
    root.addHandler(fh)
