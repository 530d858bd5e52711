"""Configuration management for IronList.

Two pieces of state live outside the task file:

- ``config.yaml``: display and notifier preferences (``ConfigModel``).
- ``.ironlist_default``: a one-line file naming the default task file
  (``DefaultPathStore``).

Both are loaded once by the CLI and handed down explicitly.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import List, Optional

import yaml


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "IRONLIST_CONFIG"
DEFAULT_CONFIG_DIR = "~/.ironlist"
DEFAULT_PATH_FILENAME = ".ironlist_default"


class ConfigError(Exception):
    """Raised when the configuration file cannot be read."""


@dataclass
class ConfigModel:
    """User preferences for IronList."""

    # Task file used when --file is not given and no default is saved
    default_file: Optional[str] = None

    # Display preferences
    description_width: int = 40
    tag_width: int = 20
    no_color: bool = False

    # Notifier defaults
    notify_time: str = "09:00"
    notify_interval: Optional[int] = None
    notify_limit: int = 10

    # Logging
    log_file: Optional[str] = None

    def __post_init__(self):
        """Expand user paths and clamp widths."""
        if self.default_file:
            self.default_file = os.path.expanduser(self.default_file)
        if self.log_file:
            self.log_file = os.path.expanduser(self.log_file)
        self.description_width = max(1, int(self.description_width))
        self.tag_width = max(1, int(self.tag_width))

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        return yaml.dump(data, default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML, ignoring keys it does not know."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping of option names to values")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def get_default_file(self) -> Optional[Path]:
        return Path(self.default_file) if self.default_file else None


def get_config_path(config_path: Optional[Path] = None) -> Path:
    """Resolve the config file location.

    Priority: explicit argument, then ``IRONLIST_CONFIG``, then
    ``~/.ironlist/config.yaml``.
    """
    if config_path is not None:
        return Path(config_path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path(DEFAULT_CONFIG_DIR).expanduser() / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file, or defaults when the file is absent."""
    path = get_config_path(config_path)
    if not path.exists():
        logger.debug(f"No configuration at {path}; using defaults")
        return ConfigModel()

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = ConfigModel.from_yaml(f.read())
    except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    logger.debug(f"Loaded configuration from {path}")
    return config


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> Path:
    """Save configuration to file and return where it went."""
    path = get_config_path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(config.to_yaml())
    logger.info(f"Configuration saved to {path}")
    return path


def _home_dir() -> Optional[Path]:
    try:
        return Path.home()
    except RuntimeError:
        return None


class DefaultPathStore:
    """Persists the default task file path as a single line of text.

    The home directory copy is preferred; the current directory is the
    fallback when no home directory can be determined or for reading a
    project-local default.
    """

    def __init__(self, home: Optional[Path] = None, cwd: Optional[Path] = None):
        self.home = home if home is not None else _home_dir()
        self.cwd = cwd if cwd is not None else Path.cwd()

    @property
    def candidates(self) -> List[Path]:
        paths = []
        if self.home is not None:
            paths.append(self.home / DEFAULT_PATH_FILENAME)
        paths.append(self.cwd / DEFAULT_PATH_FILENAME)
        return paths

    def load_default(self) -> Optional[Path]:
        """Return the saved default path, or None if nothing usable is stored."""
        for candidate in self.candidates:
            if not candidate.exists():
                continue
            try:
                text = candidate.read_text(encoding="utf-8").strip()
            except OSError as e:
                logger.warning(f"Could not read {candidate}: {e}")
                continue
            if text:
                return Path(text)
        return None

    def save_default(self, path: Path) -> Path:
        """Store ``path`` as the default and return the file it was written to."""
        target = self.candidates[0]
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"{path}\n", encoding="utf-8")
        logger.info(f"Saved default path {path} to {target}")
        return target

    def clear_default(self) -> Optional[Path]:
        """Remove the saved default; returns the file removed, if any."""
        for candidate in self.candidates:
            if candidate.exists():
                candidate.unlink()
                logger.info(f"Removed saved default {candidate}")
                return candidate
        return None

