"""Configuration management for Todoster."""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

FILE_ENV_VAR = "TODOSTER_FILE"


def default_data_dir() -> str:
    """``$XDG_CONFIG_HOME/todoster``, falling back to ``~/.config/todoster``."""
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return str(Path(base) / "todoster")
    return str(Path.home() / ".config" / "todoster")


@dataclass
class ConfigModel:
    """Global configuration model for Todoster."""

    # File paths
    data_dir: str = field(default_factory=default_data_dir)
    todo_file: str = "todos.md"  # relative to data_dir unless absolute

    # Display preferences
    show_completed: bool = True
    no_color: bool = False

    def __post_init__(self):
        for name in ("data_dir", "todo_file"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"'{name}' must be a string")
        for name in ("show_completed", "no_color"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"'{name}' must be true or false")
        self.data_dir = os.path.expanduser(self.data_dir)

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {
            "data_dir": self.data_dir,
            "todo_file": self.todo_file,
            "show_completed": self.show_completed,
            "no_color": self.no_color,
        }
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML, ignoring unknown keys."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a YAML mapping")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
        return cls(**{k: v for k, v in data.items() if k in known})

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / "config.yaml"

    def get_todo_path(self) -> Path:
        """Get the todo file path."""
        path = Path(self.todo_file).expanduser()
        if path.is_absolute():
            return path
        return Path(self.data_dir) / path


class Config:
    """Configuration manager for Todoster."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Load configuration from file, or fall back to defaults."""
        config = ConfigModel()

        if config_path is None:
            config_path = config.get_config_path()

        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    yaml_content = f.read()
                config = ConfigModel.from_yaml(yaml_content)
                logger.debug("Loaded configuration from %s", config_path)
            except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
                logger.warning("Failed to load config from %s: %s. Using defaults.", config_path, e)
                config = ConfigModel()

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = config.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(config.to_yaml())
        logger.debug("Configuration saved to %s", config_path)

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls) -> ConfigModel:
        """Reload configuration from file."""
        cls._instance = None
        return cls.get()


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path)


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    Config.save(config, config_path)


def resolve_todo_path(file_option: Optional[str], config: ConfigModel) -> Path:
    """Pick the todo file: ``--file``, then ``$TODOSTER_FILE``, then config."""
    if file_option:
        return Path(file_option).expanduser()
    env_path = os.environ.get(FILE_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return config.get_todo_path()
