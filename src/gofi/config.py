"""Configuration management for gofi."""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional
from dotenv import load_dotenv


def get_global_config_path() -> Path:
    """Get path to global config: ~/.gofi.json"""
    return Path.home() / ".gofi.json"


def get_workspace_config_path(workspace: Optional[Path] = None) -> Path:
    """Get path to workspace config: workspace/.gofi.json"""
    ws = workspace or Path.cwd()
    return ws / ".gofi.json"


def load_json_config(path: Path) -> dict:
    """Load config from JSON file if it exists."""
    if path.exists():
        try:
            data = json.loads(path.read_text())
        except (json.JSONDecodeError, IOError):
            return {}
        if isinstance(data, dict):
            return data
    return {}


# Environment variable -> (field name, converter)
ENV_VARS = {
    "GOFI_GO": ("go_binary", str),
    "GOFI_GOIMPORTS": ("goimports_binary", str),
    "GOFI_MODULE": ("module_path", str),
    "GOFI_TIMEOUT": ("run_timeout", float),
    "GOFI_MAX_FIXES": ("max_fix_attempts", int),
    "GOFI_HISTORY": ("history_file", Path),
}


@dataclass
class Config:
    """Configuration for an interactive gofi session."""

    go_binary: str = "go"
    goimports_binary: str = "goimports"
    module_path: str = "gofi.localhost"
    run_timeout: float = 30.0
    max_fix_attempts: int = 16
    prompt: str = "> "
    continuation_prompt: str = ". "
    history_file: Optional[Path] = field(
        default_factory=lambda: Path.home() / ".gofi" / "history"
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        config = cls(**kwargs)
        config.run_timeout = float(config.run_timeout)
        config.max_fix_attempts = int(config.max_fix_attempts)
        if config.history_file is not None:
            config.history_file = Path(config.history_file).expanduser()
        return config

    @classmethod
    def from_json(cls, workspace: Optional[Path] = None) -> "Config":
        """Load configuration from JSON files.

        Priority (later overrides earlier):
        1. ~/.gofi.json (global)
        2. workspace/.gofi.json (workspace-specific)
        """
        config_data = {}
        config_data.update(load_json_config(get_global_config_path()))
        config_data.update(load_json_config(get_workspace_config_path(workspace)))
        return cls.from_dict(config_data)

    @classmethod
    def load(cls, workspace: Optional[Path] = None, env_path: Optional[Path] = None) -> "Config":
        """Load JSON configuration, then apply GOFI_* environment overrides."""
        if env_path and env_path.exists():
            load_dotenv(env_path)
        else:
            load_dotenv()

        config = cls.from_json(workspace)
        for var, (name, convert) in ENV_VARS.items():
            value = os.getenv(var)
            if value:
                setattr(config, name, convert(value))
        return config

    def validate(self) -> bool:
        """Validate the configuration."""
        if self.max_fix_attempts < 1:
            raise ValueError("max_fix_attempts must be at least 1")
        if self.run_timeout < 0:
            raise ValueError("run_timeout must not be negative (0 disables it)")
        if not self.go_binary:
            raise ValueError("go_binary is required")
        return True
