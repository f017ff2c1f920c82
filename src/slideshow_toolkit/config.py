"""
Toolkit Configuration

Settings for the refinement advisor and logging, loaded from YAML or JSON
with environment overrides. A missing API key is not an error: the pipeline
runs on heuristics alone.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field

API_KEY_ENV = "ANTHROPIC_API_KEY"
DEBUG_ENV = "SLIDESHOW_DEBUG"

# Value shipped in example .env files; treated as "no key"
PLACEHOLDER_API_KEY = "your_api_key_here"

_TRUTHY = {"1", "true", "yes", "on"}


class ToolkitConfig(BaseModel):
    """Configuration for deck loading and layout refinement."""
    api_key: Optional[str] = None
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = Field(default=500, ge=1)
    temperature: float = Field(default=0.3, ge=0.0, le=1.0)
    excerpt_length: int = Field(default=500, ge=0)
    debug: bool = False

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY


def create_minimal_config() -> ToolkitConfig:
    """Return a configuration with every default applied."""
    return ToolkitConfig()


def _read_config_file(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> ToolkitConfig:
    """Load configuration from a YAML/JSON file and the environment.

    Args:
        path: Optional config file (.yaml, .yml or .json)
        environ: Environment mapping, defaults to os.environ

    Returns:
        ToolkitConfig with environment values taking precedence
    """
    environ = os.environ if environ is None else environ
    data: Dict[str, Any] = {}

    if path is not None:
        data = _read_config_file(Path(path))

    env_key = environ.get(API_KEY_ENV)
    if env_key:
        data["api_key"] = env_key

    env_debug = environ.get(DEBUG_ENV)
    if env_debug is not None:
        data["debug"] = env_debug.strip().lower() in _TRUTHY

    return ToolkitConfig(**data)


def save_config(config: ToolkitConfig, path: Union[str, Path]) -> None:
    """Save configuration as YAML or JSON depending on the file suffix.

    The API key is never written to disk.
    """
    path = Path(path)
    data = config.model_dump(mode="json", exclude={"api_key"})
    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            yaml.safe_dump(data, f, sort_keys=False)
        else:
            json.dump(data, f, indent=2)


def configure_logging(debug: bool = False) -> None:
    """Set the package log level according to the debug toggle."""
    package_logger = logging.getLogger("slideshow_toolkit")
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if not logging.getLogger().handlers and not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s: %(message)s"))
        package_logger.addHandler(handler)
