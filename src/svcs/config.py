"""Author configuration and repository settings."""

from typing import Optional

import yaml
from pydantic import ValidationError

from .context import RepositoryContext
from .core import RepositorySettings
from .errors import ConfigError
from .ops import _atomic_write_text


def load_settings(ctx: RepositoryContext) -> RepositorySettings:
    """Load settings from vcs/settings.yaml, or defaults if absent.

    Raises:
        ConfigError: If the file is not valid YAML or has invalid values
    """
    path = ctx.settings_path
    if not path.exists():
        return RepositorySettings()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")

    try:
        return RepositorySettings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e


def save_settings(settings: RepositorySettings, ctx: RepositoryContext) -> None:
    """Save settings atomically."""
    text = yaml.safe_dump(settings.model_dump(), default_flow_style=False, sort_keys=False)
    _atomic_write_text(ctx.settings_path, text)


def read_author(ctx: RepositoryContext) -> Optional[str]:
    """Return the configured author name, or None if unset."""
    path = ctx.config_path
    if not path.exists():
        return None
    lines = path.read_text(encoding="utf-8").splitlines()
    if not lines or not lines[0]:
        return None
    return lines[0]


def write_author(ctx: RepositoryContext, name: str) -> None:
    """Store ``name`` as the author for future commits."""
    _atomic_write_text(ctx.config_path, name)
