"""
YAML configuration loader for the TPA decision engine.

Loads configuration from YAML files with environment variable substitution.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from tpa_engine.config.models import EngineConfig


def _substitute_env_vars(value: Any) -> Any:
    """
    Recursively substitute environment variables in configuration values.

    Supports ${VAR_NAME} and ${VAR_NAME:-default} syntax.
    """
    if isinstance(value, str):
        pattern = r"\$\{([^}:]+)(?::-([^}]*))?\}"

        def replace(match: re.Match) -> str:
            var_name = match.group(1)
            default = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default)

        return re.sub(pattern, replace, value)
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    return value


def load_yaml(path: Path) -> dict[str, Any]:
    """
    Load a YAML file and substitute environment variables.

    Args:
        path: Path to the YAML file

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        yaml.YAMLError: If the YAML is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        return {}

    return _substitute_env_vars(raw_config)


CONFIG_PATH_ENV = "TPA_ENGINE_CONFIG"


def _default_config_paths() -> list[Path]:
    return [
        Path("config/engine.yaml"),
        Path("engine.yaml"),
        Path.home() / ".tpa_engine" / "engine.yaml",
    ]


def resolve_config_path(config_path: str | Path | None = None) -> Path:
    """
    Pick the configuration file to load.

    An explicit path wins, then the TPA_ENGINE_CONFIG environment variable,
    then the first existing default path.

    Raises:
        FileNotFoundError: If no path is given and no default file exists
    """
    if config_path is not None:
        return Path(config_path)

    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)

    default_paths = _default_config_paths()
    for path in default_paths:
        if path.exists():
            return path

    raise FileNotFoundError(
        "No configuration file found. Set "
        f"{CONFIG_PATH_ENV} or create one of: "
        f"{', '.join(str(p) for p in default_paths)}"
    )


def load_config(
    config_path: str | Path | None = None,
    override_values: dict[str, Any] | None = None,
) -> EngineConfig:
    """
    Load engine configuration from a YAML file.

    Args:
        config_path: Path to configuration YAML file. See resolve_config_path
                    for the lookup order when None.
        override_values: Values applied over the file. Keys may be nested
                    dicts or dotted paths such as "eligibility.max_future_days".

    Returns:
        Validated EngineConfig object

    Raises:
        FileNotFoundError: If configuration file not found
        ValidationError: If configuration is invalid
    """
    config_dict = load_yaml(resolve_config_path(config_path))

    if override_values:
        config_dict = _deep_merge(config_dict, _expand_dotted(override_values))

    return EngineConfig(**config_dict)


def _expand_dotted(values: dict[str, Any]) -> dict[str, Any]:
    """Turn {"a.b": 1} into {"a": {"b": 1}}, merging keys that share a prefix."""
    expanded: dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, dict):
            value = _expand_dotted(value)
        head, *rest = key.split(".")
        for part in reversed(rest):
            value = {part: value}
        expanded = _deep_merge(expanded, {head: value})
    return expanded


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries, with override taking precedence.

    Args:
        base: Base dictionary
        override: Dictionary with values to override

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
