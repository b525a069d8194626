"""Configuration loading from config.yaml and environment overrides."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from app.models.config import AppConfig

logger = logging.getLogger("homelab")

DEFAULT_CONFIG_PATH = Path("config.yaml")

# environment variable -> (section, key)
ENV_OVERRIDES = {
    "HOMELAB_SECRET_KEY": ("auth", "secret_key"),
    "HOMELAB_DEFAULT_USERNAME": ("auth", "default_username"),
    "HOMELAB_DEFAULT_PASSWORD": ("auth", "default_password"),
    "HOMELAB_TOKEN_EXPIRY_HOURS": ("auth", "token_expiry_hours"),
    "HOMELAB_PORT": ("app", "port"),
    "HOMELAB_ENVIRONMENT": ("app", "environment"),
    "HOMELAB_DATABASE": ("paths", "database"),
    "HOMELAB_WOL_BROADCAST": ("wol", "broadcast_address"),
    "HOMELAB_WOL_PORT": ("wol", "port"),
}


def load_yaml(file_path: Path) -> Dict[str, Any]:
    """
    Load YAML file and return as dictionary.

    Args:
        file_path: Path to YAML file

    Returns:
        Parsed YAML content, or an empty dict if the file is empty

    Raises:
        FileNotFoundError: If file doesn't exist
        yaml.YAMLError: If file is not valid YAML
    """
    if not file_path.exists():
        raise FileNotFoundError(f"YAML file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
            logger.debug(f"Loaded YAML from: {file_path}")
            return data or {}
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML file {file_path}: {e}")
            raise


def apply_env_overrides(data: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    """Overlay HOMELAB_* environment variables onto raw config data."""
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        section_data = data.get(section) or {}
        section_data[key] = value
        data[section] = section_data
    return data


def load_config(config_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Build the application configuration.

    The YAML file is optional; every setting has a default. Environment
    variables take precedence over the file.

    Args:
        config_path: Path to config.yaml (defaults to $HOMELAB_CONFIG or ./config.yaml)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated application configuration
    """
    environ = os.environ if environ is None else environ
    if config_path is None:
        config_path = Path(environ.get("HOMELAB_CONFIG", str(DEFAULT_CONFIG_PATH)))

    data: Dict[str, Any] = {}
    if config_path.exists():
        # Empty sections ("wol:" with nothing under it) fall back to defaults
        data = {section: values for section, values in load_yaml(config_path).items() if values is not None}
    else:
        logger.debug(f"No config file at {config_path}, using defaults")

    return AppConfig(**apply_env_overrides(data, environ))
