"""
Configuration loader for epiwrangle.
Loads YAML config and provides dotted-key access to settings.
"""
import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional


DEFAULT_CONFIG_PATH = Path(__file__).parent / "config_default.yaml"


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.
    
    Args:
        config_path: Path to config file. Defaults to the packaged config_default.yaml
        
    Returns:
        Dictionary containing all configuration settings
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    else:
        config_path = Path(config_path)
    
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    
    return config or {}


def get_setting(key: str, default: Any = None, config: Optional[Dict[str, Any]] = None) -> Any:
    """
    Read a dotted key such as ``"correlation.method"``.

    Args:
        key: Dotted path into the config mapping
        default: Returned when any part of the path is missing
        config: Mapping to read from. Defaults to the module-level CONFIG

    Returns:
        The configured value or ``default``
    """
    node: Any = CONFIG if config is None else config
    for part in key.split('.'):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def configure_logging(level: Optional[str] = None, config: Optional[Dict[str, Any]] = None) -> None:
    """Install a root handler using the configured level and format."""
    level = level or get_setting('logging.level', 'WARNING', config)
    fmt = get_setting('logging.format', logging.BASIC_FORMAT, config)
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.WARNING), format=fmt)


# Convenience: load default config on module import
try:
    CONFIG = load_config()
except FileNotFoundError:
    CONFIG = {}
