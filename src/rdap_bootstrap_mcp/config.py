"""
Configuration storage for RDAP Bootstrap MCP.

Bootstrap files (asn.json, ipv4.json, ipv6.json) are read from a local
registry directory. Fetching them is left to the operator.

Registry directory lookup order:
1. Environment variable (RDAP_BOOTSTRAP_DIR)
2. Config file ("registry_dir")
3. Default cache directory
"""

import json
import os
from pathlib import Path

APP_NAME = "rdap-bootstrap-mcp"

REGISTRY_DIR_ENV = "RDAP_BOOTSTRAP_DIR"
DEBUG_ENV = "RDAP_BOOTSTRAP_DEBUG"


def get_config_dir() -> Path:
    """Get the config directory for this app."""
    if os.name == 'nt':  # Windows
        base = Path(os.environ.get('APPDATA', Path.home()))
    else:  # macOS, Linux
        base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))

    return base / APP_NAME


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / 'config.json'


def get_default_registry_dir() -> Path:
    """Get the default directory holding the bootstrap files."""
    if os.name == 'nt':  # Windows
        base = Path(os.environ.get('APPDATA', Path.home()))
    else:  # macOS, Linux
        base = Path(os.environ.get('XDG_CACHE_HOME', Path.home() / '.cache'))

    return base / APP_NAME


def load_config() -> dict:
    """Load the config file, returning {} if missing or unreadable."""
    config_file = get_config_file()
    try:
        if config_file.exists():
            config = json.loads(config_file.read_text())
            if isinstance(config, dict):
                return config
    except (json.JSONDecodeError, OSError):
        pass
    return {}


def get_registry_dir() -> Path:
    """
    Get the directory holding the bootstrap files.

    Lookup order:
    1. Environment variable (RDAP_BOOTSTRAP_DIR)
    2. Config file ("registry_dir")
    3. Default cache directory
    """
    if path := os.environ.get(REGISTRY_DIR_ENV):
        return Path(path).expanduser()

    if path := load_config().get('registry_dir'):
        return Path(path).expanduser()

    return get_default_registry_dir()


def get_registry_dir_source() -> str:
    """Determine where the registry directory comes from (for display purposes)."""
    if os.environ.get(REGISTRY_DIR_ENV):
        return "environment variable"
    if load_config().get('registry_dir'):
        return "config file"
    return "default"


def set_registry_dir(path: str | Path) -> bool:
    """Store the registry directory in the config file."""
    try:
        config_dir = get_config_dir()
        config_dir.mkdir(parents=True, exist_ok=True)

        config = load_config()
        config['registry_dir'] = str(Path(path).expanduser().resolve())
        get_config_file().write_text(json.dumps(config, indent=2))
        return True
    except OSError:
        return False


def is_debug_enabled() -> bool:
    """Check whether verbose logging was requested."""
    return os.environ.get(DEBUG_ENV, "").lower() in ("1", "true", "yes")
