import os
import logging
from pathlib import Path
from typing import Optional
from platformdirs import user_config_dir
from .core.config import ClipConfig, ConfigManager


logger = logging.getLogger(__name__)


CONFIG_DIR = Path(user_config_dir("cliptree"))
CONFIG_FILE = CONFIG_DIR / "config.yaml"


def getflag(name, default=False):
    default = "true" if default else "false"
    return os.environ.get(name, default).lower() in ("true", "1")


# These are initialized to None so that importing the library never touches
# the file system. Applications call initialize_config() to load the file.
config_mgr: Optional[ConfigManager] = None
config: Optional[ClipConfig] = None  # Alias for config_mgr.config after init
_default_config: Optional[ClipConfig] = None


def initialize_config(config_file: Optional[Path] = None):
    """
    Loads the configuration file and applies environment overrides.
    It is safe to call multiple times (idempotent).
    """
    global config_mgr, config

    if config_mgr is not None:
        return

    path = Path(config_file) if config_file else CONFIG_FILE
    logger.info(f"Initializing configuration from {path}")
    config_mgr = ConfigManager(path)
    config = config_mgr.config

    if "CLIPTREE_VALIDATE_POLYGONS" in os.environ:
        config.set_validate_polygons(
            getflag("CLIPTREE_VALIDATE_POLYGONS", config.validate_polygons)
        )
    logger.info(
        f"Config loaded. validate_polygons={config.validate_polygons}"
    )


def get_config() -> ClipConfig:
    """The active configuration, or the defaults before initialization."""
    global _default_config
    if config is not None:
        return config
    if _default_config is None:
        _default_config = ClipConfig()
    return _default_config


def reset_config():
    """Forgets any loaded configuration. Mainly for tests."""
    global config_mgr, config, _default_config
    config_mgr = None
    config = None
    _default_config = None
