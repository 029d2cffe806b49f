"""monoscope configuration."""

from monoscope.config.loader import CONFIG_FILENAME, find_config_file, load_config
from monoscope.config.schema import MonoscopeConfig

__all__ = ["CONFIG_FILENAME", "MonoscopeConfig", "find_config_file", "load_config"]
