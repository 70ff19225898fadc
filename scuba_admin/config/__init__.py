"""
Configuration module for the dive center admin client.
"""
from .settings import ScubaAdminConfig, get_config, load_config, reload_config

__all__ = ["ScubaAdminConfig", "get_config", "load_config", "reload_config"]
