"""
Proven message - Configuration package.
"""

from .settings import Settings, get_settings, load_config

__all__ = ["Settings", "get_settings", "load_config"]
