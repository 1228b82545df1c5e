"""
Movie Browser backend: library listing with catalog metadata and range-aware streaming.
"""
from .app import create_app
from .config import BrowserConfig, load_config

__all__ = ["BrowserConfig", "create_app", "load_config"]
