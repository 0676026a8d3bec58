"""
Service layer for the Deal Feed system.

This module contains the configuration manager, the HTTP server that
serves the deal feed and the terminal client that polls it.
"""

from .config_manager import ConfigurationManager
from .feed_server import create_app, run_server
from .feed_watcher import EndpointError, FeedWatcher

__all__ = [
    "ConfigurationManager",
    "create_app",
    "run_server",
    "FeedWatcher",
    "EndpointError",
]
