"""
Data models for the Deal Feed system.

This module contains the data classes used throughout the application
for representing upstream posts, deals and configuration.
"""

from .config import (
    ClientConfig,
    Configuration,
    FeedConfig,
    LoggingConfig,
    ServerConfig,
)
from .deal import Deal
from .post import LINK_FEATURE_TYPE, LinkAnnotation, LinkFeature, RawPost

__all__ = [
    "Deal",
    "RawPost",
    "LinkAnnotation",
    "LinkFeature",
    "LINK_FEATURE_TYPE",
    "Configuration",
    "FeedConfig",
    "ServerConfig",
    "ClientConfig",
    "LoggingConfig",
]
