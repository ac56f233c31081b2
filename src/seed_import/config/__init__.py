"""
Configuration loading for the seed import tool.
"""

from .config_loader import ImportConfig

__all__ = ["ImportConfig"]
