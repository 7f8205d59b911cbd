"""Configuration package for the nightclub POS service."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
