"""
Configuration for the pointcrawl service.
"""

from .config import Settings, settings

__all__ = ['Settings', 'settings']
