"""Shared configuration helpers."""

from .config import SyncSettings, load_settings

__all__ = ['SyncSettings', 'load_settings']
