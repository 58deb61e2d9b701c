"""Preference persistence -- aiosqlite-backed favorites and theme settings."""

from coinwatch.storage.database import PreferencesDatabase
from coinwatch.storage.preferences import PreferenceStore

__all__ = ["PreferenceStore", "PreferencesDatabase"]
