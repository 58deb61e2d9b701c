"""User preference store: favorite coins and the dark-mode flag.

Read once at startup, written through to SQLite on every mutation. Values
keep the browser encoding: "favorites" is a JSON array of coin ids and
"darkMode" is the string "true" or "false".
"""

import json

from coinwatch.exceptions import ValidationError
from coinwatch.logging import get_logger
from coinwatch.storage.database import PreferencesDatabase

logger = get_logger(__name__)

FAVORITES_KEY = "favorites"
DARK_MODE_KEY = "darkMode"


class PreferenceStore:
    """In-memory preferences synchronized to a PreferencesDatabase.

    Usage:
        store = PreferenceStore(database)
        await store.load()
        await store.toggle_favorite("bitcoin")
    """

    def __init__(self, database: PreferencesDatabase) -> None:
        self._database = database
        self._favorites: list[str] = []
        self._dark_mode = False

    @property
    def favorites(self) -> list[str]:
        """Favorite coin ids in the order they were added."""
        return list(self._favorites)

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    def is_favorite(self, coin_id: str) -> bool:
        return coin_id in self._favorites

    async def load(self) -> None:
        """Read stored preferences; missing or corrupt values fall back to defaults."""
        stored = await self._database.get_values(FAVORITES_KEY, DARK_MODE_KEY)

        raw_favorites = stored.get(FAVORITES_KEY)
        self._favorites = []
        if raw_favorites is not None:
            try:
                decoded = json.loads(raw_favorites)
            except ValueError:
                decoded = None
            if isinstance(decoded, list) and all(isinstance(x, str) for x in decoded):
                self._favorites = list(dict.fromkeys(decoded))
            else:
                logger.warning("favorites_corrupt_reset", raw=raw_favorites[:100])

        self._dark_mode = stored.get(DARK_MODE_KEY) == "true"

        logger.info(
            "preferences_loaded",
            favorites=len(self._favorites),
            dark_mode=self._dark_mode,
        )

    async def toggle_favorite(self, coin_id: str) -> bool:
        """Add or remove a coin from favorites and persist.

        Returns:
            True if the coin is a favorite after the toggle.

        Raises:
            ValidationError: coin_id is empty.
        """
        if not coin_id or not coin_id.strip():
            raise ValidationError("Coin identifier must not be empty")

        if coin_id in self._favorites:
            self._favorites.remove(coin_id)
            now_favorite = False
        else:
            self._favorites.append(coin_id)
            now_favorite = True

        await self._database.set_value(FAVORITES_KEY, json.dumps(self._favorites))
        logger.info("favorite_toggled", coin_id=coin_id, favorite=now_favorite)
        return now_favorite

    async def set_dark_mode(self, enabled: bool) -> None:
        self._dark_mode = enabled
        await self._database.set_value(DARK_MODE_KEY, "true" if enabled else "false")
        logger.info("dark_mode_set", enabled=enabled)

    async def toggle_dark_mode(self) -> bool:
        """Flip the theme flag and persist; returns the new value."""
        await self.set_dark_mode(not self._dark_mode)
        return self._dark_mode
