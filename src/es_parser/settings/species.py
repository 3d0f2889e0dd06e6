"""
Government resolution settings for es-parser.
"""

from .base import SettingsSection


class SpeciesSettings(SettingsSection):
    """Manages fallbacks used when a record resolves to no government."""

    @property
    def plugin_fallback(self) -> bool:
        """Use the source's display name when nothing else matches."""
        return self._get_bool("species/plugin_fallback", False)

    @plugin_fallback.setter
    def plugin_fallback(self, value: bool) -> None:
        self._set("species/plugin_fallback", value)

    @property
    def outfit_fallback(self) -> bool:
        """Derive ship governments from the outfits they carry."""
        return self._get_bool("species/outfit_fallback", False)

    @outfit_fallback.setter
    def outfit_fallback(self, value: bool) -> None:
        self._set("species/outfit_fallback", value)
