"""
=============================================================================
MESSAGE CATALOG
=============================================================================

User-facing strings, keyed by language.

Templates use a single positional placeholder, "%1", which is replaced with
the caller's value. Values are NOT escaped here; escaping is the renderer's
job, right before text is embedded in HTML.

    catalog = MessageCatalog("en")
    catalog.greeting("Joey")
    # "Hello Joey, What a beautiful day. Server current date and time is"

=============================================================================
"""

from typing import Dict


PLACEHOLDER = "%1"

CATALOGS: Dict[str, Dict[str, str]] = {
    "en": {
        "greeting": "Hello %1, What a beautiful day. Server current date and time is",
    },
}


class MessageCatalog:
    """Static message templates for one language."""

    def __init__(self, language: str = "en"):
        if language not in CATALOGS:
            raise ValueError(
                f"Unknown language: {language}. Available: {', '.join(sorted(CATALOGS))}"
            )
        self.language = language
        self._messages = CATALOGS[language]

    def get(self, key: str) -> str:
        """
        Get a raw template.

        Raises:
            KeyError: If the catalog has no such message.
        """
        return self._messages[key]

    def format(self, key: str, value: str) -> str:
        """Substitute `value` at the first placeholder of template `key`."""
        return self.get(key).replace(PLACEHOLDER, value, 1)

    def greeting(self, name: str) -> str:
        """Greeting line for `name`."""
        return self.format("greeting", name)
