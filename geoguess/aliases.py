"""
Alias index: normalized alias -> country id.

Ambiguous aliases (two different countries normalize to the same key) are
dropped entirely rather than resolving to whichever country came first.
Canonical names are written back last so a country can always be found
by its own name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from geoguess.catalog import Catalog
from geoguess.config import get_settings
from geoguess.models import Country
from geoguess.normalize import normalize_term

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Suggestion:
    id: str
    name: str
    normalized_name: str


def build_alias_map(countries: Iterable[Country]) -> dict[str, str]:
    countries = list(countries)
    index: dict[str, str] = {}
    collisions: set[str] = set()

    for country in countries:
        for term in (country.name, *country.aliases):
            key = normalize_term(term)
            if not key:
                continue
            existing = index.get(key)
            if existing is not None and existing != country.id:
                collisions.add(key)
                continue
            index[key] = country.id

    for key in collisions:
        index.pop(key, None)

    for country in countries:
        index[normalize_term(country.name)] = country.id

    if collisions:
        logger.debug("Dropped %d ambiguous aliases: %s", len(collisions), sorted(collisions))
    return index


class AliasIndex:
    """Read-only lookup built once per catalog."""

    def __init__(self, catalog: Catalog, mapping: dict[str, str]):
        self.catalog = catalog
        self._mapping = mapping
        self._search = [
            Suggestion(c.id, c.name, normalize_term(c.name)) for c in catalog
        ]

    @classmethod
    def build(cls, catalog: Catalog) -> AliasIndex:
        return cls(catalog, build_alias_map(catalog))

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, key: object) -> bool:
        return key in self._mapping

    def get(self, key: str) -> Optional[str]:
        """Raw lookup of an already-normalized key."""
        return self._mapping.get(key)

    def resolve(self, text: str) -> Optional[Country]:
        key = normalize_term(text)
        if not key:
            return None
        country_id = self._mapping.get(key)
        if country_id is None:
            return None
        return self.catalog.get(country_id)

    def resolve_input(self, text: str, selected_id: Optional[str] = None) -> Optional[Country]:
        """
        Prefer an explicitly selected suggestion while the input still shows
        its name; otherwise resolve the typed text.
        """
        if selected_id:
            selected = self.catalog.get(selected_id)
            if selected is not None and normalize_term(selected.name) == normalize_term(text):
                return selected
        return self.resolve(text)

    def suggest(self, text: str, limit: Optional[int] = None) -> list[Suggestion]:
        """Prefix matches first, then substring matches, in catalog order."""
        if limit is None:
            limit = get_settings().game.max_suggestions
        query = normalize_term(text)
        if not query:
            return self._search[:limit]

        starts_with: list[Suggestion] = []
        includes: list[Suggestion] = []
        for entry in self._search:
            if entry.normalized_name.startswith(query):
                starts_with.append(entry)
            elif query in entry.normalized_name:
                includes.append(entry)
        return (starts_with + includes)[:limit]
