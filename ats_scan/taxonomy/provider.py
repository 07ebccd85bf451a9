from __future__ import annotations

from typing import Protocol


class TaxonomyProvider(Protocol):
    def normalize_skill(self, raw: str) -> tuple[str, str | None]:
        """Return normalized text and optional canonical skill name."""

    def known_skills(self) -> tuple[str, ...]:
        """Every canonical skill name, in dictionary order."""

    def surface_forms(self, skill: str) -> tuple[str, ...]:
        """The canonical name plus its abbreviations and spelling variants."""

    def categories(self) -> tuple[str, ...]:
        """Coarse technology categories, e.g. language, framework, database, cloud."""

    def in_category(self, skill: str, category: str) -> bool:
        """Whether a free-text skill mentions one of the category markers."""
