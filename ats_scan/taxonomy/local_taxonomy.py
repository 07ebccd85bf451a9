from __future__ import annotations

import json
import re
from pathlib import Path

from .provider import TaxonomyProvider


class LocalTaxonomy(TaxonomyProvider):
    def __init__(self, skills_path: str | Path | None = None) -> None:
        path = Path(skills_path) if skills_path else Path(__file__).with_name("skills.json")
        self._variants, self._categories = self._load(path)
        self._canonical_by_form: dict[str, str] = {}
        for skill, variants in self._variants.items():
            self._canonical_by_form.setdefault(skill, skill)
            for variant in variants:
                self._canonical_by_form.setdefault(variant, skill)

    @staticmethod
    def _load(path: Path) -> tuple[dict[str, tuple[str, ...]], dict[str, tuple[str, ...]]]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        variants = {
            str(skill).strip().lower(): tuple(str(item).strip().lower() for item in forms)
            for skill, forms in raw.get("skills", {}).items()
        }
        categories = {
            str(name): tuple(str(marker).strip().lower() for marker in markers)
            for name, markers in raw.get("categories", {}).items()
        }
        return variants, categories

    def normalize_skill(self, raw: str) -> tuple[str, str | None]:
        normalized = raw.strip().lower()
        return normalized, self._canonical_by_form.get(normalized)

    def known_skills(self) -> tuple[str, ...]:
        return tuple(self._variants)

    def surface_forms(self, skill: str) -> tuple[str, ...]:
        key = skill.strip().lower()
        return (key, *self._variants.get(key, ()))

    def categories(self) -> tuple[str, ...]:
        return tuple(self._categories)

    def in_category(self, skill: str, category: str) -> bool:
        lowered = skill.strip().lower()
        return any(
            re.search(rf"(?<![a-z0-9]){re.escape(marker)}(?![a-z0-9])", lowered)
            for marker in self._categories.get(category, ())
        )
