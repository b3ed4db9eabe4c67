from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .provider import TaxonomyProvider

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent
_CATEGORY_PRIORITY = ("hard", "tool", "soft", "role")


class LocalTaxonomy(TaxonomyProvider):
    """Lexicon tables bundled as JSON next to this module."""

    def __init__(self, data_dir: str | Path | None = None) -> None:
        base = Path(data_dir) if data_dir else _DATA_DIR
        self._synonyms = self._load_synonyms(base / "synonyms.json")
        self._categories, self._patterns = self._load_categories(base / "categories.json")
        self._stopwords_general, self._stopwords_technical = self._load_stopwords(base / "stopwords.json")
        self._stopwords_all = self._stopwords_general | self._stopwords_technical
        self._action_verbs = MappingProxyType(self._load_json(base / "action_verbs.json"))
        self._overused_words = MappingProxyType(self._load_json(base / "overused_words.json"))
        logger.debug(
            "taxonomy_loaded synonyms=%d categorized=%d patterns=%d",
            len(self._synonyms),
            len(self._categories),
            len(self._patterns),
        )

    @staticmethod
    def _load_json(path: Path) -> dict[str, Any]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        if not isinstance(raw, dict):
            raise ValueError(f"Taxonomy file '{path}' must contain a JSON object.")
        return raw

    @classmethod
    def _load_synonyms(cls, path: Path) -> Mapping[str, str]:
        raw = cls._load_json(path)
        table = {str(key).strip().lower(): str(value).strip() for key, value in raw.items()}
        for value in list(table.values()):
            table.setdefault(value.lower(), value)
        # Follow chains so every canonical value maps to itself.
        resolved: dict[str, str] = {}
        for key, value in table.items():
            seen = {key}
            while value.lower() in table and table[value.lower()] != value and value.lower() not in seen:
                seen.add(value.lower())
                value = table[value.lower()]
            resolved[key] = value
        return MappingProxyType(resolved)

    @classmethod
    def _load_categories(cls, path: Path) -> tuple[Mapping[str, str], tuple[tuple[str, str], ...]]:
        raw = cls._load_json(path)
        dictionaries = raw.get("dictionaries") or {}
        lookup: dict[str, str] = {}
        for category in _CATEGORY_PRIORITY:
            groups = dictionaries.get(category) or {}
            for terms in groups.values():
                for term in terms:
                    lookup.setdefault(str(term).strip().lower(), category)
        patterns = tuple(
            (str(item["category"]), str(item["pattern"]))
            for item in raw.get("patterns") or []
            if item.get("category") and item.get("pattern")
        )
        return MappingProxyType(lookup), patterns

    @classmethod
    def _load_stopwords(cls, path: Path) -> tuple[frozenset[str], frozenset[str]]:
        raw = cls._load_json(path)
        general = frozenset(str(word).strip().lower() for word in raw.get("general") or [])
        technical = frozenset(str(word).strip().lower() for word in raw.get("technical") or [])
        return general, technical

    def canonical_for(self, key: str) -> str | None:
        return self._synonyms.get(key.strip().lower())

    def category_for(self, term: str) -> str | None:
        return self._categories.get(term.strip().lower())

    def category_patterns(self) -> tuple[tuple[str, str], ...]:
        return self._patterns

    def stopwords(self, include_technical: bool = True) -> frozenset[str]:
        if include_technical:
            return self._stopwords_all
        return self._stopwords_general

    def action_verbs(self) -> Mapping[str, Any]:
        return self._action_verbs

    def overused_words(self) -> Mapping[str, Mapping[str, Any]]:
        return self._overused_words

    def synonym_count(self) -> int:
        return len(self._synonyms)
