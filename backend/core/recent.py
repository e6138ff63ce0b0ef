"""Bounded, most-recent-first list of past search terms."""
from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, MutableMapping, Optional


logger = logging.getLogger(__name__)

SESSION_KEY = "recent_searches"
DEFAULT_CAPACITY = 10


class RecentSearches:
    """Ordered set of search terms with case-insensitive equality.

    Adding a term that is already present moves it to the front and keeps the
    newest spelling. The oldest terms fall off once ``capacity`` is reached.
    """

    def __init__(self, terms: Optional[Iterable[str]] = None, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._terms: List[str] = []
        for term in reversed(list(terms or [])):
            self.add(term)

    def add(self, term: str) -> None:
        term = (term or "").strip()
        if not term:
            return
        folded = term.casefold()
        self._terms = [existing for existing in self._terms if existing.casefold() != folded]
        self._terms.insert(0, term)
        del self._terms[self.capacity :]

    def remove(self, term: str) -> bool:
        folded = (term or "").strip().casefold()
        before = len(self._terms)
        self._terms = [existing for existing in self._terms if existing.casefold() != folded]
        return len(self._terms) != before

    def clear(self) -> None:
        self._terms.clear()

    def __contains__(self, term: object) -> bool:
        if not isinstance(term, str):
            return False
        folded = term.strip().casefold()
        return any(existing.casefold() == folded for existing in self._terms)

    def __iter__(self):
        return iter(self._terms)

    def __len__(self) -> int:
        return len(self._terms)

    def as_list(self) -> List[str]:
        return list(self._terms)

    # -- Session persistence ------------------------------------------------
    @classmethod
    def load(cls, session: Mapping[str, object], capacity: int = DEFAULT_CAPACITY) -> RecentSearches:
        raw = session.get(SESSION_KEY)
        if raw is None:
            return cls(capacity=capacity)
        if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
            logger.warning("Ignoring malformed recent searches in session")
            return cls(capacity=capacity)
        return cls(raw, capacity=capacity)

    def save(self, session: MutableMapping[str, object]) -> None:
        session[SESSION_KEY] = self.as_list()


__all__ = ["RecentSearches", "SESSION_KEY", "DEFAULT_CAPACITY"]
