"""
Duplicate candidate search over a catalog corpus.

Matching strategies, first one that fires wins:
- Exact matching (same normalized name or id) - score 100
- Contains matching (one normalized token contains the other) - score 80
- Partial matching (word overlap with name and id words) - score 50 + 10/word

All functions are pure and have no I/O dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Callable, Generic, Optional, TypeVar

from .buckets import century_from_year
from .models import TIER_CONTAINS, TIER_EXACT, TIER_PARTIAL, Entity, Identified, MatchResult
from .normalize import id_words, normalize, text_words

logger = logging.getLogger(__name__)

EXACT_SCORE = 100
CONTAINS_SCORE = 80
PARTIAL_BASE_SCORE = 50
PARTIAL_WORD_SCORE = 10

T = TypeVar("T", bound=Identified)


def match_exact(query_token: str, name_token: str, id_token: str) -> bool:
    return query_token == name_token or query_token == id_token


def match_contains(query_token: str, name_token: str) -> bool:
    """
    Check if either token contains the other.

    Both directions count, so "Basilica of St. Peter" is found for the query
    "St. Peter" and a long query still finds a short name. Very short queries
    match almost everything; no minimum length is enforced.
    """
    if not name_token:
        return False
    return query_token in name_token or name_token in query_token


def count_word_matches(
    query_words: list[str], name_words: list[str], entity_id_words: list[str]
) -> int:
    """
    Count query words overlapping name words and id words.

    Each query word counts once against the name words and once more,
    independently, against the id words, so it contributes up to 2.

    Examples:
        ["first", "council", "nicaea"] vs name ["first", "council", "of", "nicaea"]
        and id ["first", "council", "of", "nicaea"] → 6
    """
    matches = 0
    for query_word in query_words:
        if _overlaps(query_word, name_words):
            matches += 1
        if _overlaps(query_word, entity_id_words):
            matches += 1
    return matches


def _overlaps(word: str, candidates: list[str]) -> bool:
    return any(word in candidate or candidate in word for candidate in candidates)


class EntityMatcher(Generic[T]):
    """
    Scores a query against every entity of a corpus.

    Works for any entity kind exposing ``id`` and ``name``.

    Usage:
        matcher = EntityMatcher(people)
        for result in matcher.find_matches("Francis Xavier"):
            print(result.entity.id, result.score, result.tier)
    """

    def __init__(
        self,
        corpus: Iterable[T],
        entity_filter: Optional[Callable[[T], bool]] = None,
    ) -> None:
        self.corpus = list(corpus)
        self.entity_filter = entity_filter

    def find_matches(self, query: str) -> list[MatchResult]:
        """
        Rank candidate duplicates of ``query``.

        Results are sorted by descending score; entities with equal scores
        keep their corpus order.
        """
        query_token = normalize(query)
        if not query_token:
            logger.debug("Query %r normalizes to nothing; no matches", query)
            return []
        query_words = text_words(query)

        results: list[MatchResult] = []
        for entity in self.corpus:
            if self.entity_filter is not None and not self.entity_filter(entity):
                continue
            result = self.score(query_token, query_words, entity)
            if result is not None:
                results.append(result)

        logger.debug("Query %r matched %d of %d entities", query, len(results), len(self.corpus))
        return sorted(results, key=lambda result: result.score, reverse=True)

    @staticmethod
    def score(query_token: str, query_words: list[str], entity: T) -> Optional[MatchResult]:
        name_token = normalize(entity.name)
        id_token = normalize(entity.id)

        if match_exact(query_token, name_token, id_token):
            return MatchResult(entity=entity, score=EXACT_SCORE, tier=TIER_EXACT)

        if match_contains(query_token, name_token):
            return MatchResult(entity=entity, score=CONTAINS_SCORE, tier=TIER_CONTAINS)

        word_matches = count_word_matches(query_words, text_words(entity.name), id_words(entity.id))
        if word_matches:
            return MatchResult(
                entity=entity,
                score=PARTIAL_BASE_SCORE + PARTIAL_WORD_SCORE * word_matches,
                tier=TIER_PARTIAL,
            )
        return None


def find_matches(
    query: str,
    corpus: Iterable[T],
    entity_filter: Optional[Callable[[T], bool]] = None,
) -> list[MatchResult]:
    """Shortcut for ``EntityMatcher(corpus, entity_filter).find_matches(query)``."""
    return EntityMatcher(corpus, entity_filter).find_matches(query)


def kind_is(*kinds: str) -> Callable[[Entity], bool]:
    wanted = set(kinds)
    return lambda entity: entity.kind in wanted


def attribute_equals(key: str, value: Any) -> Callable[[Entity], bool]:
    """Filter such as ``attribute_equals("type", "council")``."""
    return lambda entity: entity.get(key) == value


def in_century(date_field: str, century: int) -> Callable[[Entity], bool]:
    """Keep entities whose ``date_field`` falls in ``century``."""

    def predicate(entity: Entity) -> bool:
        year = entity.year(date_field)
        return year is not None and century_from_year(year) == century

    return predicate
