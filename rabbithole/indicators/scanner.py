"""Indicator density scanning.

One primitive serves every keyword heuristic: count matches of each table
in a text and normalise per 100 words.
"""

from dataclasses import dataclass, field
from typing import Iterable

from rabbithole.indicators.tables import DEFAULT_SCAN_SETS, IndicatorSet


@dataclass
class IndicatorProfile:
    """Per-category indicator statistics for one text.

    Attributes:
        word_count: Whitespace-delimited word count of the text
        densities: Matches per 100 words, capped at 1.0
        counts: Raw match counts
        distinct: Number of distinct indicators found
        weighted: Sum of ``matches x weight``
    """

    word_count: int
    densities: dict[str, float] = field(default_factory=dict)
    counts: dict[str, int] = field(default_factory=dict)
    distinct: dict[str, int] = field(default_factory=dict)
    weighted: dict[str, float] = field(default_factory=dict)

    def density(self, category: str) -> float:
        return self.densities.get(category, 0.0)

    def percentage(self, category: str) -> float:
        """Matches as a percentage of total words (uncapped)."""
        if self.word_count == 0:
            return 0.0
        return self.counts.get(category, 0) / self.word_count * 100.0


def word_count(text: str) -> int:
    return len(text.split())


def scan_indicators(
    text: str,
    indicator_sets: Iterable[IndicatorSet] = DEFAULT_SCAN_SETS,
) -> IndicatorProfile:
    """Scan ``text`` against each indicator table.

    Args:
        text: Text to scan
        indicator_sets: Tables to apply; each becomes one category

    Returns:
        IndicatorProfile. Empty text yields zero densities for every
        requested category.
    """
    words = word_count(text)
    profile = IndicatorProfile(word_count=words)

    for table in indicator_sets:
        if words == 0:
            matches, distinct, weighted = 0, 0, 0.0
        else:
            matches = table.count(text)
            distinct = table.distinct_hits(text)
            weighted = table.weighted_count(text)

        profile.counts[table.name] = matches
        profile.distinct[table.name] = distinct
        profile.weighted[table.name] = weighted
        profile.densities[table.name] = 0.0 if words == 0 else min(1.0, matches / (words / 100.0))

    return profile
