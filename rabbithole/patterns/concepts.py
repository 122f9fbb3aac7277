"""Pattern-based concept extraction."""

from rabbithole.indicators.tables import CONCEPT_PATTERNS, IndicatorSet


def extract_concepts(text: str, table: IndicatorSet = CONCEPT_PATTERNS) -> list[str]:
    """Extract concept phrases from ``text``.

    Recognises a capitalised phrase followed by a cue word ("Free Energy
    principle"), "concept/notion/idea of X" and acronyms. Results are
    deduplicated, keeping first-seen order.
    """
    concepts: list[str] = []
    seen: set[str] = set()
    for indicator in table:
        for match in indicator.matches(text):
            concept = match.strip().rstrip(",.").strip()
            if concept and concept not in seen:
                seen.add(concept)
                concepts.append(concept)
    return concepts
