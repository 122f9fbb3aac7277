"""Named, versioned keyword and pattern tables.

Every heuristic in the pipeline reads its vocabulary from an IndicatorSet
defined here, so a table can be replaced (or swapped for a learned
classifier) without touching the scoring code that consumes it. Bump the
version of a table whenever its contents change; scores computed against
different table versions are not comparable.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional


@dataclass(frozen=True)
class Indicator:
    """A single phrase or regex with its weight.

    Literal phrases match case-insensitively as substrings. Regex
    indicators carry their own flags.

    Attributes:
        pattern: Literal phrase or regular expression source
        weight: Contribution per match (interpretation is up to the consumer)
        regex: Whether ``pattern`` is a regular expression
        flags: ``re`` flags for regex indicators
    """

    pattern: str
    weight: float = 1.0
    regex: bool = False
    flags: int = re.IGNORECASE
    _compiled: Optional[re.Pattern] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        source = self.pattern if self.regex else re.escape(self.pattern)
        flags = self.flags if self.regex else re.IGNORECASE
        object.__setattr__(self, "_compiled", re.compile(source, flags))

    @property
    def compiled(self) -> re.Pattern:
        return self._compiled

    def count(self, text: str) -> int:
        """Number of non-overlapping matches in ``text``."""
        return sum(1 for _ in self._compiled.finditer(text))

    def matches(self, text: str) -> list[str]:
        """Full matched substrings, in order of appearance."""
        return [m.group(0) for m in self._compiled.finditer(text)]

    def found_in(self, text: str) -> bool:
        return self._compiled.search(text) is not None


@dataclass(frozen=True)
class IndicatorSet:
    """A named, versioned list of indicators for one category."""

    name: str
    version: str
    indicators: tuple[Indicator, ...]

    def __iter__(self) -> Iterator[Indicator]:
        return iter(self.indicators)

    def __len__(self) -> int:
        return len(self.indicators)

    def count(self, text: str) -> int:
        """Total matches of every indicator in ``text``."""
        return sum(indicator.count(text) for indicator in self.indicators)

    def weighted_count(self, text: str) -> float:
        """Sum of ``matches x weight`` over all indicators."""
        return sum(indicator.count(text) * indicator.weight for indicator in self.indicators)

    def hits(self, text: str) -> list[str]:
        """Patterns of the indicators found at least once, in table order."""
        return [indicator.pattern for indicator in self.indicators if indicator.found_in(text)]

    def distinct_hits(self, text: str) -> int:
        return len(self.hits(text))

    def hit_weight(self, text: str) -> float:
        """Sum of weights of the indicators found at least once."""
        return sum(indicator.weight for indicator in self.indicators if indicator.found_in(text))

    def any_in(self, text: str) -> bool:
        return any(indicator.found_in(text) for indicator in self.indicators)


def phrases(name: str, version: str, words: list[str], weight: float = 1.0) -> IndicatorSet:
    """Build a table of literal phrases sharing one weight."""
    return IndicatorSet(name, version, tuple(Indicator(word, weight) for word in words))


def patterns(
    name: str,
    version: str,
    sources: list[str],
    weight: float = 1.0,
    flags: int = re.IGNORECASE,
) -> IndicatorSet:
    """Build a table of regexes sharing one weight and flag set."""
    return IndicatorSet(
        name,
        version,
        tuple(Indicator(source, weight, regex=True, flags=flags) for source in sources),
    )


# --- Brilliance ---

NOVELTY = phrases("novelty", "1", [
    "paradigm", "breakthrough", "revolutionary", "unprecedented",
    "novel", "innovative", "transforms", "reframes", "reconceptualize",
    "emergent", "synthesis", "transcends", "unifies", "bridges",
], weight=0.1)

COMPLEXITY = phrases("complexity", "1", [
    "multidimensional", "interconnected", "recursive", "meta",
    "systemic", "holistic", "dialectical", "paradox",
], weight=0.05)

TRANSFORMATIVE = phrases("transformative", "1", [
    "transform", "revolution", "breakthrough", "game-changer",
    "paradigm shift", "fundamental", "revolutionary", "unprecedented",
], weight=0.15)

PARADIGM_SHIFT = phrases("paradigm_shift", "1", [
    "paradigm shift", "fundamental change", "revolutionary", "transforms everything",
    "changes the game", "redefines", "overturns", "challenges assumptions",
], weight=0.2)

PARADIGM = phrases("paradigm", "1", [
    "ontological", "epistemic", "paradigm", "meta-", "recursive",
    "self-referential", "emergent", "systemic", "holistic", "dialectical",
    "transcendent", "immanent", "liminal", "apophatic", "cataphatic",
])

DEPTH = phrases("depth", "1", [
    "being", "existence", "reality", "consciousness", "essence", "substance",
    "fundamental", "foundational", "ground", "absolute", "infinite", "eternal",
    "necessity", "contingency", "possibility", "actuality", "potentiality",
])

INSIGHT_CUES = phrases("insight_cues", "1", [
    "therefore", "thus", "consequently", "this means", "the key insight",
])

# Checked in order; the first family found decides the category
CATEGORY_FAMILIES: dict[str, IndicatorSet] = {
    "paradigmatic": phrases("paradigmatic", "1", ["paradigm", "framework", "model"]),
    "practical": phrases("practical", "1", ["application", "implementation", "solution"]),
    "aesthetic": phrases("aesthetic", "1", ["elegant", "beautiful", "harmony"]),
}
DEFAULT_CATEGORY = "generative"

# --- Embedding novelty ---

LINGUISTIC_NOVELTY = IndicatorSet("linguistic_novelty", "1", (
    Indicator(r"\b(like|as if|imagine|metaphorically|symbolically)\b", regex=True),
    Indicator(r"\b\w+-\w+\b", regex=True, flags=0),
    Indicator(r"\b(trans|meta|ultra|proto|quasi|pseudo)\w+\b", regex=True),
    Indicator(r"\b(timeless|eternal|momentary|infinite|finite)\b", regex=True),
    Indicator(r"\b(yet|although|however|nevertheless|simultaneously)\b", regex=True),
))

# Keywords matched as substrings; a hit outside the current domain counts as a crossing
DOMAIN_KEYWORDS: dict[str, IndicatorSet] = {
    "consciousness": phrases("consciousness", "1", [
        "awareness", "perception", "qualia", "subjective", "experience",
        "phenomenology", "mind", "mental", "cognitive", "sentience",
    ]),
    "ethics": phrases("ethics", "1", [
        "moral", "ethical", "virtue", "duty", "obligation", "rights",
        "justice", "good", "evil", "responsibility", "consequentialism",
    ]),
    "metaphysics": phrases("metaphysics", "1", [
        "being", "existence", "reality", "substance", "causation",
        "time", "space", "identity", "change", "ontology",
    ]),
    "epistemology": phrases("epistemology", "1", [
        "knowledge", "belief", "truth", "justification", "skepticism",
        "empiricism", "rationalism", "evidence", "certainty", "doubt",
    ]),
    "logic": phrases("logic", "1", [
        "argument", "premise", "conclusion", "valid", "sound",
        "fallacy", "reasoning", "inference", "contradiction", "paradox",
    ]),
}

# --- Research enforcement ---

SPECULATION = phrases("speculation", "1", [
    "might", "could", "possibly", "perhaps", "maybe", "hypothetically",
    "theoretically", "potentially", "presumably", "arguably", "allegedly",
    "speculative", "conceptual", "abstract", "metaphysical", "paradigmatic",
])

JARGON = IndicatorSet("jargon", "1", (
    Indicator(r"\b[A-Z]{3,}\b", regex=True, flags=0),
    Indicator(r"\b\w{12,}\b", regex=True, flags=0),
    Indicator(r"quantum\s+\w+", regex=True),
    Indicator(r"paradigm(atic)?", regex=True),
    Indicator(r"ontological|epistemological|metaphysical", regex=True),
))

EVIDENCE = phrases("evidence", "1", [
    "according to", "research shows", "studies indicate", "data reveals",
    "evidence suggests", "documented", "peer-reviewed", "published",
    "empirical", "measured", "observed", "verified", "validated",
])

ETHICS_KEYWORDS = phrases("ethics_keywords", "1", [
    "AI ethics", "bias", "fairness", "harm", "manipulation", "discrimination",
    "privacy", "consent", "surveillance", "human rights", "dignity", "autonomy",
    "deception", "misinformation", "exploitation", "vulnerable populations",
], weight=0.1)

ETHICS_RISK_PATTERNS = patterns("ethics_risk_patterns", "1", [
    r"harmful to (humans?|society|individuals?)",
    r"could be used to (manipulate|deceive|exploit)",
    r"without consent",
    r"bypass (safety|ethical) (measures|guidelines)",
    r"discriminat(e|ion) against",
], weight=0.3)

# --- Concept extraction ---

CONCEPT_PATTERNS = IndicatorSet("concepts", "1", (
    Indicator(
        r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\s+(?i:principle|theory|model|framework|paradigm)\b",
        regex=True,
        flags=0,
    ),
    Indicator(r"\b(?:concept|notion|idea) of\s+[a-z][a-z\s]*?(?=[\s,.]|$)", regex=True),
    Indicator(r"\b[A-Z]{2,}\b", regex=True, flags=0),
))

# Categories reported by a default scan
DEFAULT_SCAN_SETS: tuple[IndicatorSet, ...] = (
    NOVELTY,
    COMPLEXITY,
    PARADIGM,
    DEPTH,
    SPECULATION,
    JARGON,
    EVIDENCE,
    ETHICS_KEYWORDS,
    ETHICS_RISK_PATTERNS,
)
