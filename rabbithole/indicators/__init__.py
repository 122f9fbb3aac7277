"""Keyword/pattern indicator tables and the density scanner."""

from rabbithole.indicators.scanner import IndicatorProfile, scan_indicators, word_count
from rabbithole.indicators.tables import Indicator, IndicatorSet

__all__ = [
    "Indicator",
    "IndicatorProfile",
    "IndicatorSet",
    "scan_indicators",
    "word_count",
]
