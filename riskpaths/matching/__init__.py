"""Matching engine: materiality entries -> taxonomy risk pathways.

- similarity.py: exact / substring / keyword-overlap predicate
- engine.py: per-entry, per-level matching in deterministic order
- summary.py: aggregate counts over a match set
"""

from riskpaths.matching.engine import MatchLevel, MatchedPathway, MatchingEngine, match_materiality, report_input
from riskpaths.matching.summary import MatchSummary, summarize

__all__ = [
    "MatchLevel",
    "MatchSummary",
    "MatchedPathway",
    "MatchingEngine",
    "match_materiality",
    "report_input",
    "summarize",
]
