from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Sequence, Tuple
import logging

from riskpaths.materiality.errors import TypeMismatch
from riskpaths.materiality.models import MaterialityEntry
from riskpaths.matching.similarity import is_similar
from riskpaths.taxonomy.models import FullPath, TaxonomyPathway
from riskpaths.taxonomy.store import TaxonomyStore

logger = logging.getLogger(__name__)


class MatchLevel(str, Enum):
    DEPENDENCY = "dependency"
    IMPACT = "impact"


# field order is part of the output ordering contract
MATCH_LEVELS: Tuple[MatchLevel, ...] = (MatchLevel.DEPENDENCY, MatchLevel.IMPACT)


@dataclass(frozen=True)
class MatchedPathway:
    materiality_heatpoint: str
    matched_level: MatchLevel
    full_path: FullPath
    kpis: Tuple[str, ...]
    path_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "materialityHeatpoint": self.materiality_heatpoint,
            "matchedLevel": self.matched_level.value,
            "fullPath": self.full_path.to_dict(),
            "KPIs": list(self.kpis),
            "pathId": self.path_id,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "MatchedPathway":
        return MatchedPathway(
            materiality_heatpoint=data.get("materialityHeatpoint", ""),
            matched_level=MatchLevel(data["matchedLevel"]),
            full_path=FullPath.from_dict(data.get("fullPath") or {}),
            kpis=tuple(data.get("KPIs") or ()),
            path_id=data["pathId"],
        )


def _check_entry(idx: int, entry: MaterialityEntry) -> None:
    for attr in ("materiality_heatpoint", "dependency", "impact"):
        value = getattr(entry, attr)
        if value is not None and not isinstance(value, str):
            raise TypeMismatch(f"entry {idx}: {attr} must be a string, got {type(value).__name__}")


def _supplied(value: str | None) -> bool:
    # only None and "" are skipped; a whitespace-only term is still matched
    return bool(value)


class MatchingEngine:
    """Resolve materiality entries against a taxonomy store.

    A single entry can produce many matches: every pathway satisfying the
    similarity predicate, at each level the entry supplies. The same pathway
    matched through both ``dependency`` and ``impact`` is reported twice;
    downstream KPI totals count both.
    """

    def __init__(self, store: TaxonomyStore):
        self.store = store

    def find_matches(self, level: MatchLevel | str, term: str) -> List[TaxonomyPathway]:
        field = MatchLevel(level).value
        return [p for p in self.store if is_similar(getattr(p, field), term)]

    def match(self, entries: Sequence[MaterialityEntry]) -> List[MatchedPathway]:
        # validate everything first so a bad entry never yields partial output
        for idx, entry in enumerate(entries):
            _check_entry(idx, entry)

        out: List[MatchedPathway] = []
        for entry in entries:
            for level in MATCH_LEVELS:
                term = getattr(entry, level.value)
                if not _supplied(term):
                    continue
                for p in self.find_matches(level, term):
                    out.append(
                        MatchedPathway(
                            materiality_heatpoint=entry.materiality_heatpoint,
                            matched_level=level,
                            full_path=p.full_path(),
                            kpis=p.kpis,
                            path_id=p.path_id,
                        )
                    )
        logger.info("Matched %d entries to %d risk pathways", len(entries), len(out))
        return out


def match_materiality(entries: Sequence[MaterialityEntry], store: TaxonomyStore) -> List[MatchedPathway]:
    return MatchingEngine(store).match(entries)


def report_input(matches: Iterable[MatchedPathway]) -> Dict[str, List[Dict[str, Any]]]:
    """Payload handed to the report generator."""
    return {"reportInputData": [m.to_dict() for m in matches]}
