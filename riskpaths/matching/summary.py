from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable

from riskpaths.matching.engine import MatchLevel, MatchedPathway


@dataclass(frozen=True)
class MatchSummary:
    total_matches: int = 0
    unique_materiality_issues: int = 0
    dependency_matches: int = 0
    impact_matches: int = 0
    unique_risk_paths: int = 0
    total_kpis: int = 0  # KPI mentions, not deduplicated

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalMatches": self.total_matches,
            "uniqueMaterialityIssues": self.unique_materiality_issues,
            "dependencyMatches": self.dependency_matches,
            "impactMatches": self.impact_matches,
            "uniqueRiskPaths": self.unique_risk_paths,
            "totalKPIs": self.total_kpis,
        }


def summarize(matches: Iterable[MatchedPathway]) -> MatchSummary:
    ms = list(matches)
    return MatchSummary(
        total_matches=len(ms),
        unique_materiality_issues=len({m.materiality_heatpoint for m in ms}),
        dependency_matches=sum(1 for m in ms if m.matched_level is MatchLevel.DEPENDENCY),
        impact_matches=sum(1 for m in ms if m.matched_level is MatchLevel.IMPACT),
        unique_risk_paths=len({m.path_id for m in ms}),
        total_kpis=sum(len(m.kpis) for m in ms),
    )
