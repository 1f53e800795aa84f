from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from riskpaths.taxonomy.models import RiskDependency
from riskpaths.taxonomy.store import TaxonomyStore


@dataclass(frozen=True)
class ClientProfile:
    client_name: str
    nace_code: str = ""
    has_financial_statements: bool = False
    has_climate_reports: bool = False


@dataclass(frozen=True)
class MaterialityDecision:
    dependency_id: str
    selected: bool = True
    rationale: str = ""
    approved_by: str = ""


@dataclass(frozen=True)
class SelectedRisk:
    dependency: RiskDependency
    category: str
    subcategory: str
    rationale: str = ""


def resolve_selected_risks(store: TaxonomyStore, decisions: Iterable[MaterialityDecision]) -> List[SelectedRisk]:
    """Selected decisions resolved against the hierarchical taxonomy; unknown ids are skipped."""
    out: List[SelectedRisk] = []
    for d in decisions:
        if not d.selected:
            continue
        resolved = store.find_dependency(d.dependency_id)
        if resolved is None:
            continue
        out.append(SelectedRisk(
            dependency=resolved.dependency,
            category=resolved.category,
            subcategory=resolved.subcategory,
            rationale=d.rationale,
        ))
    return out


def analysis_counts(risks: List[SelectedRisk]) -> Dict[str, Any]:
    return {
        "selectedRisks": len(risks),
        "totalTransmissionChannels": sum(len(r.dependency.transmission_channels) for r in risks),
        "totalDataPoints": sum(r.dependency.data_point_count() for r in risks),
    }
