from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Tuple

# camelCase wire names used by uploaded taxonomies and report payloads
_WIRE_FIELDS = (
    ("dependency", "dependency"),
    ("impact", "impact"),
    ("transition_risk", "transitionRisk"),
    ("transmission_channel", "transmissionChannel"),
    ("financial_effect", "financialEffect"),
    ("credit_risk", "creditRisk"),
)


@dataclass(frozen=True)
class FullPath:
    dependency: str
    impact: str
    transition_risk: str
    transmission_channel: str
    financial_effect: str
    credit_risk: str

    def to_dict(self) -> Dict[str, str]:
        return {wire: getattr(self, attr) for attr, wire in _WIRE_FIELDS}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "FullPath":
        return FullPath(**{attr: data.get(wire, "") for attr, wire in _WIRE_FIELDS})


@dataclass(frozen=True)
class TaxonomyPathway:
    path_id: str
    dependency: str  # match key
    impact: str  # match key
    transition_risk: str
    transmission_channel: str
    financial_effect: str
    credit_risk: str
    kpis: Tuple[str, ...] = ()

    def full_path(self) -> FullPath:
        return FullPath(
            dependency=self.dependency,
            impact=self.impact,
            transition_risk=self.transition_risk,
            transmission_channel=self.transmission_channel,
            financial_effect=self.financial_effect,
            credit_risk=self.credit_risk,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"pathId": self.path_id, **self.full_path().to_dict(), "KPIs": list(self.kpis)}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "TaxonomyPathway":
        """Build a pathway from a camelCase record (``pathId``, ``KPIs`` ...).

        Accepts ``kpis`` as an alternative spelling of ``KPIs``.
        """
        kpis = data.get("KPIs", data.get("kpis")) or []
        return TaxonomyPathway(
            path_id=data["pathId"],
            **{attr: data.get(wire, "") for attr, wire in _WIRE_FIELDS},
            kpis=tuple(kpis),
        )


# Hierarchical taxonomy: category -> subcategory -> dependency -> transmission channels

@dataclass(frozen=True)
class DataRequirement:
    description: str
    data_points: Tuple[str, ...]


@dataclass(frozen=True)
class TransmissionChannel:
    id: str
    description: str
    quantified_impact: str
    pd_driver: str
    data_requirement: DataRequirement


@dataclass(frozen=True)
class RiskDependency:
    id: str
    title: str
    description: str
    tfm_metric: str
    transmission_channels: Tuple[TransmissionChannel, ...]

    def data_point_count(self) -> int:
        return sum(len(c.data_requirement.data_points) for c in self.transmission_channels)


@dataclass(frozen=True)
class RiskSubcategory:
    id: str
    title: str
    dependencies: Tuple[RiskDependency, ...]


@dataclass(frozen=True)
class RiskCategory:
    id: str
    title: str
    subcategories: Tuple[RiskSubcategory, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "subcategories": [
                {
                    "id": sub.id,
                    "title": sub.title,
                    "dependencies": [
                        {
                            "id": dep.id,
                            "title": dep.title,
                            "description": dep.description,
                            "tfmMetric": dep.tfm_metric,
                            "transmissionChannels": [
                                {
                                    "id": ch.id,
                                    "description": ch.description,
                                    "quantifiedImpact": ch.quantified_impact,
                                    "pdDriver": ch.pd_driver,
                                    "dataRequirement": {
                                        "description": ch.data_requirement.description,
                                        "dataPoints": list(ch.data_requirement.data_points),
                                    },
                                }
                                for ch in dep.transmission_channels
                            ],
                        }
                        for dep in sub.dependencies
                    ],
                }
                for sub in self.subcategories
            ],
        }


@dataclass(frozen=True)
class ResolvedDependency:
    """A dependency together with the titles of the branch it sits in."""
    dependency: RiskDependency
    category: str
    subcategory: str
