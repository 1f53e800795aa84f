from __future__ import annotations
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
import json
from pathlib import Path

from riskpaths.taxonomy.data import EMBEDDED_RISK_TAXONOMY, HIERARCHICAL_RISK_TAXONOMY
from riskpaths.taxonomy.models import ResolvedDependency, RiskCategory, TaxonomyPathway


class TaxonomyStore:
    """Read-only, ordered collection of risk pathways.

    Built once at process start and passed by reference to the matching engine,
    so alternate taxonomies can be swapped in without touching module state.
    """

    __slots__ = ("_pathways", "_by_id", "_hierarchy")

    def __init__(self, pathways: Iterable[TaxonomyPathway],
                 hierarchy: Iterable[RiskCategory] = ()):
        items: Tuple[TaxonomyPathway, ...] = tuple(pathways)
        by_id: Dict[str, TaxonomyPathway] = {}
        for p in items:
            for field in ("dependency", "impact"):
                if not isinstance(getattr(p, field), str):
                    raise TypeError(f"pathway {p.path_id!r}: {field} must be a string")
            if p.path_id in by_id:
                raise ValueError(f"duplicate pathId in taxonomy: {p.path_id}")
            by_id[p.path_id] = p
        self._pathways = items
        self._by_id = by_id
        self._hierarchy: Tuple[RiskCategory, ...] = tuple(hierarchy)

    def __iter__(self) -> Iterator[TaxonomyPathway]:
        return iter(self._pathways)

    def __len__(self) -> int:
        return len(self._pathways)

    def __repr__(self) -> str:
        return f"TaxonomyStore({len(self._pathways)} pathways)"

    @property
    def pathways(self) -> Tuple[TaxonomyPathway, ...]:
        return self._pathways

    @property
    def hierarchy(self) -> Tuple[RiskCategory, ...]:
        return self._hierarchy

    def get(self, path_id: str) -> Optional[TaxonomyPathway]:
        return self._by_id.get(path_id)

    def path_ids(self) -> List[str]:
        return [p.path_id for p in self._pathways]

    def find_dependency(self, dependency_id: str) -> Optional[ResolvedDependency]:
        """Look up a hierarchical dependency by id, with its category/subcategory titles."""
        for cat in self._hierarchy:
            for sub in cat.subcategories:
                for dep in sub.dependencies:
                    if dep.id == dependency_id:
                        return ResolvedDependency(dependency=dep, category=cat.title, subcategory=sub.title)
        return None

    @staticmethod
    def from_records(records: Iterable[Dict[str, Any]],
                     hierarchy: Iterable[RiskCategory] = ()) -> "TaxonomyStore":
        return TaxonomyStore((TaxonomyPathway.from_dict(r) for r in records), hierarchy)

    @staticmethod
    def from_json_path(path: str | Path) -> "TaxonomyStore":
        """Load pathways from a JSON file holding either an array of records or
        ``{"pathways": [...]}``."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("pathways", [])
        return TaxonomyStore.from_records(data)


def default_store() -> TaxonomyStore:
    return TaxonomyStore(EMBEDDED_RISK_TAXONOMY, HIERARCHICAL_RISK_TAXONOMY)
