from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class MaterialityEntry:
    materiality_heatpoint: str = ""
    dependency: Optional[str] = None  # match key
    impact: Optional[str] = None  # match key
    # carried through, not used for matching
    severity_score: Optional[float] = None
    client_id: Optional[str] = None
    sector: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """camelCase record; absent optional fields are omitted, not emptied."""
        out: Dict[str, Any] = {"materialityHeatpoint": self.materiality_heatpoint}
        for attr, wire in (
            ("dependency", "dependency"),
            ("impact", "impact"),
            ("severity_score", "severityScore"),
            ("client_id", "clientId"),
            ("sector", "sector"),
        ):
            value = getattr(self, attr)
            if value is not None:
                out[wire] = value
        return out
