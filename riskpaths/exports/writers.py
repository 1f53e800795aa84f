from __future__ import annotations
from typing import List, Dict, Any, Iterable
import csv
from dataclasses import asdict
import io

from riskpaths.matching.engine import MatchedPathway
from riskpaths.matching.summary import MatchSummary

KPI_SEPARATOR = "; "

SCHEMAS = {
    "matches": [
        "materiality_heatpoint","matched_level","path_id","dependency","impact","transition_risk",
        "transmission_channel","financial_effect","credit_risk","kpis"
    ],
    "summary": [
        "total_matches","unique_materiality_issues","dependency_matches","impact_matches",
        "unique_risk_paths","total_kpis"
    ],
}


def write_csv(rows: Iterable[Dict[str, Any]], columns: List[str]) -> str:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    w.writeheader()
    for r in rows:
        w.writerow({k: r.get(k) for k in columns})
    return buf.getvalue()


def match_row(m: MatchedPathway) -> Dict[str, Any]:
    fp = m.full_path
    return {
        "materiality_heatpoint": m.materiality_heatpoint,
        "matched_level": m.matched_level.value,
        "path_id": m.path_id,
        "dependency": fp.dependency,
        "impact": fp.impact,
        "transition_risk": fp.transition_risk,
        "transmission_channel": fp.transmission_channel,
        "financial_effect": fp.financial_effect,
        "credit_risk": fp.credit_risk,
        "kpis": KPI_SEPARATOR.join(m.kpis),
    }


def write_matches(matches: Iterable[MatchedPathway]) -> str:
    return write_csv((match_row(m) for m in matches), SCHEMAS["matches"])


def write_summary(summary: MatchSummary) -> str:
    return write_csv([asdict(summary)], SCHEMAS["summary"])
