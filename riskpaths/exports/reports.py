from __future__ import annotations
from collections import OrderedDict
from typing import Dict, List, Sequence

from riskpaths.matching.engine import MatchedPathway
from riskpaths.matching.summary import MatchSummary


def match_summary_md(summary: MatchSummary, matches: Sequence[MatchedPathway] = ()) -> str:
    lines = ["# Materiality Matching Summary", ""]
    for k, v in summary.to_dict().items():
        lines.append(f"- {k}: {v}")
    if matches:
        by_heatpoint: Dict[str, List[MatchedPathway]] = OrderedDict()
        for m in matches:
            by_heatpoint.setdefault(m.materiality_heatpoint, []).append(m)
        lines.append("\n## Matched Pathways")
        for heatpoint, ms in by_heatpoint.items():
            lines.append(f"\n### {heatpoint or '(unnamed heatpoint)'}")
            for m in ms:
                lines.append(f"- {m.path_id} via {m.matched_level.value}: {m.full_path.dependency}")
                lines.append(f"  - KPIs: {', '.join(m.kpis) if m.kpis else 'none'}")
    return "\n".join(lines) + "\n"
