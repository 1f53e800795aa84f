from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union
import logging
import math
import time

from riskpaths.materiality import MaterialityEntry, MaterialityError, parse
from riskpaths.materiality.parser import detect_format
from riskpaths.matching.engine import MatchedPathway, MatchingEngine, report_input
from riskpaths.matching.summary import MatchSummary, summarize
from riskpaths.reports.client import (
    ClientProfile,
    MaterialityDecision,
    analysis_counts,
    resolve_selected_risks,
)
from riskpaths.reports.generator import TextGenerator
from riskpaths.reports.prompts import build_client_analysis_prompt, build_report_prompt
from riskpaths.reports.store import FileReportStore, Report, ReportDraft
from riskpaths.taxonomy.store import TaxonomyStore

logger = logging.getLogger(__name__)

Content = Union[bytes, str, Callable[[], Union[bytes, str]]]


@dataclass
class Analysis:
    filename: str
    status: str = "pending"  # pending|rejected|no_matches|matched
    entries: List[MaterialityEntry] = field(default_factory=list)
    matches: List[MatchedPathway] = field(default_factory=list)
    summary: MatchSummary = field(default_factory=MatchSummary)
    events: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def rejected(self) -> bool:
        return self.status == "rejected"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "status": self.status,
            "entries": [_json_safe(e.to_dict()) for e in self.entries],
            **report_input(self.matches),
            "summary": self.summary.to_dict(),
            "events": self.events,
            "error": self.error_code,
            "message": self.error,
        }


def _json_safe(record: Dict[str, Any]) -> Dict[str, Any]:
    # NaN severities are not valid JSON; they go out as null
    return {k: (None if isinstance(v, float) and math.isnan(v) else v) for k, v in record.items()}


def _event(analysis: Analysis, stage: str, message: str):
    analysis.events.append({"stage": stage, "message": message, "ts": time.time()})


def analyze_upload(filename: str, content: Content, store: TaxonomyStore) -> Analysis:
    """Parse, match and summarize one uploaded file.

    Rejected files come back with ``status == "rejected"`` and an error code;
    a valid file with nothing matched is ``no_matches``. ``content`` may be a
    zero-argument callable so nothing is read for an unsupported extension.
    """
    analysis = Analysis(filename=filename)
    try:
        _event(analysis, "Parse", f"Parsing materiality file '{filename}'")
        detect_format(filename)
        raw = content() if callable(content) else content
        analysis.entries = parse(filename, raw)

        _event(analysis, "Match", f"Matching {len(analysis.entries)} entries against {len(store)} pathways")
        analysis.matches = MatchingEngine(store).match(analysis.entries)

        _event(analysis, "Summarize", "Computing match summary")
        analysis.summary = summarize(analysis.matches)
        analysis.status = "matched" if analysis.matches else "no_matches"
        _event(analysis, "Done", f"{analysis.summary.total_matches} matches")
    except MaterialityError as e:
        analysis.status = "rejected"
        analysis.error = str(e)
        analysis.error_code = e.code
        analysis.entries, analysis.matches, analysis.summary = [], [], MatchSummary()
        _event(analysis, "Error", str(e))
        logger.warning("Rejected materiality file %s: %s", filename, e)
    return analysis


def risk_score_band(count: int) -> str:
    if count > 10:
        return "High"
    if count > 5:
        return "Medium"
    return "Low"


def generate_materiality_report(
    user_id: str,
    client_name: str,
    matches: Sequence[MatchedPathway],
    generator: TextGenerator,
    reports: FileReportStore,
    nace_code: Optional[str] = None,
    title: Optional[str] = None,
) -> Report:
    """Generate the CRO report for a match set and save it for ``user_id``.

    Nothing is saved when generation fails; the generator's error propagates.
    """
    reports.check_user(user_id)
    if not matches:
        raise ValueError("No matched risk pathways found. Upload and process a materiality assessment first.")

    payload = report_input(matches)
    summary = summarize(matches)
    html = generator.generate(build_report_prompt(payload))
    return reports.save(user_id, ReportDraft(
        title=title or f"ESG Materiality Assessment - {client_name}",
        client_name=client_name,
        nace_code=nace_code,
        report_type="materiality_assessment",
        content=html,
        metadata={"summary": summary.to_dict(), **payload},
        material_issues=summary.unique_materiality_issues,
        risk_pathways=summary.unique_risk_paths,
        kpis=summary.total_kpis,
        risk_score=risk_score_band(summary.unique_materiality_issues),
    ))


def generate_client_analysis(
    user_id: str,
    client: ClientProfile,
    decisions: Iterable[MaterialityDecision],
    taxonomy: TaxonomyStore,
    generator: TextGenerator,
    reports: FileReportStore,
) -> Report:
    reports.check_user(user_id)
    decisions = list(decisions)
    risks = resolve_selected_risks(taxonomy, decisions)
    if not risks:
        raise ValueError("No material risk dependencies selected")

    counts = analysis_counts(risks)
    html = generator.generate(build_client_analysis_prompt(client, risks))
    return reports.save(user_id, ReportDraft(
        title=f"Client Risk Analysis - {client.client_name}",
        client_name=client.client_name,
        nace_code=client.nace_code or None,
        report_type="client_analysis",
        content=html,
        metadata={
            "analysisData": counts,
            "selectedRisks": [
                {"dependencyId": d.dependency_id, "rationale": d.rationale, "approvedBy": d.approved_by}
                for d in decisions if d.selected
            ],
        },
        material_issues=len(risks),
        risk_pathways=counts["totalTransmissionChannels"],
        kpis=counts["totalDataPoints"],
        risk_score=risk_score_band(len(risks)),
    ))
