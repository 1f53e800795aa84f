from __future__ import annotations
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging
import re
import threading
import uuid

logger = logging.getLogger(__name__)

REPORT_TYPES = ("materiality_assessment", "client_analysis")
RISK_SCORES = ("Low", "Medium", "High")
UPDATABLE_FIELDS = {
    "title", "client_name", "nace_code", "content", "metadata",
    "material_issues", "risk_pathways", "kpis", "risk_score",
}

_SAFE_ID = re.compile(r"^(?!\.+$)[A-Za-z0-9_.@-]+$")


class NotAuthenticated(PermissionError):
    pass


class ReportNotFound(LookupError):
    pass


class InvalidUserId(ValueError):
    pass


@dataclass(frozen=True)
class ReportDraft:
    title: str
    client_name: str
    report_type: str  # materiality_assessment|client_analysis
    content: str
    nace_code: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    material_issues: int = 0
    risk_pathways: int = 0
    kpis: int = 0
    risk_score: Optional[str] = None  # Low|Medium|High


@dataclass
class Report:
    id: str
    user_id: str
    title: str
    client_name: str
    report_type: str
    content: str
    nace_code: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    material_issues: int = 0
    risk_pathways: int = 0
    kpis: int = 0
    risk_score: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _validate_draft(draft: ReportDraft) -> None:
    if draft.report_type not in REPORT_TYPES:
        raise ValueError(f"report_type must be one of {REPORT_TYPES}")
    if draft.risk_score is not None and draft.risk_score not in RISK_SCORES:
        raise ValueError(f"risk_score must be one of {RISK_SCORES}")
    if not draft.title or not draft.client_name:
        raise ValueError("title and client_name are required")


class FileReportStore:
    """Reports persisted as one JSON document per report under ``root/<user_id>/``.

    Every operation is scoped to the calling user; another user's reports are
    never listed, returned, changed or deleted.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self._lock = threading.Lock()

    def _user_dir(self, user_id: Optional[str]) -> Path:
        if not user_id:
            raise NotAuthenticated("User not authenticated")
        if not _SAFE_ID.match(user_id):
            raise InvalidUserId(f"invalid user id: {user_id!r}")
        return self.root / user_id

    def check_user(self, user_id: Optional[str]) -> None:
        """Raise NotAuthenticated or InvalidUserId without touching disk."""
        self._user_dir(user_id)

    def _report_path(self, user_id: str, report_id: str) -> Optional[Path]:
        udir = self._user_dir(user_id)
        if not _SAFE_ID.match(report_id or ""):
            return None
        return udir / f"{report_id}.json"

    def _write(self, path: Path, report: Report) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(report.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")

    def save(self, user_id: str, draft: ReportDraft) -> Report:
        udir = self._user_dir(user_id)
        _validate_draft(draft)
        ts = _now()
        report = Report(id=f"rep_{uuid.uuid4().hex[:12]}", user_id=user_id,
                        created_at=ts, updated_at=ts, **asdict(draft))
        with self._lock:
            self._write(udir / f"{report.id}.json", report)
        logger.info("Saved %s report %s for user %s", report.report_type, report.id, user_id)
        return report

    def get(self, user_id: str, report_id: str) -> Optional[Report]:
        path = self._report_path(user_id, report_id)
        if path is None or not path.exists():
            return None
        return Report(**json.loads(path.read_text(encoding="utf-8")))

    def list(self, user_id: str, search_term: Optional[str] = None,
             report_type: Optional[str] = None) -> List[Report]:
        """Newest first. ``search_term`` matches title or client name, case-insensitively."""
        udir = self._user_dir(user_id)
        if not udir.exists():
            return []
        out: List[Report] = []
        for p in udir.glob("*.json"):
            try:
                out.append(Report(**json.loads(p.read_text(encoding="utf-8"))))
            except (ValueError, TypeError) as e:
                logger.warning("Skipping unreadable report %s: %s", p, e)
        if search_term:
            needle = search_term.lower()
            out = [r for r in out if needle in r.title.lower() or needle in r.client_name.lower()]
        if report_type and report_type != "all":
            out = [r for r in out if r.report_type == report_type]
        out.sort(key=lambda r: (r.created_at, r.id), reverse=True)
        return out

    def update(self, user_id: str, report_id: str, **changes: Any) -> Report:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"fields cannot be updated: {sorted(unknown)}")
        with self._lock:
            report = self.get(user_id, report_id)
            if report is None:
                raise ReportNotFound(report_id)
            for k, v in changes.items():
                setattr(report, k, v)
            _validate_draft(ReportDraft(**{f.name: getattr(report, f.name) for f in fields(ReportDraft)}))
            report.updated_at = _now()
            self._write(self._report_path(user_id, report_id), report)
        return report

    def delete(self, user_id: str, report_id: str) -> bool:
        """Delete a report; returns False when the user has no such report."""
        path = self._report_path(user_id, report_id)
        with self._lock:
            if path is None or not path.exists():
                return False
            path.unlink()
        logger.info("Deleted report %s for user %s", report_id, user_id)
        return True
