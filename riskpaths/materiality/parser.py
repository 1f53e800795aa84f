from __future__ import annotations
from typing import Any, Dict, List, Optional
import json
import logging
import math
import re
from pathlib import Path

from riskpaths.materiality.errors import MalformedInput, TypeMismatch, UnsupportedFormat
from riskpaths.materiality.models import MaterialityEntry

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".json", ".csv")

# lower-cased CSV header -> MaterialityEntry attribute
HEADER_ALIASES: Dict[str, str] = {
    "materialityheatpoint": "materiality_heatpoint",
    "materiality_heatpoint": "materiality_heatpoint",
    "heatpoint": "materiality_heatpoint",
    "dependency": "dependency",
    "impact": "impact",
    "severityscore": "severity_score",
    "severity_score": "severity_score",
    "severity": "severity_score",
    "clientid": "client_id",
    "client_id": "client_id",
    "sector": "sector",
}

# JSON key -> attribute; the text fields are the ones matching reads
_JSON_FIELDS = (
    ("materialityHeatpoint", "materiality_heatpoint"),
    ("dependency", "dependency"),
    ("impact", "impact"),
    ("severityScore", "severity_score"),
    ("clientId", "client_id"),
    ("sector", "sector"),
)
_TEXT_KEYS = {"materialityHeatpoint", "dependency", "impact"}

_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def detect_format(filename: str) -> str:
    """Return ``json`` or ``csv`` for a supported file name, else raise UnsupportedFormat."""
    name = (filename or "").lower()
    for ext in SUPPORTED_EXTENSIONS:
        if name.endswith(ext):
            return ext[1:]
    raise UnsupportedFormat(f"Unsupported file format for {filename!r}. Please use JSON or CSV.")


def parse(filename: str, content: bytes | str) -> List[MaterialityEntry]:
    """Parse an uploaded materiality file into entries.

    The extension is checked before ``content`` is touched. Bytes are decoded as
    UTF-8 (a leading BOM is tolerated).
    """
    fmt = detect_format(filename)
    text = _decode(content)
    entries = parse_json(text) if fmt == "json" else parse_csv(text)
    logger.info("Parsed %d materiality entries from %s", len(entries), filename)
    return entries


def parse_path(path: str | Path) -> List[MaterialityEntry]:
    p = Path(path)
    detect_format(p.name)
    return parse(p.name, p.read_bytes())


def _decode(content: bytes | str) -> str:
    if isinstance(content, (bytes, bytearray)):
        try:
            return bytes(content).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedInput(f"file is not valid UTF-8: {e}") from e
    if isinstance(content, str):
        return content.lstrip("\ufeff")
    raise TypeMismatch(f"file content must be bytes or str, got {type(content).__name__}")


def _reject_constant(name: str):
    raise MalformedInput(f"invalid JSON: {name} is not a JSON value")


def parse_json(text: str) -> List[MaterialityEntry]:
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedInput(f"invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise MalformedInput("JSON materiality file must contain an array of entries")

    out: List[MaterialityEntry] = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise MalformedInput(f"entry {idx} is not an object")
        fields: Dict[str, Any] = {}
        for key, attr in _JSON_FIELDS:
            if key not in item or item[key] is None:
                continue
            value = item[key]
            if key in _TEXT_KEYS and not isinstance(value, str):
                raise TypeMismatch(f"entry {idx}: {key} must be a string, got {type(value).__name__}")
            fields[attr] = value
        out.append(MaterialityEntry(**fields))
    return out


def parse_csv(text: str) -> List[MaterialityEntry]:
    """Header row plus data rows, comma-delimited, no quoting.

    Header names are resolved through HEADER_ALIASES (case-insensitive); unknown
    columns are ignored. Short rows leave the trailing fields absent.
    """
    stripped = text.strip()
    if not stripped:
        raise MalformedInput("CSV file is empty")
    lines = stripped.split("\n")
    headers = [HEADER_ALIASES.get(h.strip().lower()) for h in lines[0].split(",")]

    out: List[MaterialityEntry] = []
    for line in lines[1:]:
        if not line.strip():
            continue
        values = [v.strip() for v in line.split(",")]
        fields: Dict[str, Any] = {}
        for idx, attr in enumerate(headers):
            if attr is None or idx >= len(values):
                continue
            value = values[idx]
            fields[attr] = parse_severity(value) if attr == "severity_score" else value
        out.append(MaterialityEntry(**fields))

    if not out:
        raise MalformedInput("CSV file has a header but no data rows")
    return out


def parse_severity(value: Optional[str]) -> float:
    """Leading-float parse: '7.5' -> 7.5, '7.5pts' -> 7.5, 'high' -> nan."""
    m = _LEADING_FLOAT.match((value or "").strip())
    if not m:
        return math.nan
    return float(m.group(0))
