"""Materiality file ingestion (JSON array or header+rows CSV).

See `riskpaths/materiality/parser.py` for the header alias table.
"""

from riskpaths.materiality.errors import MalformedInput, MaterialityError, TypeMismatch, UnsupportedFormat
from riskpaths.materiality.models import MaterialityEntry
from riskpaths.materiality.parser import parse, parse_path

__all__ = [
    "MaterialityEntry",
    "MaterialityError",
    "MalformedInput",
    "TypeMismatch",
    "UnsupportedFormat",
    "parse",
    "parse_path",
]
