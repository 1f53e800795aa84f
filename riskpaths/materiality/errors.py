from __future__ import annotations


class MaterialityError(ValueError):
    """Base class for rejected materiality files. ``code`` is stable for API bodies."""
    code = "materiality_error"


class UnsupportedFormat(MaterialityError):
    code = "unsupported_format"


class MalformedInput(MaterialityError):
    code = "malformed_input"


class TypeMismatch(MaterialityError, TypeError):
    """A text field holds a non-string value; never stringified silently."""
    code = "type_mismatch"
