"""
OBJ Conversion Errors

Every failure while converting an OBJ stream is fatal. Each error keeps the
offending line or descriptor text so the caller can report it.
"""

from typing import Optional


class ObjConversionError(ValueError):
    """Base class for errors raised while converting an OBJ stream."""

    message = "Conversion failed"

    def __init__(self, text: str = "", detail: str = "",
                 line_number: Optional[int] = None):
        self.text = text
        self.detail = detail
        # Filled in by the reader when raised below the line level
        self.line_number = line_number
        super().__init__(text)

    def __str__(self):
        msg = f"{self.message}: {self.text}" if self.text else self.message
        if self.detail:
            msg += f" ({self.detail})"
        if self.line_number is not None:
            msg = f"line {self.line_number}: {msg}"
        return msg


class MalformedAttributeLine(ObjConversionError):
    """A v/vt/vn line could not be parsed as numbers."""
    message = "Malformed vertex attribute"


class EmptyPositionSet(ObjConversionError):
    """No vertex position lines were found."""
    message = "Could not parse any vertex positions"


class UnexpectedEndOfStream(ObjConversionError):
    """The stream ended after an attribute block, before any face data."""
    message = "Unexpected end of file"


class MalformedFaceDegree(ObjConversionError):
    """A face line does not have exactly 3 or 4 vertices."""
    message = "All faces must be triangles or quads"


class MalformedVertexDescriptor(ObjConversionError):
    """A p/t/n descriptor could not be split into integer indices."""
    message = "Malformed vertex"


class OutOfRangeReference(ObjConversionError):
    """A descriptor references an attribute outside its array."""
    message = "Vertex data out of bounds"

    def __init__(self, text: str, kind: str, index: int):
        self.kind = kind
        self.index = index
        super().__init__(text, f"{kind} {index}")
