"""
OBJ Line Tokenizer

Splits one OBJ line into a bounded number of converted fields.
"""

import math
import re
from typing import Any, Callable, List, Optional

# Plain decimal numbers only: no nan/inf, no "_" separators, no hex
FLOAT_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_float(text: str) -> float:
    """Parse a finite decimal number, rejecting what float() also accepts."""
    if not FLOAT_PATTERN.fullmatch(text):
        raise ValueError(f"Not a number: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {text!r}")
    return value


def parse_int(text: str) -> int:
    """Parse a decimal integer, rejecting what int() also accepts."""
    if not INT_PATTERN.fullmatch(text):
        raise ValueError(f"Not an integer: {text!r}")
    return int(text)


class TokenizeError(ValueError):
    """A non-empty field could not be converted."""

    def __init__(self, field: str, line: str):
        self.field = field
        self.line = line
        super().__init__(f"Cannot convert {field!r} in {line!r}")


def tokenize(line: str,
             max_tokens: int = 3,
             skip_first: bool = True,
             delim: str = ' ',
             sentinel: Any = 0.0,
             convert: Optional[Callable[[str], Any]] = parse_float) -> List[Any]:
    """
    Tokenize a line into at most max_tokens converted values.

    Empty fields (two delimiters in a row, or a delimiter right at the start)
    produce the sentinel. A trailing delimiter does not open a new field.
    The result may be shorter than max_tokens; callers check its length.

    Args:
        line: Line to split
        max_tokens: Maximum number of values returned
        skip_first: Drop the first field (the "v"/"vt"/"f" prefix)
        delim: Field delimiter
        sentinel: Value placed for an empty field
        convert: Conversion applied to non-empty fields, None keeps strings

    Returns:
        List of converted values

    Raises:
        TokenizeError: A non-empty field failed conversion
    """
    if not line:
        return []

    fields = line.split(delim)
    if line.endswith(delim):
        fields.pop()
    if skip_first:
        fields = fields[1:]

    values = []
    for item in fields[:max_tokens]:
        if not item:
            values.append(sentinel)
        elif convert is None:
            values.append(item)
        else:
            try:
                values.append(convert(item))
            except ValueError:
                raise TokenizeError(item, line) from None
    return values
