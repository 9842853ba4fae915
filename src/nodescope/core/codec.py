"""
Parameter Codec - Textual encoding of node parameter values.

Parameter values cross the engine boundary as strings. Each parameter kind
has one textual form:

- bool: "true" / "false"
- f32: decimal text, e.g. "-1.5" or "3"
- u32 / i32: integer text, sign only for i32
- String: alphanumeric text
- Position: "x,y"
- PositionList: "x1,y1;x2,y2;..."
"""

import re
from typing import Any, List, Tuple

from nodescope.core.types import ParameterKind

_NUMBER = r"-?[0-9]+(?:\.[0-9]*)?"

PATTERNS = {
    ParameterKind.BOOLEAN: re.compile(r"true|false"),
    ParameterKind.FLOAT: re.compile(_NUMBER),
    ParameterKind.UNSIGNED_INT: re.compile(r"[0-9]+"),
    ParameterKind.SIGNED_INT: re.compile(r"-?[0-9]+"),
    ParameterKind.STRING: re.compile(r"[a-zA-Z0-9]*"),
    ParameterKind.POSITION: re.compile(rf"{_NUMBER},{_NUMBER}"),
}


def _position_list_well_formed(text: str) -> bool:
    for element in text.split(";"):
        coords = element.split(",")
        if len(coords) != 2:
            return False
        if not all(PATTERNS[ParameterKind.FLOAT].fullmatch(c.strip()) for c in coords):
            return False
    return True


def is_well_formed(kind: ParameterKind, text: str) -> bool:
    """
    Check a textual value against the encoding of its kind.

    Args:
        kind: The parameter kind
        text: The encoded value

    Returns:
        True if the engine can parse the text as this kind
    """
    if kind == ParameterKind.POSITION_LIST:
        return _position_list_well_formed(text)
    return PATTERNS[kind].fullmatch(text) is not None


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def encode_value(kind: ParameterKind, value: Any) -> str:
    """
    Encode a Python value as parameter text.

    Raises:
        ValueError: If the value cannot be represented in this kind
    """
    if kind == ParameterKind.BOOLEAN:
        return "true" if value else "false"
    if kind == ParameterKind.FLOAT:
        return _format_number(value)
    if kind == ParameterKind.UNSIGNED_INT:
        if int(value) < 0:
            raise ValueError(f"Unsigned parameter cannot be negative: {value}")
        return str(int(value))
    if kind == ParameterKind.SIGNED_INT:
        return str(int(value))
    if kind == ParameterKind.STRING:
        text = str(value)
        if not is_well_formed(kind, text):
            raise ValueError(f"String parameter must be alphanumeric: {text!r}")
        return text
    if kind == ParameterKind.POSITION:
        x, y = value
        return f"{_format_number(x)},{_format_number(y)}"
    if kind == ParameterKind.POSITION_LIST:
        return ";".join(f"{_format_number(x)},{_format_number(y)}" for x, y in value)
    raise ValueError(f"Unsupported parameter kind: {kind}")


def decode_value(kind: ParameterKind, text: str) -> Any:
    """
    Decode parameter text into a Python value.

    Raises:
        ValueError: If the text is not well formed for the kind
    """
    text = text.strip()
    if not is_well_formed(kind, text):
        raise ValueError(f"Malformed {kind.value} value: {text!r}")

    if kind == ParameterKind.BOOLEAN:
        return text == "true"
    if kind == ParameterKind.FLOAT:
        return float(text)
    if kind in (ParameterKind.UNSIGNED_INT, ParameterKind.SIGNED_INT):
        return int(text)
    if kind == ParameterKind.STRING:
        return text
    if kind == ParameterKind.POSITION:
        return _decode_position(text)
    return _decode_position_list(text)


def _decode_position(text: str) -> Tuple[float, float]:
    x, y = text.split(",")
    return (float(x), float(y))


def _decode_position_list(text: str) -> List[Tuple[float, float]]:
    return [_decode_position(element) for element in text.split(";")]
