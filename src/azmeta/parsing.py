import json
import math
import re
from decimal import Decimal
from typing import Any

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_INTEGER_LITERAL = re.compile(r"-?[0-9]+")
_decoder = json.JSONDecoder()


def extract_tag_value(tag: str, tags: str) -> str:
    """Extracts the value of a tag from a ``name:value;name:value`` list.

    Returns "" if the tag isn't in the list.
    """
    values: dict[str, str] = {}
    for entry in tags.split(";"):
        name, sep, value = entry.partition(":")
        if sep:
            values[name] = value
    return values.get(tag, "")


def _skip_whitespace(document: str, pos: int) -> int:
    return _WHITESPACE.match(document, pos).end()


def _find_member(document: str, pos: int, segment: str) -> int:
    """Returns the offset of the value addressed by segment in the container at pos.

    Returns -1 if there is no such value. Raises ValueError on malformed JSON
    met before the value is found.
    """
    opener = document[pos : pos + 1]
    if opener == "{":
        closer = "}"
    elif opener == "[" and segment.isascii() and segment.isdigit():
        closer = "]"
        index = int(segment)
    else:
        return -1

    pos = _skip_whitespace(document, pos + 1)
    if document[pos : pos + 1] == closer:
        return -1

    position = 0
    while True:
        if closer == "}":
            name, pos = _decoder.raw_decode(document, pos)
            if not isinstance(name, str):
                raise ValueError(f"object key expected at offset {pos}")
            pos = _skip_whitespace(document, pos)
            if document[pos : pos + 1] != ":":
                raise ValueError(f"':' expected at offset {pos}")
            pos = _skip_whitespace(document, pos + 1)
            found = name == segment
        else:
            found = position == index
        if found:
            return pos

        _, pos = _decoder.raw_decode(document, pos)
        pos = _skip_whitespace(document, pos)
        separator = document[pos : pos + 1]
        if separator == closer:
            return -1
        if separator != ",":
            raise ValueError(f"',' or {closer!r} expected at offset {pos}")
        pos = _skip_whitespace(document, pos + 1)
        position += 1


def _format_number(raw: str, value: float) -> str:
    # Integer literals keep their text; any other number is printed as the
    # shortest decimal that reads back to the same float, without exponent.
    if _INTEGER_LITERAL.fullmatch(raw):
        return raw
    number = float(value)
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    return format(Decimal(repr(number)).normalize(), "f")


def _to_string(value: Any, raw: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return _format_number(raw, value)
    return raw


def extract_json_value(document: str, path: str) -> str:
    """Extracts a JSON value addressed by a path formatted as 'a/b/0/c'.

    Numeric segments index into arrays, and the first of duplicated object
    keys wins. Strings are returned unquoted, ``null`` as "", objects and
    arrays as their text in the document. Returns "" if the path doesn't
    resolve or the document is not valid JSON up to the addressed value.
    """
    try:
        pos = _skip_whitespace(document, 0)
        for segment in path.split("/"):
            pos = _find_member(document, pos, segment)
            if pos < 0:
                return ""
        value, end = _decoder.raw_decode(document, pos)
    except ValueError:
        return ""
    return _to_string(value, document[pos:end])
