"""
Normalization of raw engine output into a ResultMap.

Rule table, applied by both backends:

    HTML / TEXT  raw string     -> {"result": <string>}
    MIME         engine JSON    -> {"Content-Type": ...} only
    METADATA     engine JSON    -> every entry, unmodified
"""

import json
import re
from typing import Any

from .errors import MissingContentError, ParseError
from .models import CONTENT_TYPE_KEY, RESULT_KEY, Format, ResultMap

_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_MIME_RE = re.compile(
    rf"^{_TOKEN}/{_TOKEN}"
    rf"(\s*;\s*{_TOKEN}=({_TOKEN}|\"[^\"]*\"))*\s*;?\s*$"
)


def parse_json_object(payload: str) -> ResultMap:
    """Parse a JSON document that must be an object."""
    try:
        data: Any = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON from Tika: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object from Tika, got {type(data).__name__}"
        )
    return data


def normalize_output(output: str, fmt: Format) -> ResultMap:
    if fmt in (Format.HTML, Format.TEXT):
        return {RESULT_KEY: output}
    return filter_result(parse_json_object(output), fmt)


def filter_result(parsed: ResultMap, fmt: Format) -> ResultMap:
    """Apply the MIME rule to an already parsed engine map."""
    if fmt is Format.MIME:
        return {k: v for k, v in parsed.items() if k == CONTENT_TYPE_KEY}
    return parsed


def string_field(result: ResultMap, key: str) -> str:
    """Return ``result[key]`` when it is a string."""
    value = result.get(key)
    if not isinstance(value, str):
        raise MissingContentError(f"Missing or empty content: {key}")
    return value


def parse_mime_type(value: str) -> str:
    """Validate a media type such as ``text/plain; charset=UTF-8``."""
    value = value.strip()
    if not _MIME_RE.match(value):
        raise ParseError(f"Invalid MIME type: {value!r}")
    return value
