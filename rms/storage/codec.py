"""
Encoding of the nested structures stored as text on records.

Points are ``[lng, lat]`` pairs, polygons and bounding boxes are lists of
points, tags are a JSON list of strings. Decoders return ``None`` for
malformed text so read paths can skip the record; encoders raise
``InvalidInput`` because the caller handed us bad data.
"""
import json
import math
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from ..errors import InvalidInput

Point = Tuple[float, float]
Polygon = List[Point]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _as_point(value: Any) -> Optional[Point]:
    if isinstance(value, dict):
        value = [value.get("lng"), value.get("lat")]
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return None
    lng, lat = value[0], value[1]
    if not (_is_number(lng) and _is_number(lat)):
        return None
    return float(lng), float(lat)


def _loads(text: Optional[str]) -> Any:
    if text is None or text == "":
        return None
    if not isinstance(text, str):
        return text
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return None


def decode_point(text: Optional[str]) -> Optional[Point]:
    return _as_point(_loads(text))


def encode_point(point: Any) -> str:
    parsed = _as_point(point)
    if parsed is None:
        raise InvalidInput(f"Invalid point {point!r}, expected [lng, lat]")
    return json.dumps(list(parsed))


def decode_polygon(text: Optional[str]) -> Optional[Polygon]:
    raw = _loads(text)
    if not isinstance(raw, list):
        return None
    points = [_as_point(p) for p in raw]
    if any(p is None for p in points):
        return None
    return points


def encode_polygon(points: Iterable[Any]) -> str:
    parsed = [_as_point(p) for p in points]
    if any(p is None for p in parsed):
        raise InvalidInput("Invalid polygon, expected a list of [lng, lat] points")
    return json.dumps([list(p) for p in parsed])


def decode_tags(text: Optional[str]) -> Optional[List[str]]:
    """Stored tag list. Absent tags decode to ``[]``, malformed ones to ``None``."""
    if text is None or text == "":
        return []
    raw = _loads(text)
    if not isinstance(raw, list) or not all(isinstance(t, str) for t in raw):
        return None
    return raw


def encode_tags(tags: Sequence[str]) -> str:
    if isinstance(tags, str) or not all(isinstance(t, str) for t in tags):
        raise InvalidInput("Tags must be a list of strings")
    return json.dumps(list(tags))


def merge_tags(existing: Sequence[str], new: Sequence[str]) -> List[str]:
    """Union keeping existing order; new tags are appended once."""
    merged: List[str] = []
    for tag in list(existing) + list(new):
        if tag not in merged:
            merged.append(tag)
    return merged


def coerce_tags_field(value: Any) -> str:
    """Accept a tag list or its JSON text for the ``tags`` column."""
    if value is None:
        return "[]"
    if isinstance(value, str):
        return value
    return encode_tags(value)


def coerce_json_field(value: Any) -> Optional[str]:
    """Pass JSON text through untouched, serialize anything else."""
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)
