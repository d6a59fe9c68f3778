# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: PayloadCodec
# -----------------------------------------------------------------------------
"""
Conversions between record field values and point payload values.

Payload values are plain JSON-compatible types: ``str`` scalars, ``List[str]``
and ``List[int]``. Nothing in here raises; bad or missing input degrades to
empty results.
"""
from typing import Any, Dict, Iterable, List, Optional

from utility.logging_utils import get_logger

logger = get_logger(__name__)


def int_list_value(values: Iterable[str] | None, *, warn: bool = False) -> List[int]:
    """
    Parse each entry as an integer. Entries that do not parse are dropped
    (lossy on purpose: manifests occasionally carry symbolic event ids).
    """
    out: List[int] = []
    for v in values or []:
        try:
            out.append(int(str(v).strip()))
        except (TypeError, ValueError):
            if warn:
                logger.warning("Dropping non-numeric entry %r from integer list", v)
    return out


def string_list_value(values: Iterable[Any] | None) -> List[str]:
    return [str(v) for v in values or []]


def string_value(value: Any, default: str = "") -> str:
    if value is None:
        return default
    text = str(value)
    return text if text else default


def extract_field_from_payload(payload: Optional[Dict[str, Any]], field_name: str) -> List[str]:
    """
    Return the list stored under ``field_name`` as strings. A missing field,
    or one that does not hold a list, yields an empty list.
    """
    if not payload or field_name not in payload:
        return []
    raw = payload[field_name]
    if not isinstance(raw, (list, tuple)):
        return []
    return [str(v) for v in raw if v is not None]


def extract_string_from_payload(payload: Optional[Dict[str, Any]], field_name: str, default: str = "") -> str:
    if not payload:
        return default
    return string_value(payload.get(field_name), default)


def extract_int_from_payload(payload: Optional[Dict[str, Any]], field_name: str, default: int = 0) -> int:
    if not payload:
        return default
    try:
        return int(payload.get(field_name, default))
    except (TypeError, ValueError):
        return default
