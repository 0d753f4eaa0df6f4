"""Photo reference normalization for audit payloads.

Field clients send the ``photos`` property of an audit in whatever shape their
upstream source produced: a list of file names, a list of objects carrying
base64 data, a JSON string copied out of a spreadsheet, or a plain
semicolon-separated list of names. Everything is reduced here to one
canonical list of :class:`PhotoRecord` before an audit is persisted.

Normalization never raises. Unrecognized or unparsable input degrades to an
empty list so that a bad photo list can never block an audit submission.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from audit_shared.enums import PhotoInputKind

logger = logging.getLogger(__name__)

PHOTO_NAME_SEPARATOR = ';'


class PhotoRecord(BaseModel):
    """A single photo reference attached to an audit."""
    name: str = Field(..., min_length=1)
    data: str = Field(default="")
    type: str = Field(default="")

    model_config = ConfigDict(frozen=True)


def classify_photo_input(value: Any) -> PhotoInputKind:
    """Decide which shape a raw ``photos`` value has.

    Strings are classified on their trimmed form: only text wrapped in
    ``[`` and ``]`` is treated as JSON, everything else as a delimited list.
    """
    if value is None:
        return PhotoInputKind.ABSENT

    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return PhotoInputKind.ABSENT
        if stripped.startswith('[') and stripped.endswith(']'):
            return PhotoInputKind.JSON_STRING
        return PhotoInputKind.DELIMITED_STRING

    if isinstance(value, (Mapping, PhotoRecord)):
        return PhotoInputKind.SINGLE_OBJECT

    if isinstance(value, (list, tuple)):
        if not value:
            return PhotoInputKind.ABSENT
        if any(isinstance(item, (Mapping, PhotoRecord)) for item in value):
            return PhotoInputKind.OBJECT_LIST
        return PhotoInputKind.STRING_LIST

    return PhotoInputKind.OTHER


def try_parse_json(text: str) -> Optional[list]:
    """Parse a JSON array, tolerating the quoting damage spreadsheets introduce.

    The text is tried as-is first, then with single quotes turned into double
    quotes and newlines removed. Returns None unless one attempt yields a list.
    """
    stripped = text.strip()
    repaired = stripped.replace("'", '"').replace('\r', '').replace('\n', '')

    for candidate in (stripped, repaired):
        try:
            parsed = json.loads(candidate)
        except (ValueError, RecursionError):
            continue
        if isinstance(parsed, list):
            return parsed
        return None
    return None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _build_record(name: Any, data: Any = "", type_: Any = "") -> Optional[PhotoRecord]:
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        return None
    return PhotoRecord(name=name, data=_text(data), type=_text(type_))


def _from_delimited(text: str) -> List[PhotoRecord]:
    records = []
    for piece in text.strip().split(PHOTO_NAME_SEPARATOR):
        record = _build_record(piece)
        if record is not None:
            records.append(record)
    return records


def _from_sequence(items) -> List[PhotoRecord]:
    records = []
    for item in items:
        if isinstance(item, PhotoRecord):
            record = _build_record(item.name, item.data, item.type)
        elif isinstance(item, str):
            record = _build_record(item)
        elif isinstance(item, Mapping):
            record = _build_record(item.get('name', ''), item.get('data', ''), item.get('type', ''))
        else:
            # null, numbers, booleans and nested lists carry no usable name
            continue

        if record is not None:
            records.append(record)
    return records


def normalize_photos(value: Any) -> List[PhotoRecord]:
    """Convert any accepted ``photos`` shape into an ordered list of PhotoRecord.

    Args:
        value: The raw ``photos`` value from a request payload or CSV cell.

    Returns:
        list[PhotoRecord]: Records with non-empty trimmed names, in input order.
        Duplicate names are kept.
    """
    kind = classify_photo_input(value)

    if kind is PhotoInputKind.ABSENT:
        return []

    if kind is PhotoInputKind.DELIMITED_STRING:
        return _from_delimited(value)

    if kind is PhotoInputKind.JSON_STRING:
        parsed = try_parse_json(value)
        if parsed is None:
            logger.debug(f"Photos value looked like JSON but could not be parsed, splitting on '{PHOTO_NAME_SEPARATOR}'")
            return _from_delimited(value)
        return _from_sequence(parsed)

    if kind is PhotoInputKind.SINGLE_OBJECT:
        return _from_sequence([value])

    if kind in (PhotoInputKind.STRING_LIST, PhotoInputKind.OBJECT_LIST):
        return _from_sequence(value)

    logger.debug(f"Ignoring photos value of unsupported type {type(value).__name__}")
    return []
