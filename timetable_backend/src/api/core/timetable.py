"""Document operations for the timetable store.

The persisted document looks like::

    {
        "semesters": {"Semester 1 2024": {"courses": [], ..., "currentCollege": "Moss Vale"}},
        "currentSemester": "Semester 1 2024",
        "lastUpdated": "2024-01-01T00:00:00+00:00"
    }

Semester contents are opaque to the service; only the keys above are touched.
"""

import json
from datetime import datetime, timezone
from typing import Any

from src.api.core.errors import (
    Conflict,
    InvalidPayload,
    MissingName,
    MissingPayload,
    NotFound,
    StorageWriteFailure,
)
from src.api.core.storage import JsonStore

DEFAULT_SEMESTER = "Semester 1 2024"
DEFAULT_COLLEGE = "Moss Vale"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# PUBLIC_INTERFACE
def empty_semester() -> dict[str, Any]:
    """Return a new semester record with empty collections."""
    return {
        "courses": [],
        "teachers": [],
        "subjects": [],
        "schedule": [],
        "currentCollege": DEFAULT_COLLEGE,
    }


# PUBLIC_INTERFACE
def initial_document() -> dict[str, Any]:
    """Return the seed document written on first start."""
    return {
        "semesters": {DEFAULT_SEMESTER: empty_semester()},
        "currentSemester": DEFAULT_SEMESTER,
        "lastUpdated": _now_iso(),
    }


def _semesters(data: dict[str, Any]) -> dict[str, Any]:
    semesters = data.get("semesters")
    if not isinstance(semesters, dict):
        semesters = {}
        data["semesters"] = semesters
    return semesters


def _save(store: JsonStore, data: dict[str, Any], failure_message: str) -> None:
    data["lastUpdated"] = _now_iso()
    try:
        store.write_all(data)
    except StorageWriteFailure as exc:
        raise StorageWriteFailure(failure_message) from exc


# PUBLIC_INTERFACE
def read_document(store: JsonStore) -> dict[str, Any]:
    """Load the whole persisted document."""
    return store.read_all()


# PUBLIC_INTERFACE
def replace_document(store: JsonStore, document: dict[str, Any] | None) -> None:
    """Overwrite the persisted document with ``document``.

    Only presence is checked, plus that the document is strict JSON
    (no NaN or Infinity). ``lastUpdated`` is always server-assigned.
    """
    if not document:
        raise MissingPayload()
    try:
        json.dumps(document, allow_nan=False)
    except ValueError as exc:
        raise InvalidPayload() from exc
    data = dict(document)
    with store.locked():
        _save(store, data, "Failed to save database")


# PUBLIC_INTERFACE
def get_semester(store: JsonStore, name: str) -> dict[str, Any]:
    """Return the semester called ``name``."""
    semester = _semesters(store.read_all()).get(name)
    if semester is None:
        raise NotFound()
    return semester


# PUBLIC_INTERFACE
def create_semester(store: JsonStore, name: str | None) -> dict[str, Any]:
    """Add an empty semester called ``name`` and return it."""
    if not name:
        raise MissingName()
    with store.locked():
        data = store.read_all()
        semesters = _semesters(data)
        if name in semesters:
            raise Conflict()
        semester = empty_semester()
        semesters[name] = semester
        _save(store, data, "Failed to create semester")
    return semester


# PUBLIC_INTERFACE
def delete_semester(store: JsonStore, name: str) -> None:
    """Remove the semester called ``name``.

    When it was the current semester, the first remaining semester becomes
    current, or DEFAULT_SEMESTER when none are left even though no such
    semester exists.
    """
    with store.locked():
        data = store.read_all()
        semesters = _semesters(data)
        if name not in semesters:
            raise NotFound()
        del semesters[name]
        if data.get("currentSemester") == name:
            data["currentSemester"] = next(iter(semesters), DEFAULT_SEMESTER)
        _save(store, data, "Failed to delete semester")
