import pytest

from src.api.core import timetable
from src.api.core.errors import Conflict, InvalidPayload, MissingName, MissingPayload, NotFound
from src.api.core.storage import JsonStore


@pytest.fixture
def store(tmp_path):
    return JsonStore(str(tmp_path / "timetable.json"), timetable.initial_document)


def test_replace_stamps_last_updated(store):
    document = {
        "semesters": {"Term 1": timetable.empty_semester()},
        "currentSemester": "Term 1",
        "lastUpdated": "2000-01-01T00:00:00+00:00",
    }
    timetable.replace_document(store, document)

    saved = timetable.read_document(store)
    assert saved["semesters"] == document["semesters"]
    assert saved["currentSemester"] == "Term 1"
    assert saved["lastUpdated"] > "2000-01-01T00:00:00+00:00"


@pytest.mark.parametrize("document", [None, {}])
def test_replace_requires_payload(store, document):
    with pytest.raises(MissingPayload):
        timetable.replace_document(store, document)



def test_replace_rejects_nan_and_keeps_store(store):
    before = timetable.read_document(store)
    with pytest.raises(InvalidPayload):
        timetable.replace_document(store, {"semesters": {}, "ratio": float("inf")})
    assert timetable.read_document(store) == before

def test_create_and_get_semester(store):
    created = timetable.create_semester(store, "X")

    assert created == timetable.empty_semester()
    assert timetable.get_semester(store, "X") == {
        "courses": [],
        "teachers": [],
        "subjects": [],
        "schedule": [],
        "currentCollege": "Moss Vale",
    }


@pytest.mark.parametrize("name", [None, ""])
def test_create_requires_name(store, name):
    with pytest.raises(MissingName):
        timetable.create_semester(store, name)


def test_create_duplicate_leaves_store_unchanged(store):
    before = timetable.read_document(store)
    with pytest.raises(Conflict):
        timetable.create_semester(store, "Semester 1 2024")
    assert timetable.read_document(store) == before


def test_get_missing_semester(store):
    with pytest.raises(NotFound):
        timetable.get_semester(store, "Nope")


def test_get_semester_without_semesters_mapping(store):
    timetable.replace_document(store, {"currentSemester": "Term 1"})
    with pytest.raises(NotFound):
        timetable.get_semester(store, "Term 1")


def test_delete_other_semester_keeps_current(store):
    timetable.create_semester(store, "Term 2")
    timetable.delete_semester(store, "Term 2")

    data = timetable.read_document(store)
    assert data["currentSemester"] == "Semester 1 2024"
    assert list(data["semesters"]) == ["Semester 1 2024"]


def test_delete_current_moves_to_first_remaining(store):
    timetable.create_semester(store, "Term 2")
    timetable.create_semester(store, "Term 3")
    timetable.delete_semester(store, "Semester 1 2024")

    assert timetable.read_document(store)["currentSemester"] == "Term 2"


def test_delete_last_semester_falls_back_to_default_name(store):
    timetable.replace_document(
        store, {"semesters": {"Only": timetable.empty_semester()}, "currentSemester": "Only"}
    )
    timetable.delete_semester(store, "Only")

    data = timetable.read_document(store)
    assert data["semesters"] == {}
    assert data["currentSemester"] == timetable.DEFAULT_SEMESTER


def test_delete_missing_semester_leaves_store_unchanged(store):
    before = timetable.read_document(store)
    with pytest.raises(NotFound):
        timetable.delete_semester(store, "Nope")
    assert timetable.read_document(store) == before
