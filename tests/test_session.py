import pytest

from csv_editor.errors import NoDocumentLoaded, RecordNotFound
from csv_editor.notifications import NotificationSink
from csv_editor.session import EditingSession


def test_session_requires_a_document():
    session = EditingSession()
    assert not session.loaded
    with pytest.raises(NoDocumentLoaded):
        session.current()
    with pytest.raises(NoDocumentLoaded):
        session.add_record({"a": "1"})
    with pytest.raises(NoDocumentLoaded):
        session.export()


def test_session_applies_edits_in_order():
    session = EditingSession()
    doc = session.load("a,b\n1,2\n3,4")
    first, second = doc.ids

    session.update_field(first, "b", "9")
    session.delete_record(second)
    session.add_record({"a": "5", "b": "6"})
    assert session.export() == "a,b\n1,9\n5,6"


def test_load_replaces_prior_document():
    session = EditingSession()
    session.load("a\n1")
    session.load("x;y\n1;2", delimiter=";")
    assert session.current().headers == ("x", "y")
    assert session.export() == "x;y\n1;2"


def test_failed_edit_keeps_document():
    session = EditingSession()
    before = session.load("a\n1")
    with pytest.raises(RecordNotFound):
        session.update_field("missing", "a", "2")
    assert session.current() == before


def test_clear_ends_session():
    session = EditingSession()
    session.load("a\n1")
    session.clear()
    assert not session.loaded


def test_sink_is_bounded_and_ordered():
    sink = NotificationSink(maxlen=2)
    sink.success("add", "Row added successfully")
    sink.failure("update", "Record not found: 7")
    sink.success("delete", "Row deleted successfully")

    recent = sink.recent()
    assert [n.action for n in recent] == ["update", "delete"]
    assert recent[0].ok is False
    assert recent[1].message == "Row deleted successfully"
