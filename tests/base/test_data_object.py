# tests/base/test_data_object.py

from record_store.base.data_object import DataObject


def test_new_object_is_clean_and_empty():
    obj = DataObject()
    assert obj.data() == {}
    assert obj.data_changed() == {}
    assert not obj.is_dirty()


def test_missing_field_reads_as_empty_string():
    assert DataObject().get("missing") == ""


def test_construct_with_data_is_clean():
    obj = DataObject({"a": "1", "b": "2"})
    assert obj.get("a") == "1"
    assert not obj.is_dirty()
    assert obj.data_changed() == {}


def test_set_tracks_latest_value_per_field():
    obj = DataObject({"a": "1"})
    obj.set("a", "2")
    obj.set("b", "x")
    obj.set("a", "3")

    assert obj.is_dirty()
    assert obj.data_changed() == {"a": "3", "b": "x"}
    assert obj.data() == {"a": "3", "b": "x"}


def test_writing_the_same_value_still_counts_as_changed():
    obj = DataObject({"a": "1"})
    obj.set("a", "1")
    assert obj.data_changed() == {"a": "1"}


def test_mark_clean_keeps_values():
    obj = DataObject()
    obj.set("a", "1")
    obj.mark_clean()

    assert not obj.is_dirty()
    assert obj.get("a") == "1"


def test_hydrate_replaces_data_and_clears_changes():
    obj = DataObject({"old": "value"})
    obj.set("a", "1")
    obj.hydrate({"b": "2"})

    assert obj.data() == {"b": "2"}
    assert obj.get("old") == ""
    assert not obj.is_dirty()


def test_returned_maps_are_copies():
    obj = DataObject({"a": "1"})
    obj.set("b", "2")

    obj.data()["a"] = "changed"
    obj.data_changed()["c"] = "3"

    assert obj.get("a") == "1"
    assert obj.data_changed() == {"b": "2"}
