import json

import pytest

from config import STORE_CAPACITY, STORE_KEY
from models import Scenario
from storage.store import JsonFileSlots, ScenarioStore


class MemorySlots:
    def __init__(self, data=None):
        self.data = dict(data or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value


class BrokenSlots:
    def get(self, key):
        raise OSError("disk gone")

    def set(self, key, value):
        raise OSError("disk full")


def test_save_prepends_newest_first():
    store = ScenarioStore().save(Scenario(name="one"), now=1).save(Scenario(name="two"), now=2)
    assert [e.name for e in store] == ["two", "one"]
    assert [e.saved_at for e in store] == [2, 1]


def test_save_uses_current_time(monkeypatch):
    monkeypatch.setattr("storage.store.time.time", lambda: 1234.5)
    store = ScenarioStore().save(Scenario())
    assert store[0].saved_at == 1234500


def test_save_name_override():
    store = ScenarioStore().save(Scenario(name="A"), name="Office uplink", now=0)
    assert store[0].name == "Office uplink"
    store = store.save(Scenario(name="A"), name="", now=0)
    assert store[0].name == "A"


def test_save_does_not_deduplicate():
    s = Scenario()
    store = ScenarioStore().save(s, now=0).save(s, now=0)
    assert len(store) == 2


def test_operations_return_new_store():
    empty = ScenarioStore()
    one = empty.save(Scenario(), now=0)
    assert len(empty) == 0
    renamed = one.rename(0, "x")
    assert one[0].name == "Scenario"
    assert renamed[0].name == "x"
    assert len(one.delete(0)) == 0
    assert len(one) == 1


def test_capacity_evicts_oldest():
    store = ScenarioStore()
    for i in range(STORE_CAPACITY):
        store = store.save(Scenario(name=f"s{i}"), now=i)
    assert len(store) == STORE_CAPACITY
    store = store.save(Scenario(name="newest"), now=999)
    assert len(store) == STORE_CAPACITY
    names = [e.name for e in store]
    assert names[0] == "newest"
    assert "s0" not in names
    assert names[-1] == "s1"


def test_rename_and_delete_by_index():
    store = ScenarioStore()
    for name in ["a", "b", "c"]:
        store = store.save(Scenario(name=name), now=0)
    assert [e.name for e in store.rename(1, "B")] == ["c", "B", "a"]
    assert [e.name for e in store.delete(0)] == ["b", "a"]
    assert store.rename(2, "z")[2].saved_at == 0


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_bad_index_raises(index):
    store = ScenarioStore([]).save(Scenario(), now=0).save(Scenario(), now=0).save(Scenario(), now=0)
    with pytest.raises(IndexError):
        store.rename(index, "x")
    with pytest.raises(IndexError):
        store.delete(index)


def test_persist_and_load_round_trip():
    slots = MemorySlots()
    store = ScenarioStore().save(Scenario(name="a"), now=1).save(Scenario(name="b").with_preset("4G LTE"), now=2)
    assert store.persist(slots) is True
    assert json.loads(slots.data[STORE_KEY])[0]["savedAt"] == 2
    assert ScenarioStore.load(slots) == store


@pytest.mark.parametrize("raw", [None, "", "not json", '{"a": 1}', "42"])
def test_load_bad_contents_gives_empty_store(raw):
    store = ScenarioStore.load(MemorySlots({STORE_KEY: raw}))
    assert len(store) == 0


def test_load_skips_invalid_entries():
    huge = "1" + "0" * 400
    raw = "[" + ", ".join([
        json.dumps({"name": "ok", "savedAt": 5}),
        json.dumps({"name": "bad", "medium": "Carrier pigeon", "savedAt": 6}),
        '{"name": "far", "distance_km": ' + huge + ', "savedAt": 7}',
        '{"name": "late", "savedAt": ' + huge + ".0e400}",
        json.dumps("nonsense"),
    ]) + "]"
    store = ScenarioStore.load(MemorySlots({STORE_KEY: raw}))
    assert [e.name for e in store] == ["ok"]
    assert store[0].saved_at == 5


def test_load_deeply_nested_json_gives_empty_store():
    raw = "[" * 100000 + "]" * 100000
    assert len(ScenarioStore.load(MemorySlots({STORE_KEY: raw}))) == 0


def test_storage_failures_are_swallowed():
    assert len(ScenarioStore.load(BrokenSlots())) == 0
    store = ScenarioStore().save(Scenario(), now=0)
    assert store.persist(BrokenSlots()) is False
    assert len(store) == 1


def test_json_file_slots(tmp_path):
    path = str(tmp_path / "store.json")
    slots = JsonFileSlots(path)
    assert slots.get(STORE_KEY) is None

    store = ScenarioStore().save(Scenario(name="Zürich"), now=7)
    store.persist(slots)
    slots.set("other", "kept")

    reloaded = ScenarioStore.load(JsonFileSlots(path))
    assert reloaded == store
    assert JsonFileSlots(path).get("other") == "kept"


def test_json_file_slots_corrupt_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{broken", encoding="utf-8")
    assert len(ScenarioStore.load(JsonFileSlots(str(path)))) == 0

    slots = JsonFileSlots(str(path))
    store = ScenarioStore.load(slots).save(Scenario(name="after crash"), now=3)
    assert store.persist(slots) is True
    assert [e.name for e in ScenarioStore.load(JsonFileSlots(str(path)))] == ["after crash"]


def test_json_file_slots_non_object_file_is_overwritten(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2]", encoding="utf-8")
    slots = JsonFileSlots(str(path))
    slots.set("k", "v")
    assert slots.get("k") == "v"


def test_entry_by_index():
    store = ScenarioStore().save(Scenario(name="a"), now=1).save(Scenario(name="b"), now=2)
    assert store.entry(1).name == "a"
    with pytest.raises(IndexError):
        store.entry(2)
    with pytest.raises(IndexError):
        store.entry(-1)
