import pytest

from config import PRESETS
from models import Medium, QueueModel, SavedScenario, Scenario


def test_default_scenario():
    s = Scenario()
    assert s.name == "Scenario"
    assert s.medium is Medium.FIBER
    assert s.queue_model is QueueModel.FIXED
    assert s.hop_count == 10


def test_to_dict_uses_enum_values():
    data = Scenario(medium=Medium.FREE_SPACE_RF, queue_model=QueueModel.MM1).to_dict()
    assert data["medium"] == "Free Space (RF)"
    assert data["queue_model"] == "MM1"


def test_from_dict_merges_partial_record():
    base = Scenario(name="mine", distance_km=123)
    s = Scenario.from_dict({"hop_count": 3, "medium": "Coax", "extra": 1}, base=base)
    assert s.name == "mine"
    assert s.distance_km == 123
    assert s.hop_count == 3
    assert s.medium is Medium.COAX


@pytest.mark.parametrize("record", [
    {"medium": "Copper wire"},
    {"queue_model": "MM2"},
    {"hop_count": 2.5},
    {"packet_size_kb": "big"},
    {"utilization": True},
    {"name": 5},
    {"distance_km": 10 ** 400},
])
def test_from_dict_rejects_malformed_values(record):
    with pytest.raises((TypeError, ValueError)):
        Scenario.from_dict(record)


def test_from_dict_rejects_non_object():
    with pytest.raises(TypeError):
        Scenario.from_dict(["Fiber"])


def test_clamped_ranges():
    s = Scenario(
        packet_size_kb=0.001, link_rate_mbps=10**9, distance_km=-5, hop_count=100,
        processing_us_per_hop=-1, queue_ms_per_hop=999, utilization=1.2,
    ).clamped()
    assert s.packet_size_kb == 0.064
    assert s.link_rate_mbps == 100000
    assert s.distance_km == 0
    assert s.hop_count == 60
    assert s.processing_us_per_hop == 0
    assert s.queue_ms_per_hop == 200
    assert s.utilization == 0.98
    assert Scenario(hop_count=0).clamped().hop_count == 1


def test_clamped_keeps_valid_scenario():
    s = Scenario().with_preset("HFC (Cable)")
    assert s.clamped() == s


def test_with_preset_keeps_name():
    s = Scenario(name="A", queue_model=QueueModel.MM1).with_preset("FTTH (GPON)")
    assert s.name == "A"
    assert s.distance_km == 30
    assert s.processing_us_per_hop == 40
    assert s.queue_model is QueueModel.FIXED


def test_every_preset_applies():
    for name, preset in PRESETS.items():
        s = Scenario().with_preset(name)
        assert s.link_rate_mbps == preset["link_rate_mbps"]
        assert s.medium.value == preset["medium"]


def test_unknown_preset_leaves_scenario_unchanged(caplog):
    s = Scenario(name="keep")
    assert s.with_preset("Carrier pigeon") is s
    assert "Unknown preset" in caplog.text


def test_saved_scenario_dict():
    entry = SavedScenario(Scenario(name="x"), saved_at=1700000000000)
    data = entry.to_dict()
    assert data["savedAt"] == 1700000000000
    assert data["name"] == "x"
    assert SavedScenario.from_dict(data) == entry
