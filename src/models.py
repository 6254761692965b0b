import logging
import math
from dataclasses import asdict, dataclass, replace
from enum import Enum

from config import (
    DEFAULT_SCENARIO, DISTANCE_KM_RANGE, HOPS_RANGE, PACKET_KB_RANGE, PRESETS,
    PROC_US_RANGE, QUEUE_MS_RANGE, RATE_MBPS_RANGE, UTILIZATION_RANGE,
)

logger = logging.getLogger(__name__)


class Medium(Enum):
    """Transmission medium (selects a propagation speed)"""
    FIBER = "Fiber"
    COAX = "Coax"
    TWISTED_PAIR = "Twisted Pair"
    FREE_SPACE_RF = "Free Space (RF)"


class QueueModel(Enum):
    """Per-hop queuing model"""
    FIXED = "Fixed"
    MM1 = "MM1"


def clamp(n, lo, hi):
    return min(hi, max(lo, n))


_FLOAT_FIELDS = (
    "packet_size_kb", "link_rate_mbps", "distance_km",
    "processing_us_per_hop", "queue_ms_per_hop", "utilization",
)


@dataclass(frozen=True)
class Scenario:
    """One network path configuration.

    Only one of ``queue_ms_per_hop`` / ``utilization`` is used, depending on
    ``queue_model``; the other one is kept so it survives round-trips.
    """
    name: str = DEFAULT_SCENARIO["name"]
    packet_size_kb: float = DEFAULT_SCENARIO["packet_size_kb"]
    link_rate_mbps: float = DEFAULT_SCENARIO["link_rate_mbps"]
    distance_km: float = DEFAULT_SCENARIO["distance_km"]
    medium: Medium = Medium(DEFAULT_SCENARIO["medium"])
    hop_count: int = DEFAULT_SCENARIO["hop_count"]
    processing_us_per_hop: float = DEFAULT_SCENARIO["processing_us_per_hop"]
    queue_model: QueueModel = QueueModel(DEFAULT_SCENARIO["queue_model"])
    queue_ms_per_hop: float = DEFAULT_SCENARIO["queue_ms_per_hop"]
    utilization: float = DEFAULT_SCENARIO["utilization"]

    def to_dict(self):
        data = asdict(self)
        data["medium"] = self.medium.value
        data["queue_model"] = self.queue_model.value
        return data

    @classmethod
    def from_dict(cls, data, base=None):
        """
        Builds a scenario from a (possibly partial) mapping.
        Keys missing from ``data`` are taken from ``base`` (defaults if None).
        Raises ValueError/TypeError on malformed values.
        """
        if not isinstance(data, dict):
            raise TypeError(f"scenario record must be an object, got {type(data).__name__}")

        fields = (base or cls()).to_dict()
        fields.update({k: v for k, v in data.items() if k in fields})

        for key in _FLOAT_FIELDS:
            fields[key] = _number(key, fields[key])
        hops = _number("hop_count", fields["hop_count"])
        if not hops.is_integer():
            raise ValueError(f"hop_count must be an integer, got {hops}")
        fields["hop_count"] = int(hops)

        if not isinstance(fields["name"], str):
            raise TypeError("name must be a string")
        fields["medium"] = Medium(fields["medium"])
        fields["queue_model"] = QueueModel(fields["queue_model"])
        return cls(**fields)

    def clamped(self):
        """Returns a copy with every numeric input inside its recommended range."""
        return replace(
            self,
            packet_size_kb=clamp(self.packet_size_kb, *PACKET_KB_RANGE),
            link_rate_mbps=clamp(self.link_rate_mbps, *RATE_MBPS_RANGE),
            distance_km=clamp(self.distance_km, *DISTANCE_KM_RANGE),
            hop_count=int(round(clamp(self.hop_count, *HOPS_RANGE))),
            processing_us_per_hop=clamp(self.processing_us_per_hop, *PROC_US_RANGE),
            queue_ms_per_hop=clamp(self.queue_ms_per_hop, *QUEUE_MS_RANGE),
            utilization=clamp(self.utilization, *UTILIZATION_RANGE),
        )

    def with_preset(self, preset_name):
        """Merges a preset over this scenario, keeping the name and unset fields."""
        preset = PRESETS.get(preset_name)
        if preset is None:
            logger.warning("Unknown preset %r, scenario left unchanged", preset_name)
            return self
        return Scenario.from_dict(preset, base=self)


def _number(key, value):
    # bool is an int subclass but never a valid quantity
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} must be a number, got {value!r}")
    try:
        return float(value)
    except OverflowError:
        raise ValueError(f"{key} is out of range: {value}") from None


@dataclass(frozen=True)
class SavedScenario:
    """Scenario stamped with the time it was saved (epoch ms)"""
    scenario: Scenario
    saved_at: int

    @property
    def name(self):
        return self.scenario.name

    def to_dict(self):
        data = self.scenario.to_dict()
        data["savedAt"] = self.saved_at
        return data

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise TypeError("saved scenario must be an object")
        saved_at = _number("savedAt", data.get("savedAt", 0))
        if not math.isfinite(saved_at):
            raise ValueError(f"savedAt must be finite, got {saved_at}")
        return cls(Scenario.from_dict(data), int(saved_at))


@dataclass(frozen=True)
class DelayPart:
    key: str
    label: str
    value: float


@dataclass(frozen=True)
class DelayBreakdown:
    """End-to-end delay split into its four components (all in ms)"""
    bits: float
    rate_bps: float
    tx_per_hop_ms: float
    queuing_per_hop_ms: float
    transmission_ms: float
    propagation_ms: float
    processing_ms: float
    queuing_ms: float
    total_ms: float

    @property
    def parts(self):
        return (
            DelayPart("tx", "Transmission (all hops)", self.transmission_ms),
            DelayPart("prop", "Propagation (total)", self.propagation_ms),
            DelayPart("proc", "Processing (all hops)", self.processing_ms),
            DelayPart("queue", "Queuing (all hops)", self.queuing_ms),
        )

    @property
    def max_part(self):
        # Scale reference for bar rendering, never below 1
        values = [p.value for p in self.parts if not math.isnan(p.value)]
        return max([1.0] + values)


@dataclass(frozen=True)
class DelayDiff:
    """Signed component differences, B - A (ms)"""
    transmission_ms: float
    propagation_ms: float
    processing_ms: float
    queuing_ms: float
    total_ms: float
