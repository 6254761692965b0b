# engine.py - Delay decomposition engine with cross-layer integration

from config import *
from layers.physical import PhysicalLayer
from layers.queueing import QueueingLayer
from models import DelayBreakdown, DelayDiff


def compute(scenario):
    """
    Splits the end-to-end delay of a scenario into its components.
    Total = Transmission + Propagation + Processing + Queuing (all in ms)
    """
    phy = PhysicalLayer(scenario)
    queue = QueueingLayer(scenario, phy)
    hops = scenario.hop_count

    # 1. Transmission: store-and-forward, every hop re-serializes the packet
    tx_per_hop_ms = phy.transmission_delay_ms()
    transmission_ms = tx_per_hop_ms * hops

    # 2. Propagation: once for the whole path
    propagation_ms = phy.propagation_delay_ms()

    # 3. Processing (per hop)
    processing_ms = (scenario.processing_us_per_hop / US_PER_MS) * hops

    # 4. Queuing (per hop, whatever the model)
    queuing_per_hop_ms = queue.delay_per_hop_ms()
    queuing_ms = queuing_per_hop_ms * hops

    return DelayBreakdown(
        bits=phy.bits,
        rate_bps=phy.bit_rate,
        tx_per_hop_ms=tx_per_hop_ms,
        queuing_per_hop_ms=queuing_per_hop_ms,
        transmission_ms=transmission_ms,
        propagation_ms=propagation_ms,
        processing_ms=processing_ms,
        queuing_ms=queuing_ms,
        total_ms=transmission_ms + propagation_ms + processing_ms + queuing_ms,
    )


def diff(a, b):
    """Signed difference of two breakdowns (B - A)."""
    return DelayDiff(
        transmission_ms=b.transmission_ms - a.transmission_ms,
        propagation_ms=b.propagation_ms - a.propagation_ms,
        processing_ms=b.processing_ms - a.processing_ms,
        queuing_ms=b.queuing_ms - a.queuing_ms,
        total_ms=b.total_ms - a.total_ms,
    )


def compare(scenario_a, scenario_b):
    """Returns (breakdown A, breakdown B, B - A)."""
    m_a = compute(scenario_a)
    m_b = compute(scenario_b)
    return m_a, m_b, diff(m_a, m_b)
