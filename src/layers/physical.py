import numpy as np
from config import *
from models import Medium


def safe_div(num, den):
    """
    Float division that yields inf/nan instead of raising on a zero divisor.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(num) / np.float64(den))


class PhysicalLayer:
    def __init__(self, scenario):
        """
        Initializes the physical layer of one path.
        Every hop shares the same link rate and medium.
        """
        self.bits = scenario.packet_size_kb * KB * BITS_PER_BYTE
        self.bit_rate = scenario.link_rate_mbps * MBPS
        self.distance_m = scenario.distance_km * KM
        self.prop_speed = self.propagation_speed(scenario.medium)

    @staticmethod
    def propagation_speed(medium):
        """Looks up the propagation speed (m/s) of a medium."""
        if not isinstance(medium, Medium):
            raise ValueError(f"Unknown medium: {medium!r}")
        return PROP_SPEEDS[medium.value]

    def transmission_delay_ms(self):
        """
        Per-hop transmission delay (L_bits / R).
        A zero bit rate gives an infinite delay.
        """
        return safe_div(self.bits, self.bit_rate) * MS_PER_S

    def propagation_delay_ms(self):
        """Propagation delay over the whole path (counted once)."""
        return safe_div(self.distance_m, self.prop_speed) * MS_PER_S

    def service_rate(self):
        """Packets per second a hop can serialize (mu)."""
        return safe_div(self.bit_rate, self.bits)
