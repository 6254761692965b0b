# queueing.py - Per-hop queuing delay (Fixed or M/M/1)

from config import *
from layers.physical import safe_div
from models import QueueModel, clamp


def mm1_wait_ms(rho, mu):
    """
    Mean waiting time in queue of an M/M/1 server: Wq = rho / (mu - lambda).
    rho is clamped to [0, MAX_UTILIZATION] so the queue never saturates.
    """
    rho = clamp(rho, 0.0, MAX_UTILIZATION)
    lam = rho * mu
    return safe_div(rho, mu - lam) * MS_PER_S


class QueueingLayer:
    def __init__(self, scenario, phy):
        self.model = scenario.queue_model
        self.fixed_ms = scenario.queue_ms_per_hop
        self.utilization = scenario.utilization
        # M/M/1 service time equals the hop's transmission time
        self.mu = phy.service_rate()

    def delay_per_hop_ms(self):
        if self.model is QueueModel.FIXED:
            return float(self.fixed_ms)
        elif self.model is QueueModel.MM1:
            return mm1_wait_ms(self.utilization, self.mu)
        raise ValueError(f"Unknown queue model: {self.model!r}")
