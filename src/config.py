# config.py

import os

# Unit conventions
KB = 1024              # Byte (binary kilobyte)
BITS_PER_BYTE = 8
MBPS = 1_000_000       # bit/s (decimal megabit)
KM = 1000              # m
MS_PER_S = 1000
US_PER_MS = 1000

# Propagation speed per medium (m/s)
PROP_SPEEDS = {
    "Fiber": 2.0e8,
    "Coax": 2.0e8,
    "Twisted Pair": 2.0e8,
    "Free Space (RF)": 3.0e8,
}

# Queueing
MAX_UTILIZATION = 0.98  # rho = 1 diverges in M/M/1

# Recommended input ranges (min, max)
PACKET_KB_RANGE = (0.064, 128)
RATE_MBPS_RANGE = (1, 100000)
DISTANCE_KM_RANGE = (0, 40000)
HOPS_RANGE = (1, 60)
PROC_US_RANGE = (0, 10000)
QUEUE_MS_RANGE = (0, 200)
UTILIZATION_RANGE = (0, MAX_UTILIZATION)

DEFAULT_SCENARIO = {
    "name": "Scenario",
    "packet_size_kb": 1.5,
    "link_rate_mbps": 1000,
    "distance_km": 10,
    "medium": "Fiber",
    "hop_count": 10,
    "processing_us_per_hop": 50,
    "queue_ms_per_hop": 0.2,
    "queue_model": "Fixed",
    "utilization": 0.5,
}

# Access technologies (everything but the name)
PRESETS = {
    "HFC (Cable)": {
        "link_rate_mbps": 300, "packet_size_kb": 1.5, "distance_km": 20, "medium": "Coax",
        "hop_count": 8, "processing_us_per_hop": 50, "queue_ms_per_hop": 0.2,
        "queue_model": "Fixed", "utilization": 0.5,
    },
    "DSL (VDSL2)": {
        "link_rate_mbps": 50, "packet_size_kb": 1.5, "distance_km": 5, "medium": "Twisted Pair",
        "hop_count": 6, "processing_us_per_hop": 50, "queue_ms_per_hop": 0.3,
        "queue_model": "Fixed", "utilization": 0.6,
    },
    "FTTH (GPON)": {
        "link_rate_mbps": 1000, "packet_size_kb": 1.5, "distance_km": 30, "medium": "Fiber",
        "hop_count": 10, "processing_us_per_hop": 40, "queue_ms_per_hop": 0.1,
        "queue_model": "Fixed", "utilization": 0.35,
    },
    "4G LTE": {
        "link_rate_mbps": 75, "packet_size_kb": 1.5, "distance_km": 3, "medium": "Free Space (RF)",
        "hop_count": 12, "processing_us_per_hop": 80, "queue_ms_per_hop": 0.8,
        "queue_model": "Fixed", "utilization": 0.7,
    },
    "5G (mid-band)": {
        "link_rate_mbps": 400, "packet_size_kb": 1.5, "distance_km": 2, "medium": "Free Space (RF)",
        "hop_count": 12, "processing_us_per_hop": 60, "queue_ms_per_hop": 0.4,
        "queue_model": "Fixed", "utilization": 0.5,
    },
}

# Scenario store
STORE_KEY = "ndv_scenarios_v2"
STORE_CAPACITY = 50
STORE_FILE = os.environ.get("DELAY_STORE_FILE", os.path.expanduser("~/.ndv_store.json"))

# Share links
SHARE_PARAM = "s"
SHARE_BASE_URL = "http://localhost/"

# Sweep Parameters
SWEEP_UTILIZATION_POINTS = 50
SWEEP_CSV = "sweep_results.csv"
