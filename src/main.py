import argparse
import logging
import math
import sys
from dataclasses import replace

import numpy as np
import pandas as pd

from config import (
    MAX_UTILIZATION, PRESETS, PROP_SPEEDS, SHARE_BASE_URL,
    STORE_FILE, SWEEP_CSV, SWEEP_UTILIZATION_POINTS,
)
from engine import compare, compute
from models import QueueModel, Scenario
from storage.codec import share_url, state_from_url
from storage.store import JsonFileSlots, ScenarioStore

logger = logging.getLogger(__name__)

SCENARIO_FIELDS = [
    # (flag, field, type)
    ("name", "name", str),
    ("packet-kb", "packet_size_kb", float),
    ("rate-mbps", "link_rate_mbps", float),
    ("distance-km", "distance_km", float),
    ("medium", "medium", str),
    ("hops", "hop_count", float),
    ("proc-us", "processing_us_per_hop", float),
    ("queue-model", "queue_model", str),
    ("queue-ms", "queue_ms_per_hop", float),
    ("utilization", "utilization", float),
]


def format_ms(x):
    """Human readable duration given in milliseconds."""
    if not math.isfinite(x):
        return "∞"
    if abs(x) < 1:
        return f"{x * 1000:.2f} µs"
    if abs(x) < 1000:
        return f"{x:.3f} ms"
    return f"{x / 1000:.3f} s"


def _configure_logging(verbose=False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _add_scenario_args(parser, prefix=""):
    for flag, field, arg_type in SCENARIO_FIELDS:
        kwargs = {"type": arg_type, "dest": f"{prefix}{field}".replace("-", "_")}
        if field == "medium":
            kwargs["choices"] = list(PROP_SPEEDS)
        elif field == "queue_model":
            kwargs["choices"] = [m.value for m in QueueModel]
        parser.add_argument(f"--{prefix}{flag}", **kwargs)
    parser.add_argument(f"--{prefix}preset", choices=list(PRESETS), dest=f"{prefix}preset".replace("-", "_"))
    parser.add_argument(f"--{prefix}from-saved", type=int, metavar="INDEX",
                        dest=f"{prefix}from_saved".replace("-", "_"), help="start from a saved scenario")


def scenario_from_args(args, prefix="", base=None):
    """
    Saved scenario (if any) first, then preset, then explicit flags; the
    result is clamped to the recommended ranges.
    """
    saved_index = getattr(args, f"{prefix}from_saved".replace("-", "_"))
    if saved_index is not None:
        base = ScenarioStore.load(JsonFileSlots(args.store)).entry(saved_index).scenario
    scenario = base or Scenario()
    preset = getattr(args, f"{prefix}preset".replace("-", "_"))
    if preset:
        scenario = scenario.with_preset(preset)
    overrides = {}
    for _, field, _ in SCENARIO_FIELDS:
        value = getattr(args, f"{prefix}{field}".replace("-", "_"))
        if value is not None:
            overrides[field] = value
    if "hop_count" in overrides:
        overrides["hop_count"] = round(overrides["hop_count"])
    return Scenario.from_dict(overrides, base=scenario).clamped()


def print_breakdown(scenario, m):
    print(f"== {scenario.name}")
    print(f"  Packet size (bits)      : {m.bits:,.0f}")
    print(f"  Link rate (bps)         : {m.rate_bps:,.0f}")
    print(f"  Transmission (per hop)  : {format_ms(m.tx_per_hop_ms)}")
    print(f"  Queuing (per hop)       : {format_ms(m.queuing_per_hop_ms)}")
    for part in m.parts:
        bar = "#" * int(round(20 * part.value / m.max_part)) if math.isfinite(part.value) else "#" * 20
        print(f"  {part.label:<24}: {format_ms(part.value):>12} {bar}")
    print(f"  Total end-to-end delay  : {format_ms(m.total_ms)}")


def print_diff(d):
    print("== Δ (B − A)")
    for label, value in [
        ("Total", d.total_ms), ("Transmission", d.transmission_ms),
        ("Propagation", d.propagation_ms), ("Processing", d.processing_ms),
        ("Queuing", d.queuing_ms),
    ]:
        arrow = "↑" if value > 0 else "↓" if value < 0 else ""
        print(f"  {label:<13}: {format_ms(value)} {arrow}")


def cmd_compute(args):
    scenario = scenario_from_args(args)
    print_breakdown(scenario, compute(scenario))


def cmd_compare(args):
    a = scenario_from_args(args)
    b = scenario_from_args(args, prefix="b-", base=replace(a, name="B (compare)"))
    m_a, m_b, d = compare(a, b)
    print_breakdown(a, m_a)
    print_breakdown(b, m_b)
    print_diff(d)


def cmd_share(args):
    a = scenario_from_args(args)
    b = None
    if args.compare:
        b = scenario_from_args(args, prefix="b-", base=replace(a, name="B (compare)"))
    print(share_url(args.base_url, a, b))


def cmd_open(args):
    state = state_from_url(args.url)
    if state is None:
        print("No valid scenario in link, using defaults.")
        state_a, state_b = Scenario(name="A"), None
    else:
        state_a, state_b = state.a or Scenario(name="A"), state.b
    if state_b is None:
        print_breakdown(state_a, compute(state_a))
        return
    m_a, m_b, d = compare(state_a, state_b)
    print_breakdown(state_a, m_a)
    print_breakdown(state_b, m_b)
    print_diff(d)


def cmd_save(args):
    slots = JsonFileSlots(args.store)
    store = ScenarioStore.load(slots)
    store = store.save(scenario_from_args(args), name=args.as_name)
    store.persist(slots)
    print(f"Saved '{store[0].name}' ({len(store)} saved)")


def cmd_list(args):
    store = ScenarioStore.load(JsonFileSlots(args.store))
    if not len(store):
        print("No saved scenarios yet.")
        return
    for i, entry in enumerate(store):
        stamp = pd.Timestamp.fromtimestamp(entry.saved_at / 1000).strftime("%Y-%m-%d %H:%M:%S")
        m = compute(entry.scenario)
        print(f"[{i}] {entry.name or f'Saved #{i + 1}'}  ({stamp})  total {format_ms(m.total_ms)}")


def cmd_rename(args):
    slots = JsonFileSlots(args.store)
    store = ScenarioStore.load(slots).rename(args.index, args.new_name)
    store.persist(slots)
    print(f"Renamed [{args.index}] to '{args.new_name}'")


def cmd_delete(args):
    slots = JsonFileSlots(args.store)
    store = ScenarioStore.load(slots).delete(args.index)
    store.persist(slots)
    print(f"Deleted [{args.index}] ({len(store)} saved)")


def run_sweep(points=SWEEP_UTILIZATION_POINTS):
    """
    Computes every preset over a utilization grid, for both queue models.
    Returns one row per (preset, model, rho).
    """
    results = []
    utilizations = np.linspace(0.0, MAX_UTILIZATION, points)

    for preset in PRESETS:
        print(f"Sweeping preset: {preset}")
        base = Scenario(name=preset).with_preset(preset)
        for model in QueueModel:
            for rho in utilizations:
                scenario = replace(base, queue_model=model, utilization=float(rho))
                m = compute(scenario)
                results.append({
                    "preset": preset,
                    "queue_model": model.value,
                    "utilization": float(rho),
                    "tx_per_hop_ms": m.tx_per_hop_ms,
                    "transmission_ms": m.transmission_ms,
                    "propagation_ms": m.propagation_ms,
                    "processing_ms": m.processing_ms,
                    "queuing_ms": m.queuing_ms,
                    "total_ms": m.total_ms,
                })
    return pd.DataFrame(results)


def cmd_sweep(args):
    df = run_sweep(args.points)
    df.to_csv(args.output, index=False)
    print(f"\nSweep completed! '{args.output}' file has been created ({len(df)} rows).")


def build_parser():
    parser = argparse.ArgumentParser(description="End-to-end network delay explorer")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("compute", help="delay breakdown of one scenario")
    _add_scenario_args(p)
    p.add_argument("--store", default=STORE_FILE, help="scenario store file")
    p.set_defaults(func=cmd_compute)

    p = sub.add_parser("compare", help="compare scenario A with scenario B")
    _add_scenario_args(p)
    _add_scenario_args(p, prefix="b-")
    p.add_argument("--store", default=STORE_FILE, help="scenario store file")
    p.set_defaults(func=cmd_compare)

    p = sub.add_parser("share", help="print a share link")
    _add_scenario_args(p)
    _add_scenario_args(p, prefix="b-")
    p.add_argument("--compare", action="store_true", help="include scenario B")
    p.add_argument("--base-url", default=SHARE_BASE_URL)
    p.add_argument("--store", default=STORE_FILE, help="scenario store file")
    p.set_defaults(func=cmd_share)

    p = sub.add_parser("open", help="decode a share link")
    p.add_argument("url")
    p.set_defaults(func=cmd_open)

    for name, func, helptext in [
        ("save", cmd_save, "save a scenario"),
        ("list", cmd_list, "list saved scenarios"),
        ("rename", cmd_rename, "rename a saved scenario"),
        ("delete", cmd_delete, "delete a saved scenario"),
    ]:
        p = sub.add_parser(name, help=helptext)
        p.add_argument("--store", default=STORE_FILE, help="scenario store file")
        if name == "save":
            _add_scenario_args(p)
            p.add_argument("--as", dest="as_name", help="name to save under")
        if name in ("rename", "delete"):
            p.add_argument("index", type=int)
        if name == "rename":
            p.add_argument("new_name")
        p.set_defaults(func=func)

    p = sub.add_parser("sweep", help="utilization sweep over all presets")
    p.add_argument("--points", type=int, default=SWEEP_UTILIZATION_POINTS)
    p.add_argument("--output", default=SWEEP_CSV)
    p.set_defaults(func=cmd_sweep)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    logger.debug("Running command %s", args.command)
    try:
        args.func(args)
    except IndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
