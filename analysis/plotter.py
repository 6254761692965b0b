import pandas as pd
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

COMPONENTS = ["transmission_ms", "propagation_ms", "processing_ms", "queuing_ms"]


def plot_breakdown(csv_file="sweep_results.csv", out_file="delay_breakdown.png"):
    # Load the sweep results
    try:
        df = pd.read_csv(csv_file)
    except FileNotFoundError:
        print(f"Error: {csv_file} not found.")
        return None

    # Fixed model: queuing does not depend on rho, one row per preset is enough
    fixed = df[df["queue_model"] == "Fixed"].groupby("preset")[COMPONENTS].mean()

    fig, ax = plt.subplots(figsize=(12, 6))
    bottom = np.zeros(len(fixed))
    for col in COMPONENTS:
        ax.bar(fixed.index, fixed[col].values, bottom=bottom, label=col.replace("_ms", "").title())
        bottom += fixed[col].values

    ax.set_ylabel("Delay [ms]", fontsize=10)
    ax.set_title("End-to-end delay breakdown per access technology", fontsize=14)
    ax.legend()
    plt.tight_layout()

    plt.savefig(out_file, dpi=150)
    plt.close(fig)
    print(f"Plot saved to {out_file}")
    return out_file


def plot_mm1_queuing(csv_file="sweep_results.csv", out_file="mm1_queuing.png"):
    try:
        df = pd.read_csv(csv_file)
    except FileNotFoundError:
        print(f"Error: {csv_file} not found.")
        return None

    # rho = 0 has no queue at all (log scale)
    mm1 = df[(df["queue_model"] == "MM1") & (df["utilization"] > 0)]

    fig, ax = plt.subplots(figsize=(10, 6))
    for preset, group in mm1.groupby("preset"):
        group = group.sort_values("utilization")
        # Queuing relative to one transmission time per hop
        ax.plot(group["utilization"], group["queuing_ms"] / group["transmission_ms"], label=preset)

    ax.set_yscale("log")
    ax.set_xlabel("Utilization ρ", fontsize=10)
    ax.set_ylabel("Queuing / Transmission", fontsize=10)
    ax.set_title("M/M/1 queuing as ρ approaches saturation", fontsize=14)
    ax.legend()
    plt.tight_layout()

    plt.savefig(out_file, dpi=150)
    plt.close(fig)
    print(f"Plot saved to {out_file}")
    return out_file


if __name__ == "__main__":
    plot_breakdown()
    plot_mm1_queuing()
