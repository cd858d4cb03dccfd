"""
Visualizer for Forage.

Produces:
  1. World snapshots – creatures (oriented triangles) and food (dots)
  2. Fitness chart   – max / mean / min fitness over generations
  3. Brain diagrams  – weight heat map of every layer of one brain
  4. CSV log         – per-generation stats

Everything here only reads snapshots, statistics and networks; nothing
mutates the simulation.
"""

import os
import csv
import math
import numpy as np
import matplotlib
matplotlib.use("Agg")          # non-interactive backend (no display needed)
import matplotlib.pyplot as plt
from matplotlib.markers import MarkerStyle
from matplotlib.transforms import Affine2D

from config import CREATURE_SIZE, FOOD_SIZE, SAVE_DIR, LOG_CSV


# ──────────────────────────────────────────────────────────────────────────────
# Directory setup
# ──────────────────────────────────────────────────────────────────────────────

def ensure_dirs(base: str = SAVE_DIR):
    for sub in ("snapshots", "charts", "brains"):
        os.makedirs(os.path.join(base, sub), exist_ok=True)


# ──────────────────────────────────────────────────────────────────────────────
# World snapshot
# ──────────────────────────────────────────────────────────────────────────────

def save_world_snapshot(snapshot, base: str = SAVE_DIR, size_px: int = 600):
    """
    Render a SimulationSnapshot. Creatures are drawn as triangles pointing
    along their heading, food as green dots.
    """
    dpi = 100
    fig, ax = plt.subplots(figsize=(size_px / dpi, size_px / dpi), dpi=dpi)
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_aspect("equal")
    ax.set_facecolor("#111111")
    fig.patch.set_facecolor("#111111")
    ax.tick_params(colors="white")
    for spine in ax.spines.values():
        spine.set_edgecolor("#444444")

    title = (f"Generation {snapshot.generation}  "
             f"step {snapshot.generation_steps}")
    if snapshot.statistics is not None:
        title += f"  (prev mean fitness {snapshot.statistics.mean_fitness:.2f})"
    ax.set_title(title, color="white", fontsize=10)

    # marker sizes are in points²; scale the world sizes to the axes
    px_per_unit = size_px * 0.8
    food = snapshot.world.food
    if food:
        ax.scatter([f[0] for f in food], [f[1] for f in food],
                   s=(FOOD_SIZE * px_per_unit * 2) ** 2,
                   color="#44CC44", linewidths=0)

    for (x, y, heading) in snapshot.world.creatures:
        marker = MarkerStyle(">", transform=Affine2D().rotate_deg(math.degrees(heading)))
        ax.scatter([x], [y], marker=marker,
                   s=(CREATURE_SIZE * px_per_unit * 2) ** 2,
                   color="#BBBBBB", linewidths=0)

    path = os.path.join(base, "snapshots",
                        f"gen_{snapshot.generation:06d}.png")
    plt.savefig(path, dpi=dpi, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# Fitness chart
# ──────────────────────────────────────────────────────────────────────────────

def save_fitness_chart(stats: list, base: str = SAVE_DIR,
                       filename: str = "fitness.png"):
    """
    Plot max / mean / min fitness per generation, with a ±1 std band
    around the mean.
    """
    if not stats:
        return
    gens  = np.array([s["generation"]   for s in stats])
    best  = np.array([s["max_fitness"]  for s in stats])
    worst = np.array([s["min_fitness"]  for s in stats])
    mean  = np.array([s["mean_fitness"] for s in stats])
    std   = np.array([s["std_fitness"]  for s in stats])

    fig, ax = plt.subplots(figsize=(12, 5), dpi=100)
    fig.patch.set_facecolor("#111111")
    ax.set_facecolor("#111111")

    ax.fill_between(gens, np.maximum(mean - std, 0), mean + std,
                    color="#CC44FF", alpha=0.2, linewidth=0, label="Mean ± std")
    ax.plot(gens, best,  color="#44FF44", linewidth=1.2, label="Max")
    ax.plot(gens, mean,  color="#CC44FF", linewidth=1.2, label="Mean")
    ax.plot(gens, worst, color="#FF8800", linewidth=1.0, alpha=0.8, label="Min")

    ax.set_xlabel("Generation", color="white")
    ax.set_ylabel("Food eaten", color="white")
    ax.set_ylim(bottom=0)
    ax.tick_params(axis="both", colors="white")
    for spine in ax.spines.values():
        spine.set_edgecolor("#444444")
    ax.legend(facecolor="#222222", labelcolor="white",
              loc="upper left", fontsize=8)

    ax.set_title("Evolutionary Progress", color="white", fontsize=12)
    plt.tight_layout()
    path = os.path.join(base, "charts", filename)
    plt.savefig(path, dpi=100, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# Brain diagram
# ──────────────────────────────────────────────────────────────────────────────

def save_brain_diagram(network, generation: int, label: str = "",
                       base: str = SAVE_DIR):
    """
    Draw each layer of ``network`` as a heat map: one row per neuron, one
    column per input, plus a last column for the bias.
    Green = positive, red = negative.
    """
    layers = network.layers
    fig, axes = plt.subplots(1, len(layers), figsize=(5 * len(layers), 5),
                             dpi=100, squeeze=False)
    fig.patch.set_facecolor("#111111")

    for i, (ax, layer) in enumerate(zip(axes[0], layers)):
        matrix = np.array([np.append(n.weights, n.bias) for n in layer.neurons])
        limit  = max(1e-9, float(np.abs(matrix).max()))
        ax.imshow(matrix, cmap="RdYlGn", vmin=-limit, vmax=limit,
                  aspect="auto", interpolation="nearest")
        ax.axvline(layer.nin - 0.5, color="white", linewidth=0.8)
        ax.set_title(f"Layer {i}  ({layer.nin} → {layer.nout})",
                     color="white", fontsize=9)
        ax.set_xlabel("input (last column = bias)", color="#CCCCCC", fontsize=8)
        ax.set_ylabel("neuron", color="#CCCCCC", fontsize=8)
        ax.tick_params(colors="white", labelsize=7)

    fig.suptitle(f"Gen {generation} — Brain of {label}  ({network.summary()})",
                 color="white", fontsize=10)

    path = os.path.join(base, "brains", f"gen_{generation:06d}_{label}.png")
    plt.savefig(path, dpi=100, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# CSV log
# ──────────────────────────────────────────────────────────────────────────────

def append_csv(stats: dict, base: str = SAVE_DIR):
    """Append one generation's stats to a CSV file."""
    if not LOG_CSV:
        return
    path = os.path.join(base, "evolution_log.csv")
    file_exists = os.path.isfile(path)
    with open(path, "a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(stats.keys()))
        if not file_exists:
            writer.writeheader()
        writer.writerow(stats)
    return path
