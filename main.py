"""
Forage – Main Entry Point
=========================

Usage examples:
  python main.py                              # defaults from config.py
  python main.py --gens 200 --seed 42         # reproducible run
  python main.py --creatures 64 --food 256    # bigger world
  python main.py --steps 500                  # shorter generations
  python main.py --mutation-rate 0            # turn off mutations (demonstration)
"""

import argparse
import time

import numpy as np

from simulation import Simulation
from genome     import ZeroFitnessError
from visualizer import (ensure_dirs, save_world_snapshot,
                        save_fitness_chart, save_brain_diagram,
                        append_csv)
from config import (SAVE_DIR, SNAPSHOT_INTERVAL, SAVE_BRAIN_SAMPLE,
                    NUM_CREATURES, NUM_FOOD, MAX_GENERATIONS,
                    GENERATION_STEPS, MUTATION_RATE, MUTATION_STRENGTH)


# ──────────────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Forage – neuroevolution foraging simulator")
    p.add_argument("--gens",       type=int,   default=MAX_GENERATIONS,
                   help="Number of generations to run")
    p.add_argument("--creatures",  type=int,   default=NUM_CREATURES,
                   help="Population size")
    p.add_argument("--food",       type=int,   default=NUM_FOOD,
                   help="Number of food items")
    p.add_argument("--steps",      type=int,   default=GENERATION_STEPS,
                   help="Simulator steps per generation")
    p.add_argument("--mutation-rate",     type=float, default=MUTATION_RATE,
                   help="Probability that a gene is mutated")
    p.add_argument("--mutation-strength", type=float, default=MUTATION_STRENGTH,
                   help="Scale of the gaussian gene perturbation")
    p.add_argument("--seed",       type=int,   default=None,
                   help="Random seed for reproducibility")
    p.add_argument("--outdir",     default=SAVE_DIR,
                   help="Output directory")
    p.add_argument("--snapshot-interval", type=int, default=SNAPSHOT_INTERVAL,
                   help="Save world snapshot every N generations")
    return p.parse_args(argv)


# ──────────────────────────────────────────────────────────────────────────────
# Callbacks
# ──────────────────────────────────────────────────────────────────────────────

class SimCallbacks:
    """Bundles the per-generation outputs of a run."""

    def __init__(self, outdir: str, snapshot_interval: int, all_stats: list):
        self.outdir            = outdir
        self.snapshot_interval = snapshot_interval
        self.all_stats         = all_stats

    def on_generation(self, gen_idx, stats, snapshot, best):
        row = {"generation": gen_idx, **stats.as_dict()}
        self.all_stats.append(row)

        # CSV log
        append_csv(row, self.outdir)

        if gen_idx % self.snapshot_interval == 0:
            path = save_world_snapshot(snapshot, self.outdir)
            print(f"  → Snapshot: {path}")

            if SAVE_BRAIN_SAMPLE and best is not None:
                bpath = save_brain_diagram(best.brain, gen_idx, "best", self.outdir)
                print(f"  → Brain diagram: {bpath}")

        # Chart update every 10 gens
        if gen_idx % 10 == 0 and gen_idx > 0:
            save_fitness_chart(self.all_stats, self.outdir)


def print_stats(gen_idx: int, stats, elapsed: float):
    print(
        f"Gen {gen_idx:>5}  |  "
        f"max {stats.max_fitness:>5.0f}  "
        f"min {stats.min_fitness:>5.0f}  "
        f"mean {stats.mean_fitness:>7.2f}  "
        f"std {stats.std_fitness:>6.2f}  |  "
        f"{elapsed:.2f}s"
    )


# ──────────────────────────────────────────────────────────────────────────────
# Running
# ──────────────────────────────────────────────────────────────────────────────

def run_generation(sim: Simulation, rng: np.random.Generator):
    """
    Step ``sim`` through the rest of its current generation.

    Returns (stats, snapshot, best) where snapshot is the world just before
    the population was replaced and best is the creature that ate most.
    """
    while sim.generation_steps < sim.generation_length - 1:
        sim.step(rng)
    snapshot = sim.snapshot()
    best     = max(sim.world.creatures, key=lambda c: c.consumed, default=None)
    stats    = sim.step(rng)
    return stats, snapshot, best


def main(argv=None):
    args = parse_args(argv)
    outdir = args.outdir
    ensure_dirs(outdir)

    print("=" * 60)
    print("  Forage – Neuroevolution Foraging Simulator")
    print("=" * 60)
    print(f"  Creatures  : {args.creatures}")
    print(f"  Food       : {args.food}")
    print(f"  Generations: {args.gens}")
    print(f"  Steps/gen  : {args.steps}")
    print(f"  Mutation   : rate {args.mutation_rate}, "
          f"strength {args.mutation_strength}")
    print(f"  Seed       : {args.seed}")
    print(f"  Output dir : {outdir}")
    print("=" * 60)

    rng = np.random.default_rng(args.seed)
    sim = Simulation.random(
        rng,
        num_creatures     = args.creatures,
        num_food          = args.food,
        generation_length = args.steps,
        mutation_rate     = args.mutation_rate,
        mutation_strength = args.mutation_strength,
    )

    all_stats = []
    cb = SimCallbacks(outdir, args.snapshot_interval, all_stats)

    for _ in range(args.gens):
        gen_idx = sim.generation
        t0 = time.time()
        try:
            stats, snapshot, best = run_generation(sim, rng)
        except ZeroFitnessError:
            print("  !! Nothing was eaten this generation – cannot select parents. Stopping.")
            break
        print_stats(gen_idx, stats, time.time() - t0)
        cb.on_generation(gen_idx, stats, snapshot, best)

    # Final chart
    print("\nSaving final fitness chart …")
    chart_path = save_fitness_chart(all_stats, outdir, "fitness_final.png")
    if chart_path:
        print(f"  → {chart_path}")

    print("\nDone! All outputs saved to:", outdir)
    return all_stats


if __name__ == "__main__":
    main()
