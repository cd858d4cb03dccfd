import csv
import os

import numpy as np

from simulation import Simulation
import visualizer


def _simulation():
    rng = np.random.default_rng(0)
    sim = Simulation.random(rng, num_creatures=4, num_food=10)
    for _ in range(3):
        sim.step(rng)
    return sim


def test_ensure_dirs(tmp_path):
    visualizer.ensure_dirs(str(tmp_path))
    for sub in ("snapshots", "charts", "brains"):
        assert (tmp_path / sub).is_dir()


def test_save_world_snapshot(tmp_path):
    visualizer.ensure_dirs(str(tmp_path))
    path = visualizer.save_world_snapshot(_simulation().snapshot(), str(tmp_path))
    assert path.endswith("gen_000000.png")
    assert os.path.getsize(path) > 0


def test_save_fitness_chart(tmp_path):
    visualizer.ensure_dirs(str(tmp_path))
    stats = [
        {"generation": g, "max_fitness": 3.0 + g, "min_fitness": 0.0,
         "mean_fitness": 1.0 + g / 2, "std_fitness": 0.5}
        for g in range(5)
    ]
    path = visualizer.save_fitness_chart(stats, str(tmp_path))
    assert os.path.isfile(path)
    assert visualizer.save_fitness_chart([], str(tmp_path)) is None


def test_save_brain_diagram(tmp_path):
    visualizer.ensure_dirs(str(tmp_path))
    brain = _simulation().world.creatures[0].brain
    path = visualizer.save_brain_diagram(brain, 3, "best", str(tmp_path))
    assert path.endswith("gen_000003_best.png")
    assert os.path.isfile(path)


def test_append_csv_writes_header_once(tmp_path):
    row = {"generation": 0, "max_fitness": 2.0, "min_fitness": 0.0,
           "mean_fitness": 1.0, "std_fitness": 0.5}
    visualizer.append_csv(row, str(tmp_path))
    visualizer.append_csv({**row, "generation": 1}, str(tmp_path))

    with open(tmp_path / "evolution_log.csv", newline="") as f:
        rows = list(csv.DictReader(f))
    assert [r["generation"] for r in rows] == ["0", "1"]
    assert rows[0]["mean_fitness"] == "1.0"
