import numpy as np

import main
from simulation import Simulation


def test_parse_args_defaults():
    args = main.parse_args([])
    assert args.creatures == main.NUM_CREATURES
    assert args.steps == main.GENERATION_STEPS
    assert args.seed is None


def test_run_generation_returns_best_of_finished_generation():
    rng = np.random.default_rng(0)
    sim = Simulation.random(rng, num_creatures=4, num_food=10, generation_length=6)
    for i, creature in enumerate(sim.world.creatures):
        creature.consumed = 10 * (i + 1)

    stats, snapshot, best = main.run_generation(sim, rng)

    assert sim.generation == 1
    assert snapshot.generation == 0
    assert snapshot.generation_steps == 5
    assert best.consumed == stats.max_fitness
    assert best.consumed >= 40


def test_main_runs_headless(tmp_path, capsys):
    outdir = tmp_path / "run"
    all_stats = main.main([
        "--gens", "2", "--creatures", "4", "--food", "40", "--steps", "5",
        "--seed", "3", "--outdir", str(outdir), "--snapshot-interval", "1",
    ])

    out = capsys.readouterr().out
    assert "Forage" in out
    assert "Done!" in out
    assert (outdir / "charts").is_dir()
    # a generation in which nothing is eaten stops the run early
    assert len(all_stats) <= 2
    for row in all_stats:
        assert set(row) == {"generation", "max_fitness", "min_fitness",
                            "mean_fitness", "std_fitness"}
