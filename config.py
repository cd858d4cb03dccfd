"""
Forage Configuration
All tunable parameters for the neuroevolution foraging simulation.
"""

import math

# ─── World ────────────────────────────────────────────────────────────────────
# The world is the unit square [0, 1) x [0, 1) with wrap-around edges.
NUM_CREATURES = 32     # creatures alive at any time
NUM_FOOD      = 128    # food items (never destroyed, only relocated)

# ─── Generations ──────────────────────────────────────────────────────────────
GENERATION_STEPS = 1000   # simulator steps before the population is replaced
MAX_GENERATIONS  = 100    # default run length for the CLI

# ─── Physics ──────────────────────────────────────────────────────────────────
MIN_SPEED         = 0.001        # also the speed of a freshly spawned creature
MAX_SPEED         = 0.005
MAX_ACCEL         = 0.2          # max |speed change| per step
MAX_ANGULAR_ACCEL = math.pi / 2  # max |heading change| per step

CREATURE_SIZE = 0.015
FOOD_SIZE     = 0.005
EAT_RADIUS    = CREATURE_SIZE + FOOD_SIZE   # a creature eats strictly inside this

# ─── Eye ──────────────────────────────────────────────────────────────────────
FOV_RANGE = 0.5            # how far a creature sees (world units)
FOV_ANGLE = math.pi / 2    # width of the field of view (radians)
RECEPTORS = 10             # angular bins of the field of view
NOTHING_SEEN = 2.0         # receptor value when no food falls in its bin

# ─── Brain ────────────────────────────────────────────────────────────────────
# Topology: RECEPTORS inputs → HIDDEN_PER_RECEPTOR * RECEPTORS hidden → 2 outputs
HIDDEN_PER_RECEPTOR = 2
BRAIN_OUTPUTS       = 2      # [speed delta, heading delta]
INITIAL_BIAS        = 0.01   # bias of every neuron in a random brain

# ─── Genetic Algorithm ────────────────────────────────────────────────────────
MUTATION_RATE     = 0.01   # probability a single gene is perturbed
MUTATION_STRENGTH = 0.2    # std-dev multiplier of the gaussian perturbation

# ─── Output / Logging ─────────────────────────────────────────────────────────
SAVE_DIR           = "output"   # directory for saved images and charts
SNAPSHOT_INTERVAL  = 10         # save a world snapshot every N generations
SAVE_BRAIN_SAMPLE  = True       # save a weight diagram of the fittest brain
LOG_CSV            = True       # write per-generation CSV log
STREAM_EVERY_STEPS = 10         # server pushes one frame every N steps
