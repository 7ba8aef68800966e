"""Reproduction, mutation and population constants."""

# Reproduction
REPRODUCTION_THRESHOLD = 150.0  # Energy needed before an agent may reproduce
REPRODUCTION_COST = 50.0  # Energy the parent pays
CHILD_ENERGY_FRACTION = 0.8  # Child starts with this fraction of the cost
REPRODUCTION_COOLDOWN = 180  # Ticks between successive reproductions
SPAWN_OFFSET = 10.0  # Max distance of a child from its parent (pixels)

# Mutation
MUTATION_CHANCE = 0.1  # Per-trait probability of a shift
MUTATION_MAGNITUDE = 0.1  # Max absolute shift per mutation
STRATEGY_MUTATION_CHANCE = 0.02  # Probability a child switches strategy

# Population
MAX_AGENTS = 150
MIN_POPULATION = 5  # Floor enforced by rescue spawns
MAX_AGE = 120.0  # Simulated seconds

# Strategy spawn ratios (normalised before use)
STRATEGY_SPAWN = {
    "AGGRESSIVE": 0.25,
    "PASSIVE": 0.25,
    "COOPERATIVE": 0.20,
    "TIT_FOR_TAT": 0.20,
    "RANDOM": 0.10,
}
