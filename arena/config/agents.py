"""Agent kinematics, energy and steering constants."""

# Agent kinematics (pixels and seconds)
DEFAULT_SPEED = 100.0  # Base max speed, scaled by the speed trait
MAX_SPEED = 150.0  # Absolute ceiling after trait scaling
MAX_FORCE = 200.0  # Steering force strength
VISION_RADIUS = 80.0  # Base vision, scaled by the vision trait

# Energy
STARTING_ENERGY = 100.0
MAX_ENERGY = 200.0
LOW_ENERGY_THRESHOLD = 30.0  # Below this agents flee threats and avoid fights

# Encounter memory
DEFAULT_MEMORY_SIZE = 5  # Number of opponents remembered

# Energy costs
BASE_TICK_COST = 0.05  # Energy lost per tick just existing
MOVEMENT_COST_FACTOR = 0.01  # Energy per pixel moved
AGE_METABOLISM_FACTOR = 1.0  # Extra base cost at max age (1.0 = doubled)

# Steering
FRICTION = 0.98  # Velocity dampening per tick
SEPARATION_WEIGHT = 0.6
FLEE_WEIGHT = 2.0
FOOD_SEEK_WEIGHT = 1.5
ARRIVE_SLOW_RADIUS = 30.0
THREAT_AGGRESSION = 0.7  # Neighbours above this aggression count as threats

# Wander circle
WANDER_DISTANCE = 60.0
WANDER_RADIUS = 40.0
WANDER_STRENGTH = 50.0  # Percent of a full seek force
WANDER_SMOOTHNESS = 0.1  # Lower = smoother turns

# Boundaries
BOUNDARY_MODE = "bounce"  # "bounce" or "wrap"
BOUNDARY_MARGIN = 20.0
BOUNDARY_FORCE_MULTIPLIER = 2.0
BOUNDARY_HARD_PADDING = 5.0
