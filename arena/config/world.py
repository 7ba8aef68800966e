"""World geometry, spawning and scheduling constants."""

# World bounds are supplied by the presentation layer; these are fallbacks
WORLD_WIDTH = 1280.0
WORLD_HEIGHT = 720.0
MIN_WORLD_SIZE = 50.0

# Initial spawning
INITIAL_AGENT_COUNT = 30
INITIAL_FOOD_COUNT = 60
AGENT_DENSITY = 0.00003  # Agents per pixel^2 (alternative to count)
FOOD_DENSITY = 0.00006  # Food per pixel^2
SPAWN_MARGIN = 20.0

# Fixed timestep scheduling
FIXED_TIMESTEP = 1.0 / 60.0
MAX_STEPS_PER_POLL = 5  # Caps catch-up work per poll
MAX_FRAME_DELTA = 0.25  # Wall-clock deltas above this are truncated
MIN_SPEED_MULTIPLIER = 0.1
MAX_SPEED_MULTIPLIER = 10.0

# Export record format
CONFIG_RECORD_VERSION = 1
