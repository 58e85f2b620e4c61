"""
Central configuration constants for petri simulation.

Defines fixed behavior constants, thresholds, and default values
used across multiple modules. Tunable values live in SimulationParams.
"""

# ============================================================================
# Spatial Indexing Configuration
# ============================================================================

# Enable scipy.cKDTree spatial indexing
# Set to False to use O(n) fallback for performance comparison
USE_CKDTREE = True

# cKDTree build parameters
CKDTREE_LEAFSIZE = 16


# ============================================================================
# World Defaults
# ============================================================================

# Play area of the original window (1400x900 minus UI panel and graph strip)
WORLD_WIDTH_DEFAULT = 1080.0
WORLD_HEIGHT_DEFAULT = 700.0

# Seed population sizes
INITIAL_PREY_COUNT = 50
INITIAL_FOOD_COUNT = 200

# Prey reseeded when the whole population dies out
FAILSAFE_RESEED_COUNT = 10


# ============================================================================
# Genome Configuration
# ============================================================================

# Clamp range for speed, size and sense radius after mutation
TRAIT_MIN = 0.1
TRAIT_MAX = 100.0

# Clamp range for color channels after mutation
COLOR_CHANNEL_MIN = 0.2
COLOR_CHANNEL_MAX = 1.0
COLOR_ALPHA = 0.9

# Per-channel color drift per generation (uniform, +/-)
COLOR_DRIFT = 0.05

# Random genome ranges (low inclusive, high exclusive)
GENOME_SPEED_RANGE = (1.0, 3.0)
GENOME_SIZE_RANGE = (3.0, 8.0)
GENOME_SENSE_RANGE = (20.0, 60.0)


# ============================================================================
# Prey Behavior
# ============================================================================

# Predators closer than this trigger fleeing
PREY_DANGER_RADIUS = 80.0

# Predators closer than this are ignored (degenerate direction)
PREY_DANGER_EPSILON = 0.1

# Minimum flee vector magnitude that overrides foraging
PREY_FLEE_THRESHOLD = 0.1

# Heading blend weights
PREY_FLEE_WEIGHT = 0.5
PREY_FORAGE_WEIGHT = 0.2

# Wander jitter (radians, uniform +/-)
PREY_JITTER_ANGLE = 0.2

# Metabolism: (speed^2 * size * FACTOR + BASE) * speed_multiplier
PREY_METABOLISM_FACTOR = 0.005
PREY_METABOLISM_BASE = 0.1

# Food is eaten within (prey size + margin)
FOOD_CONTACT_MARGIN = 2.0

# Energy gained per food item
FOOD_ENERGY = 30.0


# ============================================================================
# Predator Configuration
# ============================================================================

PREDATOR_INITIAL_ENERGY = 150.0
PREDATOR_SPEED = 2.5
PREDATOR_SIZE = 12.0
PREDATOR_SENSE_RADIUS = 100.0

# Pursuit blend weight and wander jitter (radians, uniform +/-)
PREDATOR_PURSUIT_WEIGHT = 0.3
PREDATOR_JITTER_ANGLE = 0.15

# Flat metabolic cost per tick (scaled by speed_multiplier)
PREDATOR_METABOLISM = 0.2

# Energy gained per captured prey
PREY_ENERGY_REWARD = 80.0


# ============================================================================
# Statistics Configuration
# ============================================================================

# Rolling history length for population graphs
MAX_HISTORY = 300


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100  # Number of ticks to average

# Default tick summary interval (print every N ticks)
TICK_SUMMARY_INTERVAL = 100
