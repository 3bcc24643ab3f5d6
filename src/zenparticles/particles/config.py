"""Tuning constants for point clouds and the morph engine."""

# =============================================================================
# PARTICLE FIELD
# =============================================================================
DEFAULT_PARTICLE_COUNT = 3000
PARTICLE_COUNT_STEP = 500
MAX_PARTICLE_COUNT = 20000

DEFAULT_COLOR_HEX = "#00ffff"
COLOR_PALETTE = (
    "#00ffff",
    "#ff00ff",
    "#ffd700",
    "#ff4500",
    "#7fff00",
    "#ffffff",
)


# =============================================================================
# MORPH / ANIMATION
# =============================================================================
LERP_RATE = 4.0

# expansion = EXPANSION_BASE + span * EXPANSION_SPAN_GAIN (hands present)
EXPANSION_BASE = 0.5
EXPANSION_SPAN_GAIN = 2.0
# expansion = sin(t) * BREATH_AMPLITUDE + 1 (no hands)
BREATH_AMPLITUDE = 0.1

TENSION_DEAD_ZONE = 0.1
TENSION_PULL = 0.8
JITTER_AMPLITUDE = 0.25

ROTATION_BASE_SPEED = 0.001
ROTATION_TENSION_SPEED = 0.05


# =============================================================================
# SHAPES
# =============================================================================
SPHERE_RADIUS = 2.0

HEART_XY_SCALE = 0.1
HEART_Z_SCALE = 0.5
HEART_THICKNESS = 5.0

PLANET_RATIO = 0.4
PLANET_RADIUS = 1.5
RING_INNER_RADIUS = 2.2
RING_WIDTH = 2.5
RING_THICKNESS = 0.1

ROSE_PETALS_K = 4
ROSE_AMPLITUDE = 2.0
ROSE_OFFSET = 1.0

BURST_MAX_RADIUS = 4.0
