#!/usr/bin/env python3
"""
Shared constants for the solar system simulator (simulation units).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier. These are defaults only; a running
Simulation reads everything it needs from its SimulationConfig.

Units
- 1 mass unit = 1 Mercury mass.
- Distances and radii are world units (1 Mercury orbit = DISTANCE_SCALE * SUN_VISUAL_SCALE).
- Time is in simulation ticks; velocities are world units per tick.
"""

# Physical constants
G = 0.000015  # gravitational constant in world units
SOFTENING = 0.1  # kept for configuration parity; not applied by the force law
SPEED_OF_LIGHT = 638.0  # simulation's c in units/tick
LIGHT_SPEED_FRACTION = 0.99999  # spaceship speed cap as a fraction of c

# Physics controls
BASE_DT = 0.1  # simulation time per frame before time scaling
SUB_STEPS = 10  # physics sub-steps per frame
MAX_TIME_SCALE = 100.0
RESTITUTION = 0.95  # fraction of relative normal velocity kept through a collision
FALLBACK_NORMAL = (1.0, 0.0, 0.0)  # collision normal for coincident bodies

# Spaceship controls
THRUST_RAMP = 0.1  # thrust change per control tick while W/S is held
THRUST_DECAY = 0.95  # thrust multiplier per control tick when idle
REVERSE_THRUST_FRACTION = 0.5  # reverse thrust floor as a fraction of max thrust
STEERING_SENSITIVITY = 0.002  # radians per pixel of pointer motion
DEFAULT_MAX_THRUST = 5.0
SPACESHIP_NAME = "Spaceship"
SPACESHIP_MASS = 1.0
SPACESHIP_RADIUS = 0.5
BASE_FORWARD = (0.0, 0.0, -1.0)
YAW_AXIS = (0.0, 1.0, 0.0)
PITCH_AXIS = (1.0, 0.0, 0.0)

# Spawning
SPAWN_DEFAULT_MASS = 10.0
SPAWN_VELOCITY_SCALE = 0.1
SPAWN_RADIUS_FACTOR = 0.5
SPAWN_NAME_PREFIX = "Asteroid_"

# Scale factors ("real ratios" to world units)
MASS_SCALE = 1.0  # 1 unit mass = 1 Mercury mass
RADIUS_SCALE = 0.5  # 1 unit radius = 0.5 world units
DISTANCE_SCALE = 30.0  # 1 unit distance (Mercury orbit) = 30 world units
SUN_VISUAL_SCALE = 285.0
SUN_MASS = 6035500.0
SUN_RADIUS = 285.0
BASE_ROTATION_SPEED = 0.035  # spin per tick for a rotation period of 1 (cosmetic)

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (10, 12, 18)
HUD_COLOR = (220, 230, 240)
SPAWN_LINE_COLOR = (255, 153, 0)
DEFAULT_BODY_COLOR = (200, 200, 255)
TRAIL_LENGTH = 200

# Camera zoom bounds (world units per pixel)
DEFAULT_UNITS_PER_PIXEL = 40.0
MIN_UNITS_PER_PIXEL = 0.01
MAX_UNITS_PER_PIXEL = 1000.0

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
