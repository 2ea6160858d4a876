"""Core simulation constants.

Units are canvas pixels and "frames" of 1/60 s; every per-frame quantity is
scaled by the delta-time multiplier before it is applied.
"""

# Canvas
CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600

# Frame timing
TARGET_FPS = 60
TARGET_FRAME_MS = 1000 / TARGET_FPS
MAX_FRAME_MS = 100                # Clamp on a single frame's elapsed time
DEBUG_LOG_EVERY = 60              # Frames between debug log lines

# Physics
GRAVITY = 0.4                     # Downward acceleration (pixels/frame^2)
AIR_FRICTION = 0.998              # Horizontal velocity kept per frame
BOUNCE_FACTOR = 0.3               # Restitution on landing
BOUNCE_THRESHOLD = 1.0            # Slower landings do not bounce
ROLL_FRICTION = 0.9995
MAGNET_ROLL_FRICTION = 0.990
ICE_ROLL_FRICTION = 0.99999
MAGNET_GRAVITY_FACTOR = 0.7
MAGNET_BOUNCE_FACTOR = 0.1
SCROLL_SPEED = 1.5                # Base falling speed of holes, orbs and tokens

# Platform
PLATFORM_INITIAL_X = 225
PLATFORM_Y = 450
PLATFORM_BASE_WIDTH = 350
PLATFORM_HEIGHT = 12
PLATFORM_MAX_TILT = 80
PLATFORM_TILT_SPEED = 2.5
PLATFORM_MOVE_SPEED = 4
PLATFORM_MIN_X = 50
TILT_DECAY = 0.96                 # Auto-levelling factor per frame
WIDE_PLATFORM_MULTIPLIER = 1.3
NARROW_PLATFORM_MULTIPLIER = 0.7
PLATFORM_PRESETS = {"short": 0.9, "normal": 1.0, "wide": 1.1}

# Earthquake
EARTHQUAKE_BASE_SHAKE = 50
EARTHQUAKE_SHAKE_SWING = 30
EARTHQUAKE_SHAKE_RATE = 0.015     # Radians per wall-clock millisecond
EARTHQUAKE_HORIZONTAL_SHAKE = 16

# Ball
BALL_INITIAL_Y = 400
BALL_BASE_RADIUS = 18
TRAIL_LENGTH = 15
SIZE_SHRUNK = 0.5
SIZE_NORMAL = 1.0
SIZE_BIG = 1.4
EXTRA_BALL_OFFSET = 50
EXTRA_BALL_MARGIN = 20

# Black holes
BLACK_HOLE_SPAWN_INTERVAL = 200   # Frames between spawns
BLACK_HOLE_RADIUS_FACTOR = 2.0    # Relative to BALL_BASE_RADIUS
CAPTURE_RADIUS_FACTOR = 0.5       # Capture triggers inside this share of the radius
GRAVITY_RADIUS = 150
GRAVITY_STRENGTH = 0.15
MAGNET_PULL_FACTOR = 0.1
SPEED_INCREASE_INTERVAL = 20      # Points per speed step
SPEED_INCREASE_AMOUNT = 0.05
MAX_SPEED_MULTIPLIER = 1.5
HOLE_SPIN = 0.03

# Power-ups
POWERUP_SPAWN_INTERVAL = 450
POWERUP_RADIUS = 15
EFFECT_DURATION = 12.0            # Seconds, wall clock
TOKEN_SPIN = 0.03

# Score orbs
SCORE_ORB_SPAWN_INTERVAL = 150
ORB_SPIN = 0.02
SCORE_ORB_TYPES = {
    "large": {"points": 1, "size": 2.0, "speed": 1.0, "color": (255, 215, 0), "glow": (255, 170, 0)},
    "medium": {"points": 3, "size": 1.0, "speed": 1.5, "color": (80, 250, 123), "glow": (0, 255, 85)},
    "small": {"points": 5, "size": 0.5, "speed": 2.0, "color": (189, 147, 249), "glow": (255, 121, 198)},
}

# Speed variation drawn once per falling object
SPEED_VARIATION_MIN = 0.9
SPEED_VARIATION_SPAN = 0.2

# Capture (suck-in) animation
SUCK_RATE = 0.03                  # Progress per frame
SUCK_LERP = 0.9                   # Remaining distance kept per frame
SUCK_SHRINK = 0.9
SUCK_SPIN = 0.3
PARTICLE_SPAWN_CHANCE = 0.5
PARTICLE_PULL = 0.5
PARTICLE_DECAY = 0.03
PARTICLE_ABSORB_FACTOR = 0.3

# Ball colours
BALL_COLORS = {
    "white": {"fill": (224, 224, 224), "glow": (255, 255, 255), "suck": (136, 136, 136)},
    "red": {"fill": (233, 69, 96), "glow": (255, 123, 148), "suck": (153, 50, 255)},
    "black": {"fill": (42, 42, 42), "glow": (102, 102, 102), "suck": (136, 136, 136)},
}
