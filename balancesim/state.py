"""Simulation context: the mutable world snapshot owned by the frame driver.

Every update function takes a `SimulationState` explicitly; the renderer and
UI only read it between frames.
"""
from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, List, Optional, Tuple

from pymunk import Vec2d

from . import constants
from .config import GameConfig, Settings
from .kinds import BallSize, EffectKind, PowerUpKind


class RunStatus(Enum):
    RUNNING = "running"
    CAPTURING = "capturing"
    GAME_OVER = "game_over"


class BallSlot(Enum):
    PRIMARY = "primary"
    EXTRA = "extra"


@dataclass
class InputIntent:
    """Per-frame player intents. The core knows nothing about physical keys.

    Tilting left lowers the left edge of the platform, tilting right lowers
    the right edge.
    """

    tilt_left: bool = False
    tilt_right: bool = False
    move_left: bool = False
    move_right: bool = False


@dataclass
class Platform:
    x: float
    y: float
    width: float
    height: float
    max_tilt: float
    tilt_speed: float
    move_speed: float
    min_x: float
    max_x: float
    tilt: float = 0.0
    earthquake_shake: float = 0.0

    @property
    def effective_tilt(self) -> float:
        return self.tilt + self.earthquake_shake

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass
class Ball:
    x: float
    y: float
    radius: float
    vx: float = 0.0
    vy: float = 0.0
    ax: float = 0.0
    ay: float = 0.0
    suck_rotation: float = 0.0
    trail: Deque[Tuple[float, float]] = field(default_factory=deque)

    @property
    def position(self) -> Vec2d:
        return Vec2d(self.x, self.y)

    def take_over(self, other: "Ball") -> None:
        # Full kinematic state and trail move into this slot
        self.x, self.y = other.x, other.y
        self.vx, self.vy = other.vx, other.vy
        self.ax, self.ay = other.ax, other.ay
        self.radius = other.radius
        self.trail.clear()
        self.trail.extend(other.trail)


@dataclass
class BlackHole:
    x: float
    y: float
    radius: float
    rotation: float
    speed_variation: float

    @property
    def position(self) -> Vec2d:
        return Vec2d(self.x, self.y)


@dataclass
class ScoreOrb:
    archetype: str
    x: float
    y: float
    radius: float
    points: int
    speed_multiplier: float
    color: Tuple[int, int, int]
    glow_color: Tuple[int, int, int]
    rotation: float
    speed_variation: float

    @property
    def position(self) -> Vec2d:
        return Vec2d(self.x, self.y)


@dataclass
class PowerUpToken:
    kind: PowerUpKind
    x: float
    y: float
    radius: float
    speed_variation: float
    rotation: float = 0.0

    @property
    def position(self) -> Vec2d:
        return Vec2d(self.x, self.y)


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    size: float
    life: float = 1.0


@dataclass
class EffectTimer:
    active: bool = False
    started_at: float = 0.0
    end_time: float = 0.0


@dataclass
class CaptureState:
    """Suck-in animation bookkeeping for the primary ball."""

    hole: BlackHole
    start_radius: float
    start_pos: Tuple[float, float]
    progress: float = 0.0
    particles: List[Particle] = field(default_factory=list)


@dataclass
class SimulationState:
    config: GameConfig
    settings: Settings
    rng: random.Random
    platform: Platform
    base_platform_width: float
    ball: Ball
    extra_ball: Optional[Ball] = None
    black_holes: List[BlackHole] = field(default_factory=list)
    score_orbs: List[ScoreOrb] = field(default_factory=list)
    power_ups: List[PowerUpToken] = field(default_factory=list)
    effects: Dict[EffectKind, EffectTimer] = field(
        default_factory=lambda: {kind: EffectTimer() for kind in EffectKind}
    )
    ball_size: BallSize = BallSize.NORMAL
    status: RunStatus = RunStatus.RUNNING
    paused: bool = False
    capture: Optional[CaptureState] = None
    score: int = 0
    final_score: int = 0
    best_score: int = 0
    game_over_reason: str = ""
    # Spawn timers run on simulation time (accumulated dt)
    hole_timer: float = 0.0
    orb_timer: float = 0.0
    powerup_timer: float = 0.0
    frame: int = 0

    @property
    def running(self) -> bool:
        return self.status is not RunStatus.GAME_OVER

    @property
    def capturing(self) -> bool:
        return self.status is RunStatus.CAPTURING

    def is_active(self, effect: EffectKind) -> bool:
        return self.effects[effect].active

    def balls(self) -> List[Ball]:
        if self.extra_ball is None:
            return [self.ball]
        return [self.ball, self.extra_ball]


def new_state(
    config: Optional[GameConfig] = None,
    settings: Optional[Settings] = None,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    best_score: int = 0,
) -> SimulationState:
    """Create the world for a fresh run: level platform, ball above its centre."""
    config = config or GameConfig()
    settings = settings or Settings()
    rng = rng or random.Random(seed)

    base_width = config.platform_base_width * settings.platform_scale
    max_x = config.width - base_width - config.platform_min_x
    platform = Platform(
        x=min(max(config.platform_initial_x, config.platform_min_x), max_x),
        y=config.platform_y,
        width=base_width,
        height=constants.PLATFORM_HEIGHT,
        max_tilt=config.max_tilt,
        tilt_speed=config.tilt_speed,
        move_speed=config.move_speed,
        min_x=config.platform_min_x,
        max_x=max_x,
    )
    ball = Ball(
        x=platform.center_x,
        y=config.ball_initial_y,
        radius=config.radius_for(BallSize.NORMAL),
        trail=deque(maxlen=config.trail_length),
    )
    return SimulationState(
        config=config,
        settings=settings,
        rng=rng,
        platform=platform,
        base_platform_width=base_width,
        ball=ball,
        best_score=best_score,
    )


def reset_state(state: SimulationState, settings: Optional[Settings] = None) -> SimulationState:
    # Restart discards the old world; options, rng and best score carry over
    return new_state(
        config=state.config,
        settings=settings or state.settings,
        rng=state.rng,
        best_score=state.best_score,
    )
