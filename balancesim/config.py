"""Tunable configuration bundles.

`GameConfig` groups the physics and spawn tunables, defaulting to the values
in `constants`. `Settings` holds the player-facing options. Both validate on
construction so a bad configuration fails at startup instead of mid-run.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from . import constants
from .kinds import BallSize, PowerUpKind


def _default_size_multipliers() -> Dict[BallSize, float]:
    return {
        BallSize.SHRUNK: constants.SIZE_SHRUNK,
        BallSize.NORMAL: constants.SIZE_NORMAL,
        BallSize.BIG: constants.SIZE_BIG,
    }


@dataclass
class GameConfig:
    width: int = constants.CANVAS_WIDTH
    height: int = constants.CANVAS_HEIGHT

    gravity: float = constants.GRAVITY
    air_friction: float = constants.AIR_FRICTION
    bounce_factor: float = constants.BOUNCE_FACTOR
    roll_friction: float = constants.ROLL_FRICTION
    magnet_roll_friction: float = constants.MAGNET_ROLL_FRICTION
    ice_roll_friction: float = constants.ICE_ROLL_FRICTION
    scroll_speed: float = constants.SCROLL_SPEED

    platform_initial_x: float = constants.PLATFORM_INITIAL_X
    platform_y: float = constants.PLATFORM_Y
    platform_base_width: float = constants.PLATFORM_BASE_WIDTH
    platform_min_x: float = constants.PLATFORM_MIN_X
    max_tilt: float = constants.PLATFORM_MAX_TILT
    tilt_speed: float = constants.PLATFORM_TILT_SPEED
    move_speed: float = constants.PLATFORM_MOVE_SPEED
    tilt_decay: float = constants.TILT_DECAY

    ball_radius: float = constants.BALL_BASE_RADIUS
    ball_initial_y: float = constants.BALL_INITIAL_Y
    trail_length: int = constants.TRAIL_LENGTH
    size_multipliers: Dict[BallSize, float] = field(default_factory=_default_size_multipliers)

    hole_spawn_interval: float = constants.BLACK_HOLE_SPAWN_INTERVAL
    gravity_radius: float = constants.GRAVITY_RADIUS
    gravity_strength: float = constants.GRAVITY_STRENGTH
    speed_increase_interval: int = constants.SPEED_INCREASE_INTERVAL
    speed_increase_amount: float = constants.SPEED_INCREASE_AMOUNT
    max_speed_multiplier: float = constants.MAX_SPEED_MULTIPLIER

    powerup_spawn_interval: float = constants.POWERUP_SPAWN_INTERVAL
    powerup_radius: float = constants.POWERUP_RADIUS
    effect_duration: float = constants.EFFECT_DURATION

    orb_spawn_interval: float = constants.SCORE_ORB_SPAWN_INTERVAL
    orb_types: Dict[str, Dict[str, Any]] = field(
        default_factory=lambda: copy.deepcopy(constants.SCORE_ORB_TYPES)
    )

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas must have a positive size, got {self.width}x{self.height}")
        for name in ("ball_radius", "platform_base_width", "powerup_radius",
                     "gravity_radius", "effect_duration", "speed_increase_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("hole_spawn_interval", "powerup_spawn_interval", "orb_spawn_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("air_friction", "roll_friction", "magnet_roll_friction",
                     "ice_roll_friction", "tilt_decay"):
            value = getattr(self, name)
            if not 0 < value <= 1:
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        if self.max_speed_multiplier < 1:
            raise ValueError("max_speed_multiplier must be at least 1")
        if self.trail_length < 1:
            raise ValueError("trail_length must be at least 1")
        missing = set(BallSize) - set(self.size_multipliers)
        if missing:
            raise ValueError(f"Missing size multipliers for {sorted(s.value for s in missing)}")
        if any(m <= 0 for m in self.size_multipliers.values()):
            raise ValueError("Size multipliers must be positive")
        if not self.orb_types:
            raise ValueError("At least one score orb archetype is required")
        for key, orb in self.orb_types.items():
            for required in ("points", "size", "speed", "color"):
                if required not in orb:
                    raise ValueError(f"Score orb '{key}' is missing '{required}'")
        if self.platform_min_x * 2 + self.platform_base_width > self.width:
            raise ValueError("Platform does not fit inside the canvas")

    @property
    def hole_radius(self) -> float:
        # Independent of the current ball size
        return self.ball_radius * constants.BLACK_HOLE_RADIUS_FACTOR

    def radius_for(self, size: BallSize) -> float:
        return self.ball_radius * self.size_multipliers[size]


def _default_enabled() -> Dict[PowerUpKind, bool]:
    return {kind: True for kind in PowerUpKind}


@dataclass
class Settings:
    """Player options: visuals, platform preset and the enabled token pool."""

    ball_color: str = "red"
    platform_width: str = "normal"
    enabled: Dict[PowerUpKind, bool] = field(default_factory=_default_enabled)

    def __post_init__(self):
        if self.ball_color not in constants.BALL_COLORS:
            raise ValueError(f"Unknown ball colour: {self.ball_color}")
        if self.platform_width not in constants.PLATFORM_PRESETS:
            raise ValueError(f"Unknown platform width preset: {self.platform_width}")
        self.enabled = {**_default_enabled(), **self.enabled}

    @property
    def platform_scale(self) -> float:
        return constants.PLATFORM_PRESETS[self.platform_width]

    def is_enabled(self, kind: PowerUpKind) -> bool:
        return self.enabled.get(kind, False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from plain keys, e.g. ``{"shield": False, "platform_width": "wide"}``."""
        options = dict(data)
        ball_color = options.pop("ball_color", "red")
        platform_width = options.pop("platform_width", "normal")
        enabled = _default_enabled()
        for key, value in options.items():
            try:
                kind = PowerUpKind(key)
            except ValueError:
                raise ValueError(f"Unknown setting: {key}") from None
            enabled[kind] = bool(value)
        return cls(ball_color=ball_color, platform_width=platform_width, enabled=enabled)
