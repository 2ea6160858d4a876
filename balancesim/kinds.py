"""Closed catalogs of effects, power-up tokens and ball sizes."""
from __future__ import annotations

from enum import Enum
from typing import Dict


class EffectKind(Enum):
    """Timed modifiers with their own active/expiry state."""

    SHIELD = "shield"
    WIDE_PLATFORM = "wide_platform"
    MAGNET = "magnet"
    TIME_FREEZE = "time_freeze"
    NARROW_PLATFORM = "narrow_platform"
    ICE_MODE = "ice_mode"
    BLINKING_EYE = "blinking_eye"
    EARTHQUAKE = "earthquake"


class PowerUpKind(Enum):
    """Falling token types. Power-ups and power-downs share one pool."""

    SHIELD = "shield"
    WIDE_PLATFORM = "wide_platform"
    MAGNET = "magnet"
    SHRINK_BALL = "shrink_ball"
    BIG_BALLZ = "big_ballz"
    TIME_FREEZE = "time_freeze"
    EXTRA_BALL = "extra_ball"
    RANDOM = "random"
    NARROW_PLATFORM = "narrow_platform"
    ICE_MODE = "ice_mode"
    BLINKING_EYE = "blinking_eye"
    EARTHQUAKE = "earthquake"

    @property
    def is_power_down(self) -> bool:
        return self in POWER_DOWNS


class BallSize(Enum):
    SHRUNK = "shrunk"
    NORMAL = "normal"
    BIG = "big"


POWER_DOWNS = frozenset({
    PowerUpKind.NARROW_PLATFORM,
    PowerUpKind.ICE_MODE,
    PowerUpKind.BLINKING_EYE,
    PowerUpKind.EARTHQUAKE,
})

# Tokens that simply start a timed effect
TIMED_POWERUPS: Dict[PowerUpKind, EffectKind] = {
    PowerUpKind.SHIELD: EffectKind.SHIELD,
    PowerUpKind.WIDE_PLATFORM: EffectKind.WIDE_PLATFORM,
    PowerUpKind.MAGNET: EffectKind.MAGNET,
    PowerUpKind.TIME_FREEZE: EffectKind.TIME_FREEZE,
    PowerUpKind.NARROW_PLATFORM: EffectKind.NARROW_PLATFORM,
    PowerUpKind.ICE_MODE: EffectKind.ICE_MODE,
    PowerUpKind.BLINKING_EYE: EffectKind.BLINKING_EYE,
    PowerUpKind.EARTHQUAKE: EffectKind.EARTHQUAKE,
}

# Effects that change the platform width on activation and expiry
WIDTH_EFFECTS = frozenset({EffectKind.WIDE_PLATFORM, EffectKind.NARROW_PLATFORM})
