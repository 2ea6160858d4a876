"""Power-up tokens and the timed-effect state machine.

Timed effects live on the wall clock (`now`, seconds); the token spawn timer
lives on simulation time like every other spawner.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional

from . import constants
from .entities import apply_platform_width, random_speed_variation, spawn_extra_ball
from .kinds import TIMED_POWERUPS, WIDTH_EFFECTS, BallSize, EffectKind, PowerUpKind
from .state import PowerUpToken, SimulationState

logger = logging.getLogger(__name__)

# Permanent size toggles: each token moves one step, saturating at the ends
SIZE_TRANSITIONS: Dict[PowerUpKind, Dict[BallSize, BallSize]] = {
    PowerUpKind.SHRINK_BALL: {
        BallSize.BIG: BallSize.NORMAL,
        BallSize.NORMAL: BallSize.SHRUNK,
        BallSize.SHRUNK: BallSize.SHRUNK,
    },
    PowerUpKind.BIG_BALLZ: {
        BallSize.SHRUNK: BallSize.NORMAL,
        BallSize.NORMAL: BallSize.BIG,
        BallSize.BIG: BallSize.BIG,
    },
}


def next_ball_size(size: BallSize, kind: PowerUpKind) -> BallSize:
    return SIZE_TRANSITIONS[kind][size]


def set_ball_size(state: SimulationState, size: BallSize) -> None:
    state.ball_size = size
    radius = state.config.radius_for(size)
    for ball in state.balls():
        ball.radius = radius


# ---------------------------------------------
# Spawning and movement
# ---------------------------------------------
def enabled_pool(state: SimulationState, include_random: bool = True) -> List[PowerUpKind]:
    """Token kinds currently eligible for selection."""
    pool = []
    for kind in PowerUpKind:
        if not state.settings.is_enabled(kind):
            continue
        if kind is PowerUpKind.EXTRA_BALL and state.extra_ball is not None:
            continue
        if kind is PowerUpKind.RANDOM and not include_random:
            continue
        pool.append(kind)
    return pool


def spawn_power_up(state: SimulationState) -> Optional[PowerUpToken]:
    pool = enabled_pool(state)
    if not pool:
        return None
    cfg = state.config
    kind = state.rng.choice(pool)
    token = PowerUpToken(
        kind=kind,
        x=cfg.powerup_radius + state.rng.random() * (cfg.width - cfg.powerup_radius * 2),
        y=-cfg.powerup_radius,
        radius=cfg.powerup_radius,
        speed_variation=random_speed_variation(state.rng),
    )
    state.power_ups.append(token)
    return token


def update_power_ups(state: SimulationState, dt: float) -> None:
    # Tokens keep falling during time freeze
    cfg = state.config
    state.powerup_timer += dt
    while state.powerup_timer >= cfg.powerup_spawn_interval:
        spawn_power_up(state)
        state.powerup_timer -= cfg.powerup_spawn_interval

    for token in state.power_ups:
        token.y += cfg.scroll_speed * token.speed_variation * dt
        token.rotation += constants.TOKEN_SPIN * dt

    state.power_ups = [t for t in state.power_ups if t.y <= cfg.height + t.radius]


def check_power_up_collisions(state: SimulationState, now: float) -> List[PowerUpKind]:
    """Activate every token touched by either ball. Returns the kinds collected."""
    collected = []
    remaining = []
    for token in state.power_ups:
        touched = any(
            ball.position.get_distance(token.position) < ball.radius + token.radius
            for ball in state.balls()
        )
        if touched:
            collected.append(token.kind)
        else:
            remaining.append(token)
    state.power_ups = remaining
    # Activate after the sweep so an extra ball spawned here is not tested this frame
    for kind in collected:
        activate_power_up(state, kind, now)
    return collected


# ---------------------------------------------
# Activation and expiry
# ---------------------------------------------
def activate_effect(state: SimulationState, effect: EffectKind, now: float) -> None:
    timer = state.effects[effect]
    timer.active = True
    timer.started_at = now
    timer.end_time = now + state.config.effect_duration
    if effect in WIDTH_EFFECTS:
        apply_platform_width(state)


def activate_power_up(state: SimulationState, kind: PowerUpKind, now: float) -> None:
    logger.debug("Power-up %s collected at score %d", kind.value, state.score)
    if kind in TIMED_POWERUPS:
        activate_effect(state, TIMED_POWERUPS[kind], now)
    elif kind in SIZE_TRANSITIONS:
        set_ball_size(state, next_ball_size(state.ball_size, kind))
    elif kind is PowerUpKind.EXTRA_BALL:
        spawn_extra_ball(state)
    elif kind is PowerUpKind.RANDOM:
        pool = enabled_pool(state, include_random=False)
        if pool:
            activate_power_up(state, state.rng.choice(pool), now)
    else:
        raise ValueError(f"Unhandled power-up kind: {kind}")


def expire_effects(state: SimulationState, now: float) -> List[EffectKind]:
    expired = []
    for effect, timer in state.effects.items():
        if timer.active and now > timer.end_time:
            timer.active = False
            expired.append(effect)
    if WIDTH_EFFECTS.intersection(expired):
        apply_platform_width(state)
    return expired


# ---------------------------------------------
# Read-only helpers for the renderer/UI
# ---------------------------------------------
def effect_time_remaining(state: SimulationState, effect: EffectKind, now: float) -> float:
    timer = state.effects[effect]
    if not timer.active:
        return 0.0
    return max(0.0, timer.end_time - now)


def is_ball_visible(state: SimulationState, now: float) -> bool:
    # Blinking eye: visible on even whole seconds since activation
    timer = state.effects[EffectKind.BLINKING_EYE]
    if not timer.active:
        return True
    seconds = math.floor(now - timer.started_at)
    return seconds % 2 == 0
