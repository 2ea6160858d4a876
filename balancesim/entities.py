"""Physics/entity engine: platform, balls, black holes, score orbs.

Every update takes the delta-time multiplier `dt` (1.0 at 60 fps). Linear
terms scale by `dt`, decay and friction terms by `rate ** dt`.
"""
from __future__ import annotations

import math
from collections import deque
from typing import NamedTuple, Optional, Tuple

from pymunk import Vec2d

from . import constants
from .config import GameConfig
from .kinds import EffectKind
from .state import Ball, BallSlot, BlackHole, InputIntent, Platform, ScoreOrb, SimulationState


class HoleContact(NamedTuple):
    hole: BlackHole
    slot: BallSlot


def random_speed_variation(rng) -> float:
    # 0.9 .. 1.1, drawn once per falling object
    return constants.SPEED_VARIATION_MIN + rng.random() * constants.SPEED_VARIATION_SPAN


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(value, hi))


# ---------------------------------------------
# Platform
# ---------------------------------------------
def update_platform(state: SimulationState, intent: InputIntent, dt: float, now: float) -> None:
    """Apply tilt/move intents, auto-levelling and earthquake shake."""
    p = state.platform
    quaking = state.is_active(EffectKind.EARTHQUAKE)
    # The earthquake takes tilt control away from the player
    tilt_left = intent.tilt_left and not quaking
    tilt_right = intent.tilt_right and not quaking

    if tilt_left:
        p.tilt = min(p.tilt + p.tilt_speed * dt, p.max_tilt)
    if tilt_right:
        p.tilt = max(p.tilt - p.tilt_speed * dt, -p.max_tilt)
    if intent.move_left:
        p.x = max(p.x - p.move_speed * dt, p.min_x)
    if intent.move_right:
        p.x = min(p.x + p.move_speed * dt, p.max_x)

    if not tilt_left and not tilt_right:
        p.tilt *= state.config.tilt_decay ** dt

    if quaking:
        intensity = (constants.EARTHQUAKE_BASE_SHAKE
                     + math.sin(now * 1000 * constants.EARTHQUAKE_SHAKE_RATE) * constants.EARTHQUAKE_SHAKE_SWING)
        p.earthquake_shake = (state.rng.random() - 0.5) * intensity
        jitter = (state.rng.random() - 0.5) * constants.EARTHQUAKE_HORIZONTAL_SHAKE * dt
        p.x = _clamp(p.x + jitter, p.min_x, p.max_x)
    else:
        p.earthquake_shake = 0.0


def platform_angle(platform: Platform) -> float:
    return math.atan2(platform.effective_tilt * 2, platform.width)


def platform_y_at(platform: Platform, x: float) -> float:
    # Straight segment through the centre; positive tilt lowers the left edge
    relative_x = (x - platform.center_x) / (platform.width / 2)
    return platform.y - platform.effective_tilt * relative_x


def width_multiplier(state: SimulationState) -> float:
    multiplier = 1.0
    if state.is_active(EffectKind.WIDE_PLATFORM):
        multiplier *= constants.WIDE_PLATFORM_MULTIPLIER
    if state.is_active(EffectKind.NARROW_PLATFORM):
        multiplier *= constants.NARROW_PLATFORM_MULTIPLIER
    return multiplier


def apply_platform_width(state: SimulationState) -> None:
    """Recompute width from the active effects, keep the centre, re-clamp bounds."""
    p = state.platform
    center_x = p.center_x
    p.width = state.base_platform_width * width_multiplier(state)
    p.max_x = state.config.width - p.width - p.min_x
    p.x = _clamp(center_x - p.width / 2, p.min_x, p.max_x)


# ---------------------------------------------
# Balls
# ---------------------------------------------
def roll_friction(state: SimulationState) -> float:
    cfg = state.config
    if state.is_active(EffectKind.ICE_MODE):
        return cfg.ice_roll_friction
    if state.is_active(EffectKind.MAGNET):
        return cfg.magnet_roll_friction
    return cfg.roll_friction


def is_off_screen(config: GameConfig, ball: Ball) -> bool:
    return (ball.y > config.height + ball.radius
            or ball.x < -ball.radius
            or ball.x > config.width + ball.radius)


def update_ball(state: SimulationState, ball: Ball, dt: float) -> bool:
    """Advance one ball by `dt`. Returns True when the ball left the playfield."""
    assert ball.radius > 0, f"ball radius must be positive, got {ball.radius}"
    cfg = state.config
    p = state.platform
    magnet = state.is_active(EffectKind.MAGNET)

    gravity = cfg.gravity * constants.MAGNET_GRAVITY_FACTOR if magnet else cfg.gravity
    angle = platform_angle(p)
    ball.ax = -math.sin(angle) * gravity
    ball.ay = gravity

    surface_y = platform_y_at(p, ball.x)
    over_platform = p.x <= ball.x <= p.right
    if over_platform and ball.y + ball.radius >= surface_y and ball.vy >= 0:
        ball.y = surface_y - ball.radius
        ball.vx += ball.ax * dt
        ball.vx *= roll_friction(state) ** dt
        if ball.vy > constants.BOUNCE_THRESHOLD:
            bounce = cfg.bounce_factor * constants.MAGNET_BOUNCE_FACTOR if magnet else cfg.bounce_factor
            ball.vy = -ball.vy * bounce
        else:
            ball.vy = 0.0
    else:
        ball.vy += ball.ay * dt

    ball.vx *= cfg.air_friction ** dt
    ball.x += ball.vx * dt
    ball.y += ball.vy * dt

    ball.trail.append((ball.x, ball.y))
    return is_off_screen(cfg, ball)


def update_balls(state: SimulationState, dt: float) -> Tuple[bool, bool]:
    """Integrate both balls independently. Returns (primary_lost, extra_lost)."""
    primary_lost = update_ball(state, state.ball, dt)
    extra_lost = False
    if state.extra_ball is not None:
        extra_lost = update_ball(state, state.extra_ball, dt)
    return primary_lost, extra_lost


def spawn_extra_ball(state: SimulationState) -> bool:
    """Place a second ball on the platform beside the primary one."""
    if state.extra_ball is not None:
        return False
    p = state.platform
    ball = state.ball
    # Offset toward whichever side has more platform room
    offset = constants.EXTRA_BALL_OFFSET if ball.x < p.center_x else -constants.EXTRA_BALL_OFFSET
    margin = constants.EXTRA_BALL_MARGIN
    x = _clamp(ball.x + offset, p.x + margin, p.right - margin)
    state.extra_ball = Ball(
        x=x,
        y=state.config.ball_initial_y,
        radius=ball.radius,
        trail=deque(maxlen=state.config.trail_length),
    )
    return True


# ---------------------------------------------
# Black holes
# ---------------------------------------------
def black_hole_speed_multiplier(score: int, config: GameConfig) -> float:
    steps = score // config.speed_increase_interval
    return min(config.max_speed_multiplier, 1 + steps * config.speed_increase_amount)


def spawn_black_hole(state: SimulationState) -> BlackHole:
    cfg = state.config
    radius = cfg.hole_radius
    hole = BlackHole(
        x=radius + state.rng.random() * (cfg.width - radius * 2),
        y=-radius,
        radius=radius,
        rotation=state.rng.random() * math.pi * 2,
        speed_variation=random_speed_variation(state.rng),
    )
    state.black_holes.append(hole)
    return hole


def update_black_holes(state: SimulationState, dt: float) -> None:
    cfg = state.config
    state.hole_timer += dt
    while state.hole_timer >= cfg.hole_spawn_interval:
        spawn_black_hole(state)
        state.hole_timer -= cfg.hole_spawn_interval

    frozen = state.is_active(EffectKind.TIME_FREEZE)
    multiplier = black_hole_speed_multiplier(state.score, cfg)
    for hole in state.black_holes:
        if not frozen:
            hole.y += cfg.scroll_speed * multiplier * hole.speed_variation * dt
        hole.rotation += constants.HOLE_SPIN * dt

    state.black_holes = [h for h in state.black_holes if h.y <= cfg.height + h.radius]


def check_black_hole_collision(state: SimulationState) -> Optional[HoleContact]:
    """First hole whose capture zone contains a ball centre, or None."""
    if state.is_active(EffectKind.SHIELD):
        return None
    for hole in state.black_holes:
        capture_radius = hole.radius * constants.CAPTURE_RADIUS_FACTOR
        if state.ball.position.get_distance(hole.position) < capture_radius:
            return HoleContact(hole, BallSlot.PRIMARY)
        extra = state.extra_ball
        if extra is not None and extra.position.get_distance(hole.position) < capture_radius:
            return HoleContact(hole, BallSlot.EXTRA)
    return None


def gravity_pull(state: SimulationState, ball: Ball, hole: BlackHole) -> Vec2d:
    """Per-frame velocity increment the hole applies to the ball (before dt)."""
    if state.is_active(EffectKind.SHIELD):
        return Vec2d(0, 0)
    cfg = state.config
    delta = hole.position - ball.position
    distance = delta.length
    if distance <= 0 or distance >= cfg.gravity_radius:
        return Vec2d(0, 0)
    falloff = 1 - distance / cfg.gravity_radius
    strength = cfg.gravity_strength * falloff * falloff
    if state.is_active(EffectKind.MAGNET):
        strength *= constants.MAGNET_PULL_FACTOR
    return delta / distance * strength


def apply_black_hole_gravity(state: SimulationState, dt: float) -> None:
    if state.is_active(EffectKind.SHIELD):
        return
    for ball in state.balls():
        for hole in state.black_holes:
            pull = gravity_pull(state, ball, hole)
            ball.vx += pull.x * dt
            ball.vy += pull.y * dt


# ---------------------------------------------
# Score orbs
# ---------------------------------------------
def spawn_score_orb(state: SimulationState) -> ScoreOrb:
    cfg = state.config
    archetype = state.rng.choice(list(cfg.orb_types))
    traits = cfg.orb_types[archetype]
    radius = cfg.ball_radius * traits["size"]
    orb = ScoreOrb(
        archetype=archetype,
        x=radius + state.rng.random() * (cfg.width - radius * 2),
        y=-radius,
        radius=radius,
        points=traits["points"],
        speed_multiplier=traits["speed"],
        color=traits["color"],
        glow_color=traits.get("glow", traits["color"]),
        rotation=state.rng.random() * math.pi * 2,
        speed_variation=random_speed_variation(state.rng),
    )
    state.score_orbs.append(orb)
    return orb


def update_score_orbs(state: SimulationState, dt: float) -> None:
    # Orbs keep falling during time freeze; only black holes stop
    cfg = state.config
    state.orb_timer += dt
    while state.orb_timer >= cfg.orb_spawn_interval:
        spawn_score_orb(state)
        state.orb_timer -= cfg.orb_spawn_interval

    for orb in state.score_orbs:
        orb.y += cfg.scroll_speed * orb.speed_multiplier * orb.speed_variation * dt
        orb.rotation += constants.ORB_SPIN * dt

    state.score_orbs = [o for o in state.score_orbs if o.y <= cfg.height + o.radius]


def _touches(ball: Ball, x: float, y: float, radius: float) -> bool:
    return ball.position.get_distance((x, y)) < ball.radius + radius


def check_score_orb_collisions(state: SimulationState) -> int:
    """Collect overlapping orbs for either ball. Returns the points gained."""
    gained = 0
    remaining = []
    for orb in state.score_orbs:
        if any(_touches(ball, orb.x, orb.y, orb.radius) for ball in state.balls()):
            gained += orb.points
        else:
            remaining.append(orb)
    state.score_orbs = remaining
    state.score += gained
    return gained
