"""Ball-loss resolution: extra-ball promotion, capture animation, game over.

    RUNNING --fall, no extra--------------------------> GAME_OVER
    RUNNING --capture of primary, no extra--> CAPTURING --progress 1--> GAME_OVER
    RUNNING --any loss with an extra ball left--------> RUNNING
"""
from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Optional

from pymunk import Vec2d

from . import constants
from .entities import HoleContact
from .state import BallSlot, BlackHole, CaptureState, Particle, RunStatus, SimulationState

logger = logging.getLogger(__name__)

FELL_REASON = "The ball fell off the platform!"
SUCKED_REASON = "The ball was sucked into a black hole!"


class LossOutcome(Enum):
    PROMOTED = "promoted"                  # primary lost, extra ball took its slot
    EXTRA_DISCARDED = "extra_discarded"    # extra lost, primary carries on
    CAPTURE_STARTED = "capture_started"    # suck-in animation, ends in game over
    GAME_OVER = "game_over"


def promote_extra_ball(state: SimulationState) -> None:
    assert state.extra_ball is not None, "no extra ball to promote"
    state.ball.take_over(state.extra_ball)
    state.extra_ball = None


def end_run(state: SimulationState, reason: str) -> None:
    """Latch the final score and leave the run in GAME_OVER."""
    state.status = RunStatus.GAME_OVER
    state.paused = False
    state.final_score = state.score
    state.game_over_reason = reason
    if state.final_score > state.best_score:
        state.best_score = state.final_score
    logger.info("Game over after %d frames: %s (score %d)", state.frame, reason, state.final_score)


def resolve_fall(state: SimulationState, primary_lost: bool, extra_lost: bool) -> Optional[LossOutcome]:
    """Decide what a fall means for the run. None when nothing was lost."""
    if primary_lost:
        if state.extra_ball is not None and not extra_lost:
            promote_extra_ball(state)
            return LossOutcome.PROMOTED
        state.extra_ball = None
        end_run(state, FELL_REASON)
        return LossOutcome.GAME_OVER
    if extra_lost:
        state.extra_ball = None
        return LossOutcome.EXTRA_DISCARDED
    return None


def resolve_capture(state: SimulationState, contact: HoleContact) -> LossOutcome:
    if contact.slot is BallSlot.EXTRA:
        state.extra_ball = None
        return LossOutcome.EXTRA_DISCARDED
    if state.extra_ball is not None:
        promote_extra_ball(state)
        return LossOutcome.PROMOTED
    start_capture(state, contact.hole)
    return LossOutcome.CAPTURE_STARTED


def start_capture(state: SimulationState, hole: BlackHole) -> None:
    ball = state.ball
    state.status = RunStatus.CAPTURING
    state.paused = False
    state.capture = CaptureState(
        hole=hole,
        start_radius=ball.radius,
        start_pos=(ball.x, ball.y),
    )


def _spawn_particle(state: SimulationState) -> None:
    rng = state.rng
    angle = rng.random() * math.pi * 2
    speed = 2 + rng.random() * 3
    velocity = Vec2d(speed, 0).rotated(angle)
    state.capture.particles.append(Particle(
        x=state.ball.x,
        y=state.ball.y,
        vx=velocity.x,
        vy=velocity.y,
        size=2 + rng.random() * 4,
    ))


def _update_particles(capture: CaptureState, dt: float) -> None:
    hole = capture.hole
    kept = []
    for p in capture.particles:
        to_hole = hole.position - Vec2d(p.x, p.y)
        distance = to_hole.length
        if distance > 0:
            pull = to_hole / distance * constants.PARTICLE_PULL * dt
            p.vx += pull.x
            p.vy += pull.y
        p.x += p.vx * dt
        p.y += p.vy * dt
        p.life -= constants.PARTICLE_DECAY * dt
        if p.life > 0 and distance >= hole.radius * constants.PARTICLE_ABSORB_FACTOR:
            kept.append(p)
    capture.particles = kept


def advance_capture(state: SimulationState, dt: float) -> bool:
    """One frame of the suck-in animation. Returns True once the run is over."""
    capture = state.capture
    assert capture is not None and state.status is RunStatus.CAPTURING, "no capture in progress"
    ball = state.ball
    hole = capture.hole

    capture.progress = min(1.0, capture.progress + constants.SUCK_RATE * dt)
    lerp = 1 - constants.SUCK_LERP ** dt
    ball.x += (hole.x - ball.x) * lerp
    ball.y += (hole.y - ball.y) * lerp
    ball.radius = capture.start_radius * (1 - capture.progress * constants.SUCK_SHRINK)
    ball.suck_rotation += constants.SUCK_SPIN * dt * (1 + capture.progress * 3)

    if state.rng.random() < constants.PARTICLE_SPAWN_CHANCE * dt:
        _spawn_particle(state)
    _update_particles(capture, dt)

    if capture.progress >= 1:
        ball.radius = capture.start_radius
        end_run(state, SUCKED_REASON)
        return True
    return False
