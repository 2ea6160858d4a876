"""Frame driver: delta-time normalization and the fixed per-frame pipeline.

`step` advances a `SimulationState` by one frame. `FrameDriver` owns the state
between frames and keeps scheduling even when one frame's update raises.
`run_headless` drives it without a window and records a physics log.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from . import constants
from .capture import LossOutcome, advance_capture, resolve_capture, resolve_fall
from .config import GameConfig, Settings
from .entities import (
    apply_black_hole_gravity,
    check_black_hole_collision,
    check_score_orb_collisions,
    update_balls,
    update_black_holes,
    update_platform,
    update_score_orbs,
)
from .powerups import check_power_up_collisions, expire_effects, update_power_ups
from .state import InputIntent, RunStatus, SimulationState, new_state, reset_state

logger = logging.getLogger(__name__)


def frame_dt(elapsed_ms: float) -> float:
    """Delta-time multiplier: 1.0 at the target frame rate, clamped after stalls."""
    clamped = min(max(elapsed_ms, 0.0), constants.MAX_FRAME_MS)
    return clamped / constants.TARGET_FRAME_MS


def step(state: SimulationState, intent: InputIntent, dt: float, now: float) -> Optional[LossOutcome]:
    """Advance the world by one frame. Returns what happened to a lost ball, if anything."""
    if not state.running or state.paused:
        return None
    state.frame += 1

    if state.capturing:
        # The world keeps moving; input and the captured ball's physics are suspended
        update_black_holes(state, dt)
        update_score_orbs(state, dt)
        update_power_ups(state, dt)
        expire_effects(state, now)
        if advance_capture(state, dt):
            return LossOutcome.GAME_OVER
        return None

    update_platform(state, intent, dt, now)
    outcome = resolve_fall(state, *update_balls(state, dt))
    if outcome is LossOutcome.GAME_OVER:
        return outcome

    apply_black_hole_gravity(state, dt)
    update_black_holes(state, dt)
    update_score_orbs(state, dt)
    check_score_orb_collisions(state)
    update_power_ups(state, dt)
    expire_effects(state, now)
    check_power_up_collisions(state, now)

    contact = check_black_hole_collision(state)
    if contact is not None:
        return resolve_capture(state, contact)
    return outcome


def _where(entity) -> str:
    if entity is None:
        return "-"
    return f"({getattr(entity, 'x', None)!r}, {getattr(entity, 'y', None)!r})"


def describe(state: SimulationState) -> str:
    # Only reprs: this runs while the state may be inconsistent
    status = getattr(state, "status", None)
    holes = getattr(state, "black_holes", None) or []
    return (
        f"status={getattr(status, 'value', status)!r} "
        f"ball={_where(getattr(state, 'ball', None))} "
        f"extra={_where(getattr(state, 'extra_ball', None))} "
        f"holes=[{', '.join(_where(h) for h in holes)}]"
    )


class FrameDriver:
    """Owns the simulation context and runs one guarded update per host frame."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        settings: Optional[Settings] = None,
        seed: Optional[int] = None,
        best_score: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.state = new_state(config=config, settings=settings, seed=seed, best_score=best_score)
        self.clock = clock
        self.frame_index = 0
        self.fault_count = 0
        self.last_error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.last_error is not None

    def tick(self, elapsed_ms: float, intent: InputIntent, now: Optional[float] = None) -> Optional[LossOutcome]:
        """Run one frame. A fault is logged and the next tick proceeds as usual."""
        dt = frame_dt(elapsed_ms)
        now = self.clock() if now is None else now
        self.frame_index += 1
        try:
            outcome = step(self.state, intent, dt, now)
        except Exception as exc:
            self.fault_count += 1
            self.last_error = f"{type(exc).__name__}: {exc}"
            logger.exception("Frame %d update failed, dt=%.3f %s", self.frame_index, dt, describe(self.state))
            return None

        if self.frame_index % constants.DEBUG_LOG_EVERY == 0:
            ball = self.state.ball
            logger.debug(
                "Frame %d ball=(%.1f, %.1f) vel=(%.2f, %.2f) extra=%s fps=%.0f",
                self.frame_index, ball.x, ball.y, ball.vx, ball.vy,
                "yes" if self.state.extra_ball is not None else "no",
                1000 / elapsed_ms if elapsed_ms > 0 else 0,
            )
        return outcome

    def toggle_pause(self) -> bool:
        # No pausing mid-capture or after game over
        if self.state.status is RunStatus.RUNNING:
            self.state.paused = not self.state.paused
        return self.state.paused

    def restart(self, settings: Optional[Settings] = None) -> SimulationState:
        self.state = reset_state(self.state, settings)
        self.last_error = None
        logger.info("Run restarted (best score %d)", self.state.best_score)
        return self.state


@dataclass
class RunSummary:
    """Container for the output of a headless run."""

    frames: int
    score: int
    final_score: int
    game_over: bool
    reason: str
    faults: int
    physics_log: List[Dict[str, Any]]


def log_frame(physics_log: List[Dict[str, Any]], time_elapsed: float, state: SimulationState) -> None:
    # Capture kinematics and run status for the current frame
    ball = state.ball
    physics_log.append({
        "t": time_elapsed,
        "x": ball.x,
        "y": ball.y,
        "vx": ball.vx,
        "vy": ball.vy,
        "radius": ball.radius,
        "tilt": state.platform.tilt,
        "platform_x": state.platform.x,
        "extra": state.extra_ball is not None,
        "score": state.score,
        "status": state.status.value,
        "effects": sorted(e.value for e, timer in state.effects.items() if timer.active),
        "holes": len(state.black_holes),
    })


def run_headless(
    frames: int,
    intents: Optional[Callable[[int], InputIntent]] = None,
    seed: Optional[int] = None,
    config: Optional[GameConfig] = None,
    settings: Optional[Settings] = None,
    frame_ms: float = constants.TARGET_FRAME_MS,
    start_time: float = 0.0,
    stop_on_game_over: bool = True,
) -> RunSummary:
    """Run without a window at a fixed frame length on a simulated clock."""
    driver = FrameDriver(config=config, settings=settings, seed=seed)
    physics_log: List[Dict[str, Any]] = []
    now = start_time
    time_elapsed = 0.0
    played = 0
    for i in range(frames):
        intent = intents(i) if intents is not None else InputIntent()
        now += frame_ms / 1000
        time_elapsed += frame_ms / 1000
        driver.tick(frame_ms, intent, now=now)
        played += 1
        log_frame(physics_log, time_elapsed, driver.state)
        if stop_on_game_over and not driver.state.running:
            break

    state = driver.state
    return RunSummary(
        frames=played,
        score=state.score,
        final_score=state.final_score,
        game_over=not state.running,
        reason=state.game_over_reason,
        faults=driver.fault_count,
        physics_log=physics_log,
    )
