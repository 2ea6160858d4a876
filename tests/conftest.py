import pytest

from balancesim.config import GameConfig
from balancesim.entities import platform_y_at
from balancesim.state import Ball, BlackHole, new_state


def rest_on_platform(state, ball, x=None):
    # Put a ball on the platform surface with no velocity
    if x is not None:
        ball.x = x
    ball.y = platform_y_at(state.platform, ball.x) - ball.radius
    ball.vx = ball.vy = 0.0
    return ball


def make_hole(x, y, radius=36.0):
    return BlackHole(x=x, y=y, radius=radius, rotation=0.0, speed_variation=1.0)


def add_extra_ball(state, x):
    state.extra_ball = Ball(x=x, y=0.0, radius=state.ball.radius)
    return rest_on_platform(state, state.extra_ball)


@pytest.fixture
def quiet_config():
    # Nothing spawns on its own
    return GameConfig(hole_spawn_interval=1e9, orb_spawn_interval=1e9, powerup_spawn_interval=1e9)


@pytest.fixture
def state(quiet_config):
    return new_state(config=quiet_config, seed=7)


@pytest.fixture
def resting_state(state):
    rest_on_platform(state, state.ball)
    return state
