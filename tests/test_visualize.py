import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from balancesim import constants
from balancesim.capture import end_run
from balancesim.kinds import EffectKind, PowerUpKind
from balancesim.powerups import activate_effect
from balancesim.state import PowerUpToken
from balancesim.visualize import (
    BG_COLOR,
    ERROR_COLOR,
    PLATFORM_COLOR,
    PLATFORM_ICE_COLOR,
    POWERUP_STYLE,
    render_frame,
)
from conftest import make_hole


@pytest.fixture
def surface():
    return pygame.Surface((800, 600))


def color_at(surface, x, y):
    return tuple(surface.get_at((x, y)))[:3]


def test_every_token_kind_has_a_style():
    assert set(POWERUP_STYLE) == set(PowerUpKind)


def test_draws_platform_and_ball(surface, state):
    render_frame(surface, state, now=0.0)
    assert color_at(surface, 400, 456) == PLATFORM_COLOR
    assert color_at(surface, 400, 400) == constants.BALL_COLORS["red"]["fill"]
    assert color_at(surface, 20, 20) == BG_COLOR


def test_ice_mode_recolours_platform(surface, state):
    activate_effect(state, EffectKind.ICE_MODE, now=0.0)
    render_frame(surface, state, now=0.0)
    assert color_at(surface, 400, 456) == PLATFORM_ICE_COLOR


def test_blinking_eye_hides_ball_on_odd_seconds(surface, state):
    activate_effect(state, EffectKind.BLINKING_EYE, now=0.0)
    render_frame(surface, state, now=1.5)
    assert color_at(surface, 400, 400) == BG_COLOR
    render_frame(surface, state, now=2.5)
    assert color_at(surface, 400, 400) != BG_COLOR


def test_draws_tokens_and_holes(surface, state):
    state.power_ups = [PowerUpToken(kind=PowerUpKind.MAGNET, x=100, y=100, radius=15, speed_variation=1.0)]
    state.black_holes = [make_hole(600, 200)]
    render_frame(surface, state, now=0.0)
    assert color_at(surface, 100, 100) == POWERUP_STYLE[PowerUpKind.MAGNET][1]
    assert color_at(surface, 600, 200) != BG_COLOR


def test_error_banner(surface, state):
    render_frame(surface, state, now=0.0, error="RuntimeError: boom")
    assert color_at(surface, 5, 5) == ERROR_COLOR


def test_renders_with_hud_text(surface, state):
    pygame.font.init()
    font = pygame.font.Font(None, 24)
    activate_effect(state, EffectKind.SHIELD, now=0.0)
    state.score = 3
    end_run(state, "done")
    render_frame(surface, state, now=1.0, font=font, error="boom")
    assert color_at(surface, 400, 456) == PLATFORM_COLOR
