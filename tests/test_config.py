import pytest

from balancesim.config import GameConfig, Settings
from balancesim.kinds import BallSize, PowerUpKind
from balancesim.state import new_state, reset_state


def test_defaults():
    cfg = GameConfig()
    assert (cfg.width, cfg.height) == (800, 600)
    assert cfg.hole_radius == 36
    assert cfg.radius_for(BallSize.BIG) == pytest.approx(25.2)


@pytest.mark.parametrize("overrides", [
    {"width": 0},
    {"ball_radius": -1},
    {"effect_duration": 0},
    {"hole_spawn_interval": 0},
    {"air_friction": 1.5},
    {"tilt_decay": 0},
    {"max_speed_multiplier": 0.5},
    {"trail_length": 0},
    {"size_multipliers": {BallSize.NORMAL: 1.0}},
    {"orb_types": {}},
    {"orb_types": {"odd": {"points": 1, "size": 1}}},
    {"platform_base_width": 750},
])
def test_invalid_config_rejected(overrides):
    with pytest.raises(ValueError):
        GameConfig(**overrides)


def test_orb_types_not_shared_between_configs():
    a, b = GameConfig(), GameConfig()
    a.orb_types["large"]["points"] = 99
    assert b.orb_types["large"]["points"] != 99


def test_settings_default_enables_everything():
    settings = Settings()
    assert all(settings.is_enabled(kind) for kind in PowerUpKind)
    assert settings.platform_scale == 1.0


@pytest.mark.parametrize("overrides", [{"ball_color": "green"}, {"platform_width": "huge"}])
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ValueError):
        Settings(**overrides)


def test_settings_from_dict():
    settings = Settings.from_dict({"shield": False, "earthquake": 0, "platform_width": "wide",
                                   "ball_color": "white"})
    assert not settings.is_enabled(PowerUpKind.SHIELD)
    assert not settings.is_enabled(PowerUpKind.EARTHQUAKE)
    assert settings.is_enabled(PowerUpKind.MAGNET)
    assert settings.ball_color == "white"
    assert settings.platform_scale == 1.1


def test_settings_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="Unknown setting: lasers"):
        Settings.from_dict({"lasers": True})


@pytest.mark.parametrize("preset, width", [("short", 315), ("normal", 350), ("wide", 385)])
def test_platform_preset_sets_base_width(preset, width):
    state = new_state(settings=Settings(platform_width=preset), seed=1)
    p = state.platform
    assert p.width == pytest.approx(width)
    assert state.base_platform_width == pytest.approx(width)
    assert p.max_x == pytest.approx(800 - width - 50)
    assert p.min_x <= p.x <= p.max_x


def test_new_state_places_ball_above_platform_centre():
    state = new_state(seed=1)
    assert state.ball.x == state.platform.center_x
    assert state.ball.y == 400
    assert state.ball.radius == 18
    assert state.running and not state.paused
    assert state.score == state.final_score == 0


def test_reset_keeps_config_rng_and_best_score():
    state = new_state(seed=1, best_score=12)
    state.score = 30
    state.platform.tilt = 40
    fresh = reset_state(state, Settings(platform_width="short"))
    assert fresh.config is state.config
    assert fresh.rng is state.rng
    assert fresh.best_score == 12
    assert fresh.score == 0
    assert fresh.platform.tilt == 0
    assert fresh.settings.platform_width == "short"


def test_settings_leave_callers_dict_untouched():
    enabled = {PowerUpKind.SHIELD: False}
    settings = Settings(enabled=enabled)
    assert enabled == {PowerUpKind.SHIELD: False}
    assert not settings.is_enabled(PowerUpKind.SHIELD)
    assert settings.is_enabled(PowerUpKind.MAGNET)
