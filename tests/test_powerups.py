import random

import pytest

from balancesim.config import Settings
from balancesim.kinds import BallSize, EffectKind, PowerUpKind
from balancesim.powerups import (
    activate_effect,
    activate_power_up,
    check_power_up_collisions,
    effect_time_remaining,
    enabled_pool,
    expire_effects,
    is_ball_visible,
    next_ball_size,
    spawn_power_up,
    update_power_ups,
)
from balancesim.state import PowerUpToken, new_state
from conftest import rest_on_platform

SIZE_TABLE = {
    (BallSize.NORMAL, PowerUpKind.SHRINK_BALL): BallSize.SHRUNK,
    (BallSize.BIG, PowerUpKind.SHRINK_BALL): BallSize.NORMAL,
    (BallSize.SHRUNK, PowerUpKind.SHRINK_BALL): BallSize.SHRUNK,
    (BallSize.NORMAL, PowerUpKind.BIG_BALLZ): BallSize.BIG,
    (BallSize.SHRUNK, PowerUpKind.BIG_BALLZ): BallSize.NORMAL,
    (BallSize.BIG, PowerUpKind.BIG_BALLZ): BallSize.BIG,
}
MULTIPLIERS = {BallSize.SHRUNK: 0.5, BallSize.NORMAL: 1.0, BallSize.BIG: 1.4}


def only(*kinds):
    return Settings(enabled={kind: kind in kinds for kind in PowerUpKind})


@pytest.mark.parametrize("start, kind", list(SIZE_TABLE))
def test_size_transition_table(start, kind):
    assert next_ball_size(start, kind) is SIZE_TABLE[(start, kind)]


@pytest.mark.parametrize("seed", range(10))
def test_size_state_folds_over_any_sequence(state, seed):
    rng = random.Random(seed)
    expected = BallSize.NORMAL
    for _ in range(30):
        kind = rng.choice([PowerUpKind.SHRINK_BALL, PowerUpKind.BIG_BALLZ])
        activate_power_up(state, kind, now=0.0)
        expected = SIZE_TABLE[(expected, kind)]
        assert state.ball_size is expected
        assert state.ball.radius == pytest.approx(18 * MULTIPLIERS[expected])


def test_size_change_applies_to_extra_ball(state):
    activate_power_up(state, PowerUpKind.EXTRA_BALL, now=0.0)
    activate_power_up(state, PowerUpKind.SHRINK_BALL, now=0.0)
    assert state.extra_ball.radius == pytest.approx(9)


@pytest.mark.parametrize("kind, effect", [
    (PowerUpKind.SHIELD, EffectKind.SHIELD),
    (PowerUpKind.MAGNET, EffectKind.MAGNET),
    (PowerUpKind.TIME_FREEZE, EffectKind.TIME_FREEZE),
    (PowerUpKind.ICE_MODE, EffectKind.ICE_MODE),
    (PowerUpKind.BLINKING_EYE, EffectKind.BLINKING_EYE),
    (PowerUpKind.EARTHQUAKE, EffectKind.EARTHQUAKE),
])
def test_timed_activation_sets_expiry(state, kind, effect):
    activate_power_up(state, kind, now=100.0)
    timer = state.effects[effect]
    assert timer.active
    assert timer.started_at == 100.0
    assert timer.end_time == 112.0


def test_expiry_is_strictly_after_end_time(state):
    activate_effect(state, EffectKind.SHIELD, now=0.0)
    assert expire_effects(state, now=12.0) == []
    assert state.is_active(EffectKind.SHIELD)
    assert expire_effects(state, now=12.001) == [EffectKind.SHIELD]
    assert not state.is_active(EffectKind.SHIELD)


def test_reactivation_extends_effect(state):
    activate_effect(state, EffectKind.MAGNET, now=0.0)
    activate_effect(state, EffectKind.MAGNET, now=10.0)
    expire_effects(state, now=15.0)
    assert state.is_active(EffectKind.MAGNET)


def test_effects_overlap_independently(state):
    activate_effect(state, EffectKind.SHIELD, now=0.0)
    activate_effect(state, EffectKind.ICE_MODE, now=5.0)
    assert expire_effects(state, now=13.0) == [EffectKind.SHIELD]
    assert state.is_active(EffectKind.ICE_MODE)


def test_width_effects_resize_on_activation_and_expiry(state):
    p = state.platform
    activate_power_up(state, PowerUpKind.WIDE_PLATFORM, now=0.0)
    assert p.width == pytest.approx(350 * 1.3)
    activate_power_up(state, PowerUpKind.NARROW_PLATFORM, now=6.0)
    assert p.width == pytest.approx(350 * 1.3 * 0.7)
    expire_effects(state, now=13.0)
    assert p.width == pytest.approx(350 * 0.7)
    expire_effects(state, now=19.0)
    assert p.width == pytest.approx(350)
    assert p.min_x <= p.x <= p.max_x


def test_extra_ball_leaves_pool_while_present(state):
    assert PowerUpKind.EXTRA_BALL in enabled_pool(state)
    activate_power_up(state, PowerUpKind.EXTRA_BALL, now=0.0)
    first = state.extra_ball
    assert first is not None
    assert PowerUpKind.EXTRA_BALL not in enabled_pool(state)
    activate_power_up(state, PowerUpKind.EXTRA_BALL, now=0.0)
    assert state.extra_ball is first


def test_disabled_kinds_leave_pool(quiet_config):
    state = new_state(config=quiet_config, settings=only(PowerUpKind.SHIELD, PowerUpKind.ICE_MODE), seed=1)
    assert enabled_pool(state) == [PowerUpKind.SHIELD, PowerUpKind.ICE_MODE]


def test_random_activates_from_pool_without_itself(quiet_config):
    state = new_state(config=quiet_config, settings=only(PowerUpKind.RANDOM, PowerUpKind.MAGNET), seed=1)
    activate_power_up(state, PowerUpKind.RANDOM, now=0.0)
    assert state.is_active(EffectKind.MAGNET)


def test_random_with_empty_pool_does_nothing(quiet_config):
    state = new_state(config=quiet_config, settings=only(PowerUpKind.RANDOM), seed=1)
    activate_power_up(state, PowerUpKind.RANDOM, now=0.0)
    assert not any(timer.active for timer in state.effects.values())
    assert state.ball_size is BallSize.NORMAL
    assert state.extra_ball is None


def test_random_can_reach_permanent_and_extra_ball(quiet_config):
    state = new_state(config=quiet_config, settings=only(PowerUpKind.RANDOM, PowerUpKind.EXTRA_BALL), seed=1)
    activate_power_up(state, PowerUpKind.RANDOM, now=0.0)
    assert state.extra_ball is not None


def test_spawn_with_nothing_enabled(quiet_config):
    state = new_state(config=quiet_config, settings=only(), seed=1)
    assert spawn_power_up(state) is None
    assert state.power_ups == []


def test_spawned_tokens_fall_with_fixed_variation(state):
    token = spawn_power_up(state)
    assert token.y == -15
    assert 15 <= token.x <= 785
    assert 0.9 <= token.speed_variation <= 1.1
    variation = token.speed_variation
    update_power_ups(state, 1.0)
    update_power_ups(state, 1.0)
    assert token.speed_variation == variation
    assert token.y == pytest.approx(-15 + 2 * 1.5 * variation)


def test_tokens_not_frozen(state):
    activate_effect(state, EffectKind.TIME_FREEZE, now=0.0)
    token = spawn_power_up(state)
    update_power_ups(state, 1.0)
    assert token.y > -15


def test_spawn_timer_uses_simulation_time(quiet_config):
    cfg = quiet_config
    cfg.powerup_spawn_interval = 450
    state = new_state(config=cfg, seed=3)
    for _ in range(224):
        update_power_ups(state, 2.0)
    assert state.power_ups == []
    update_power_ups(state, 2.0)
    assert len(state.power_ups) == 1


def test_token_collection_activates_and_removes(resting_state):
    ball = resting_state.ball
    token = PowerUpToken(kind=PowerUpKind.SHIELD, x=ball.x + 20, y=ball.y, radius=15, speed_variation=1.0)
    far = PowerUpToken(kind=PowerUpKind.MAGNET, x=50, y=50, radius=15, speed_variation=1.0)
    resting_state.power_ups = [token, far]
    assert check_power_up_collisions(resting_state, now=3.0) == [PowerUpKind.SHIELD]
    assert resting_state.power_ups == [far]
    assert resting_state.effects[EffectKind.SHIELD].end_time == 15.0


def test_extra_ball_collects_tokens(resting_state):
    activate_power_up(resting_state, PowerUpKind.EXTRA_BALL, now=0.0)
    extra = rest_on_platform(resting_state, resting_state.extra_ball)
    resting_state.power_ups = [
        PowerUpToken(kind=PowerUpKind.ICE_MODE, x=extra.x, y=extra.y, radius=15, speed_variation=1.0),
    ]
    check_power_up_collisions(resting_state, now=0.0)
    assert resting_state.is_active(EffectKind.ICE_MODE)


def test_blinking_eye_follows_whole_seconds(state):
    assert is_ball_visible(state, now=5.0)
    activate_effect(state, EffectKind.BLINKING_EYE, now=10.0)
    assert is_ball_visible(state, now=10.5)
    assert not is_ball_visible(state, now=11.2)
    assert is_ball_visible(state, now=12.9)
    assert not is_ball_visible(state, now=13.01)


def test_time_remaining(state):
    assert effect_time_remaining(state, EffectKind.SHIELD, now=0.0) == 0
    activate_effect(state, EffectKind.SHIELD, now=0.0)
    assert effect_time_remaining(state, EffectKind.SHIELD, now=5.0) == pytest.approx(7.0)
    assert effect_time_remaining(state, EffectKind.SHIELD, now=12.0) == 0


def test_power_down_catalog():
    downs = {kind for kind in PowerUpKind if kind.is_power_down}
    assert downs == {PowerUpKind.NARROW_PLATFORM, PowerUpKind.ICE_MODE,
                     PowerUpKind.BLINKING_EYE, PowerUpKind.EARTHQUAKE}
