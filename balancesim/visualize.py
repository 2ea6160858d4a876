"""Draw a simulation snapshot with pygame. Reads the state, never mutates it."""
from __future__ import annotations

import math
from typing import Optional

import pygame

from . import constants
from .entities import platform_y_at
from .kinds import EffectKind, PowerUpKind
from .powerups import effect_time_remaining, is_ball_visible
from .state import Ball, SimulationState

BG_COLOR = (12, 16, 25)
PLATFORM_COLOR = (150, 150, 170)
PLATFORM_ICE_COLOR = (136, 221, 255)
HOLE_COLOR = (5, 0, 12)
HOLE_RING_COLOR = (120, 60, 200)
SHIELD_COLOR = (74, 144, 217)
TEXT_COLOR = (230, 230, 230)
ERROR_COLOR = (200, 30, 30)

# Label and colour per token kind
POWERUP_STYLE = {
    PowerUpKind.SHIELD: ("S", (74, 144, 217)),
    PowerUpKind.WIDE_PLATFORM: ("W", (0, 217, 255)),
    PowerUpKind.MAGNET: ("M", (255, 107, 53)),
    PowerUpKind.SHRINK_BALL: ("-", (153, 50, 255)),
    PowerUpKind.BIG_BALLZ: ("+", (255, 140, 0)),
    PowerUpKind.TIME_FREEZE: ("F", (0, 255, 255)),
    PowerUpKind.EXTRA_BALL: ("2", (255, 221, 0)),
    PowerUpKind.RANDOM: ("?", (255, 0, 255)),
    PowerUpKind.NARROW_PLATFORM: ("N", (255, 51, 51)),
    PowerUpKind.ICE_MODE: ("I", (136, 221, 255)),
    PowerUpKind.BLINKING_EYE: ("E", (255, 102, 255)),
    PowerUpKind.EARTHQUAKE: ("Q", (139, 69, 19)),
}

EFFECT_LABELS = {
    EffectKind.SHIELD: "Shield",
    EffectKind.WIDE_PLATFORM: "Wide",
    EffectKind.MAGNET: "Magnet",
    EffectKind.TIME_FREEZE: "Freeze",
    EffectKind.NARROW_PLATFORM: "Narrow",
    EffectKind.ICE_MODE: "Ice",
    EffectKind.BLINKING_EYE: "Blink",
    EffectKind.EARTHQUAKE: "Quake",
}


def _point(x: float, y: float):
    return int(round(x)), int(round(y))


def render_frame(
    surface: pygame.Surface,
    state: SimulationState,
    now: float,
    font: Optional[pygame.font.Font] = None,
    error: Optional[str] = None,
) -> None:
    """Render one frame of `state` onto `surface`. Text needs a `font`."""
    surface.fill(BG_COLOR)
    colors = constants.BALL_COLORS[state.settings.ball_color]

    for hole in state.black_holes:
        # Dark core with a rotating accretion ring
        pygame.draw.circle(surface, HOLE_RING_COLOR, _point(hole.x, hole.y), int(hole.radius), 2)
        pygame.draw.circle(surface, HOLE_COLOR, _point(hole.x, hole.y), max(1, int(hole.radius * 0.75)))
        tip_x = hole.x + math.cos(hole.rotation) * hole.radius
        tip_y = hole.y + math.sin(hole.rotation) * hole.radius
        pygame.draw.line(surface, HOLE_RING_COLOR, _point(hole.x, hole.y), _point(tip_x, tip_y), 1)

    for orb in state.score_orbs:
        pygame.draw.circle(surface, orb.glow_color, _point(orb.x, orb.y), int(orb.radius) + 2, 1)
        pygame.draw.circle(surface, orb.color, _point(orb.x, orb.y), max(1, int(orb.radius)))

    for token in state.power_ups:
        label, color = POWERUP_STYLE[token.kind]
        pygame.draw.circle(surface, color, _point(token.x, token.y), int(token.radius))
        if font is not None:
            text = font.render(label, True, BG_COLOR)
            surface.blit(text, text.get_rect(center=_point(token.x, token.y)))

    # Platform as a tilted straight slab
    p = state.platform
    left_y = platform_y_at(p, p.x)
    right_y = platform_y_at(p, p.right)
    slab = [(p.x, left_y), (p.right, right_y), (p.right, right_y + p.height), (p.x, left_y + p.height)]
    platform_color = PLATFORM_ICE_COLOR if state.is_active(EffectKind.ICE_MODE) else PLATFORM_COLOR
    pygame.draw.polygon(surface, platform_color, [_point(x, y) for x, y in slab])

    if is_ball_visible(state, now):
        fill = colors["suck"] if state.capturing else colors["fill"]
        for ball in state.balls():
            _draw_ball(surface, state, ball, fill, colors["glow"])

    if state.capture is not None:
        for particle in state.capture.particles:
            shade = max(0, min(255, int(255 * particle.life)))
            pygame.draw.circle(surface, (shade, shade // 2, 255), _point(particle.x, particle.y),
                               max(1, int(particle.size * particle.life)))

    if font is not None:
        _draw_hud(surface, state, now, font)
    if error is not None:
        banner = pygame.Rect(0, 0, surface.get_width(), 28)
        pygame.draw.rect(surface, ERROR_COLOR, banner)
        if font is not None:
            surface.blit(font.render(f"ERROR: {error}", True, TEXT_COLOR), (8, 5))


def _draw_ball(surface, state: SimulationState, ball: Ball, fill, glow) -> None:
    # Trail first so the ball sits on top
    count = len(ball.trail)
    for i, (tx, ty) in enumerate(ball.trail):
        radius = max(1, int(ball.radius * (i + 1) / (count + 1) * 0.6))
        pygame.draw.circle(surface, glow, _point(tx, ty), radius, 1)
    center = _point(ball.x, ball.y)
    pygame.draw.circle(surface, fill, center, max(1, int(ball.radius)))
    if state.capturing:
        tip = (ball.x + math.cos(ball.suck_rotation) * ball.radius,
               ball.y + math.sin(ball.suck_rotation) * ball.radius)
        pygame.draw.line(surface, glow, center, _point(*tip), 2)
    if state.is_active(EffectKind.SHIELD):
        pygame.draw.circle(surface, SHIELD_COLOR, center, int(ball.radius) + 6, 2)


def _draw_hud(surface, state: SimulationState, now: float, font) -> None:
    lines = [f"Score: {state.score}", f"Best: {state.best_score}"]
    for effect in EffectKind:
        remaining = effect_time_remaining(state, effect, now)
        if remaining > 0:
            lines.append(f"{EFFECT_LABELS[effect]}: {remaining:.1f}s")
    for i, line in enumerate(lines):
        surface.blit(font.render(line, True, TEXT_COLOR), (10, 34 + 20 * i))

    W, H = surface.get_size()
    if state.paused:
        text = font.render("PAUSED  (P to resume)", True, TEXT_COLOR)
        surface.blit(text, text.get_rect(center=(W // 2, H // 2)))
    elif not state.running:
        for j, line in enumerate((state.game_over_reason,
                                  f"Final score: {state.final_score}",
                                  "ENTER: restart   ESC: quit")):
            text = font.render(line, True, TEXT_COLOR)
            surface.blit(text, text.get_rect(center=(W // 2, H // 2 - 24 + 24 * j)))
