"""Interactive pygame host: keyboard in, frames out."""
from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Optional

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame

from . import constants
from .config import Settings
from .driver import FrameDriver
from .highscore import SCORE_FILE, load_best_score, save_best_score
from .state import InputIntent
from .visualize import render_frame

logger = logging.getLogger(__name__)

# A/Z tilt, N/M move (arrows work too)
TILT_LEFT_KEYS = (pygame.K_a, pygame.K_UP)
TILT_RIGHT_KEYS = (pygame.K_z, pygame.K_DOWN)
MOVE_LEFT_KEYS = (pygame.K_n, pygame.K_LEFT)
MOVE_RIGHT_KEYS = (pygame.K_m, pygame.K_RIGHT)


def read_intent(pressed) -> InputIntent:
    return InputIntent(
        tilt_left=any(pressed[k] for k in TILT_LEFT_KEYS),
        tilt_right=any(pressed[k] for k in TILT_RIGHT_KEYS),
        move_left=any(pressed[k] for k in MOVE_LEFT_KEYS),
        move_right=any(pressed[k] for k in MOVE_RIGHT_KEYS),
    )


def run_game(
    settings: Optional[Settings] = None,
    seed: Optional[int] = None,
    score_file: Path = SCORE_FILE,
    fps: int = constants.TARGET_FPS,
) -> int:
    """Play until the window closes. Returns the best score."""
    driver = FrameDriver(settings=settings, seed=seed, best_score=load_best_score(score_file))
    saved_best = driver.state.best_score

    pygame.init()
    cfg = driver.state.config
    screen = pygame.display.set_mode((cfg.width, cfg.height))
    pygame.display.set_caption("Balance Ball")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 24)

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYUP:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    driver.toggle_pause()
                elif event.key == pygame.K_RETURN and (not driver.state.running or driver.degraded):
                    # A faulted run can always be restarted
                    driver.restart()

        elapsed_ms = clock.tick(fps)
        now = time.monotonic()
        driver.tick(elapsed_ms, read_intent(pygame.key.get_pressed()), now=now)

        if driver.state.best_score > saved_best:
            saved_best = driver.state.best_score
            save_best_score(saved_best, score_file)

        # The loop keeps going whatever a single frame does
        try:
            render_frame(screen, driver.state, now, font, error=driver.last_error)
        except Exception:
            logger.exception("Render failed at frame %d", driver.frame_index)
        pygame.display.flip()

    pygame.quit()
    return saved_best
