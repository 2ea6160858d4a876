import logging

from balancesim.config import Settings
from balancesim.game import run_game

# Interactive run with every power-up enabled

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

settings = Settings(ball_color="red", platform_width="normal")

best = run_game(settings)
print(f"Best score: {best}")
