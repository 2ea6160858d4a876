"""Best-score persistence in a small JSON file."""
from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SCORE_FILE = Path("balance_best_score.json")


def load_best_score(path: Path = SCORE_FILE) -> int:
    if not path.exists():
        return 0
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return max(0, int(data.get("best_score", 0)))
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable best score file %s: %s", path, exc)
        return 0


def save_best_score(score: int, path: Path = SCORE_FILE) -> None:
    try:
        path.write_text(json.dumps({"best_score": score}, indent=2), encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not save best score to %s: %s", path, exc)
