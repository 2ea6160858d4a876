"""Batch and parallel headless runs over many seeds."""
from __future__ import annotations

from multiprocessing import Pool, cpu_count
from typing import Callable, Dict, Iterable, Optional, Tuple

from .config import GameConfig, Settings
from .driver import RunSummary, run_headless
from .state import InputIntent

IntentFn = Callable[[int], InputIntent]


def sway(frame: int) -> InputIntent:
    """Tilt left for two seconds, then right for two seconds, and repeat."""
    left = (frame // 120) % 2 == 0
    return InputIntent(tilt_left=left, tilt_right=not left)


def _summary_to_dict(summary: RunSummary) -> Dict[str, object]:
    return {
        "frames": summary.frames,
        "score": summary.score,
        "final_score": summary.final_score,
        "game_over": summary.game_over,
        "reason": summary.reason,
        "faults": summary.faults,
        "log": summary.physics_log,
    }


def run_seeds(
    seeds: Iterable[int],
    frames: int,
    intents: Optional[IntentFn] = None,
    config: Optional[GameConfig] = None,
    settings: Optional[Settings] = None,
) -> Dict[int, Dict[str, object]]:
    """Run one headless game per seed (sequential)."""
    results = {}
    for seed in seeds:
        summary = run_headless(frames, intents=intents, seed=seed, config=config, settings=settings)
        results[seed] = _summary_to_dict(summary)
    return results


def _seed_worker(args: Tuple[int, int, Optional[IntentFn], Optional[GameConfig], Optional[Settings]]):
    # Child-process worker for multiprocessing Pool
    seed, frames, intents, config, settings = args
    summary = run_headless(frames, intents=intents, seed=seed, config=config, settings=settings)
    return seed, _summary_to_dict(summary)


def run_seeds_parallel(
    seeds: Iterable[int],
    frames: int,
    intents: Optional[IntentFn] = None,
    config: Optional[GameConfig] = None,
    settings: Optional[Settings] = None,
    processes: Optional[int] = None,
) -> Dict[int, Dict[str, object]]:
    """Run the seeds across worker processes. `intents` must be picklable."""
    args = [(seed, frames, intents, config, settings) for seed in seeds]
    n_procs = processes or cpu_count()
    print(f"Running {len(args)} games on {n_procs} processes (headless)...")

    results = {}
    with Pool(processes=n_procs) as pool:
        for seed, data in pool.map(_seed_worker, args):
            results[seed] = data
    return results
