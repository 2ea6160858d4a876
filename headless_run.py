# headless_run.py
from balancesim.batch import run_seeds_parallel, sway

if __name__ == "__main__":
    seeds = [1, 2, 3, 4, 5]

    # 1) Run each seed for up to five simulated minutes, swaying the platform
    results = run_seeds_parallel(seeds, 60 * 300, intents=sway)

    # 2) Print summarized outcomes
    for seed, data in results.items():
        outcome = data["reason"] if data["game_over"] else "still alive"
        print(f"seed={seed} -> frames={data['frames']} score={data['score']} "
              f"faults={data['faults']} ({outcome})")
