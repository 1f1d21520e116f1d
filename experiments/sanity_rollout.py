# /experiments/sanity_rollout.py
"""
Sanity rollouts for FlappyEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis

Usage examples (from repo root):
  # Run both policies over 20 default seeds, frame_skip=2:
  python -m experiments.sanity_rollout --policies both

  # Only heuristic, custom seeds:
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333

  # Quick random-only smoke with fewer steps:
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/sanity
"""

from __future__ import annotations
import argparse
import csv
from pathlib import Path
from typing import List, Tuple, Optional

import numpy as np

from flappy.env.flappy_env import FlappyEnv


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int, flap_prob: float = 0.08):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        return int(rng.random_sample() < flap_prob)
    return act

def tiny_heuristic_policy_init():
    """
    Flap when the bird is below the middle of the next gap and not already rising fast.
    obs = [y, vy, dx, gap_top, gap_bottom]
    """
    def act(obs: np.ndarray) -> int:
        y, vy, _dx, gap_top, gap_bottom = obs
        target = gap_top + 0.65 * (gap_bottom - gap_top)
        return 1 if (y > target and vy > -0.2) else 0
    return act


# ------------------------ Rollout core ------------------------

def ensure_dir(p: Path):
    p.mkdir(parents=True, exist_ok=True)

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(policy_name: str,
                    seed: int,
                    frame_skip: int,
                    steps_limit: int) -> Tuple[int, float, int, bool, bool, Optional[str]]:
    """
    Returns: (ep_len, ret_sum, score, terminated, truncated, death_cause)
    """
    env = FlappyEnv(frame_skip=frame_skip)

    if policy_name == "random":
        policy = random_policy_init(10_000 + seed)
    elif policy_name == "heuristic":
        policy = tiny_heuristic_policy_init()
    else:
        raise ValueError("Unknown policy")

    ret_sum = 0.0
    ep_len = 0
    term = trunc = False
    info = {}

    try:
        obs, info = env.reset(seed=seed)
        for _ in range(steps_limit):
            a = policy(obs)
            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1
            if term or trunc:
                break
    finally:
        env.close()

    return ep_len, ret_sum, int(info.get("score", 0)), bool(term), bool(trunc), info.get("death_cause")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"],
                    help="Which policy to run")
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=2,
                    help="Sim frames per decision step")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--out-dir", type=str, default="experiments/runs",
                    help="Directory to store episodes.csv")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    ensure_dir(out_dir)

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))

    episodes_csv = out_dir / "episodes.csv"
    header = [
        "policy_name", "seed", "frame_skip",
        "episode_len_decisions", "return_sum", "score",
        "terminated", "truncated", "death_cause",
    ]

    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running policies={to_run} on {len(seeds)} seeds (frame_skip={args.frame_skip})")
    print(f"Writing summaries to {episodes_csv}")

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, score, terminated, truncated, death_cause = run_one_episode(
                policy_name=policy_name,
                seed=seed,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
            )
            row = [
                policy_name, seed, args.frame_skip,
                ep_len, f"{ret_sum:.1f}", score,
                int(terminated), int(truncated), (death_cause or ""),
            ]
            write_episode_row(episodes_csv, header, row)

            print(f"[{policy_name}] seed={seed}  len={ep_len}  score={score}  "
                  f"ret={ret_sum:.1f}  term={terminated} trunc={truncated}  cause={death_cause}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
