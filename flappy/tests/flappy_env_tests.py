# flappy/tests/flappy_env_tests.py
"""
Quick tests for FlappyEnv (Gymnasium environment).

Usage (from repo root):
  python -m flappy.tests.flappy_env_tests
  python -m flappy.tests.flappy_env_tests --no-api-check --no-determinism
"""

from __future__ import annotations
import argparse
import os
import sys
from typing import List, Tuple

# Headless pygame for the rgb_array check
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
from gymnasium.utils.env_checker import check_env

from flappy.env.flappy_env import FlappyEnv, PASS_REWARD

SEED = 123
STEPS = 300
FRAME_SKIP = 2


def test_api_check(frame_skip: int = FRAME_SKIP) -> None:
    """Verify Gym API contract (spaces, step/reset signatures, types)."""
    env = FlappyEnv(frame_skip=frame_skip)
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()


def test_smoke(steps: int = STEPS, seed: int = SEED, frame_skip: int = FRAME_SKIP) -> None:
    """Short random rollout: no crashes, obs in space, reward type, proper terminations."""
    env = FlappyEnv(frame_skip=frame_skip)
    try:
        obs, info = env.reset(seed=seed)
        assert env.observation_space.contains(obs), "Initial observation not in space"
        assert info["score"] == 0

        rng = np.random.RandomState(seed)
        term = False
        for t in range(steps):
            a = int(rng.random_sample() < 0.1)
            obs, r, term, trunc, info = env.step(a)
            assert isinstance(r, float), "Reward must be a float"
            assert env.observation_space.contains(obs), f"Step {t}: observation out of bounds"
            if term or trunc:
                break
        assert term, "random flapping should crash within a few hundred decisions"
        assert info["death_cause"] in ("ground", "ceiling", "pipe")
        assert r <= -1.0 + PASS_REWARD * info["score"]
    finally:
        env.close()


def test_noop_falls_to_ground(frame_skip: int = FRAME_SKIP) -> None:
    env = FlappyEnv(frame_skip=frame_skip)
    try:
        env.reset(seed=SEED)
        rewards = []
        for _ in range(100):
            _, r, term, _, info = env.step(0)
            rewards.append(r)
            if term:
                break
        assert term and info["death_cause"] == "ground"
        assert rewards[-1] == -1.0 and all(x == 1.0 for x in rewards[:-1])
    finally:
        env.close()


def test_determinism(steps: int = STEPS, seed: int = SEED, frame_skip: int = FRAME_SKIP) -> None:
    """Same seed + same action sequence => identical obs/reward/terminal flags."""
    def rollout(seed_val: int, action_seq: List[int]) -> List[Tuple[np.ndarray, float, bool, bool]]:
        env = FlappyEnv(frame_skip=frame_skip)
        traj: List[Tuple[np.ndarray, float, bool, bool]] = []
        try:
            env.reset(seed=seed_val)
            for a in action_seq:
                obs, r, term, trunc, _ = env.step(int(a))
                traj.append((obs.copy(), float(r), bool(term), bool(trunc)))
                if term or trunc:
                    break
        finally:
            env.close()
        return traj

    rng = np.random.RandomState(42)
    action_seq = [int(rng.random_sample() < 0.15) for _ in range(steps)]

    t1 = rollout(seed, action_seq)
    t2 = rollout(seed, action_seq)

    assert len(t1) == len(t2), "Determinism: trajectory length mismatch"
    for i, ((o1, r1, te1, tr1), (o2, r2, te2, tr2)) in enumerate(zip(t1, t2)):
        if not np.array_equal(o1, o2):
            raise AssertionError(f"Determinism: obs mismatch at step {i}")
        if not (r1 == r2 and te1 == te2 and tr1 == tr2):
            raise AssertionError(f"Determinism: transition mismatch at step {i}")


def test_time_limit_truncates() -> None:
    env = FlappyEnv(frame_skip=1, time_limit_seconds=0.05)    # 3 decisions
    try:
        env.reset(seed=SEED)
        flags = [env.step(0)[3] for _ in range(3)]
        assert flags == [False, False, True]
    finally:
        env.close()


def test_rgb_array_render() -> None:
    env = FlappyEnv(render_mode="rgb_array")
    try:
        env.reset(seed=SEED)
        env.step(1)
        frame = env.render()
        assert isinstance(frame, np.ndarray)
        assert frame.shape == (640, 480, 3) and frame.dtype == np.uint8
    finally:
        env.close()
    env.close()     # idempotent


def test_sanity_rollout_episode() -> None:
    from experiments.sanity_rollout import run_one_episode
    ep_len, ret_sum, score, term, trunc, cause = run_one_episode("heuristic", seed=SEED, frame_skip=FRAME_SKIP,
                                                                 steps_limit=50)
    assert 1 <= ep_len <= 50
    assert score >= 0 and isinstance(ret_sum, float)
    assert term == (cause is not None)

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=int, default=SEED, help="Episode seed for tests")
    ap.add_argument("--steps", type=int, default=STEPS, help="Max decision steps per test")
    ap.add_argument("--frame-skip", type=int, default=FRAME_SKIP, help="Sim frames per decision step")
    ap.add_argument("--no-api-check", action="store_true", help="Skip Gym API compliance check")
    ap.add_argument("--no-smoke", action="store_true", help="Skip smoke test")
    ap.add_argument("--no-determinism", action="store_true", help="Skip determinism test")
    args = ap.parse_args()

    try:
        if not args.no_api_check:
            test_api_check(frame_skip=args.frame_skip)
            print("✓ API check ok")
        if not args.no_smoke:
            test_smoke(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
            print("✓ Smoke test ok")
        if not args.no_determinism:
            test_determinism(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
            print("✓ Determinism ok")
        test_noop_falls_to_ground(frame_skip=args.frame_skip)
        test_time_limit_truncates()
        test_rgb_array_render()
        test_sanity_rollout_episode()
        print("✓ Env extras ok")
    except AssertionError as e:
        print(f"✗ Test failed: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"✗ Unexpected error: {e}", file=sys.stderr)
        raise
    else:
        print("🎉 All selected tests passed")


if __name__ == "__main__":
    main()
