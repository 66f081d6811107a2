#!/usr/bin/env python3
"""Interactive console session.

Simulates a scene (or loads one from a scene list), then asks yes/no
questions until your intended object and action are confirmed. Learned
templates are written back to the store file after every session.

    python scripts/run_interactive_session.py
    python scripts/run_interactive_session.py --scenes Tests/Group_Learning_Test.txt --policy count
    python scripts/run_interactive_session.py --random-queries --seed 7
"""

import argparse
import logging
import random

from intentnet.brain import IntentionEngine
from intentnet.core import RankingPolicy, Scene
from intentnet.io import load_scene_list
from intentnet.simulation import SceneSimulator
from intentnet.utils.config import load_config


logger = logging.getLogger(__name__)


def _ask(question: str) -> bool:
    while True:
        reply = input(f"{question} [y/n/q] ").strip().lower()
        if reply in ("y", "yes"):
            return True
        if reply in ("n", "no"):
            return False
        if reply in ("q", "quit"):
            raise KeyboardInterrupt
        print("Please answer 'y' or 'n' ('q' to quit).")


def _print_scene(scene: Scene) -> None:
    print(f"\n{'─' * 60}")
    print(f"  Scene {scene.name}")
    for observation in scene.sorted_by_distance():
        print(f"    {observation.label:>10s}  {observation.distance:.3f}")
    print(f"{'─' * 60}")


def run(engine: IntentionEngine, scenes, policy, random_queries: bool, learning_rate: float) -> None:
    engine.store.learning_rate = learning_rate
    for scene in scenes:
        _print_scene(scene)
        engine.construct_network(scene)
        candidates = engine.generate_random_query_set() if random_queries else None
        session = engine.start_session(policy, candidates=candidates)

        try:
            while not session.is_finished:
                query = session.select_query()
                session.evaluate(_ask(query.question))
        except KeyboardInterrupt:
            engine.finish_session(session)
            print("\nSession cancelled; templates left unchanged.")
            return

        record = engine.finish_session(session)
        if record.resolved:
            print(f"\n  -> {record.intention.describe()} after {record.interactions} questions")
        else:
            print("\n  You have exhausted all possible actions based on your selections!")
        engine.write_templates()

        if input("\nAnother session? [y/n] ").strip().lower() not in ("y", "yes"):
            break


def main():
    parser = argparse.ArgumentParser(description="Answer intention queries in the console")
    parser.add_argument("--config", default=None,
                        help="Path to YAML config (default: config/default.yaml)")
    parser.add_argument("--store", default=None,
                        help="Compatibility store file (overrides config)")
    parser.add_argument("--scenes", default=None,
                        help="Scene-list file; simulated complete scenes when omitted")
    parser.add_argument("--policy", choices=[p.value for p in RankingPolicy], default=None,
                        help="Ranking policy (overrides config)")
    parser.add_argument("--random-queries", action="store_true",
                        help="Ask from the shuffled catalog-wide query set")
    parser.add_argument("--learning-rate", type=float, default=10.0,
                        help="Increment applied to a confirmed template")
    parser.add_argument("--sessions", type=int, default=10,
                        help="Number of simulated scenes")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for simulated scenes and tie breaking")

    args = parser.parse_args()

    overrides = {"logging.log_to_file": False}
    if args.store:
        overrides["store.path"] = args.store
    if args.seed is not None:
        overrides["ranking.random_seed"] = args.seed
    config = load_config(args.config, overrides=overrides)

    engine = IntentionEngine.from_config(config)
    if args.scenes:
        scenes = load_scene_list(args.scenes)
    else:
        simulator = SceneSimulator(rng=random.Random(args.seed))
        scenes = simulator.generate("complete", args.sessions)

    try:
        run(engine, scenes, args.policy, args.random_queries, args.learning_rate)
    except EOFError:
        print()
    logger.info(f"Finished {len(engine.records)} sessions")


if __name__ == "__main__":
    main()
